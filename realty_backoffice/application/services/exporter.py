"""Export services for market studies.

Handles saving studies to JSON files and flattening analysis results into
tables for reports.
"""

import json
import os
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from realty_backoffice.core.logging import get_logger
from realty_backoffice.core.settings import get_settings
from realty_backoffice.domain.models import MarketStudy, PropertyStandard, PropertyValuation, StatisticalAnalysis

log = get_logger(__name__)

SAMPLE_COLUMNS = [
    "id",
    "location",
    "status",
    "area_sqm",
    "price",
    "price_per_sqm",
    "homogenized_price_per_sqm",
    "classification",
]

VALUATION_COLUMNS = ["standard", "description", "multiplier", "price_per_sqm", "total_value"]


class StudyExporter:
    """Handles exporting of market studies."""

    def __init__(self, output_dir: Optional[str] = None):
        """Initialize exporter.

        Args:
            output_dir: Directory where studies will be saved. Defaults to
                settings.results_dir.
        """
        self.output_dir = output_dir or get_settings().results_dir
        self._ensure_dir()

    def _ensure_dir(self):
        """Ensure output directory exists."""
        if not os.path.exists(self.output_dir):
            try:
                os.makedirs(self.output_dir)
                log.info("created_output_directory", path=self.output_dir)
            except OSError as e:
                log.error("output_directory_creation_failed", path=self.output_dir, error=str(e))
                raise

    def save_study(
        self,
        study: MarketStudy,
        prefix: str = "market_study",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Save a study to a JSON file.

        Args:
            study: Study to export.
            prefix: Filename prefix.
            metadata: Optional extra metadata (e.g. requesting agent).

        Returns:
            Path to the saved file.
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{prefix}_{study.id}_{timestamp}.json"
        filepath = os.path.join(self.output_dir, filename)

        payload = {
            "metadata": {
                "timestamp": datetime.now().isoformat(),
                "study_id": study.id,
                "samples": len(study.samples),
                "precision_grade": study.analysis.precision_grade,
                **(metadata or {}),
            },
            "study": study.model_dump(mode="json"),
        }

        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)

            log.info("study_saved", path=filepath, study_id=study.id)
            return filepath

        except OSError as e:
            log.error("study_save_failed", path=filepath, error=str(e))
            raise

    @staticmethod
    def samples_table(analysis: StatisticalAnalysis) -> pd.DataFrame:
        """One row per analyzed sample, with its filter classification."""
        rows = []
        for sample in analysis.samples:
            homogenized = sample.homogenized_price_per_sqm
            rows.append({
                "id": sample.id,
                "location": sample.location,
                "status": sample.status.value,
                "area_sqm": sample.area.square_meters,
                "price": sample.price.amount,
                "price_per_sqm": sample.price_per_sqm.amount,
                "homogenized_price_per_sqm": homogenized.amount if homogenized is not None else None,
                "classification": analysis.classification_of(sample.id),
            })
        return pd.DataFrame(rows, columns=SAMPLE_COLUMNS)

    @staticmethod
    def valuations_table(
        valuations: Mapping[PropertyStandard, PropertyValuation] | Iterable[PropertyValuation],
    ) -> pd.DataFrame:
        """One row per standard, in fixed tag order."""
        items = valuations.values() if isinstance(valuations, Mapping) else valuations
        rows = [
            {
                "standard": v.standard.value,
                "description": v.standard_description,
                "multiplier": v.standard_multiplier,
                "price_per_sqm": v.price_per_sqm.amount,
                "total_value": v.total_value.amount,
            }
            for v in sorted(items, key=lambda v: v.standard.rank)
        ]
        return pd.DataFrame(rows, columns=VALUATION_COLUMNS)
