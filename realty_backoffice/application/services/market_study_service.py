"""Market study use cases.

Creates studies from submitted comparables and applies metadata changes,
persisting through a ``MarketStudyRepository``.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable

from realty_backoffice.application.schemas import (
    CreateMarketStudyRequest,
    UpdateMarketStudyRequest,
    parse_request,
)
from realty_backoffice.core.exceptions import NotFoundError, ValidationError
from realty_backoffice.core.logging import get_logger
from realty_backoffice.core.settings import get_settings
from realty_backoffice.domain.models import (
    FactorScores,
    MarketSample,
    MarketStudy,
    PropertyStandard,
    generate_study_id,
)
from realty_backoffice.domain.models.study import IdFactory, utcnow
from realty_backoffice.domain.repositories import MarketStudyRepository
from realty_backoffice.domain.values import Area, Money

from .valuation_service import ValuationService

log = get_logger(__name__)

MAX_PAGE_SIZE = 100


class MarketStudyService:
    """Application service for the market study lifecycle."""

    def __init__(
        self,
        repository: MarketStudyRepository,
        valuation_service: ValuationService | None = None,
        id_factory: IdFactory = generate_study_id,
        clock: Callable[[], datetime] = utcnow,
    ):
        """Initialize service with its collaborators.

        Args:
            repository: Persistence boundary
            valuation_service: Comparative method engine
            id_factory: Generates study and sample ids (inject for determinism)
            clock: Source of creation timestamps
        """
        self.repository = repository
        self.valuation_service = valuation_service or ValuationService()
        self.id_factory = id_factory
        self.clock = clock

    # --- Commands ---

    def create_study(self, payload: CreateMarketStudyRequest | Mapping[str, Any]) -> MarketStudy:
        """Validate a submission, run the valuation and persist the study.

        Steps:
        1. Validate payload
        2. Build samples with original prices
        3. Homogenize against the target profile
        4. Statistical analysis (outlier/normality filtering)
        5. Valuations for every standard
        6. Build and save the aggregate
        """
        request = parse_request(CreateMarketStudyRequest, payload)

        max_samples = get_settings().max_samples_per_study
        if len(request.samples) > max_samples:
            raise ValidationError(f"Maximum {max_samples} samples allowed")

        currency = get_settings().default_currency
        samples = [
            MarketSample(
                id=self.id_factory(),
                location=s.location,
                area=Area(s.area),
                price=Money(s.price, currency),
                status=s.status,
                characteristics=FactorScores(s.characteristics),
                listing_date=s.listing_date,
                sale_date=s.sale_date,
            )
            for s in request.samples
        ]

        target_profile = self._target_profile(request)
        property_area = Area(request.property_area)
        outcome = self.valuation_service.evaluate(
            samples, target_profile, property_area, request.perception_factor
        )

        now = self.clock()
        study = MarketStudy(
            id=self.id_factory(),
            user_id=request.user_id,
            property_address=request.property_address,
            property_area=property_area,
            property_characteristics=request.property_characteristics,
            evaluation_type=request.evaluation_type,
            factor_names=tuple(request.factor_names),
            samples=outcome.samples,
            analysis=outcome.analysis,
            valuations=outcome.valuations,
            created_at=now,
            updated_at=now,
        )

        if not study.analysis.is_reliable:
            log.warning(
                "analysis_unreliable",
                study_id=study.id,
                cv=round(study.analysis.coefficient_of_variation, 2),
                retained=len(study.analysis.retained),
            )

        saved = self.repository.save(study)
        log.info("study_created", study_id=saved.id, user_id=saved.user_id, samples=len(saved.samples))
        return saved

    def update_study(self, payload: UpdateMarketStudyRequest | Mapping[str, Any]) -> MarketStudy:
        """Apply selected standard and/or agent logo changes."""
        request = parse_request(UpdateMarketStudyRequest, payload)
        study = self.load_study(request.id, request.user_id)

        if request.selected_standard is not None:
            study.select_standard(request.selected_standard)
        if request.agent_logo is not None:
            study.upload_agent_logo(str(request.agent_logo))

        return self.repository.update(study)

    def select_standard(self, study_id: str, user_id: str, standard: PropertyStandard | str) -> MarketStudy:
        study = self.load_study(study_id, user_id)
        study.select_standard(standard)
        log.info("standard_selected", study_id=study_id, standard=study.selected_standard.value)
        return self.repository.update(study)

    def attach_pdf_url(self, study_id: str, user_id: str, url: str) -> MarketStudy:
        study = self.load_study(study_id, user_id)
        study.set_pdf_url(url)
        return self.repository.update(study)

    def attach_slides_url(self, study_id: str, user_id: str, url: str) -> MarketStudy:
        study = self.load_study(study_id, user_id)
        study.set_slides_url(url)
        return self.repository.update(study)

    def delete_study(self, study_id: str, user_id: str) -> None:
        self.load_study(study_id, user_id)
        self.repository.delete(study_id)

    # --- Queries ---

    def load_study(self, study_id: str, user_id: str) -> MarketStudy:
        """Fetch a study owned by ``user_id``.

        Raises:
            NotFoundError: if missing or owned by someone else.
        """
        study = self.repository.find_by_id(study_id)
        if study is None or study.user_id != user_id:
            raise NotFoundError("MarketStudy", study_id)
        return study

    def list_studies(self, user_id: str, limit: int = 50, offset: int = 0) -> list[MarketStudy]:
        if not 0 < limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise ValidationError("Offset cannot be negative")
        return self.repository.find_by_user_id(user_id, limit=limit, offset=offset)

    def search_by_location(self, user_id: str, city: str, neighborhood: str | None = None) -> list[MarketStudy]:
        if not city or not city.strip():
            raise ValidationError("City is required")
        return self.repository.search_by_location(user_id, city, neighborhood)

    @staticmethod
    def _target_profile(request: CreateMarketStudyRequest) -> FactorScores:
        """Target scores for the requested comparison factors."""
        scores = {
            **dict(request.property_characteristics.as_factor_scores().items()),
            **request.target_factors,
        }
        return FactorScores(scores).restricted_to(request.factor_names)
