"""In-memory market study repository.

Stores each study as its serialized JSON state, the same shape a document
column would hold, and rehydrates a fresh aggregate on every read so that
callers never share instances with the store.
"""

from __future__ import annotations

import threading
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from realty_backoffice.core.exceptions import BusinessRuleError, NotFoundError, RepositoryError, ValidationError
from realty_backoffice.core.logging import get_logger
from realty_backoffice.domain.models.study import MarketStudy

log = get_logger(__name__)


class InMemoryMarketStudyRepository:
    """Dict-backed implementation of ``MarketStudyRepository``."""

    def __init__(self):
        self._rows: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def save(self, study: MarketStudy) -> MarketStudy:
        with self._lock:
            if study.id in self._rows:
                raise RepositoryError(f"Market study '{study.id}' already exists", operation="save")
            row = self._rows[study.id] = self._serialize(study)
        log.info("market_study_saved", study_id=study.id, user_id=study.user_id)
        return self._hydrate(row)

    def find_by_id(self, study_id: str) -> MarketStudy | None:
        row = self._rows.get(study_id)
        return self._hydrate(row) if row is not None else None

    def find_by_user_id(self, user_id: str, limit: int = 50, offset: int = 0) -> list[MarketStudy]:
        rows = [r for r in self._newest_first() if r["user_id"] == user_id]
        return [self._hydrate(r) for r in rows[offset:offset + limit]]

    def update(self, study: MarketStudy) -> MarketStudy:
        with self._lock:
            if study.id not in self._rows:
                raise NotFoundError("MarketStudy", study.id)
            row = self._rows[study.id] = self._serialize(study)
        log.info("market_study_updated", study_id=study.id)
        return self._hydrate(row)

    def delete(self, study_id: str) -> None:
        with self._lock:
            if self._rows.pop(study_id, None) is None:
                raise NotFoundError("MarketStudy", study_id)
        log.info("market_study_deleted", study_id=study_id)

    def count_by_user_id(self, user_id: str) -> int:
        return sum(1 for r in self._rows.values() if r["user_id"] == user_id)

    def find_recent(self, limit: int = 20) -> list[MarketStudy]:
        return [self._hydrate(r) for r in self._newest_first()[:limit]]

    def search_by_location(
        self, user_id: str, city: str, neighborhood: str | None = None
    ) -> list[MarketStudy]:
        city_key = city.strip().casefold()
        hood_key = neighborhood.strip().casefold() if neighborhood else None
        results = []
        for row in self._newest_first():
            address = row["property_address"]
            if row["user_id"] != user_id or address["city"].casefold() != city_key:
                continue
            if hood_key and address["neighborhood"].casefold() != hood_key:
                continue
            results.append(self._hydrate(row))
        return results

    def _newest_first(self) -> list[dict[str, Any]]:
        return sorted(self._rows.values(), key=lambda r: r["created_at"], reverse=True)

    @staticmethod
    def _serialize(study: MarketStudy) -> dict[str, Any]:
        return study.model_dump(mode="json")

    @staticmethod
    def _hydrate(row: dict[str, Any]) -> MarketStudy:
        try:
            return MarketStudy.model_validate(row)
        except (ValidationError, BusinessRuleError, PydanticValidationError) as e:
            log.error("market_study_state_corrupted", study_id=row.get("id"), error=str(e))
            raise RepositoryError(f"Stored state for '{row.get('id')}' is invalid: {e}", operation="load") from e
