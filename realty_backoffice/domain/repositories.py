"""Repository interface for market study persistence."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models.study import MarketStudy


@runtime_checkable
class MarketStudyRepository(Protocol):
    """Persistence boundary for MarketStudy aggregates.

    Implementations raise ``NotFoundError`` from ``update``/``delete`` when
    the study does not exist and ``RepositoryError`` on backend failures.
    """

    def save(self, study: MarketStudy) -> MarketStudy:
        """Persist a new study and return the stored version."""
        ...

    def find_by_id(self, study_id: str) -> MarketStudy | None:
        ...

    def find_by_user_id(self, user_id: str, limit: int = 50, offset: int = 0) -> list[MarketStudy]:
        """Studies of a user, newest first."""
        ...

    def update(self, study: MarketStudy) -> MarketStudy:
        ...

    def delete(self, study_id: str) -> None:
        ...

    def count_by_user_id(self, user_id: str) -> int:
        ...

    def find_recent(self, limit: int = 20) -> list[MarketStudy]:
        ...

    def search_by_location(
        self, user_id: str, city: str, neighborhood: str | None = None
    ) -> list[MarketStudy]:
        ...
