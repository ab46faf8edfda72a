"""Named-factor score map.

A comparable or a target property is described by numeric scores keyed by
factor name (``{"bedrooms": 3, "parking_spots": 1}``). Homogenization only
compares factors present on both sides.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Iterator

from pydantic import RootModel, field_validator, model_serializer
from pydantic import ValidationError as PydanticValidationError

from realty_backoffice.core.exceptions import ValidationError
from realty_backoffice.domain.base import to_domain_error

_MISSING = object()


class FactorScores(RootModel[tuple[tuple[str, float], ...]]):
    """Immutable factor name -> score mapping.

    Stored as sorted ``(name, score)`` pairs, so iteration never depends on
    the order the caller supplied them in and nothing handed out can be
    changed in place. Serializes as a plain mapping.
    """

    root: tuple[tuple[str, float], ...]

    model_config = {
        "frozen": True,
    }

    def __init__(self, /, root: Any = _MISSING, **data: Any):
        # Nested mappings may arrive as keyword arguments, an empty one as none
        if root is _MISSING:
            root = data or ()
        try:
            super().__init__(root)
        except PydanticValidationError as e:
            raise to_domain_error(e) from e

    @classmethod
    def model_validate(cls, obj: Any, *args: Any, **kwargs: Any) -> FactorScores:
        try:
            return super().model_validate(obj, *args, **kwargs)
        except PydanticValidationError as e:
            raise to_domain_error(e) from e

    @field_validator("root", mode="before")
    @classmethod
    def accept_mapping(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return tuple(v.items())
        return v

    @field_validator("root")
    @classmethod
    def validate_scores(cls, v: tuple[tuple[str, float], ...]) -> tuple[tuple[str, float], ...]:
        scores: dict[str, float] = {}
        for name, score in v:
            key = name.strip()
            if not key:
                raise ValidationError("Factor name cannot be empty")
            if not math.isfinite(score):
                raise ValidationError(f"Score for factor '{key}' must be finite")
            scores[key] = float(score)
        return tuple(sorted(scores.items()))

    @model_serializer(mode="plain")
    def serialize_scores(self) -> dict[str, float]:
        return dict(self.root)

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.names())

    def __getitem__(self, name: str) -> float:
        return self.as_dict()[name]

    def __contains__(self, name: object) -> bool:
        return name in self.names()

    def __len__(self) -> int:
        return len(self.root)

    def get(self, name: str, default: float | None = None) -> float | None:
        return self.as_dict().get(name, default)

    def items(self) -> list[tuple[str, float]]:
        return list(self.root)

    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.root)

    def as_dict(self) -> dict[str, float]:
        """Fresh dict copy of the scores."""
        return dict(self.root)

    def shared_with(self, other: FactorScores) -> tuple[str, ...]:
        """Factor names present in both maps, sorted."""
        theirs = set(other.names())
        return tuple(name for name in self.names() if name in theirs)

    def restricted_to(self, names: list[str] | tuple[str, ...]) -> FactorScores:
        """Copy keeping only the given factor names."""
        wanted = set(names)
        return FactorScores({k: v for k, v in self.root if k in wanted})

    @classmethod
    def empty(cls) -> FactorScores:
        return cls(())
