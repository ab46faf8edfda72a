"""Base model for domain types.

Schema failures (missing fields, wrong types, writes to frozen fields)
surface as the domain ``ValidationError`` rather than pydantic's own error,
on construction, ``model_validate`` and attribute assignment alike.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from realty_backoffice.core.exceptions import ValidationError


def error_details(error: PydanticValidationError) -> list[dict[str, str]]:
    """One ``{"field", "message"}`` entry per pydantic error."""
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in error.errors()
    ]


def to_domain_error(error: PydanticValidationError, message: str | None = None) -> ValidationError:
    """Convert a pydantic ``ValidationError`` into the domain one."""
    details = error_details(error)
    if message is None:
        summary = "; ".join(f"{d['field']}: {d['message']}" if d["field"] else d["message"] for d in details)
        message = f"Invalid {error.title} data: {summary}"
    return ValidationError(message, details=details)


class DomainModel(BaseModel):
    """BaseModel raising domain errors only."""

    def __init__(self, /, **data: Any):
        try:
            super().__init__(**data)
        except PydanticValidationError as e:
            raise to_domain_error(e) from e

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except PydanticValidationError as e:
            raise to_domain_error(e) from e

    @classmethod
    def model_validate(cls, obj: Any, *args: Any, **kwargs: Any):
        try:
            return super().model_validate(obj, *args, **kwargs)
        except PydanticValidationError as e:
            raise to_domain_error(e) from e
