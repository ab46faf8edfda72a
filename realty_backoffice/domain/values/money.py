"""Money value object.

Immutable monetary amount rounded to cents, tagged with a currency code.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import Field, field_validator, model_validator

from realty_backoffice.core.exceptions import CurrencyMismatchError, ValidationError
from realty_backoffice.core.settings import get_settings
from realty_backoffice.domain.base import DomainModel


def _default_currency() -> str:
    return get_settings().default_currency


class Money(DomainModel):
    """Non-negative monetary amount.

    Every operation returns a new instance; operations between two amounts
    require the same currency.

    Example:
        >>> Money(150000).subtract(Money(10000)).amount
        140000.0
    """

    amount: float = Field(..., description="Amount rounded to 2 decimals")
    currency: str = Field(default_factory=_default_currency, description="ISO 4217 code")

    model_config = {
        "frozen": True,
    }

    def __init__(self, amount: Any = None, currency: str | None = None, **data: Any):
        if amount is not None:
            data["amount"] = amount
        if currency is not None:
            data["currency"] = currency
        super().__init__(**data)

    @model_validator(mode="before")
    @classmethod
    def coerce_bare_amount(cls, data: Any) -> Any:
        """Accept a bare number as serialized form."""
        if isinstance(data, (int, float)) and not isinstance(data, bool):
            return {"amount": data}
        return data

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValidationError("Money amount must be a finite number")
        if v < 0:
            raise ValidationError("Money amount cannot be negative")
        return round(v, 2)

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) != 3:
            raise ValidationError(f"Invalid currency code: {v!r}")
        return v

    # --- Arithmetic ---

    def add(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < 0:
            raise ValidationError("Subtraction would result in negative amount")
        return Money(result, self.currency)

    def multiply(self, factor: float) -> Money:
        if not math.isfinite(factor):
            raise ValidationError("Multiplication factor must be finite")
        return Money(self.amount * factor, self.currency)

    def divide(self, divisor: float) -> Money:
        if divisor == 0:
            raise ValidationError("Cannot divide by zero")
        if not math.isfinite(divisor):
            raise ValidationError("Divisor must be finite")
        return Money(self.amount / divisor, self.currency)

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply
    __truediv__ = divide

    # --- Comparison ---

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def is_zero(self) -> bool:
        return self.amount == 0

    def format(self) -> str:
        """Format in Brazilian style, e.g. ``R$ 1.234,56``."""
        digits = f"{self.amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
        symbol = "R$" if self.currency == "BRL" else self.currency
        return f"{symbol} {digits}"

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    @classmethod
    def zero(cls, currency: str | None = None) -> Money:
        return cls(0, currency)

    def __str__(self) -> str:
        return self.format()
