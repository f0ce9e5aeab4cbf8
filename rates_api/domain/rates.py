"""Rate entity, classification enums and validation rules."""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping

from .errors import ValidationError


class Currency(str, Enum):
    CHF = "CHF"
    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"


class RateType(str, Enum):
    STANDARD = "STANDARD"
    TRAVEL = "TRAVEL"
    OVERTIME = "OVERTIME"
    SPECIAL = "SPECIAL"


DEFAULT_CURRENCY = Currency.CHF
DEFAULT_RATE_TYPE = RateType.STANDARD

# searchable fields for list(query_type, query)
QUERY_FIELDS = {
    "title": "title",
    "description": "description",
    "currency": "currency",
    "type": "rate_type",
}


@dataclass
class Rate:
    """A single billing rate. Provenance fields are owned by the store."""

    title: str
    amount: float = 0.0
    description: str = ""
    currency: Currency = DEFAULT_CURRENCY
    rate_type: RateType = DEFAULT_RATE_TYPE
    id: str = ""
    created_at: str = ""
    created_by: str = ""
    modified_at: str = ""
    modified_by: str = ""
    disabled: bool = False

    def copy(self) -> "Rate":
        return replace(self)

    def to_dict(self) -> dict:
        """Serialize using the persisted file keys."""
        return {
            "id": self.id,
            "title": self.title,
            "rate": self.amount,
            "description": self.description,
            "currency": self.currency.value,
            "type": self.rate_type.value,
            "createdAt": self.created_at,
            "createdBy": self.created_by,
            "modifiedAt": self.modified_at,
            "modifiedBy": self.modified_by,
            "disabled": self.disabled,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rate":
        """Build a Rate from the persisted representation.

        Missing classification fields fall back to their defaults, unknown keys
        are ignored. Raises ValueError/TypeError when a value has the wrong type
        or an enum member does not exist.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"rate entry must be an object, got {type(data).__name__}")
        amount = data.get("rate", 0)
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise TypeError(f"rate amount must be numeric, got {amount!r}")
        if not math.isfinite(amount):
            raise ValueError(f"rate amount must be finite, got {amount!r}")
        disabled = data.get("disabled", False)
        if not isinstance(disabled, bool):
            raise TypeError(f"disabled must be true or false, got {disabled!r}")
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            amount=float(amount),
            description=str(data.get("description") or ""),
            currency=Currency(data.get("currency") or DEFAULT_CURRENCY.value),
            rate_type=RateType(data.get("type") or DEFAULT_RATE_TYPE.value),
            created_at=str(data.get("createdAt") or ""),
            created_by=str(data.get("createdBy") or ""),
            modified_at=str(data.get("modifiedAt") or ""),
            modified_by=str(data.get("modifiedBy") or ""),
            disabled=disabled,
        )


def normalize_id(value: str | None) -> str:
    return (value or "").strip()


def validate_rate(rate: Rate) -> None:
    """Raise ValidationError when title is blank or amount is negative or not finite."""
    if not (rate.title or "").strip():
        raise ValidationError("title is required")
    if rate.amount is None or not math.isfinite(rate.amount):
        raise ValidationError(f"rate must be a finite number, got {rate.amount!r}")
    if rate.amount < 0:
        raise ValidationError(f"rate must be >= 0, got {rate.amount!r}")


def apply_changes(target: Rate, source: Rate) -> None:
    """Copy the client-editable fields of source onto target in place."""
    target.title = source.title.strip()
    target.amount = source.amount
    target.description = source.description or ""
    target.currency = source.currency
    target.rate_type = source.rate_type


def matches(rate: Rate, query_type: str | None, query: str | None) -> bool:
    """Case-insensitive substring match of query against one rate field."""
    if not query:
        return True
    attr = QUERY_FIELDS[query_type or "title"]
    value = getattr(rate, attr)
    if isinstance(value, Enum):
        value = value.value
    return query.lower() in str(value or "").lower()


def check_list_args(query_type: str | None, position: int, size: int | None) -> None:
    if query_type and query_type not in QUERY_FIELDS:
        raise ValidationError(f"unknown queryType {query_type!r}")
    if position is None or position < 0:
        raise ValidationError("position must be >= 0")
    if size is not None and size < 0:
        raise ValidationError("size must be >= 0")
