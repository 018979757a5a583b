# expense_tracker/core/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

INCOME = "Income"
EXPENSE = "Expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None or value == "":
        return Decimal("0")
    return Decimal(str(value))


def _optional_decimal(value) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return _to_decimal(value)


def _to_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _check_type(value: str) -> str:
    if value not in TRANSACTION_TYPES:
        raise ValueError(f"Transaction type must be Income or Expense, got {value!r}")
    return value


@dataclass
class User:
    user_id: int
    username: str
    email: str = ""
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "User":
        return cls(
            user_id=payload["user_id"],
            username=payload.get("username", ""),
            email=payload.get("email", ""),
            created_at=payload.get("created_at"),
        )


@dataclass
class Category:
    category_id: int
    user_id: int
    name: str
    is_default: bool = False

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Category":
        return cls(
            category_id=payload["category_id"],
            user_id=payload.get("user"),
            name=payload.get("name", ""),
            is_default=bool(payload.get("is_default", False)),
        )


@dataclass
class Transaction:
    """A single income or expense entry as stored by the backend.

    ``category_name`` and the timestamps are filled in by the server and are
    never sent back on create.
    """
    user_id: int
    category_id: int
    date: date
    amount: Decimal
    type: str = EXPENSE
    notes: str = ""
    transaction_id: Optional[int] = None
    category_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def __post_init__(self) -> None:
        self.date = _to_date(self.date)
        self.amount = _to_decimal(self.amount)
        if self.amount < 0:
            raise ValueError(f"Transaction amount must be non-negative, got {self.amount}")
        _check_type(self.type)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Transaction":
        return cls(
            transaction_id=payload.get("transaction_id"),
            user_id=payload.get("user"),
            category_id=payload.get("category"),
            category_name=payload.get("category_name"),
            date=payload["date"],
            amount=payload.get("amount", 0),
            type=payload.get("type", EXPENSE),
            notes=payload.get("notes") or "",
            created_at=payload.get("created_at"),
            updated_at=payload.get("updated_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "user": self.user_id,
            "category": self.category_id,
            "date": self.date.isoformat(),
            "amount": float(self.amount),
            "type": self.type,
            "notes": self.notes,
        }
        if self.transaction_id is not None:
            data["transaction_id"] = self.transaction_id
        return data


# Python attribute -> wire field for partial transaction updates
_TRANSACTION_FIELDS = {
    "user_id": "user",
    "category_id": "category",
    "date": "date",
    "amount": "amount",
    "type": "type",
    "notes": "notes",
}


def transaction_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Translate a partial update keyed by attribute names into a request body."""
    body = {}
    for key, value in changes.items():
        if key not in _TRANSACTION_FIELDS:
            raise ValueError(f"Unknown transaction field: {key}")
        if key == "date":
            value = _to_date(value).isoformat()
        elif key == "amount":
            amount = _to_decimal(value)
            if amount < 0:
                raise ValueError(f"Transaction amount must be non-negative, got {amount}")
            value = float(amount)
        elif key == "type":
            value = _check_type(value)
        body[_TRANSACTION_FIELDS[key]] = value
    return body


@dataclass
class CategoryBreakdown:
    category_id: int
    category_name: str
    total: Decimal
    percentage: Decimal

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CategoryBreakdown":
        return cls(
            category_id=payload.get("category_id"),
            category_name=payload.get("category_name", ""),
            total=_to_decimal(payload.get("total")),
            percentage=_to_decimal(payload.get("percentage")),
        )


@dataclass
class Summary:
    """Totals computed by the backend. Values are copied as returned; a
    figure the server left out stays ``None``."""
    total_income: Optional[Decimal]
    total_expense: Optional[Decimal]
    net_balance: Optional[Decimal]
    transaction_count: int = 0
    category_breakdown: List[CategoryBreakdown] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Summary":
        return cls(
            total_income=_optional_decimal(payload.get("total_income")),
            total_expense=_optional_decimal(payload.get("total_expense")),
            net_balance=_optional_decimal(payload.get("net_balance")),
            transaction_count=int(payload.get("transaction_count") or 0),
            category_breakdown=[
                CategoryBreakdown.from_dict(row)
                for row in payload.get("category_breakdown") or []
            ],
        )


@dataclass
class AuthResult:
    user: User
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AuthResult":
        # login may answer with the user fields at the top level
        user_data = payload.get("user", payload)
        return cls(user=User.from_dict(user_data), payload=payload)


def _iso(value) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@dataclass
class DateRange:
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def to_params(self) -> Dict[str, str]:
        params = {
            "start_date": _iso(self.start_date),
            "end_date": _iso(self.end_date),
        }
        return {k: v for k, v in params.items() if v is not None}


@dataclass
class TransactionFilters:
    """Optional list/export filters, combined with AND on the server."""
    category: Optional[int] = None
    type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self) -> None:
        if self.type:
            _check_type(self.type)

    def to_params(self) -> Dict[str, str]:
        params = {
            "category": None if self.category in (None, "") else str(self.category),
            "type": self.type or None,
            "start_date": _iso(self.start_date),
            "end_date": _iso(self.end_date),
        }
        return {k: v for k, v in params.items() if v is not None}


def split_categories(categories: List[Category]) -> Tuple[List[Category], List[Category]]:
    """Return ``(default, custom)`` categories, preserving order."""
    default = [c for c in categories if c.is_default]
    custom = [c for c in categories if not c.is_default]
    return default, custom
