from datetime import date
from decimal import Decimal

import pytest

from expense_tracker.core.models import (
    AuthResult,
    Category,
    DateRange,
    Summary,
    Transaction,
    TransactionFilters,
    split_categories,
    transaction_changes,
)


def test_transaction_from_wire():
    tx = Transaction.from_dict({
        "transaction_id": 5,
        "user": 1,
        "category": 2,
        "category_name": "Food",
        "date": "2025-03-01",
        "amount": "12.50",
        "type": "Expense",
        "notes": None,
        "created_at": "2025-03-01T10:00:00Z",
    })
    assert tx.transaction_id == 5
    assert tx.user_id == 1
    assert tx.category_id == 2
    assert tx.date == date(2025, 3, 1)
    assert tx.amount == Decimal("12.50")
    assert tx.notes == ""


def test_transaction_to_wire_omits_server_fields():
    tx = Transaction(user_id=1, category_id=2, date=date(2025, 3, 1), amount="10", type="Income")
    assert tx.to_dict() == {
        "user": 1,
        "category": 2,
        "date": "2025-03-01",
        "amount": 10.0,
        "type": "Income",
        "notes": "",
    }


def test_transaction_rejects_negative_amount_and_bad_type():
    with pytest.raises(ValueError):
        Transaction(user_id=1, category_id=2, date="2025-03-01", amount="-1")
    with pytest.raises(ValueError):
        Transaction(user_id=1, category_id=2, date="2025-03-01", amount="1", type="Transfer")


def test_transaction_changes_maps_attribute_names():
    body = transaction_changes({"category_id": 4, "amount": Decimal("3.25"), "date": date(2025, 1, 2)})
    assert body == {"category": 4, "amount": 3.25, "date": "2025-01-02"}
    with pytest.raises(ValueError):
        transaction_changes({"category_name": "x"})
    with pytest.raises(ValueError):
        transaction_changes({"type": "Refund"})


def test_summary_copies_net_balance():
    summary = Summary.from_dict({
        "total_income": 1000,
        "total_expense": 400,
        "net_balance": 600,
        "transaction_count": 3,
        "category_breakdown": [
            {"category_id": 1, "category_name": "Rent", "total": 400, "percentage": 100.0},
        ],
    })
    assert summary.net_balance == Decimal("600")
    assert summary.category_breakdown[0].category_name == "Rent"
    assert summary.category_breakdown[0].percentage == Decimal("100.0")


def test_summary_does_not_fill_in_missing_figures():
    summary = Summary.from_dict({"total_income": 1000, "total_expense": 400})
    assert summary.total_income == Decimal("1000")
    assert summary.total_expense == Decimal("400")
    assert summary.net_balance is None


def test_auth_result_with_and_without_user_key():
    nested = AuthResult.from_dict({"user": {"user_id": 1, "username": "a"}, "message": "ok"})
    assert nested.user.user_id == 1
    assert nested.payload["message"] == "ok"

    flat = AuthResult.from_dict({"user_id": 2, "username": "b", "email": "b@x.io"})
    assert flat.user.username == "b"


def test_filters_drop_empty_values():
    assert TransactionFilters().to_params() == {}
    assert TransactionFilters(category="", type="", start_date="").to_params() == {}
    params = TransactionFilters(category=3, type="Income", end_date=date(2025, 1, 31)).to_params()
    assert params == {"category": "3", "type": "Income", "end_date": "2025-01-31"}
    assert DateRange(start_date=date(2025, 1, 1)).to_params() == {"start_date": "2025-01-01"}


def test_split_categories():
    cats = [
        Category(category_id=1, user_id=1, name="Food", is_default=True),
        Category(category_id=2, user_id=1, name="Hobbies"),
        Category(category_id=3, user_id=1, name="Salary", is_default=True),
    ]
    default, custom = split_categories(cats)
    assert [c.name for c in default] == ["Food", "Salary"]
    assert [c.name for c in custom] == ["Hobbies"]
