# expense_tracker/api/transactions.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from expense_tracker.api.client import ApiClient
from expense_tracker.core.models import Transaction, TransactionFilters, transaction_changes


def _transactions(rows) -> List[Transaction]:
    return [Transaction.from_dict(row) for row in rows or []]


class TransactionAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self, user_id: int, filters: Optional[TransactionFilters] = None) -> List[Transaction]:
        params = {"user_id": user_id}
        if filters is not None:
            params.update(filters.to_params())
        return await self.client.get("/transactions/", params=params, parse=_transactions)

    async def create(self, transaction: Transaction) -> Transaction:
        return await self.client.post(
            "/transactions/", transaction.to_dict(), parse=Transaction.from_dict
        )

    async def update(self, transaction_id: int, changes: Dict[str, Any]) -> Transaction:
        """Apply a partial update. ``changes`` uses ``Transaction`` attribute names."""
        return await self.client.put(
            f"/transactions/{transaction_id}/",
            transaction_changes(changes),
            parse=Transaction.from_dict,
        )

    async def delete(self, transaction_id: int) -> None:
        await self.client.delete(f"/transactions/{transaction_id}/")
