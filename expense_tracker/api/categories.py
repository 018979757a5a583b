# expense_tracker/api/categories.py
from __future__ import annotations

from typing import List

from expense_tracker.api.client import ApiClient
from expense_tracker.core.models import Category


def _categories(rows) -> List[Category]:
    return [Category.from_dict(row) for row in rows or []]


class CategoryAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list(self, user_id: int) -> List[Category]:
        return await self.client.get("/categories/", params={"user_id": user_id}, parse=_categories)

    async def create(self, user_id: int, name: str) -> Category:
        return await self.client.post(
            "/categories/", {"user": user_id, "name": name}, parse=Category.from_dict
        )

    async def update(self, category_id: int, name: str) -> Category:
        return await self.client.put(
            f"/categories/{category_id}/", {"name": name}, parse=Category.from_dict
        )

    async def delete(self, category_id: int) -> None:
        # what happens to transactions in this category is up to the backend
        await self.client.delete(f"/categories/{category_id}/")
