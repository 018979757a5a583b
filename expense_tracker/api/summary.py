# expense_tracker/api/summary.py
from __future__ import annotations

from typing import Optional

from expense_tracker.api.client import ApiClient
from expense_tracker.core.models import DateRange, Summary


class SummaryAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    async def get(self, user_id: int, date_range: Optional[DateRange] = None) -> Summary:
        params = {"user_id": user_id}
        if date_range is not None:
            params.update(date_range.to_params())
        return await self.client.get("/summary/", params=params, parse=Summary.from_dict)
