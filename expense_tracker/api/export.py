# expense_tracker/api/export.py
from __future__ import annotations

import logging
import os
from typing import Optional

from expense_tracker.api.client import ApiClient
from expense_tracker.core.models import TransactionFilters

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "transactions.csv"


class ExportAPI:
    """Downloads the server-generated CSV into ``download_dir``."""

    def __init__(self, client: ApiClient, download_dir: str = "."):
        self.client = client
        self.download_dir = download_dir

    async def download(self, user_id: int, filters: Optional[TransactionFilters] = None) -> None:
        params = {"user_id": user_id}
        if filters is not None:
            params.update(filters.to_params())
        body = await self.client.get("/export/", params=params, raw=True)

        os.makedirs(self.download_dir, exist_ok=True)
        out_path = os.path.join(self.download_dir, EXPORT_FILENAME)
        with open(out_path, "wb") as f:
            f.write(body)
        logger.info("Written %d bytes to %s", len(body), out_path)
