# expense_tracker/api/__init__.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from expense_tracker.api.auth import AuthAPI
from expense_tracker.api.categories import CategoryAPI
from expense_tracker.api.client import ApiClient
from expense_tracker.api.export import ExportAPI
from expense_tracker.api.summary import SummaryAPI
from expense_tracker.api.transactions import TransactionAPI
from expense_tracker.config import resolve_base_url


@dataclass
class ExpenseTrackerAPI:
    """All resource facades sharing one ``ApiClient``."""
    client: ApiClient
    download_dir: str = "."

    def __post_init__(self) -> None:
        self.auth = AuthAPI(self.client)
        self.transactions = TransactionAPI(self.client)
        self.categories = CategoryAPI(self.client)
        self.summary = SummaryAPI(self.client)
        self.export = ExportAPI(self.client, self.download_dir)

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, object],
        environ: Optional[Mapping[str, str]] = None,
        base_url: Optional[str] = None,
    ) -> "ExpenseTrackerAPI":
        timeout = config.get("timeout")
        client = ApiClient(
            base_url=base_url or resolve_base_url(config, environ),
            timeout=float(timeout) if timeout else None,
        )
        return cls(client=client, download_dir=str(config.get("download_dir") or "."))
