# expense_tracker/api/auth.py
from __future__ import annotations

from expense_tracker.api.client import ApiClient
from expense_tracker.core.models import AuthResult


class AuthAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        return await self.client.post(
            "/auth/register/",
            {"username": username, "email": email, "password": password},
            parse=AuthResult.from_dict,
        )

    async def login(self, username: str, password: str) -> AuthResult:
        return await self.client.post(
            "/auth/login/",
            {"username": username, "password": password},
            parse=AuthResult.from_dict,
        )
