# expense_tracker/session.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from expense_tracker.api.errors import NotAuthenticatedError
from expense_tracker.core.models import User


@dataclass
class Session:
    """Holds the logged-in user for the lifetime of the process.

    Nothing is persisted. Create one per run and hand it to whatever needs
    to know who is logged in.
    """
    user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def login(self, user: User) -> None:
        self.user = user

    def logout(self) -> None:
        self.user = None

    def require_user(self) -> User:
        if self.user is None:
            raise NotAuthenticatedError("Log in before accessing this resource")
        return self.user
