# expense_tracker/api/errors.py
from __future__ import annotations

import json
from typing import Any, Optional

GENERIC_MESSAGE = "An error occurred"
INVALID_CREDENTIALS = "Invalid credentials"


class ApiError(Exception):
    """Base class for every failure raised by the REST client and facades."""

    def __init__(self, message: str, status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload


class TransportError(ApiError):
    """The request never reached the backend or no response came back."""


class ValidationError(ApiError):
    """A 4xx response carrying the server's explanation."""


class AuthenticationError(ApiError):
    """The backend rejected the credentials (401/403)."""


class ServerError(ApiError):
    """The backend failed with a 5xx response."""


class NotAuthenticatedError(Exception):
    """A user-scoped operation was attempted without anyone logged in."""


def _decode_body(body: bytes) -> Any:
    if not body:
        return None
    try:
        return json.loads(body.decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None


def extract_message(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    for key in ("error", "detail", "message"):
        value = payload.get(key)
        if value:
            return str(value)
    return None


def error_from_response(status: int, body: bytes) -> ApiError:
    payload = _decode_body(body)
    message = extract_message(payload)
    if status in (401, 403):
        return AuthenticationError(message or INVALID_CREDENTIALS, status, payload)
    if 400 <= status < 500:
        return ValidationError(message or GENERIC_MESSAGE, status, payload)
    if status >= 500:
        return ServerError(message or GENERIC_MESSAGE, status, payload)
    return ApiError(message or GENERIC_MESSAGE, status, payload)
