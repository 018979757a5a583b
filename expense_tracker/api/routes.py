# expense_tracker/api/routes.py
"""Known backend routes and the methods each one accepts.

Outgoing requests are checked against ``ROUTE_RULES`` just before they are
sent. A request whose method is not accepted by any matching rule has its
method swapped for an accepted one; nothing else about the request changes.
Paths no rule claims are left alone.
"""

from __future__ import annotations

import logging
import re
import urllib.request
from typing import Iterable, Sequence, Tuple
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

RouteRule = Tuple[re.Pattern, Tuple[str, ...]]

ROUTE_RULES: Tuple[RouteRule, ...] = (
    (re.compile(r"^/auth/register/?$"), ("POST",)),
    (re.compile(r"^/auth/login/?$"), ("POST",)),
    (re.compile(r"^/transactions/?$"), ("POST", "GET")),
    (re.compile(r"^/transactions/\d+/?$"), ("PUT", "DELETE")),
    (re.compile(r"^/categories/?$"), ("POST", "GET")),
    (re.compile(r"^/categories/\d+/?$"), ("PUT", "DELETE")),
    (re.compile(r"^/summary/?$"), ("GET",)),
    (re.compile(r"^/export/?$"), ("GET",)),
)


def allowed_methods(path: str, rules: Iterable[RouteRule] = ROUTE_RULES) -> Tuple[str, ...]:
    """Return the allowed methods of every rule matching ``path``, in table order."""
    allowed = []
    for pattern, methods in rules:
        if pattern.match(path):
            for method in methods:
                if method not in allowed:
                    allowed.append(method)
    return tuple(allowed)


def correct_method(path: str, method: str, rules: Sequence[RouteRule] = ROUTE_RULES) -> str:
    method = (method or "GET").upper()
    allowed = allowed_methods(path, rules)
    if not allowed or method in allowed:
        return method
    preferred = "POST" if "POST" in allowed else allowed[0]
    logger.warning("Adjusting method for %s from %s to %s", path, method, preferred)
    return preferred


def relative_path(url: str, base_url: str) -> str:
    """Strip ``base_url`` and any query string from an outgoing URL."""
    if base_url and url.startswith(base_url):
        path = url[len(base_url):]
    else:
        path = urlsplit(url).path
    path = path.split("?", 1)[0].split("#", 1)[0]
    return path if path.startswith("/") else f"/{path}"


class MethodEnforcer(urllib.request.BaseHandler):
    """urllib pre-processor that applies ``correct_method`` to every request."""

    # run ahead of the stock HTTP handlers
    handler_order = 100

    def __init__(self, base_url: str, rules: Sequence[RouteRule] = ROUTE_RULES):
        self.base_url = base_url.rstrip("/")
        self.rules = rules

    def http_request(self, request: urllib.request.Request) -> urllib.request.Request:
        path = relative_path(request.full_url, self.base_url)
        method = request.get_method()
        corrected = correct_method(path, method, self.rules)
        if corrected != method:
            request.method = corrected
        return request

    https_request = http_request
