# expense_tracker/api/client.py
from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from functools import partial
from typing import Any, Callable, Dict, Mapping, Optional, Sequence
from urllib.parse import urlencode

from anyio import to_thread

from expense_tracker.api.errors import ApiError, TransportError, error_from_response
from expense_tracker.api.routes import ROUTE_RULES, MethodEnforcer, RouteRule
from expense_tracker.config import resolve_base_url

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Drop parameters the caller left empty so they never hit the query string."""
    if not params:
        return {}
    return {
        key: str(value)
        for key, value in params.items()
        if value is not None and value != ""
    }


class ApiClient:
    """Thin JSON client bound to one backend base URL.

    Calls are coroutines; the blocking urllib round trip runs in a worker
    thread. Every request passes through ``MethodEnforcer`` before it is sent.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        rules: Sequence[RouteRule] = ROUTE_RULES,
    ) -> None:
        self.base_url = (base_url or resolve_base_url()).rstrip("/")
        self.timeout = timeout
        self._opener = urllib.request.build_opener(MethodEnforcer(self.base_url, rules))

    def url_for(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        url = f"{self.base_url}/{path.lstrip('/')}"
        query = clean_params(params)
        if query:
            url = f"{url}?{urlencode(query)}"
        return url

    def _send(self, request: urllib.request.Request) -> tuple[int, bytes]:
        kwargs = {} if self.timeout is None else {"timeout": self.timeout}
        try:
            with self._opener.open(request, **kwargs) as resp:
                body = resp.read()
                status = resp.status
        except urllib.error.HTTPError as exc:
            body = exc.read()
            logger.debug("◀ %s %s", exc.code, request.full_url)
            raise error_from_response(exc.code, body) from exc
        except (urllib.error.URLError, OSError) as exc:
            reason = getattr(exc, "reason", exc)
            raise TransportError(f"Could not reach {self.base_url}: {reason}") from exc
        logger.debug("◀ %s %s", status, request.full_url)
        return status, body

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Any = None,
        raw: bool = False,
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        ``parse`` turns the decoded body into result objects. A body it cannot
        handle raises ``ApiError`` instead of leaking a ``KeyError``.
        """
        url = self.url_for(path, params)
        data = None if json_body is None else json.dumps(json_body).encode("utf-8")
        request = urllib.request.Request(
            url, data=data, headers=dict(DEFAULT_HEADERS), method=method.upper()
        )
        logger.debug("▶ %s %s", method.upper(), url)

        status, body = await to_thread.run_sync(partial(self._send, request))
        if raw:
            return body
        payload = None
        if body:
            try:
                payload = json.loads(body.decode("utf-8"))
            except (ValueError, UnicodeDecodeError) as exc:
                raise ApiError(f"Malformed response from {url}", status) from exc
        if parse is None:
            return payload
        try:
            return parse(payload)
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            raise ApiError(f"Malformed response from {url}", status, payload) from exc

    async def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        raw: bool = False,
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        return await self.request("GET", path, params=params, raw=raw, parse=parse)

    async def post(self, path: str, json_body: Any = None, parse: Optional[Callable[[Any], Any]] = None) -> Any:
        return await self.request("POST", path, json_body=json_body, parse=parse)

    async def put(self, path: str, json_body: Any = None, parse: Optional[Callable[[Any], Any]] = None) -> Any:
        return await self.request("PUT", path, json_body=json_body, parse=parse)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
