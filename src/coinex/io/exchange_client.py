from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any
from urllib.parse import urlencode

import httpx

from coinex.auth.credential import Credential, HTTPVerb, serialize_body
from coinex.auth.scope import AuthScope
from coinex.auth.signing import SignedRequestFactory, now_ms
from coinex.config.settings import get_settings, load_auth_scope
from coinex.observability.metrics import metrics
from coinex.utils.logging_redaction import get_logger

_HTTP_CLIENT: httpx.AsyncClient | None = None
_BASE_URL = "https://api.coinex.com"
_LOGGER = get_logger(__name__)

QueryParams = Iterable[tuple[str, Any]]


def _get_http_client() -> httpx.AsyncClient:
    global _HTTP_CLIENT
    if _HTTP_CLIENT is None:
        _HTTP_CLIENT = httpx.AsyncClient(timeout=10)
    return _HTTP_CLIENT


async def aclose_http_client() -> None:
    global _HTTP_CLIENT
    client = _HTTP_CLIENT
    _HTTP_CLIENT = None
    if client is not None:
        await client.aclose()


def _format_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def with_query(path: str, params: QueryParams | None = None) -> str:
    """Append params to path in the given order, skipping None values.

    The result is what gets signed and what gets sent; nothing may reorder or
    re-encode it afterwards.
    """
    pairs = [(k, _format_param(v)) for k, v in (params or ()) if v is not None]
    if not pairs:
        return path
    sep = "&" if "?" in path else "?"
    return f"{path}{sep}{urlencode(pairs)}"


class ExchangeClient:
    """Signed REST client for CoinEx v2.

    - Signs with SignedRequestFactory (one timestamp per request)
    - Sends exactly the body string and path+query that were signed
    - No retries: transport and HTTP status errors propagate unchanged
    """

    def __init__(
        self,
        scope: AuthScope,
        *,
        clock: Callable[[], int] = now_ms,
        timeout: float = 10.0,
        base_url: str = _BASE_URL,
    ) -> None:
        self._signer = SignedRequestFactory(scope, clock=clock)
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")

    @property
    def scope(self) -> AuthScope:
        return self._signer.scope

    @property
    def credential(self) -> Credential:
        return self._signer.scope.resolve()

    def build_headers(
        self, verb: HTTPVerb | str, path: str, body: Any | None = None
    ) -> dict[str, str]:
        headers = self._signer.http(verb, path, body).as_headers()
        if body is not None:
            headers["Content-Type"] = "application/json"
        return headers

    async def signed_request(
        self,
        *,
        method: str,
        path: str,
        params: QueryParams | None = None,
        body: Any | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        verb = HTTPVerb(method.upper())
        target = with_query(path, params)
        # Serialize before signing so a bad body fails without touching the network
        content = serialize_body(body)
        headers = self.build_headers(verb, target, body)
        metrics.inc("rest_auth_request")
        _LOGGER.info("REST %s %s", verb.value, path)
        client = _get_http_client()
        try:
            resp = await client.request(
                verb.value,
                f"{self._base_url}{target}",
                headers=headers,
                content=content or None,
                timeout=self._timeout if timeout is None else timeout,
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = getattr(e.response, "status_code", None)
            metrics.inc("rest_auth_error")
            metrics.event("rest_auth_error", {"path": path, "status": status})
            _LOGGER.info("REST error %s %s status=%s", verb.value, path, status)
            raise
        metrics.inc("rest_auth_success")
        metrics.event("rest_auth_ok", {"path": path, "status": resp.status_code})
        return resp


_EXCHANGE_CLIENT: ExchangeClient | None = None


def get_exchange_client() -> ExchangeClient:
    global _EXCHANGE_CLIENT
    if _EXCHANGE_CLIENT is None:
        settings = get_settings()
        _EXCHANGE_CLIENT = ExchangeClient(
            load_auth_scope(settings), timeout=settings.COINEX_HTTP_TIMEOUT
        )
    return _EXCHANGE_CLIENT
