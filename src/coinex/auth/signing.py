from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, NamedTuple

from coinex.auth.credential import HTTPVerb, HttpSignPayload, WebsocketSignPayload
from coinex.auth.scope import AuthScope

HEADER_KEY = "X-COINEX-KEY"
HEADER_SIGN = "X-COINEX-SIGN"
HEADER_TIMESTAMP = "X-COINEX-TIMESTAMP"


def now_ms() -> int:
    return int(time.time() * 1000)


class AuthHeaders(NamedTuple):
    key: str
    signature: str
    timestamp: int

    def as_headers(self) -> dict[str, str]:
        return {
            HEADER_KEY: self.key,
            HEADER_SIGN: self.signature,
            HEADER_TIMESTAMP: str(self.timestamp),
        }


class SignedRequestFactory:
    """Produce the (key, signature, timestamp) triple for outgoing requests.

    - One clock read per request; that value is signed and emitted
    - The path is signed exactly as given, query string included
    - No network I/O, no caching
    """

    def __init__(self, scope: AuthScope, *, clock: Callable[[], int] = now_ms) -> None:
        self._scope = scope
        self._clock = clock

    @property
    def scope(self) -> AuthScope:
        return self._scope

    def http(self, verb: HTTPVerb | str, path: str, body: Any | None = None) -> AuthHeaders:
        credential = self._scope.resolve()
        timestamp = self._clock()
        payload = HttpSignPayload(
            verb=HTTPVerb(verb.upper()),
            path=path,
            timestamp=timestamp,
            body=body,
        )
        return AuthHeaders(credential.get_key(), credential.sign(payload), timestamp)

    def websocket(self) -> AuthHeaders:
        credential = self._scope.resolve()
        timestamp = self._clock()
        signature = credential.sign(WebsocketSignPayload(timestamp=timestamp))
        return AuthHeaders(credential.get_key(), signature, timestamp)
