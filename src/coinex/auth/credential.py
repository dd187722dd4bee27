"""API credential and HMAC-SHA256 request signing for CoinEx v2.

Signing follows the exchange's canonical string:

    HTTP:       VERB + PATH[?QUERY] + BODY_JSON + TIMESTAMP_MS
    WebSocket:  TIMESTAMP_MS

and returns the lowercase hex digest of HMAC-SHA256 keyed by the API secret.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NewType

from coinex.utils.logging_redaction import get_logger

_LOGGER = get_logger(__name__)

Signature = NewType("Signature", str)


class SerializationError(ValueError):
    """Request body could not be serialized into its canonical JSON form."""


class Capability(str, Enum):
    TRADE = "trade"
    WITHDRAW = "withdraw"


class HTTPVerb(str, Enum):
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


@dataclass(frozen=True)
class HttpSignPayload:
    verb: HTTPVerb
    path: str  # includes the query string exactly as transmitted
    timestamp: int
    body: Any | None = None


@dataclass(frozen=True)
class WebsocketSignPayload:
    timestamp: int


SignPayload = HttpSignPayload | WebsocketSignPayload


def serialize_body(body: Any | None) -> str:
    """Serialize a request body deterministically (sorted keys, compact).

    Returns "" for an absent body. The same string must be both signed and
    transmitted.
    """
    if body is None:
        return ""
    try:
        return json.dumps(body, sort_keys=True, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as err:
        raise SerializationError(
            f"request body is not JSON serializable: {type(err).__name__}"
        ) from err


def _timestamp_str(timestamp: int) -> str:
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise TypeError(f"timestamp must be int milliseconds, got {type(timestamp).__name__}")
    return str(timestamp)


def canonical_payload(payload: SignPayload) -> str:
    """Build the exact string fed to the HMAC for a payload."""
    if isinstance(payload, WebsocketSignPayload):
        return _timestamp_str(payload.timestamp)
    verb = HTTPVerb(payload.verb).value
    body = serialize_body(payload.body)
    return f"{verb}{payload.path}{body}{_timestamp_str(payload.timestamp)}"


def _describe(payload: SignPayload, canonical: str) -> str:
    # Shape only: query values and body contents stay out of the logs
    if isinstance(payload, WebsocketSignPayload):
        return f"ws ts={payload.timestamp} len={len(canonical)}"
    path, _, query = payload.path.partition("?")
    body_len = len(serialize_body(payload.body))
    return (
        f"http verb={HTTPVerb(payload.verb).value} path={path} "
        f"query_len={len(query)} body_len={body_len} ts={payload.timestamp}"
    )


@dataclass(frozen=True)
class Credential:
    """Public key id, private secret and optional IP allowlist.

    Immutable after construction; safe to share between threads and tasks.
    The secret is excluded from repr and to_dict().
    """

    key: str
    secret: str = field(repr=False)
    ip_whitelist: frozenset[str] | None = None
    diagnostics: bool = field(default=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.ip_whitelist is not None and not isinstance(self.ip_whitelist, frozenset):
            object.__setattr__(self, "ip_whitelist", frozenset(self._as_iterable(self.ip_whitelist)))

    @staticmethod
    def _as_iterable(value: Iterable[str] | str) -> Iterable[str]:
        if isinstance(value, str):
            return (value,)
        return value

    def is_whitelisted(self, ip: str) -> bool:
        """True when no allowlist is configured, else exact membership."""
        if self.ip_whitelist is None:
            return True
        return ip in self.ip_whitelist

    def get_key(self) -> str:
        return self.key

    def sign(self, payload: SignPayload) -> Signature:
        """HMAC-SHA256 over the canonical payload, lowercase hex.

        Raises:
            SerializationError: the HTTP body cannot be serialized. Nothing is
                signed in that case.
        """
        message = canonical_payload(payload)
        if self.diagnostics:
            _LOGGER.debug("sign %s", _describe(payload, message))
        digest = hmac.new(self.secret.encode(), message.encode(), hashlib.sha256).hexdigest()
        return Signature(digest)

    def to_dict(self) -> dict[str, Any]:
        """Serializable view without the secret."""
        return {
            "key": self.key,
            "ip_whitelist": sorted(self.ip_whitelist) if self.ip_whitelist is not None else None,
        }
