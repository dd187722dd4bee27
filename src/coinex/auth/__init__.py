"""Credentials, permission scopes and request signing for the CoinEx v2 API."""

from .credential import (
    Capability,
    Credential,
    HTTPVerb,
    HttpSignPayload,
    SerializationError,
    Signature,
    SignPayload,
    WebsocketSignPayload,
    canonical_payload,
    serialize_body,
)
from .scope import AuthScope, Permission
from .signing import AuthHeaders, SignedRequestFactory, now_ms

__all__ = [
    "AuthHeaders",
    "AuthScope",
    "Capability",
    "Credential",
    "HTTPVerb",
    "HttpSignPayload",
    "Permission",
    "SerializationError",
    "SignPayload",
    "Signature",
    "SignedRequestFactory",
    "WebsocketSignPayload",
    "canonical_payload",
    "now_ms",
    "serialize_body",
]
