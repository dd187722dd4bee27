from __future__ import annotations

import asyncio
import gzip
import json
from collections.abc import Callable
from typing import Any

import websockets

from coinex.auth.scope import AuthScope
from coinex.auth.signing import SignedRequestFactory, now_ms
from coinex.observability.metrics import metrics
from coinex.utils.logging_redaction import get_logger

WS_URL = "wss://socket.coinex.com/v2/spot"
_LOGGER = get_logger(__name__)


def build_ws_auth_message(
    scope: AuthScope, *, clock: Callable[[], int] = now_ms, request_id: int = 1
) -> dict[str, Any]:
    auth = SignedRequestFactory(scope, clock=clock).websocket()
    return {
        "method": "server.sign",
        "params": {
            "access_id": auth.key,
            "signed_str": auth.signature,
            "timestamp": auth.timestamp,
        },
        "id": request_id,
    }


def _decode_frame(msg: str | bytes) -> Any:
    # Server frames are gzip-compressed binary; text frames pass through
    if isinstance(msg, bytes):
        try:
            msg = gzip.decompress(msg)
        except (OSError, EOFError):
            pass
        msg = msg.decode("utf-8", errors="replace")
    return json.loads(msg)


async def auth_ping(
    scope: AuthScope,
    *,
    url: str = WS_URL,
    timeout: float = 5.0,
    clock: Callable[[], int] = now_ms,
) -> dict:
    """Connect, send server.sign and wait for its reply (minimal)."""
    request_id = 1
    message = build_ws_auth_message(scope, clock=clock, request_id=request_id)
    metrics.inc("ws_auth_request")
    async with websockets.connect(url, ping_interval=None) as ws:
        _LOGGER.info("WS auth %s", url)
        await ws.send(json.dumps(message))
        try:
            for _ in range(5):
                msg = await asyncio.wait_for(ws.recv(), timeout=timeout)
                try:
                    data = _decode_frame(msg)
                except (json.JSONDecodeError, TypeError, UnicodeDecodeError):
                    continue
                if not isinstance(data, dict) or data.get("id") != request_id:
                    continue
                if data.get("code") == 0:
                    metrics.inc("ws_auth_success")
                    return {"ok": True}
                metrics.inc("ws_auth_error")
                metrics.event("ws_auth_error", {"code": data.get("code"), "msg": data.get("message")})
                return {
                    "ok": False,
                    "code": data.get("code"),
                    "error": data.get("message") or str(data),
                }
            metrics.inc("ws_auth_timeout")
            return {"ok": False, "error": "timeout"}
        except TimeoutError:
            metrics.inc("ws_auth_timeout")
            return {"ok": False, "error": "timeout"}
