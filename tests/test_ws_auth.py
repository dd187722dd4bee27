import asyncio
import gzip
import json

import pytest

import coinex.io.ws_auth as mod
from coinex.auth.credential import WebsocketSignPayload
from coinex.io.ws_auth import _decode_frame, auth_ping, build_ws_auth_message
from coinex.observability.metrics import metrics


class DummyWS:
    def __init__(self, replies=None, delay: float = 0.0):
        self.replies = list(replies or [])
        self.delay = delay
        self.sent: list[str] = []

    async def recv(self):  # noqa: D401
        await asyncio.sleep(self.delay)
        if self.replies:
            return self.replies.pop(0)
        return "{}"

    async def __aenter__(self):  # noqa: D401
        return self

    async def __aexit__(self, exc_type, exc, tb):  # noqa: D401, ARG002
        return False

    async def send(self, msg):  # noqa: D401
        self.sent.append(msg)


@pytest.fixture()
def fake_ws(monkeypatch):
    holder = {}

    def install(ws: DummyWS) -> DummyWS:
        def fake_connect(url, *args, **kwargs):  # noqa: ARG001
            holder["url"] = url
            return ws

        monkeypatch.setattr(mod.websockets, "connect", fake_connect)
        holder["ws"] = ws
        return ws

    holder["install"] = install
    return holder


def test_build_ws_auth_message(scope, fixed_clock):
    msg = build_ws_auth_message(scope, clock=fixed_clock, request_id=7)
    assert msg == {
        "method": "server.sign",
        "params": {
            "access_id": "test_api_key",
            "signed_str": "04f77ebe8af567af0d45ed2937168c51cf187bdbc13da8e433a01d6f9ac64f52",
            "timestamp": 1700000000000,
        },
        "id": 7,
    }
    assert msg["params"]["signed_str"] == scope.resolve().sign(
        WebsocketSignPayload(timestamp=1700000000000)
    )


def test_decode_frame_gzip_and_text():
    assert _decode_frame(gzip.compress(b'{"id":1,"code":0}')) == {"id": 1, "code": 0}
    assert _decode_frame('{"id":1}') == {"id": 1}
    assert _decode_frame(b'{"id":2}') == {"id": 2}


@pytest.mark.asyncio
async def test_auth_ping_ok(scope, fixed_clock, fake_ws):
    ws = fake_ws["install"](
        DummyWS(
            [
                "not json",
                json.dumps({"method": "state.update", "data": {}}),
                gzip.compress(json.dumps({"id": 1, "code": 0, "message": "OK"}).encode()),
            ]
        )
    )
    out = await auth_ping(scope, clock=fixed_clock, timeout=0.5)
    assert out == {"ok": True}
    sent = json.loads(ws.sent[0])
    assert sent["method"] == "server.sign"
    assert sent["params"]["timestamp"] == 1700000000000
    assert fake_ws["url"] == "wss://socket.coinex.com/v2/spot"
    assert metrics.counters["ws_auth_success"] == 1


@pytest.mark.asyncio
async def test_auth_ping_error(scope, fixed_clock, fake_ws):
    fake_ws["install"](DummyWS([json.dumps({"id": 1, "code": 25, "message": "signature error"})]))
    out = await auth_ping(scope, clock=fixed_clock, timeout=0.5)
    assert out == {"ok": False, "code": 25, "error": "signature error"}
    assert metrics.counters["ws_auth_error"] == 1


@pytest.mark.asyncio
async def test_auth_ping_timeout(scope, fake_ws):
    fake_ws["install"](DummyWS(delay=0.2))
    out = await auth_ping(scope, timeout=0.05)
    assert out["ok"] is False and out["error"] == "timeout"
    assert metrics.counters["ws_auth_timeout"] == 1
