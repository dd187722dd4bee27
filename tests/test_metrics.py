from concurrent.futures import ThreadPoolExecutor

from coinex.observability.metrics import Metrics


def test_counters_and_gauges():
    m = Metrics()
    m.inc("a")
    m.inc("a", 2)
    m.set_gauge("g", 3)
    snap = m.snapshot()
    assert snap["counters"] == {"a": 3}
    assert snap["gauges"] == {"g": 3.0}


def test_event_payload_is_redacted():
    m = Metrics()
    m.event("rest_auth_ok", {"X-COINEX-SIGN": "abcdef0123456789", "status": 200})
    payload = m.snapshot()["events"][0]["payload"]
    assert payload["status"] == 200
    assert payload["X-COINEX-SIGN"] == "abc..."


def test_events_are_bounded():
    m = Metrics()
    for i in range(600):
        m.event("e", {"i": i})
    assert len(m.events) == 500
    assert m.events[-1]["payload"]["i"] == 599
    assert len(m.snapshot()["events"]) == 100


def test_concurrent_inc():
    m = Metrics()
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: m.inc("n"), range(1000)))
    assert m.counters["n"] == 1000


def test_reset():
    m = Metrics()
    m.inc("a")
    m.event("e")
    m.reset()
    assert m.snapshot() == {"counters": {}, "gauges": {}, "events": []}
