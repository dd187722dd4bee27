import time
from threading import Lock
from typing import Any, Dict, List

from coinex.utils.logging_redaction import redact_mapping

_MAX_EVENTS = 500


class Metrics:
    """In-process counters, gauges and a bounded event log.

    Shared by every request path, so updates take a lock. Event payloads are
    redacted before they are stored.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self.counters: Dict[str, int] = {}
        self.gauges: Dict[str, float] = {}
        self.events: List[dict] = []

    def inc(self, name: str, value: int = 1) -> None:
        with self._lock:
            self.counters[name] = self.counters.get(name, 0) + value

    def set_gauge(self, name: str, value: float) -> None:
        with self._lock:
            self.gauges[name] = float(value)

    def event(self, name: str, payload: Dict[str, Any] | None = None) -> None:
        entry = {"ts": int(time.time()), "name": name, "payload": redact_mapping(payload or {})}
        with self._lock:
            self.events.append(entry)
            if len(self.events) > _MAX_EVENTS:
                del self.events[: len(self.events) - _MAX_EVENTS]

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "counters": dict(self.counters),
                "gauges": dict(self.gauges),
                "events": list(self.events[-100:]),
            }

    def reset(self) -> None:
        with self._lock:
            self.counters.clear()
            self.gauges.clear()
            self.events.clear()


metrics = Metrics()
