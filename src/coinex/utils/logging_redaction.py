from __future__ import annotations

import logging
import os
import re
from typing import Any

SENSITIVE_KEYS = {
    "X-COINEX-KEY",
    "X-COINEX-SIGN",
    "access_id",
    "signed_str",
    "secret",
    "COINEX_API_KEY",
    "COINEX_API_SECRET",
}
_SENSITIVE_KEYS_LOWER = {k.lower() for k in SENSITIVE_KEYS}


def _mask(value: Any) -> Any:
    try:
        s = str(value)
    except Exception:
        return "***"
    if not s:
        return s
    # At most three leading characters survive, enough to tell keys apart
    return (s[:3] + "...") if len(s) > 6 else "***"


def redact_mapping(data: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict with known sensitive keys masked (nested dicts included)."""
    redacted: dict[str, Any] = {}
    for k, v in data.items():
        if str(k).lower() in _SENSITIVE_KEYS_LOWER:
            redacted[k] = _mask(v)
        elif isinstance(v, dict):
            redacted[k] = redact_mapping(v)
        else:
            redacted[k] = v
    return redacted


_KV_PATTERNS = [
    re.compile(r"(X-COINEX-KEY\s*[:=]\s*)([^\s,]+)", re.IGNORECASE),
    re.compile(r"(X-COINEX-SIGN\s*[:=]\s*)([^\s,]+)", re.IGNORECASE),
    re.compile(r"(access_id['\"]?\s*[:=]\s*)([^\s,}]+)", re.IGNORECASE),
    re.compile(r"(signed_str['\"]?\s*[:=]\s*)([^\s,}]+)", re.IGNORECASE),
    re.compile(r"(secret['\"]?\s*[:=]\s*)([^\s,}]+)", re.IGNORECASE),
]


def redact_text(text: str) -> str:
    """Mask known sensitive key/value pairs in free text."""
    if not text:
        return text
    out = text
    for pat in _KV_PATTERNS:
        out = pat.sub(lambda m: m.group(1) + "***", out)
    return out


def _parse_log_level(raw_level: str | None, fallback: int = logging.INFO) -> int:
    if not raw_level:
        return fallback
    # "INFO,DEBUG" picks the last (most specific) entry
    parts = [segment.strip() for segment in raw_level.split(",") if segment.strip()]
    candidate = parts[-1] if parts else raw_level.strip()
    level_value = getattr(logging, candidate.upper(), None)
    if isinstance(level_value, int):
        return level_value
    return fallback


_EFFECTIVE_LOG_LEVEL = _parse_log_level(os.getenv("CORE_LOG_LEVEL") or os.getenv("LOG_LEVEL"))


class RedactionFilter(logging.Filter):
    """Logging filter masking known sensitive values in msg/args."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        try:
            try:
                formatted = record.getMessage()
            except Exception:
                formatted = str(record.msg)
            record.msg = redact_text(formatted)
            record.args = ()
        except (TypeError, ValueError, AttributeError) as redaction_err:
            # A redaction failure must never stop logging
            logging.getLogger("redaction").debug("redaction_error: %s", redaction_err)
        return True


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not any(isinstance(f, RedactionFilter) for f in logger.filters):
        logger.addFilter(RedactionFilter())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(_EFFECTIVE_LOG_LEVEL)
    return logger
