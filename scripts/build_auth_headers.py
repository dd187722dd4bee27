#!/usr/bin/env python3
"""
Build CoinEx v2 authentication headers for a request path.
Key and signature are masked unless --reveal is given; the secret is never printed.
"""

from __future__ import annotations
import argparse
import json
import sys

from coinex.auth.credential import HTTPVerb, SerializationError
from coinex.auth.signing import AuthHeaders, SignedRequestFactory
from coinex.config.settings import get_settings, load_auth_scope


def make_request_path(path: str) -> str:
    """Normalize a path into the /v2/... form that gets signed."""
    p = path.strip().lstrip("/")
    p = p.removeprefix("v2/")
    return f"/v2/{p}"


def build_headers(path: str, body: object | None, verb: str = "GET") -> AuthHeaders:
    scope = load_auth_scope(get_settings())
    return SignedRequestFactory(scope).http(HTTPVerb(verb.upper()), make_request_path(path), body)


def build_ws_headers() -> AuthHeaders:
    scope = load_auth_scope(get_settings())
    return SignedRequestFactory(scope).websocket()


def log_safe_json(data: dict, pretty: bool = False) -> None:
    print(json.dumps(data, indent=2 if pretty else None))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build CoinEx v2 auth headers")
    parser.add_argument("path", nargs="?", default="account/subs", help="e.g. account/subs?page=1")
    parser.add_argument("--verb", choices=[v.value for v in HTTPVerb], default="GET")
    parser.add_argument("--body", help="JSON body as string", default=None)
    parser.add_argument("--ws", action="store_true", help="WebSocket server.sign fields")
    parser.add_argument("--reveal", action="store_true", help="Show key and signature")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    args = parser.parse_args(argv)

    try:
        body = json.loads(args.body) if args.body else None
    except json.JSONDecodeError as e:
        print(f"Invalid JSON body: {e}", file=sys.stderr)
        return 2

    try:
        auth = build_ws_headers() if args.ws else build_headers(args.path, body, args.verb)
    except SerializationError as e:
        print(f"Body not serializable: {e}", file=sys.stderr)
        return 2

    out = auth.as_headers()
    if not args.reveal:
        out = {k: ("***" if k != "X-COINEX-TIMESTAMP" else v) for k, v in out.items()}
    out["info"] = "WS auth built" if args.ws else f"Auth headers built for {args.verb}"
    if not args.ws:
        out["path"] = make_request_path(args.path)
    log_safe_json(out, args.pretty)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
