from __future__ import annotations

import json
from typing import Any

from coinex.io.exchange_client import ExchangeClient, get_exchange_client

SUBS_PATH = "/v2/account/subs"
SUBS_API_PATH = "/v2/account/subs/api"


def _decode(resp: Any) -> Any:
    try:
        return resp.json()  # type: ignore[attr-defined]
    except Exception:
        try:
            return json.loads(resp.text)
        except Exception:
            return resp.text


async def get_sub_account_list(
    *,
    user: str | None = None,
    frozen: bool | None = None,
    page: int | None = None,
    limit: int | None = None,
    client: ExchangeClient | None = None,
) -> Any:
    """List sub-accounts (GET /v2/account/subs), optionally filtered.

    Returns the JSON-decoded response (list/dict) or raw text.
    """
    ec = client or get_exchange_client()
    params = [
        ("sub_user_name", user),
        ("is_frozen", frozen),
        ("page", page),
        ("limit", limit),
    ]
    resp = await ec.signed_request(method="GET", path=SUBS_PATH, params=params)
    return _decode(resp)


async def get_sub_account_api_list(
    user: str,
    *,
    page: int | None = None,
    limit: int | None = None,
    client: ExchangeClient | None = None,
) -> Any:
    """List the API keys of one sub-account (GET /v2/account/subs/api)."""
    ec = client or get_exchange_client()
    params = [("sub_user_name", user), ("page", page), ("limit", limit)]
    resp = await ec.signed_request(method="GET", path=SUBS_API_PATH, params=params)
    return _decode(resp)


async def create_sub_account(
    user: str,
    *,
    remark: str | None = None,
    client: ExchangeClient | None = None,
) -> Any:
    """Create a sub-account (POST /v2/account/subs)."""
    ec = client or get_exchange_client()
    body: dict[str, Any] = {"sub_user_name": user}
    if remark is not None:
        body["remark"] = remark
    resp = await ec.signed_request(method="POST", path=SUBS_PATH, body=body)
    return _decode(resp)
