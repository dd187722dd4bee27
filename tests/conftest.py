from __future__ import annotations

import pytest

from coinex.auth.credential import Credential
from coinex.auth.scope import AuthScope
from coinex.observability.metrics import metrics

TEST_KEY = "test_api_key"
TEST_SECRET = "s3cr3t"  # pragma: allowlist secret (testdata)
FIXED_TS = 1700000000000


@pytest.fixture()
def credential() -> Credential:
    return Credential(key=TEST_KEY, secret=TEST_SECRET)


@pytest.fixture()
def scope(credential: Credential) -> AuthScope:
    return AuthScope.read_only(credential)


@pytest.fixture()
def fixed_clock():
    return lambda: FIXED_TS


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield
    metrics.reset()
