"""
Shared pytest fixtures for the PASSGATE test suite.

Strategy:
- Domain / infrastructure tests: pure in-memory, explicit timestamps.
- API tests: FastAPI TestClient against an app built with a fresh ledger
  per test, so lockouts never leak between tests.
"""
import os
import pytest

# ---------------------------------------------------------------------------
# Required configuration must exist before passgate.main is imported
# ---------------------------------------------------------------------------
TEST_PASSWORD = "open-sesame-correct-horse"
TEST_SESSION_SECRET = "test-session-secret-not-for-production-0123456789"

os.environ.setdefault("GATE_PASSWORD", TEST_PASSWORD)
os.environ.setdefault("SESSION_SECRET", TEST_SESSION_SECRET)
os.environ.setdefault("ENV", "test")

from passgate.application.auth_gate import AuthGate
from passgate.infrastructure.auth.attempt_ledger import AttemptLedger
from passgate.infrastructure.auth.secret import SecretVerifier
from passgate.infrastructure.config import GateSettings
from passgate.infrastructure.session.cookie import SessionCookieCodec

# A fixed, realistic epoch so arithmetic on timestamps stays readable.
T0 = 1_700_000_000.0


def make_settings(**kwargs) -> GateSettings:
    defaults = {
        "session_secret": TEST_SESSION_SECRET,
        "password": TEST_PASSWORD,
        "cookie_secure": False,
        "protected_content": "The treasure is under the oak.",
        "env": "test",
    }
    defaults.update(kwargs)
    return GateSettings(**defaults)


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def ledger():
    return AttemptLedger()


@pytest.fixture
def verifier():
    return SecretVerifier(secret=TEST_PASSWORD)


@pytest.fixture
def gate(verifier, ledger):
    return AuthGate(verifier, ledger, clock=lambda: T0)


@pytest.fixture
def codec():
    return SessionCookieCodec(TEST_SESSION_SECRET)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def test_app(settings, ledger):
    from passgate.main import create_app
    return create_app(settings, ledger)


@pytest.fixture
def client(test_app):
    from fastapi.testclient import TestClient
    return TestClient(test_app)


@pytest.fixture
def proxy_client(ledger):
    """Client for an app that trusts X-Forwarded-For, to simulate many addresses."""
    from fastapi.testclient import TestClient
    from passgate.main import create_app
    return TestClient(create_app(make_settings(trust_proxy_headers=True), ledger))
