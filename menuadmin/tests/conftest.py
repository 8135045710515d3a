import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from menuadmin import create_app
from menuadmin.core.auth.auth_client import InvalidCredentialsError
from menuadmin.core.auth.schemas import LoginResult
from menuadmin.core.events.event_bus import EventBus
from menuadmin.core.session import codec
from menuadmin.core.session.schemas import FeatureFlagSet
from menuadmin.core.session.storage import MemoryCookieJar
from menuadmin.core.session.token_store import SessionTokenStore


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (Flask app, test client)")


class FakeClock:
    def __init__(self, now: Optional[datetime] = None) -> None:
        self.now = now or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeAuthClient:
    """Stands in for the menu backend."""

    def __init__(self) -> None:
        self.password = "secret123"
        self.token = "jwt-token-abc"
        self.admin = {
            "id": "65f0c0ffee",
            "email": "owner@cafe.test",
            "features": {"ordersToggle": False, "eventsToggle": True, "dailyOfferToggle": True},
        }
        self.feature_updates: List[tuple] = []
        self.update_error: Optional[Exception] = None
        self.reset_requests: List[str] = []
        self.stored_features = {"ordersToggle": True}
        self.feature_fetches: List[str] = []

    def login(self, email: str, password: str) -> LoginResult:
        if password != self.password:
            raise InvalidCredentialsError("Invalid credentials", 401)
        return LoginResult.model_validate({"token": self.token, "admin": self.admin})

    def request_password_reset(self, email: str) -> str:
        self.reset_requests.append(email)
        return "OTP sent to your email"

    def reset_password(self, otp: str, password: str) -> str:
        return "Password reset successful"

    def get_features(self, admin_id, token=None) -> FeatureFlagSet:
        self.feature_fetches.append(admin_id)
        return FeatureFlagSet(**self.stored_features)

    def update_features(self, admin_id, features: FeatureFlagSet, token=None) -> FeatureFlagSet:
        if self.update_error is not None:
            raise self.update_error
        self.feature_updates.append((admin_id, features.as_dict(), token))
        return features


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def jar(clock):
    return MemoryCookieJar(clock=clock)


@pytest.fixture()
def bus():
    return EventBus()


@pytest.fixture()
def store(jar, bus, clock):
    return SessionTokenStore(jar, event_bus=bus, clock=clock)


@pytest.fixture()
def auth_client():
    return FakeAuthClient()


@pytest.fixture()
def app(auth_client):
    app = create_app("testing")
    app.extensions["auth_client"] = auth_client
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def login_cookies(client):
    """Seed the browser cookies a successful login would leave behind."""

    def _seed(token="jwt-token-abc", features=None, admin_id="65f0c0ffee"):
        client.set_cookie("adminToken", codec.encode(token))
        if features is not None:
            client.set_cookie("adminFeatures", codec.encode(FeatureFlagSet(**features).model_dump_json()))
        if admin_id:
            client.set_cookie("adminId", codec.encode(admin_id))

    return _seed
