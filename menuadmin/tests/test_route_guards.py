import pytest
from flask import Blueprint, request_tearing_down

from menuadmin.core.session import current_event_bus
from menuadmin.core.session.events import ADMIN_FEATURES_UPDATED
from menuadmin.core.utils.decorators import feature_route, protected_route

pytestmark = pytest.mark.integration


def test_protected_page_redirects_without_token(client):
    resp = client.get("/admin/dashboard")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/login")


def test_protected_page_renders_with_token(client, login_cookies):
    login_cookies()
    resp = client.get("/admin/dashboard")
    assert resp.status_code == 200
    assert b'aria-current="page">Dashboard' in resp.data


def test_undecodable_token_cookie_redirects(client):
    client.set_cookie("adminToken", "garbage***")
    resp = client.get("/admin/dashboard")
    assert resp.status_code == 302


def test_disabled_feature_redirects_to_dashboard(client, login_cookies):
    login_cookies(features={"eventsToggle": False})
    resp = client.get("/admin/events/manage")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/dashboard")


def test_missing_feature_cookie_uses_safe_defaults(client, login_cookies):
    login_cookies(features=None)
    assert client.get("/admin/orders").status_code == 302
    assert client.get("/admin/menu/daily-offers").status_code == 302


def test_enabled_feature_renders_page_with_trail(client, login_cookies):
    login_cookies(features={"eventsToggle": True})
    resp = client.get("/admin/events/manage")
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert '<a href="/admin/dashboard">Dashboard</a>' in body
    assert '<li class="breadcrumb-item">Events</li>' in body
    assert 'aria-current="page">Manage Events' in body


def test_feature_route_custom_redirect(app, client, login_cookies):
    bp = Blueprint("guard_test", __name__)

    @bp.get("/guarded")
    @protected_route
    @feature_route("ordersToggle", redirect_to="/admin/menu/category")
    def guarded():
        return {"ok": True}

    app.register_blueprint(bp)
    login_cookies(features={"ordersToggle": False})
    resp = client.get("/guarded")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/menu/category")

    login_cookies(features={"ordersToggle": True})
    assert client.get("/guarded").get_json()["ok"] is True


def test_page_tears_down_sidebar_subscription(app, client, login_cookies):
    counts = []

    def _record(sender, **extra):
        counts.append(current_event_bus().subscriber_count(ADMIN_FEATURES_UPDATED))

    login_cookies(features={})
    with request_tearing_down.connected_to(_record, app):
        assert client.get("/admin/menu/category").status_code == 200
    assert counts == [0]
