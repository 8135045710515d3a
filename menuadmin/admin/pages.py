"""Admin back-office pages.

Every page sets its breadcrumb trail while it is being set up and builds the
sidebar for its section. CRUD screens behind these pages talk to the menu
backend directly and are not rendered here.
"""

from __future__ import annotations

from typing import Optional

from flask import Blueprint, current_app, g, redirect, render_template, request, url_for

from menuadmin.core.auth.auth_client import AuthenticationError
from menuadmin.core.navigation.breadcrumb import BreadcrumbContext, use_breadcrumb
from menuadmin.core.navigation.sidebar import SECTION_INDEX, AdminSidebar
from menuadmin.core.session import FeatureFlagSet, current_event_bus, current_token_store
from menuadmin.core.utils.decorators import feature_route, protected_route

admin_bp = Blueprint("admin_pages", __name__)

FEATURE_LABELS = {
    "ordersToggle": "Orders",
    "eventsToggle": "Events",
    "dailyOfferToggle": "Daily Offers",
}


def _setup_page(section_key: Optional[str], breadcrumb: BreadcrumbContext) -> AdminSidebar:
    sidebar = AdminSidebar(
        current_token_store().get_admin_features(),
        active=section_key,
        event_bus=current_event_bus(),
    )
    sidebar.publish_trail(breadcrumb)
    g.admin_sidebar = sidebar
    return sidebar


def _section_page(section_key: str):
    _setup_page(section_key, use_breadcrumb())
    section, _ = SECTION_INDEX[section_key]
    return render_template("admin/section.html", section=section)


@admin_bp.teardown_request
def _close_sidebar(exc: Optional[BaseException]) -> None:
    sidebar = g.pop("admin_sidebar", None)
    if sidebar is not None:
        sidebar.close()


@admin_bp.context_processor
def _inject_sidebar():
    sidebar = g.get("admin_sidebar")
    return {"sidebar_entries": sidebar.entries() if sidebar is not None else []}


@admin_bp.get("/")
def index():
    return redirect(url_for("admin_pages.dashboard"))


@admin_bp.get("/dashboard")
@protected_route
def dashboard():
    sidebar = _setup_page(None, use_breadcrumb())
    return render_template("admin/dashboard.html", sections=sidebar.visible_sections())


@admin_bp.route("/controls", methods=["GET", "POST"])
@protected_route
def admin_controls():
    """Feature toggles for this admin; saved on the backend, then in the session."""
    _setup_page("admin-controls", use_breadcrumb())
    store = current_token_store()
    error = None
    status = 200

    if request.method == "POST":
        requested = FeatureFlagSet(
            **{name: request.form.get(name) in ("on", "true", "1") for name in FEATURE_LABELS}
        )
        admin_id = store.get_admin_id()
        try:
            saved = (
                current_app.extensions["auth_client"].update_features(
                    admin_id, requested, token=store.get_valid_token()
                )
                if admin_id
                else requested
            )
        except AuthenticationError as exc:
            current_app.logger.warning("Feature update rejected: %s", exc.message)
            error, status = exc.message, exc.status_code or 502
        else:
            store.set_admin_features(saved)

    return (
        render_template(
            "admin/controls.html",
            features=store.get_admin_features(),
            labels=FEATURE_LABELS,
            error=error,
        ),
        status,
    )


@admin_bp.get("/management-controls")
@protected_route
def management_controls():
    return _section_page("management-controls")


@admin_bp.get("/menu/category")
@protected_route
def category():
    return _section_page("category")


@admin_bp.get("/menu/daily-offers")
@protected_route
@feature_route("dailyOfferToggle")
def daily_offers():
    return _section_page("daily-offers")


@admin_bp.get("/menu/image-uploads")
@protected_route
def image_uploads():
    return _section_page("image-uploads")


@admin_bp.get("/events/create")
@protected_route
@feature_route("eventsToggle")
def create_event():
    return _section_page("create-event")


@admin_bp.get("/events/manage")
@protected_route
@feature_route("eventsToggle")
def manage_events():
    return _section_page("manage-events")


@admin_bp.get("/orders")
@protected_route
@feature_route("ordersToggle")
def orders():
    return _section_page("orders")


@admin_bp.get("/review-analytics")
@protected_route
def review_analytics():
    return _section_page("review-analytics")


@admin_bp.get("/user-info")
@protected_route
def user_info():
    return _section_page("user-info")
