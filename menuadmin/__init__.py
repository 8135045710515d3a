"""Menu admin application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from flask import Flask, redirect, url_for

from menuadmin.config import config_by_name
from menuadmin.core.auth.auth_client import AuthenticationClient
from menuadmin.core.navigation.breadcrumb import init_breadcrumbs
from menuadmin.core.session import init_session
from menuadmin.core.session.storage import init_cookie_storage
from menuadmin.extensions import init_extensions


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the menu admin Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()

    app = Flask(
        __name__,
        static_folder=str(Path(__file__).parent / "static"),
        template_folder=str(Path(__file__).parent / "templates"),
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    init_extensions(app)
    init_cookie_storage(app)
    init_session(app)
    init_breadcrumbs(app)
    _register_blueprints(app)
    _register_error_handlers(app)

    app.extensions["auth_client"] = AuthenticationClient(
        app.config["MENU_API_BASE_URL"],
        timeout=app.config["MENU_API_TIMEOUT_SECONDS"],
    )

    @app.get("/")
    def index():
        return redirect(url_for("admin_pages.dashboard"))

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from menuadmin.admin.pages import admin_bp
    from menuadmin.core.auth.controllers import auth_bp  # local import to avoid circulars

    app.register_blueprint(auth_bp, url_prefix="/admin")
    app.register_blueprint(admin_bp, url_prefix="/admin")


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500
