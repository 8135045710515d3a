"""Route guards for admin views."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Optional, TypeVar

from flask import current_app, redirect

from menuadmin.core.session import current_token_store

F = TypeVar("F", bound=Callable)


def protected_route(fn: F) -> F:
    """Redirect to the login page unless an admin token is present."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if not current_token_store().is_token_valid():
            return redirect(current_app.config.get("ADMIN_LOGIN_PATH", "/admin/login"))
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def feature_route(feature: str, redirect_to: Optional[str] = None):
    """Redirect to the default admin page when ``feature`` is switched off."""

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):  # type: ignore[misc]
            if not current_token_store().get_admin_features().is_enabled(feature):
                target = redirect_to or current_app.config.get("ADMIN_DEFAULT_PATH", "/admin/dashboard")
                return redirect(target)
            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
