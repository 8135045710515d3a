"""Admin session token store and helpers bound to the current request."""

from __future__ import annotations

from flask import Flask, g

from menuadmin.core.events.event_bus import EventBus
from menuadmin.core.session.schemas import DEFAULT_FEATURES, AdminData, FeatureFlagSet
from menuadmin.core.session.storage import FlaskCookieStorage
from menuadmin.core.session.token_store import SessionTokenStore

_BUS_KEY = "_session_event_bus"
_STORE_KEY = "_session_token_store"


def current_event_bus() -> EventBus:
    """Return the bus for the current request.

    Feature updates published here only reach listeners set up while handling
    the same request, never another admin's.
    """
    bus = g.get(_BUS_KEY)
    if bus is None:
        bus = EventBus()
        setattr(g, _BUS_KEY, bus)
    return bus


def current_token_store() -> SessionTokenStore:
    """Return the store for the current request, creating it on first use."""
    store = g.get(_STORE_KEY)
    if store is None:
        store = SessionTokenStore(FlaskCookieStorage(), event_bus=current_event_bus())
        setattr(g, _STORE_KEY, store)
    return store


def init_session(app: Flask) -> None:
    """Give every request its own event bus and token store."""

    @app.before_request
    def _reset_session_state() -> None:
        g.pop(_STORE_KEY, None)
        setattr(g, _BUS_KEY, EventBus())


__all__ = [
    "AdminData",
    "DEFAULT_FEATURES",
    "FeatureFlagSet",
    "SessionTokenStore",
    "current_event_bus",
    "current_token_store",
    "init_session",
]
