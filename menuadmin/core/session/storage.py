"""Cookie storage port and its implementations.

The session store only talks to a :class:`CookieStorage`. Each entry carries
its own absolute expiry and the medium is responsible for evicting it; readers
never re-check the deadline themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Protocol

from flask import Flask, Response, current_app, g, has_request_context, request

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CookieStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str, expires: datetime) -> None: ...

    def delete(self, key: str) -> None: ...


@dataclass
class _Entry:
    value: str
    expires: datetime


class MemoryCookieJar:
    """In-memory medium with per-entry expiry, used by tests and scripts."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or utcnow
        self._entries: Dict[str, _Entry] = {}

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires <= self._clock():
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: str, expires: datetime) -> None:
        self._entries[key] = _Entry(value=value, expires=expires)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> list[str]:
        return [key for key in list(self._entries) if self.get(key) is not None]


_PENDING_KEY = "_admin_cookie_writes"
_DELETED = object()


class FlaskCookieStorage:
    """Adapter over the browser cookie jar for the current request.

    Reads see the request cookies overlaid with writes made earlier in the same
    request. Writes are queued on ``flask.g`` and emitted as ``Set-Cookie``
    headers by :func:`init_cookie_storage`'s ``after_request`` hook.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or utcnow

    def _pending(self) -> Dict[str, object]:
        pending = g.get(_PENDING_KEY)
        if pending is None:
            pending = {}
            setattr(g, _PENDING_KEY, pending)
        return pending

    def get(self, key: str) -> Optional[str]:
        pending = self._pending()
        if key in pending:
            entry = pending[key]
            if not isinstance(entry, _Entry):
                return None
            if entry.expires <= self._clock():
                return None
            return entry.value
        return request.cookies.get(key)

    def set(self, key: str, value: str, expires: datetime) -> None:
        self._pending()[key] = _Entry(value=value, expires=expires)

    def delete(self, key: str) -> None:
        self._pending()[key] = _DELETED


def flush_cookie_writes(response: Response) -> Response:
    """Apply queued cookie writes to ``response``."""
    if not has_request_context():
        return response
    pending: Optional[Dict[str, object]] = g.get(_PENDING_KEY)
    if not pending:
        return response

    config = current_app.config
    path = config.get("ADMIN_COOKIE_PATH", "/")
    samesite = config.get("ADMIN_COOKIE_SAMESITE", "Strict")
    secure = config.get("ADMIN_COOKIE_SECURE", False)
    for key, entry in pending.items():
        if not isinstance(entry, _Entry):
            response.delete_cookie(key, path=path, secure=secure, samesite=samesite)
            continue
        response.set_cookie(
            key,
            entry.value,
            expires=entry.expires,
            path=path,
            secure=secure,
            samesite=samesite,
        )
    pending.clear()
    return response


def init_cookie_storage(app: Flask) -> None:
    app.after_request(flush_cookie_writes)


__all__ = [
    "Clock",
    "CookieStorage",
    "FlaskCookieStorage",
    "MemoryCookieJar",
    "flush_cookie_writes",
    "init_cookie_storage",
    "utcnow",
]
