"""Cookie-backed admin session token store.

Holds the bearer token issued by the menu backend together with the admin's
feature flags and id. Every value is passed through :mod:`codec` before it
reaches the cookie medium. No operation here raises to its caller: storage and
decoding problems degrade to "absent" or to the default feature flags so that
guard checks can never break a page render.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from menuadmin.core.events.event_bus import EventBus
from menuadmin.core.session import codec
from menuadmin.core.session.codec import DecodeResult
from menuadmin.core.session.events import ADMIN_FEATURES_UPDATED
from menuadmin.core.session.schemas import AdminData, FeatureFlagSet
from menuadmin.core.session.storage import Clock, CookieStorage, utcnow

logger = logging.getLogger(__name__)

ADMIN_TOKEN_KEY = "adminToken"
ADMIN_FEATURES_KEY = "adminFeatures"
ADMIN_ID_KEY = "adminId"

DEFAULT_TOKEN_HOURS = 6
FEATURES_TTL_HOURS = 6

FeaturesInput = Union[FeatureFlagSet, Mapping[str, Any]]


class SessionTokenStore:
    def __init__(
        self,
        storage: CookieStorage,
        *,
        event_bus: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.storage = storage
        self.event_bus = event_bus
        self._clock = clock or utcnow

    # --- writes ---

    def set_token_with_expiry(
        self,
        token: str,
        hours: float = DEFAULT_TOKEN_HOURS,
        admin_data: Optional[Union[AdminData, Mapping[str, Any]]] = None,
    ) -> None:
        expires = self._expiry(hours)
        self._write(ADMIN_TOKEN_KEY, token, expires)

        if admin_data is None:
            return
        try:
            data = admin_data if isinstance(admin_data, AdminData) else AdminData.model_validate(admin_data)
        except ValidationError:
            logger.warning("Ignoring malformed admin data on login")
            return
        if data.features is not None:
            self._write(ADMIN_FEATURES_KEY, json.dumps(data.features.as_dict()), expires)
        if data.id:
            self._write(ADMIN_ID_KEY, data.id, expires)

    def set_admin_features(self, features: FeaturesInput) -> None:
        flags = _coerce_features(features)
        expires = self._expiry(FEATURES_TTL_HOURS)
        self._write(ADMIN_FEATURES_KEY, json.dumps(flags.as_dict()), expires)
        if self.event_bus is None:
            return
        try:
            self.event_bus.emit(
                ADMIN_FEATURES_UPDATED,
                {"features": flags.as_dict(), "expires_at": expires.isoformat()},
            )
        except Exception:
            logger.exception("Feature update notification failed")

    def clear_token(self) -> None:
        for key in (ADMIN_TOKEN_KEY, ADMIN_FEATURES_KEY, ADMIN_ID_KEY):
            try:
                self.storage.delete(key)
            except Exception as exc:
                logger.warning("Could not delete cookie %s: %s", key, exc)

    # --- reads ---

    def is_token_valid(self) -> bool:
        return self.get_valid_token() is not None

    def get_valid_token(self) -> Optional[str]:
        token = self.read(ADMIN_TOKEN_KEY).unwrap_or(None)
        return token or None

    def get_admin_features(self) -> FeatureFlagSet:
        raw = self.read(ADMIN_FEATURES_KEY).unwrap_or(None)
        if not raw:
            return FeatureFlagSet()
        try:
            return FeatureFlagSet.model_validate(json.loads(raw))
        except (ValueError, TypeError, ValidationError):
            logger.debug("Malformed %s cookie; using default flags", ADMIN_FEATURES_KEY)
            return FeatureFlagSet()

    def get_admin_id(self) -> Optional[str]:
        admin_id = self.read(ADMIN_ID_KEY).unwrap_or(None)
        return admin_id or None

    def read(self, key: str) -> DecodeResult:
        """Read and decode ``key``.

        An absent entry (or a medium failure) yields an empty ``DecodeResult``;
        an undecodable value yields one carrying the ``DecodeError``.
        """
        try:
            stored = self.storage.get(key)
        except Exception as exc:
            logger.warning("Could not read cookie %s: %s", key, exc)
            return DecodeResult()
        if stored is None:
            return DecodeResult()
        return codec.try_decode(stored)

    # --- helpers ---

    def _expiry(self, hours: float) -> datetime:
        return self._clock() + timedelta(hours=hours)

    def _write(self, key: str, value: str, expires: datetime) -> None:
        try:
            self.storage.set(key, codec.encode(value), expires)
        except Exception as exc:
            logger.warning("Could not write cookie %s: %s", key, exc)


def _coerce_features(features: FeaturesInput) -> FeatureFlagSet:
    if isinstance(features, FeatureFlagSet):
        return features
    try:
        return FeatureFlagSet.model_validate(dict(features))
    except (ValidationError, TypeError, ValueError):
        logger.warning("Ignoring malformed feature flags: %r", features)
        return FeatureFlagSet()


__all__ = [
    "ADMIN_FEATURES_KEY",
    "ADMIN_ID_KEY",
    "ADMIN_TOKEN_KEY",
    "DEFAULT_TOKEN_HOURS",
    "FEATURES_TTL_HOURS",
    "SessionTokenStore",
]
