"""Typed schemas for the admin session payloads."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class FeatureFlagSet(BaseModel):
    """Named boolean toggles gating admin capabilities.

    The three known flags always exist; any additional flag sent by the backend
    is kept as an extra field and coerced to bool like the known ones.
    """

    model_config = ConfigDict(extra="allow")
    __pydantic_extra__: Dict[str, bool]

    ordersToggle: bool = False
    eventsToggle: bool = False
    dailyOfferToggle: bool = False

    def is_enabled(self, name: str) -> bool:
        return bool(self.as_dict().get(name, False))

    def as_dict(self) -> Dict[str, bool]:
        return {key: bool(value) for key, value in self.model_dump().items()}


DEFAULT_FEATURES = FeatureFlagSet()


class AdminData(BaseModel):
    """Admin fields co-stored with the token after login."""

    id: Optional[str] = None
    features: Optional[FeatureFlagSet] = None


__all__ = ["AdminData", "DEFAULT_FEATURES", "FeatureFlagSet"]
