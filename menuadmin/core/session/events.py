"""Contracts for admin session events."""

from __future__ import annotations

ADMIN_FEATURES_UPDATED = "admin.features.updated"

EVENT_CATALOG = {
    ADMIN_FEATURES_UPDATED: {
        "version": "v1",
        "payload": {
            "features": "dict[str, bool]",
            "expires_at": "datetime",
        },
    },
}

__all__ = ["ADMIN_FEATURES_UPDATED", "EVENT_CATALOG"]
