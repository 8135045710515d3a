"""Application configuration for the menu admin back-office."""

from __future__ import annotations

import os
from typing import Dict, Type

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")

    # External menu backend (REST CRUD service owning admins, cafes, menus).
    MENU_API_BASE_URL = os.environ.get("MENU_API_BASE_URL", "http://localhost:5000")
    MENU_API_TIMEOUT_SECONDS = int(os.environ.get("MENU_API_TIMEOUT_SECONDS", "15"))

    # Admin session cookies (adminToken / adminFeatures / adminId).
    ADMIN_TOKEN_TTL_HOURS = float(os.environ.get("ADMIN_TOKEN_TTL_HOURS", "6"))
    ADMIN_COOKIE_SECURE = _env_flag("ADMIN_COOKIE_SECURE")
    ADMIN_COOKIE_SAMESITE = "Strict"
    ADMIN_COOKIE_PATH = "/"
    ADMIN_LOGIN_PATH = "/admin/login"
    ADMIN_DEFAULT_PATH = "/admin/dashboard"

    RATELIMIT_DEFAULT = "200/hour"
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "memory://")
    RATELIMIT_ENABLED = _env_flag("RATELIMIT_ENABLED", "true")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    MENU_API_BASE_URL = "http://menu-api.test"
    RATELIMIT_ENABLED = False


class ProductionConfig(BaseConfig):
    ENV = "production"
    ADMIN_COOKIE_SECURE = True


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}
