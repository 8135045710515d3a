"""HTTP client for the menu backend's admin auth endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import requests
from pydantic import ValidationError

from menuadmin.core.auth.schemas import LoginResult
from menuadmin.core.session.schemas import FeatureFlagSet

logger = logging.getLogger(__name__)

AUTH_PREFIX = "/api/admin/auth"


class AuthenticationError(Exception):
    """Base exception for backend auth operations."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidCredentialsError(AuthenticationError):
    """Raised when the backend rejects the email/password pair."""


class BackendUnavailableError(AuthenticationError):
    """Raised when the backend cannot be reached or answers garbage."""


class AuthenticationClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def login(self, email: str, password: str) -> LoginResult:
        data = self._request("POST", "/login", json={"email": email, "password": password})
        try:
            return LoginResult.model_validate(data)
        except ValidationError as exc:
            logger.error("Unexpected login response: %s", exc)
            raise BackendUnavailableError("Unexpected login response") from exc

    def request_password_reset(self, email: str) -> str:
        data = self._request("POST", "/forgot-password", json={"email": email})
        return str(data.get("message") or "OTP sent to your email")

    def reset_password(self, otp: str, password: str) -> str:
        data = self._request("POST", "/reset-password", json={"otp": otp, "password": password})
        return str(data.get("message") or "Password reset successful")

    def get_features(self, admin_id: str, token: Optional[str] = None) -> FeatureFlagSet:
        data = self._request("GET", f"/features/{admin_id}", token=token)
        return _features_from(data)

    def update_features(
        self,
        admin_id: str,
        features: FeatureFlagSet,
        token: Optional[str] = None,
    ) -> FeatureFlagSet:
        data = self._request("PUT", f"/features/{admin_id}", json=features.as_dict(), token=token)
        return _features_from(data)

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Mapping[str, Any]] = None,
        token: Optional[str] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{AUTH_PREFIX}{path}"
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            resp = self.session.request(method, url, json=json, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Menu backend request %s %s failed: %s", method, path, exc)
            raise BackendUnavailableError("Menu backend is unreachable") from exc

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if resp.status_code == 401:
            raise InvalidCredentialsError(body.get("message") or "Invalid credentials", 401)
        if resp.status_code >= 500:
            logger.error("Menu backend %s %s returned %s", method, path, resp.status_code)
            raise BackendUnavailableError(body.get("message") or "Something went wrong!", resp.status_code)
        if resp.status_code >= 400:
            raise AuthenticationError(body.get("message") or "Request rejected", resp.status_code)
        return body


def _features_from(data: Mapping[str, Any]) -> FeatureFlagSet:
    try:
        return FeatureFlagSet.model_validate(data.get("features") or {})
    except ValidationError as exc:
        raise BackendUnavailableError("Unexpected features response") from exc


__all__ = [
    "AuthenticationClient",
    "AuthenticationError",
    "BackendUnavailableError",
    "InvalidCredentialsError",
]
