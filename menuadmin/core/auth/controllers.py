"""Admin login/logout and password recovery controllers."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, redirect, render_template, request, url_for
from pydantic import ValidationError

from menuadmin.core.auth.auth_client import (
    AuthenticationClient,
    AuthenticationError,
    BackendUnavailableError,
    InvalidCredentialsError,
)
from menuadmin.core.auth.schemas import ForgotPasswordRequest, LoginRequest, ResetPasswordRequest
from menuadmin.core.session import current_token_store
from menuadmin.extensions import limiter

auth_bp = Blueprint("auth_pages", __name__)


def _jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors()
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
    return errors


def _auth_client() -> AuthenticationClient:
    return current_app.extensions["auth_client"]


def _payload() -> dict:
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def _login_failed(message: str, status: int, email: str = ""):
    if request.is_json:
        return jsonify({"ok": False, "error": message}), status
    return render_template("auth/login.html", error=message, email=email), status


@auth_bp.get("/login")
def login_page():
    if current_token_store().is_token_valid():
        return redirect(current_app.config["ADMIN_DEFAULT_PATH"])
    return render_template("auth/login.html")


@auth_bp.post("/login")
@limiter.limit("10/minute")
def login():
    payload = _payload()
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        if request.is_json:
            return (
                jsonify({"ok": False, "error": "bad_request", "details": _jsonable_errors(exc)}),
                400,
            )
        return _login_failed("Email and password are required", 400, str(payload.get("email", "")))

    try:
        result = _auth_client().login(data.email, data.password)
    except InvalidCredentialsError as exc:
        return _login_failed(exc.message, 401, data.email)
    except BackendUnavailableError as exc:
        return _login_failed(exc.message, 502, data.email)
    except AuthenticationError as exc:
        return _login_failed(exc.message, exc.status_code or 400, data.email)

    admin_data = result.admin_data()
    if admin_data.features is None and admin_data.id:
        try:
            admin_data.features = _auth_client().get_features(admin_data.id, token=result.token)
        except AuthenticationError as exc:
            current_app.logger.warning("Could not load features for admin %s: %s", admin_data.id, exc.message)

    store = current_token_store()
    store.set_token_with_expiry(
        result.token,
        hours=current_app.config["ADMIN_TOKEN_TTL_HOURS"],
        admin_data=admin_data,
    )
    current_app.logger.info("Admin %s logged in", result.admin.id or data.email)

    if request.is_json:
        return jsonify({"ok": True, "features": store.get_admin_features().as_dict()})
    return redirect(current_app.config["ADMIN_DEFAULT_PATH"])


@auth_bp.post("/logout")
def logout():
    current_token_store().clear_token()
    if request.is_json:
        return jsonify({"ok": True})
    return redirect(url_for("auth_pages.login_page"))


@auth_bp.post("/forgot-password")
@limiter.limit("5/minute")
def forgot_password():
    payload = request.get_json(silent=True) or {}
    try:
        data = ForgotPasswordRequest.model_validate(payload)
    except ValidationError as exc:
        return (
            jsonify({"ok": False, "error": "bad_request", "details": _jsonable_errors(exc)}),
            400,
        )
    try:
        message = _auth_client().request_password_reset(data.email)
    except AuthenticationError as exc:
        return jsonify({"ok": False, "error": exc.message}), exc.status_code or 400
    return jsonify({"ok": True, "message": message})


@auth_bp.post("/reset-password")
@limiter.limit("5/minute")
def reset_password_route():
    payload = request.get_json(silent=True) or {}
    try:
        data = ResetPasswordRequest.model_validate(payload)
    except ValidationError as exc:
        return (
            jsonify({"ok": False, "error": "bad_request", "details": _jsonable_errors(exc)}),
            400,
        )
    try:
        message = _auth_client().reset_password(data.otp, data.password)
    except AuthenticationError as exc:
        return jsonify({"ok": False, "error": exc.message}), exc.status_code or 400
    return jsonify({"ok": True, "message": message})
