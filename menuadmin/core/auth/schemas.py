"""Schemas for the admin auth flows (login, password recovery)."""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from menuadmin.core.session.schemas import AdminData, FeatureFlagSet

_OTP_REGEX = re.compile(r"^\d{6}$")


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ForgotPasswordRequest(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ResetPasswordRequest(BaseModel):
    otp: str
    password: str = Field(min_length=8)

    @field_validator("otp")
    @classmethod
    def validate_otp(cls, v: str) -> str:
        v = v.strip()
        if not _OTP_REGEX.match(v):
            raise ValueError("otp must be 6 digits")
        return v


class AdminProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    email: Optional[str] = None
    features: Optional[FeatureFlagSet] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v) if isinstance(v, int) else v


class LoginResult(BaseModel):
    """Successful login payload returned by the menu backend."""

    model_config = ConfigDict(extra="ignore")

    token: str = Field(min_length=1)
    admin: AdminProfile = Field(default_factory=AdminProfile)

    @field_validator("admin", mode="before")
    @classmethod
    def default_admin(cls, v):
        return v or {}

    def admin_data(self) -> AdminData:
        return AdminData(id=self.admin.id, features=self.admin.features)
