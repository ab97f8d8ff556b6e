import re
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator, model_validator


# ─── Helpers ──────────────────────────────────────────────────────────────────
def validate_password_strength(v: str) -> str:
    if len(v) < 8:
        raise ValueError("Password must be at least 8 characters")
    if not re.search(r"[A-Z]", v):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"[0-9]", v):
        raise ValueError("Password must contain at least one digit")
    return v


# ─── Request Schemas ──────────────────────────────────────────────────────────
class SignUpRequest(BaseModel):
    name:     str
    email:    EmailStr
    password: str
    phone:    Optional[str] = None
    username: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return validate_password_strength(v)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("username")
    @classmethod
    def username_format(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if "@" in v:
            raise ValueError("Username cannot contain '@'")
        if not re.fullmatch(r"[A-Za-z0-9_.]{3,30}", v):
            raise ValueError("Username must be 3-30 letters, digits, dots or underscores")
        return v


class SignInRequest(BaseModel):
    identifier: str          # email or username
    password:   str

    @field_validator("identifier")
    @classmethod
    def identifier_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Email or username is required")
        return v.strip()


class VerifyEmailRequest(BaseModel):
    email: EmailStr
    code:  str


class EmailOnlyRequest(BaseModel):
    email: EmailStr


class RefreshTokenRequest(BaseModel):
    refreshToken: str


class ResetPasswordRequest(BaseModel):
    resetToken:      str
    newPassword:     str
    confirmPassword: str

    @field_validator("newPassword")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return validate_password_strength(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "ResetPasswordRequest":
        if self.newPassword != self.confirmPassword:
            raise ValueError("Passwords do not match")
        return self


class ChangePasswordRequest(BaseModel):
    currentPassword: str
    newPassword:     str
    confirmPassword: str

    @field_validator("newPassword")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return validate_password_strength(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.newPassword != self.confirmPassword:
            raise ValueError("Passwords do not match")
        return self


class UpdateEmailRequest(BaseModel):
    newEmail: EmailStr


class ActivateWebRequest(BaseModel):
    email:    EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        return validate_password_strength(v)
