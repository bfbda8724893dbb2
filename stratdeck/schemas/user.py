"""Pydantic schemas for signup, login and the current user."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from stratdeck.schemas._validators import required_text


class SignupRequest(BaseModel):
    email: str = Field(max_length=320)
    password: str = Field(min_length=1)
    name: str = Field(max_length=120)

    @field_validator("email", "name")
    @classmethod
    def _trim_required(cls, value: str) -> str:
        return required_text(value)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("must be an email address")
        return value.lower()


class LoginRequest(BaseModel):
    email: str
    password: str
    totp_code: str | None = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRead(BaseModel):
    id: int
    email: str
    name: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
