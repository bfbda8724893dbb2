"""Pydantic schemas for broker credential API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from stratdeck.schemas._validators import optional_text, required_text


class BrokerCreate(BaseModel):
    name: str = Field(max_length=120)
    platform: str = Field(max_length=64)
    api_key: str  # Raw key, will be encrypted before storage
    api_secret: str | None = None
    auth_token: str | None = None
    client_id: str | None = Field(default=None, max_length=120)
    mpin: str | None = None
    totp: str | None = None
    notes: str | None = None

    @field_validator("name", "platform", "api_key")
    @classmethod
    def _trim_required(cls, value: str) -> str:
        return required_text(value)

    @field_validator("api_secret", "auth_token", "client_id", "mpin", "totp", "notes")
    @classmethod
    def _trim_optional(cls, value: str | None) -> str | None:
        return optional_text(value)


class BrokerUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=120)
    platform: str | None = Field(default=None, max_length=64)
    api_key: str | None = None  # If provided, re-encrypts
    api_secret: str | None = None
    auth_token: str | None = None
    client_id: str | None = Field(default=None, max_length=120)
    mpin: str | None = None
    totp: str | None = None
    notes: str | None = None

    @field_validator("name", "platform", "api_key")
    @classmethod
    def _trim_optional_required(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return required_text(value)

    @field_validator("api_secret", "auth_token", "client_id", "mpin", "totp", "notes")
    @classmethod
    def _trim_optional(cls, value: str | None) -> str | None:
        return optional_text(value)


class BrokerRead(BaseModel):
    id: int
    name: str
    platform: str
    api_key_masked: str
    has_api_secret: bool
    has_auth_token: bool
    has_mpin: bool
    has_totp: bool
    client_id: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime
    # secrets are NEVER exposed
