"""Pydantic schemas for Telegram chat API."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from stratdeck.schemas._validators import optional_text, required_text


class TelegramChatCreate(BaseModel):
    bot_token: str
    chat_id: str = Field(max_length=64)
    label: str | None = Field(default=None, max_length=120)

    @field_validator("bot_token", "chat_id")
    @classmethod
    def _trim_required(cls, value: str) -> str:
        return required_text(value)

    @field_validator("label")
    @classmethod
    def _trim_label(cls, value: str | None) -> str | None:
        return optional_text(value)


class TelegramChatUpdate(BaseModel):
    bot_token: str | None = None
    chat_id: str | None = Field(default=None, max_length=64)
    label: str | None = Field(default=None, max_length=120)

    @field_validator("bot_token", "chat_id")
    @classmethod
    def _trim_optional_required(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return required_text(value)

    @field_validator("label")
    @classmethod
    def _trim_label(cls, value: str | None) -> str | None:
        return optional_text(value)


class TelegramChatRead(BaseModel):
    id: int
    chat_id: str
    label: str | None
    created_at: datetime
    updated_at: datetime
    # bot_token is NEVER exposed

    model_config = {"from_attributes": True}
