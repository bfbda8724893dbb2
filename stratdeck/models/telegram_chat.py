"""UserTelegramChat model: a bot token + chat id notification target."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class UserTelegramChat(SQLModel, table=True):
    __tablename__ = "user_telegram_chat"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    bot_token_encrypted: str  # Fernet-encrypted
    chat_id: str
    label: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
