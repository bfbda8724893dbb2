"""UserBroker model: encrypted broker API credentials."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class UserBroker(SQLModel, table=True):
    __tablename__ = "user_broker"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str
    platform: str  # e.g. "zerodha", "angelone"
    api_key_encrypted: str = ""  # Fernet-encrypted
    api_secret_encrypted: str | None = None
    auth_token_encrypted: str | None = None
    client_id: str | None = None
    mpin_encrypted: str | None = None
    totp_encrypted: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
