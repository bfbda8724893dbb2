"""UserStrategy model: a deployed strategy, consumed by the external worker."""

from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class UserStrategy(SQLModel, table=True):
    __tablename__ = "user_strategy"
    __table_args__ = (UniqueConstraint("user_id", "strategy_id"),)

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    strategy_id: int = Field(foreign_key="strategy_catalog.id", index=True)
    broker_id: int | None = Field(default=None, foreign_key="user_broker.id")
    telegram_chat_id: int | None = Field(default=None, foreign_key="user_telegram_chat.id")
    qty: int | None = None
    dry_run: bool = True
    active: bool = True
    config_version: int = 0

    # Written by the worker
    task_arn: str | None = None
    last_task_status: str | None = None
    last_seen: datetime | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
