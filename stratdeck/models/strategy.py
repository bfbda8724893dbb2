"""StrategyCatalog model: strategies users can deploy."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class StrategyCatalog(SQLModel, table=True):
    __tablename__ = "strategy_catalog"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    image_uri: str = ""
    description: str | None = None
    requires_telegram: bool = False
    default_qty: int | None = None
    active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
