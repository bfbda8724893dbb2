"""KVEntry model: generic JSON key/value store."""

from typing import Any

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON


class KVEntry(SQLModel, table=True):
    __tablename__ = "kv_store"

    key: str = Field(primary_key=True)
    value: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
