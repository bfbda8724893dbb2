"""Trade model: one ledger row written by the strategy worker.

Rows are immutable from the dashboard's point of view. Every field except
the owner is nullable because the worker writes them as it sees fit.
"""

from datetime import datetime
from sqlmodel import SQLModel, Field


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    instrument: str | None = None  # stock or option contract
    position: str | None = None  # "entry"/"buy" or "exit"/"sell"/"cutoff"
    price: float | None = None
    date_time: datetime | None = Field(default=None, index=True)  # timezone-aware, UTC
