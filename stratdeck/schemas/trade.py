"""Pydantic schemas for the trade ledger and dashboard."""

from datetime import datetime

from pydantic import BaseModel


class TradeRead(BaseModel):
    id: int
    instrument: str | None
    position: str | None
    price: float | None
    date_time: datetime | None

    model_config = {"from_attributes": True}


class DashboardSummary(BaseModel):
    month: str  # "YYYY-MM"
    total_pnl: float
    return_percent: float
    win_rate: float
    trade_count: int
    winning_count: int
    open_positions: int
    ledger_error: str | None = None
