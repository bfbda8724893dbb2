"""Dashboard API: month-to-date performance summary."""

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlmodel import Session

from stratdeck.database import get_session
from stratdeck.api.deps import get_user_context
from stratdeck.schemas.trade import DashboardSummary
from stratdeck.services.ledger import UserContext, fetch_user_trades_safe
from stratdeck.services.performance import monthly_performance

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """Realized P&L, return and win rate for the current calendar month."""
    now = datetime.now()
    trades, ledger_error = fetch_user_trades_safe(session, ctx)
    summary = monthly_performance(trades, now=now)

    return DashboardSummary(
        month=now.strftime("%Y-%m"),
        total_pnl=round(summary.total_pnl, 2),
        return_percent=round(summary.return_percent, 2),
        win_rate=round(summary.win_rate, 1),
        trade_count=summary.trade_count,
        winning_count=summary.winning_count,
        open_positions=summary.open_positions,
        ledger_error=ledger_error,
    )
