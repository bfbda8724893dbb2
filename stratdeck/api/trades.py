"""Trade history API (read-only; the ledger is written by the strategy worker)."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from stratdeck.database import get_session
from stratdeck.api.deps import get_user_context
from stratdeck.schemas.trade import TradeRead
from stratdeck.services.ledger import UserContext, list_user_trades, get_user_trade

router = APIRouter(prefix="/api/trades", tags=["trades"])


@router.get("", response_model=list[TradeRead])
def list_trades(
    instrument: str | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    return list_user_trades(session, ctx, limit=limit, offset=offset, instrument=instrument)


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(
    trade_id: int,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    trade = get_user_trade(session, ctx, trade_id)
    if not trade:
        raise HTTPException(status_code=404, detail="Trade not found")
    return trade
