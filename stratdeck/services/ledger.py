"""Trade ledger access, scoped to an explicit caller context."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from stratdeck.models.trade import Trade

logger = logging.getLogger(__name__)

LEDGER_ERROR_MESSAGE = "Failed to load trades"


@dataclass(frozen=True)
class UserContext:
    """Identity of the authenticated caller, passed to every ledger query."""

    user_id: int
    email: str


def fetch_user_trades(session: Session, ctx: UserContext) -> list[Trade]:
    """All trades owned by the caller, newest first."""
    stmt = (
        select(Trade)
        .where(Trade.user_id == ctx.user_id)
        .order_by(Trade.date_time.desc())  # type: ignore[union-attr]
    )
    return list(session.exec(stmt).all())


def fetch_user_trades_safe(session: Session, ctx: UserContext) -> tuple[list[Trade], str | None]:
    """Like fetch_user_trades, but a database error yields an empty ledger.

    Returns (trades, error_message). The message is meant for display.
    """
    try:
        return fetch_user_trades(session, ctx), None
    except SQLAlchemyError as e:
        logger.warning(f"Ledger fetch failed for user {ctx.user_id}: {e}")
        session.rollback()
        return [], LEDGER_ERROR_MESSAGE


def list_user_trades(
    session: Session,
    ctx: UserContext,
    limit: int = 50,
    offset: int = 0,
    instrument: str | None = None,
) -> list[Trade]:
    stmt = (
        select(Trade)
        .where(Trade.user_id == ctx.user_id)
        .order_by(Trade.date_time.desc(), Trade.id.desc())  # type: ignore[union-attr]
    )
    if instrument is not None:
        stmt = stmt.where(Trade.instrument == instrument)
    stmt = stmt.offset(offset).limit(limit)
    return list(session.exec(stmt).all())


def get_user_trade(session: Session, ctx: UserContext, trade_id: int) -> Trade | None:
    trade = session.get(Trade, trade_id)
    if trade is None or trade.user_id != ctx.user_id:
        return None
    return trade
