"""Strategy catalog and deployment API."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from stratdeck.database import get_session
from stratdeck.models.broker import UserBroker
from stratdeck.models.strategy import StrategyCatalog
from stratdeck.models.telegram_chat import UserTelegramChat
from stratdeck.models.user_strategy import UserStrategy
from stratdeck.schemas.strategy import StrategyRead, DeployRequest, UserStrategyRead
from stratdeck.services.ledger import UserContext
from stratdeck.api.deps import get_user_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/strategies", tags=["strategies"])

ALREADY_DEPLOYED = "This strategy is already deployed. Please edit it from the Portfolio page."


def check_owned_refs(
    session: Session,
    ctx: UserContext,
    broker_id: int | None,
    telegram_chat_id: int | None,
) -> None:
    """Reject broker / telegram references that do not belong to the caller."""
    if broker_id is not None:
        broker = session.get(UserBroker, broker_id)
        if not broker or broker.user_id != ctx.user_id:
            raise HTTPException(status_code=404, detail="Broker not found")
    if telegram_chat_id is not None:
        chat = session.get(UserTelegramChat, telegram_chat_id)
        if not chat or chat.user_id != ctx.user_id:
            raise HTTPException(status_code=404, detail="Telegram chat not found")


@router.get("", response_model=list[StrategyRead])
def list_strategies(
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    return session.exec(
        select(StrategyCatalog)
        .where(StrategyCatalog.active == True)
        .order_by(StrategyCatalog.name)
    ).all()


@router.get("/{strategy_id}", response_model=StrategyRead)
def get_strategy(
    strategy_id: int,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    strategy = session.get(StrategyCatalog, strategy_id)
    if not strategy or not strategy.active:
        raise HTTPException(status_code=404, detail="Strategy not found")
    return strategy


@router.post("/{strategy_id}/deploy", response_model=UserStrategyRead, status_code=201)
def deploy_strategy(
    strategy_id: int,
    data: DeployRequest,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """Deploy a catalog strategy for the caller; the worker picks it up from the table."""
    strategy = session.get(StrategyCatalog, strategy_id)
    if not strategy or not strategy.active:
        raise HTTPException(status_code=404, detail="Strategy not found")

    if data.broker_id is None:
        raise HTTPException(status_code=400, detail="Please select a broker")
    if strategy.requires_telegram and data.telegram_chat_id is None:
        raise HTTPException(status_code=400, detail="This strategy requires a Telegram chat")
    check_owned_refs(session, ctx, data.broker_id, data.telegram_chat_id)

    existing = session.exec(
        select(UserStrategy).where(
            UserStrategy.user_id == ctx.user_id,
            UserStrategy.strategy_id == strategy_id,
        )
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail=ALREADY_DEPLOYED)

    deployment = UserStrategy(
        user_id=ctx.user_id,
        strategy_id=strategy_id,
        broker_id=data.broker_id,
        telegram_chat_id=data.telegram_chat_id,
        qty=data.qty or strategy.default_qty or 1,
        dry_run=data.dry_run,
        active=True,
        config_version=0,
        updated_at=datetime.now(timezone.utc),
    )
    session.add(deployment)
    try:
        session.commit()
    except IntegrityError:
        # Lost a race with a concurrent deploy of the same strategy
        session.rollback()
        raise HTTPException(status_code=409, detail=ALREADY_DEPLOYED)
    session.refresh(deployment)

    logger.info(
        f"User {ctx.user_id} deployed strategy {strategy_id} "
        f"(broker={data.broker_id}, dry_run={data.dry_run})"
    )
    return deployment
