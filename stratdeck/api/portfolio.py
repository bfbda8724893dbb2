"""Portfolio API: the caller's deployed strategies."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from stratdeck.database import get_session
from stratdeck.models.broker import UserBroker
from stratdeck.models.strategy import StrategyCatalog
from stratdeck.models.telegram_chat import UserTelegramChat
from stratdeck.models.user_strategy import UserStrategy
from stratdeck.schemas.strategy import PortfolioEntry, UserStrategyRead, UserStrategyUpdate
from stratdeck.services.ledger import UserContext
from stratdeck.utils.constants import UNNAMED_TELEGRAM_LABEL
from stratdeck.api.deps import get_user_context
from stratdeck.api.strategies import check_owned_refs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


def _get_owned(session: Session, ctx: UserContext, deployment_id: int) -> UserStrategy:
    deployment = session.get(UserStrategy, deployment_id)
    if not deployment or deployment.user_id != ctx.user_id:
        raise HTTPException(status_code=404, detail="Deployed strategy not found")
    return deployment


@router.get("", response_model=list[PortfolioEntry])
def list_portfolio(
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """Active deployments enriched with strategy, broker and chat names."""
    deployments = session.exec(
        select(UserStrategy)
        .where(UserStrategy.user_id == ctx.user_id, UserStrategy.active == True)
        .order_by(UserStrategy.created_at.desc(), UserStrategy.id.desc())  # type: ignore[union-attr]
    ).all()
    if not deployments:
        return []

    strategy_ids = {d.strategy_id for d in deployments}
    strategies = session.exec(
        select(StrategyCatalog).where(StrategyCatalog.id.in_(strategy_ids))  # type: ignore[union-attr]
    ).all()
    strategy_names = {s.id: s.name for s in strategies}

    brokers = session.exec(select(UserBroker).where(UserBroker.user_id == ctx.user_id)).all()
    broker_names = {b.id: b.name for b in brokers}

    chats = session.exec(
        select(UserTelegramChat).where(UserTelegramChat.user_id == ctx.user_id)
    ).all()
    chat_labels = {c.id: c.label or UNNAMED_TELEGRAM_LABEL for c in chats}

    result = []
    for d in deployments:
        base = UserStrategyRead.model_validate(d).model_dump()
        result.append(PortfolioEntry(
            **base,
            strategy_name=strategy_names.get(d.strategy_id, str(d.strategy_id)),
            broker_name=broker_names.get(d.broker_id) if d.broker_id else None,
            telegram_label=chat_labels.get(d.telegram_chat_id) if d.telegram_chat_id else None,
        ))
    return result


@router.put("/{deployment_id}", response_model=UserStrategyRead)
def update_deployment(
    deployment_id: int,
    data: UserStrategyUpdate,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    deployment = _get_owned(session, ctx, deployment_id)

    update_data = data.model_dump(exclude_unset=True)
    check_owned_refs(
        session,
        ctx,
        update_data.get("broker_id"),
        update_data.get("telegram_chat_id"),
    )

    if "telegram_chat_id" in update_data and update_data["telegram_chat_id"] is None:
        strategy = session.get(StrategyCatalog, deployment.strategy_id)
        if strategy and strategy.requires_telegram:
            raise HTTPException(status_code=400, detail="This strategy requires a Telegram chat")

    if "dry_run" in update_data and update_data["dry_run"] is None:
        update_data.pop("dry_run")

    for key, value in update_data.items():
        setattr(deployment, key, value)
    deployment.updated_at = datetime.now(timezone.utc)

    session.add(deployment)
    session.commit()
    session.refresh(deployment)
    return deployment


@router.delete("/{deployment_id}", status_code=204)
def delete_deployment(
    deployment_id: int,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    deployment = _get_owned(session, ctx, deployment_id)
    session.delete(deployment)
    session.commit()
    logger.info(f"User {ctx.user_id} removed deployment {deployment_id}")
