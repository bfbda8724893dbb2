"""CRUD API for broker credentials ("My Keys")."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from stratdeck.database import get_session
from stratdeck.models.broker import UserBroker
from stratdeck.models.user_strategy import UserStrategy
from stratdeck.schemas.broker import BrokerCreate, BrokerUpdate, BrokerRead
from stratdeck.services.encryption import encrypt, encrypt_optional, decrypt, mask_secret
from stratdeck.services.ledger import UserContext
from stratdeck.api.deps import get_user_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/brokers", tags=["brokers"])

# Request field -> encrypted column
_SECRET_FIELDS = {
    "api_secret": "api_secret_encrypted",
    "auth_token": "auth_token_encrypted",
    "mpin": "mpin_encrypted",
    "totp": "totp_encrypted",
}


def _to_read(broker: UserBroker) -> BrokerRead:
    return BrokerRead(
        id=broker.id,
        name=broker.name,
        platform=broker.platform,
        api_key_masked=mask_secret(decrypt(broker.api_key_encrypted)),
        has_api_secret=broker.api_secret_encrypted is not None,
        has_auth_token=broker.auth_token_encrypted is not None,
        has_mpin=broker.mpin_encrypted is not None,
        has_totp=broker.totp_encrypted is not None,
        client_id=broker.client_id,
        notes=broker.notes,
        created_at=broker.created_at,
        updated_at=broker.updated_at,
    )


def _get_owned(session: Session, ctx: UserContext, broker_id: int) -> UserBroker:
    broker = session.get(UserBroker, broker_id)
    if not broker or broker.user_id != ctx.user_id:
        raise HTTPException(status_code=404, detail="Broker not found")
    return broker


@router.get("", response_model=list[BrokerRead])
def list_brokers(
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    brokers = session.exec(
        select(UserBroker)
        .where(UserBroker.user_id == ctx.user_id)
        .order_by(UserBroker.name)
    ).all()
    return [_to_read(b) for b in brokers]


@router.post("", response_model=BrokerRead, status_code=201)
def create_broker(
    data: BrokerCreate,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    broker = UserBroker(
        user_id=ctx.user_id,
        name=data.name,
        platform=data.platform,
        api_key_encrypted=encrypt(data.api_key),
        client_id=data.client_id,
        notes=data.notes,
    )
    for field, column in _SECRET_FIELDS.items():
        setattr(broker, column, encrypt_optional(getattr(data, field)))

    session.add(broker)
    session.commit()
    session.refresh(broker)
    logger.info(f"User {ctx.user_id} added broker {broker.id} ({broker.platform})")
    return _to_read(broker)


@router.get("/{broker_id}", response_model=BrokerRead)
def get_broker(
    broker_id: int,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    return _to_read(_get_owned(session, ctx, broker_id))


@router.put("/{broker_id}", response_model=BrokerRead)
def update_broker(
    broker_id: int,
    data: BrokerUpdate,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    broker = _get_owned(session, ctx, broker_id)

    update_data = data.model_dump(exclude_unset=True)
    if "api_key" in update_data:
        key = update_data.pop("api_key")
        if key is not None:
            broker.api_key_encrypted = encrypt(key)

    for field, column in _SECRET_FIELDS.items():
        if field in update_data:
            setattr(broker, column, encrypt_optional(update_data.pop(field)))

    for key, value in update_data.items():
        if key in ("name", "platform") and value is None:
            continue
        setattr(broker, key, value)
    broker.updated_at = datetime.now(timezone.utc)

    session.add(broker)
    session.commit()
    session.refresh(broker)
    return _to_read(broker)


@router.delete("/{broker_id}", status_code=204)
def delete_broker(
    broker_id: int,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    broker = _get_owned(session, ctx, broker_id)

    referencing = session.exec(
        select(UserStrategy).where(UserStrategy.broker_id == broker_id)
    ).all()
    if any(d.active for d in referencing):
        raise HTTPException(
            status_code=409,
            detail="Cannot delete a broker used by a deployed strategy. Update the strategy first.",
        )

    # Stopped deployments still hold the foreign key
    for deployment in referencing:
        deployment.broker_id = None
        session.add(deployment)
    session.flush()

    session.delete(broker)
    session.commit()
    logger.info(f"User {ctx.user_id} deleted broker {broker_id}")
