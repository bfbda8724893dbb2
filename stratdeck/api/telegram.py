"""CRUD API for Telegram notification chats."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from stratdeck.database import get_session
from stratdeck.models.telegram_chat import UserTelegramChat
from stratdeck.models.user_strategy import UserStrategy
from stratdeck.schemas.telegram_chat import TelegramChatCreate, TelegramChatUpdate, TelegramChatRead
from stratdeck.services.encryption import encrypt, decrypt
from stratdeck.services.ledger import UserContext
from stratdeck.api.deps import get_user_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/telegram", tags=["telegram"])


def _get_owned(session: Session, ctx: UserContext, chat_pk: int) -> UserTelegramChat:
    chat = session.get(UserTelegramChat, chat_pk)
    if not chat or chat.user_id != ctx.user_id:
        raise HTTPException(status_code=404, detail="Telegram chat not found")
    return chat


@router.get("", response_model=list[TelegramChatRead])
def list_chats(
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    return session.exec(
        select(UserTelegramChat)
        .where(UserTelegramChat.user_id == ctx.user_id)
        .order_by(UserTelegramChat.label.asc().nulls_last())  # type: ignore[union-attr]
    ).all()


@router.post("", response_model=TelegramChatRead, status_code=201)
def create_chat(
    data: TelegramChatCreate,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    chat = UserTelegramChat(
        user_id=ctx.user_id,
        bot_token_encrypted=encrypt(data.bot_token),
        chat_id=data.chat_id,
        label=data.label,
    )
    session.add(chat)
    session.commit()
    session.refresh(chat)
    return chat


@router.get("/{chat_pk}", response_model=TelegramChatRead)
def get_chat(
    chat_pk: int,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    return _get_owned(session, ctx, chat_pk)


@router.put("/{chat_pk}", response_model=TelegramChatRead)
def update_chat(
    chat_pk: int,
    data: TelegramChatUpdate,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    chat = _get_owned(session, ctx, chat_pk)

    update_data = data.model_dump(exclude_unset=True)
    if "bot_token" in update_data:
        token = update_data.pop("bot_token")
        if token is not None:
            chat.bot_token_encrypted = encrypt(token)

    if update_data.get("chat_id") is not None:
        chat.chat_id = update_data["chat_id"]
    if "label" in update_data:
        chat.label = update_data["label"]
    chat.updated_at = datetime.now(timezone.utc)

    session.add(chat)
    session.commit()
    session.refresh(chat)
    return chat


@router.delete("/{chat_pk}", status_code=204)
def delete_chat(
    chat_pk: int,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    chat = _get_owned(session, ctx, chat_pk)

    referencing = session.exec(
        select(UserStrategy).where(UserStrategy.telegram_chat_id == chat_pk)
    ).all()
    if any(d.active for d in referencing):
        raise HTTPException(
            status_code=409,
            detail="Cannot delete a Telegram chat used by a deployed strategy. Update the strategy first.",
        )

    # Stopped deployments still hold the foreign key
    for deployment in referencing:
        deployment.telegram_chat_id = None
        session.add(deployment)
    session.flush()

    session.delete(chat)
    session.commit()
    logger.info(f"User {ctx.user_id} deleted Telegram chat {chat_pk}")


@router.post("/{chat_pk}/test")
async def test_chat(
    chat_pk: int,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """Send a test message to this chat."""
    chat = _get_owned(session, ctx, chat_pk)

    from stratdeck.services.telegram_notifier import send_test_message

    return await send_test_message(decrypt(chat.bot_token_encrypted), chat.chat_id)
