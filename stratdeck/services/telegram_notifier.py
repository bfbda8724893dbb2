"""Outbound Telegram messages to user-configured chats."""

import logging

from telegram import Bot
from telegram.error import TelegramError
from telegram.request import HTTPXRequest

from stratdeck.config import settings

logger = logging.getLogger(__name__)

TEST_MESSAGE = "Stratdeck: this chat is connected and will receive strategy notifications."


async def send_message(bot_token: str, chat_id: str, text: str) -> None:
    """Send one message. Raises TelegramError on failure."""
    request = HTTPXRequest(
        connect_timeout=settings.telegram_timeout,
        read_timeout=settings.telegram_timeout,
    )
    bot = Bot(token=bot_token, request=request)
    async with bot:
        await bot.send_message(chat_id=chat_id, text=text)


async def send_test_message(bot_token: str, chat_id: str) -> dict:
    """Send the test message and report the outcome instead of raising."""
    try:
        await send_message(bot_token, chat_id, TEST_MESSAGE)
    except TelegramError as e:
        logger.warning(f"Telegram test message to chat {chat_id} failed: {e}")
        return {"status": "error", "message": str(e)}
    return {"status": "ok", "message": "Test message sent"}
