"""Tests for ledger access, encryption helpers and outbound integrations."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pyotp
import pytest
from sqlalchemy.exc import OperationalError
from telegram.error import TelegramError

from stratdeck.models.trade import Trade
from stratdeck.services import kv_store
from stratdeck.services.auth import AuthError, authenticate, create_access_token, decode_access_token
from stratdeck.services.encryption import encrypt, decrypt, encrypt_optional, mask_secret
from stratdeck.services.ledger import (
    LEDGER_ERROR_MESSAGE,
    UserContext,
    fetch_user_trades,
    fetch_user_trades_safe,
)
from stratdeck.services.telegram_notifier import send_test_message
from stratdeck.services.worker_control import (
    WorkerControlError,
    WorkerNotConfigured,
    restart_worker,
)


# ---------------------------------------------------------------------------
# 1. Ledger + auth
# ---------------------------------------------------------------------------

def test_fetch_user_trades_newest_first(session, user, other_user):
    for day in (3, 1, 2):
        session.add(Trade(user_id=user.id, instrument="TCS", position="buy",
                          price=float(day), date_time=datetime(2026, 10, day, tzinfo=timezone.utc)))
    session.add(Trade(user_id=other_user.id, instrument="TCS", position="buy",
                      price=99.0, date_time=datetime(2026, 10, 4, tzinfo=timezone.utc)))
    session.commit()

    ctx = UserContext(user_id=user.id, email=user.email)
    trades = fetch_user_trades(session, ctx)
    assert [t.price for t in trades] == [3.0, 2.0, 1.0]


def test_fetch_user_trades_safe_returns_empty_on_db_error(caplog):
    session = MagicMock()
    session.exec.side_effect = OperationalError("SELECT", {}, Exception("db down"))

    trades, error = fetch_user_trades_safe(session, UserContext(user_id=7, email="x@example.com"))

    assert trades == []
    assert error == LEDGER_ERROR_MESSAGE
    session.rollback.assert_called_once()
    assert "Ledger fetch failed for user 7" in caplog.text


def test_access_token_carries_user_id():
    assert decode_access_token(create_access_token(42)) == 42
    assert decode_access_token("not-a-token") is None


def test_authenticate_checks_password_and_totp(session, user):
    assert authenticate(session, " Alice@Example.com ", "secret-pw").id == user.id
    with pytest.raises(AuthError, match="Invalid credentials"):
        authenticate(session, user.email, "wrong")
    with pytest.raises(AuthError, match="Invalid credentials"):
        authenticate(session, "nobody@example.com", "secret-pw")

    user.totp_secret = pyotp.random_base32()
    session.add(user)
    session.commit()
    with pytest.raises(AuthError, match="TOTP"):
        authenticate(session, user.email, "secret-pw")
    code = pyotp.TOTP(user.totp_secret).now()
    assert authenticate(session, user.email, "secret-pw", totp_code=code).id == user.id


# ---------------------------------------------------------------------------
# 2. Encryption + key/value store
# ---------------------------------------------------------------------------

def test_encrypt_roundtrip_and_optional():
    assert decrypt(encrypt("secret")) == "secret"
    assert encrypt_optional(None) is None
    assert encrypt_optional("") is None


@pytest.mark.parametrize(
    "plain, masked",
    [("abcdefgh", "****efgh"), ("abc", "***"), ("", "")],
)
def test_mask_secret(plain, masked):
    assert mask_secret(plain) == masked


def test_kv_store_set_overwrites(session):
    kv_store.set(session, "apikeys:1", {"platform": "a"})
    kv_store.set(session, "apikeys:1", {"platform": "b"})
    assert kv_store.get(session, "apikeys:1") == {"platform": "b"}

    kv_store.delete(session, "apikeys:1")
    assert kv_store.get(session, "apikeys:1") is None


# ---------------------------------------------------------------------------
# 3. Telegram
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_send_test_message_reports_failure():
    with patch(
        "stratdeck.services.telegram_notifier.send_message",
        new_callable=AsyncMock,
        side_effect=TelegramError("Chat not found"),
    ):
        result = await send_test_message("token", "42")
    assert result == {"status": "error", "message": "Chat not found"}


@pytest.mark.asyncio
async def test_send_test_message_ok():
    with patch("stratdeck.services.telegram_notifier.send_message", new_callable=AsyncMock) as send:
        result = await send_test_message("token", "42")
    assert result["status"] == "ok"
    send.assert_awaited_once()


# ---------------------------------------------------------------------------
# 4. Worker restart webhook
# ---------------------------------------------------------------------------

_URL = "https://hooks.example.com/restart"


@pytest.mark.asyncio
async def test_restart_worker_requires_url():
    with patch("stratdeck.services.worker_control.settings.worker_restart_url", ""):
        with pytest.raises(WorkerNotConfigured):
            await restart_worker()


@pytest.mark.asyncio
async def test_restart_worker_posts_to_webhook():
    response = httpx.Response(200, request=httpx.Request("POST", _URL))
    with patch("stratdeck.services.worker_control.settings.worker_restart_url", _URL), \
            patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock, return_value=response) as post:
        await restart_worker()
    post.assert_awaited_once_with(_URL)


@pytest.mark.asyncio
async def test_restart_worker_maps_http_errors():
    response = httpx.Response(500, request=httpx.Request("POST", _URL))
    with patch("stratdeck.services.worker_control.settings.worker_restart_url", _URL), \
            patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock, return_value=response):
        with pytest.raises(WorkerControlError, match="500"):
            await restart_worker()
