"""Database models."""

from stratdeck.models.user import User
from stratdeck.models.trade import Trade
from stratdeck.models.broker import UserBroker
from stratdeck.models.telegram_chat import UserTelegramChat
from stratdeck.models.strategy import StrategyCatalog
from stratdeck.models.user_strategy import UserStrategy
from stratdeck.models.kv_store import KVEntry

__all__ = [
    "User",
    "Trade",
    "UserBroker",
    "UserTelegramChat",
    "StrategyCatalog",
    "UserStrategy",
    "KVEntry",
]
