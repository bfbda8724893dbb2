"""Shared constants and defaults."""

# Free-form position labels written by the strategy worker, lowercased
ENTRY_LABELS = frozenset({"entry", "buy"})
EXIT_LABELS = frozenset({"exit", "sell", "cutoff"})

# Key/value store prefix for per-user API key sets
API_KEYS_PREFIX = "apikeys:"

DEFAULT_API_KEYS: dict[str, str] = {
    "platform": "",
    "apiKey": "",
    "apiSecret": "",
    "authToken": "",
}

# Fields of the API key set that are encrypted at rest
API_KEYS_SECRET_FIELDS = ("apiKey", "apiSecret", "authToken")

UNNAMED_TELEGRAM_LABEL = "Unnamed"
