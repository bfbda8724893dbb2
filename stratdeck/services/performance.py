"""Month-to-date trading performance from a user's trade ledger.

Pipeline: month filter -> position pairing -> summarizer. All functions are
pure; malformed ledger rows are skipped rather than raised on.

Pairing rules:
- trades without an instrument are ignored
- each instrument is scanned in timestamp order (missing timestamps sort
  first, ties keep input order)
- at most one open entry per instrument; a second entry while one is open is
  ignored, an exit with nothing open is dropped
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Protocol

from stratdeck.utils.constants import ENTRY_LABELS, EXIT_LABELS

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class TradeLike(Protocol):
    instrument: str | None
    position: str | None
    price: float | None
    date_time: Any  # datetime, ISO string or None


class PositionTag(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"
    UNKNOWN = "unknown"


def classify_position(raw: str | None) -> PositionTag:
    """Normalize a free-form position label."""
    if raw is None:
        return PositionTag.UNKNOWN
    label = raw.strip().lower()
    if label in ENTRY_LABELS:
        return PositionTag.ENTRY
    if label in EXIT_LABELS:
        return PositionTag.EXIT
    return PositionTag.UNKNOWN


@dataclass(frozen=True)
class ClosedPosition:
    """An entry trade matched with the exit that closed it."""

    instrument: str
    entry: TradeLike
    exit: TradeLike

    @property
    def pnl(self) -> float | None:
        if self.entry.price is None or self.exit.price is None:
            return None
        return self.exit.price - self.entry.price


@dataclass
class PerformanceSummary:
    total_pnl: float = 0.0
    return_percent: float = 0.0
    win_rate: float = 0.0
    trade_count: int = 0
    winning_count: int = 0
    open_positions: int = 0


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a ledger timestamp. Returns None when missing or unparsable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _to_local(ts: datetime) -> datetime:
    # Stored timestamps come back UTC-aware; naive ones (ISO strings without
    # an offset) are taken as local wall-clock time
    if ts.tzinfo is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)


def filter_current_month(trades: Iterable[TradeLike], now: datetime | None = None) -> list[TradeLike]:
    """Keep trades dated in the calendar month of ``now`` (local clock)."""
    ref = _to_local(now) if now is not None else datetime.now()
    result = []
    for trade in trades:
        ts = parse_timestamp(trade.date_time)
        if ts is None:
            continue
        local = _to_local(ts)
        if local.year == ref.year and local.month == ref.month:
            result.append(trade)
    return result


def _sort_key(trade: TradeLike) -> datetime:
    ts = parse_timestamp(trade.date_time)
    if ts is None:
        return _EPOCH
    if ts.tzinfo is None:
        ts = ts.astimezone()
    return ts


def _group_by_instrument(trades: Iterable[TradeLike]) -> dict[str, list[TradeLike]]:
    groups: dict[str, list[TradeLike]] = {}
    for trade in trades:
        if not trade.instrument:
            continue
        groups.setdefault(trade.instrument, []).append(trade)
    return groups


def _scan(trades: Iterable[TradeLike]) -> tuple[list[ClosedPosition], list[TradeLike]]:
    closed: list[ClosedPosition] = []
    still_open: list[TradeLike] = []

    for instrument, group in _group_by_instrument(trades).items():
        open_entry: TradeLike | None = None
        for trade in sorted(group, key=_sort_key):
            tag = classify_position(trade.position)
            if tag is PositionTag.ENTRY:
                if open_entry is None:
                    open_entry = trade
            elif tag is PositionTag.EXIT:
                if open_entry is not None:
                    closed.append(ClosedPosition(instrument, open_entry, trade))
                    open_entry = None
        if open_entry is not None:
            still_open.append(open_entry)

    return closed, still_open


def pair_positions(trades: Iterable[TradeLike]) -> list[ClosedPosition]:
    """Match entries with exits per instrument, in completion order."""
    closed, _ = _scan(trades)
    return closed


def find_open_entries(trades: Iterable[TradeLike]) -> list[TradeLike]:
    """Entries still waiting for an exit after pairing."""
    _, still_open = _scan(trades)
    return still_open


def summarize(positions: Iterable[ClosedPosition]) -> PerformanceSummary:
    """Aggregate realized P&L, return and win rate over closed positions."""
    total_pnl = 0.0
    entry_value = 0.0
    trade_count = 0
    winning_count = 0

    for position in positions:
        pnl = position.pnl
        if pnl is None:
            continue
        total_pnl += pnl
        entry_value += position.entry.price
        trade_count += 1
        if pnl > 0:
            winning_count += 1

    return PerformanceSummary(
        total_pnl=total_pnl,
        return_percent=total_pnl / entry_value * 100 if entry_value > 0 else 0.0,
        win_rate=winning_count / trade_count * 100 if trade_count > 0 else 0.0,
        trade_count=trade_count,
        winning_count=winning_count,
    )


def monthly_performance(trades: Iterable[TradeLike], now: datetime | None = None) -> PerformanceSummary:
    """Summarize the current calendar month of a ledger."""
    month_trades = filter_current_month(trades, now)
    closed, still_open = _scan(month_trades)
    summary = summarize(closed)
    summary.open_positions = len(still_open)
    return summary
