"""Tests for month filtering, position pairing and performance summary."""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from stratdeck.models.trade import Trade
from stratdeck.services.performance import (
    ClosedPosition,
    PerformanceSummary,
    PositionTag,
    classify_position,
    filter_current_month,
    find_open_entries,
    monthly_performance,
    pair_positions,
    parse_timestamp,
    summarize,
)

NOW = datetime(2026, 10, 18, 12, 0, 0)


def _trade(instrument, position, price, date_time):
    return SimpleNamespace(
        instrument=instrument, position=position, price=price, date_time=date_time
    )


def _day(day: int, hour: int = 10) -> datetime:
    return datetime(2026, 10, day, hour, 0, 0)


# ---------------------------------------------------------------------------
# 1. Position classification
# ---------------------------------------------------------------------------

class TestClassifyPosition:
    @pytest.mark.parametrize("raw", ["entry", "BUY", "  Entry "])
    def test_entry_labels(self, raw):
        assert classify_position(raw) is PositionTag.ENTRY

    @pytest.mark.parametrize("raw", ["exit", "Sell", "CUTOFF"])
    def test_exit_labels(self, raw):
        assert classify_position(raw) is PositionTag.EXIT

    @pytest.mark.parametrize("raw", [None, "", "hold", "short"])
    def test_unknown_labels(self, raw):
        assert classify_position(raw) is PositionTag.UNKNOWN


# ---------------------------------------------------------------------------
# 2. Month filter
# ---------------------------------------------------------------------------

class TestFilterCurrentMonth:
    def test_keeps_only_current_month(self):
        this_month = _trade("A", "entry", 10.0, _day(3))
        last_month = _trade("A", "entry", 10.0, datetime(2026, 9, 30, 23, 0))
        last_year = _trade("A", "entry", 10.0, datetime(2025, 10, 5))
        result = filter_current_month([this_month, last_month, last_year], now=NOW)
        assert result == [this_month]

    def test_excludes_missing_and_unparsable_timestamps(self):
        trades = [
            _trade("A", "entry", 10.0, None),
            _trade("A", "entry", 10.0, "not a date"),
            _trade("A", "entry", 10.0, ""),
        ]
        assert filter_current_month(trades, now=NOW) == []

    def test_accepts_iso_strings(self):
        trade = _trade("A", "entry", 10.0, "2026-10-05T09:15:00")
        assert filter_current_month([trade], now=NOW) == [trade]

    def test_aware_timestamps_use_local_clock(self):
        local_noon = datetime(2026, 10, 10, 12, 0).astimezone()
        trade = _trade("A", "entry", 10.0, local_noon.astimezone(timezone.utc))
        assert filter_current_month([trade], now=NOW) == [trade]


def test_parse_timestamp_handles_zulu_suffix():
    ts = parse_timestamp("2026-10-05T09:15:00Z")
    assert ts == datetime(2026, 10, 5, 9, 15, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# 3. Pairing
# ---------------------------------------------------------------------------

class TestPairPositions:
    def test_pairs_earliest_entry_regardless_of_input_order(self):
        later_entry = _trade("A", "entry", 12.0, _day(2))
        earlier_entry = _trade("A", "entry", 10.0, _day(1))
        exit_ = _trade("A", "exit", 15.0, _day(3))

        pairs = pair_positions([later_entry, earlier_entry, exit_])

        assert len(pairs) == 1
        assert pairs[0].entry is earlier_entry
        assert pairs[0].exit is exit_

    def test_lone_exit_is_dropped(self):
        assert pair_positions([_trade("A", "exit", 10.0, _day(1))]) == []

    def test_trades_without_instrument_are_ignored(self):
        trades = [
            _trade(None, "entry", 10.0, _day(1)),
            _trade("", "exit", 12.0, _day(2)),
        ]
        assert pair_positions(trades) == []

    def test_unknown_positions_do_not_open_or_close(self):
        trades = [
            _trade("A", "hold", 9.0, _day(1)),
            _trade("A", "buy", 10.0, _day(2)),
            _trade("A", "hold", 11.0, _day(3)),
            _trade("A", "cutoff", 12.0, _day(4)),
        ]
        pairs = pair_positions(trades)
        assert [(p.entry.price, p.exit.price) for p in pairs] == [(10.0, 12.0)]

    def test_reopens_after_close(self):
        trades = [
            _trade("A", "entry", 10.0, _day(1)),
            _trade("A", "exit", 11.0, _day(2)),
            _trade("A", "entry", 20.0, _day(3)),
            _trade("A", "sell", 18.0, _day(4)),
        ]
        pairs = pair_positions(trades)
        assert [(p.entry.price, p.exit.price) for p in pairs] == [(10.0, 11.0), (20.0, 18.0)]

    def test_groups_are_independent(self):
        trades = [
            _trade("A", "entry", 10.0, _day(1)),
            _trade("B", "exit", 50.0, _day(2)),
            _trade("B", "entry", 40.0, _day(3)),
            _trade("A", "exit", 12.0, _day(4)),
        ]
        pairs = pair_positions(trades)
        assert [p.instrument for p in pairs] == ["A"]

    def test_missing_timestamps_sort_first_and_keep_input_order(self):
        first = _trade("A", "entry", 10.0, None)
        second = _trade("A", "entry", 11.0, None)
        exit_ = _trade("A", "exit", 12.0, _day(1))
        pairs = pair_positions([first, second, exit_])
        assert pairs[0].entry is first

    def test_mixed_aware_and_naive_timestamps_sort(self):
        aware_exit = _trade("A", "exit", 12.0, datetime(2026, 10, 5, tzinfo=timezone.utc))
        naive_entry = _trade("A", "entry", 10.0, datetime(2026, 10, 1))
        assert len(pair_positions([aware_exit, naive_entry])) == 1

    def test_open_entries_are_reported(self):
        entry = _trade("A", "entry", 10.0, _day(1))
        closed_entry = _trade("B", "entry", 5.0, _day(1))
        closed_exit = _trade("B", "exit", 6.0, _day(2))
        assert find_open_entries([entry, closed_entry, closed_exit]) == [entry]


# ---------------------------------------------------------------------------
# 4. Summarizer
# ---------------------------------------------------------------------------

def _pair(entry_price, exit_price, instrument="A"):
    return ClosedPosition(
        instrument,
        _trade(instrument, "entry", entry_price, _day(1)),
        _trade(instrument, "exit", exit_price, _day(2)),
    )


class TestSummarize:
    def test_empty_is_zero_state(self):
        summary = summarize([])
        assert summary == PerformanceSummary()
        assert (summary.total_pnl, summary.return_percent, summary.win_rate) == (0, 0, 0)

    def test_single_winning_pair(self):
        summary = summarize([_pair(100.0, 110.0)])
        assert summary.total_pnl == pytest.approx(10.0)
        assert summary.return_percent == pytest.approx(10.0)
        assert summary.win_rate == pytest.approx(100.0)

    def test_single_losing_pair(self):
        summary = summarize([_pair(100.0, 90.0)])
        assert summary.total_pnl == pytest.approx(-10.0)
        assert summary.return_percent == pytest.approx(-10.0)
        assert summary.win_rate == 0.0

    def test_break_even_is_not_a_win(self):
        assert summarize([_pair(100.0, 100.0)]).win_rate == 0.0

    def test_return_uses_combined_entry_value(self):
        summary = summarize([_pair(100.0, 110.0, "A"), _pair(300.0, 290.0, "B")])
        assert summary.total_pnl == pytest.approx(0.0)
        assert summary.return_percent == pytest.approx(0.0)
        assert summary.win_rate == pytest.approx(50.0)

        summary = summarize([_pair(100.0, 120.0, "A"), _pair(300.0, 310.0, "B")])
        assert summary.total_pnl == pytest.approx(30.0)
        assert summary.return_percent == pytest.approx(30.0 / 400.0 * 100)

    def test_null_prices_are_excluded_from_denominator(self):
        summary = summarize([_pair(None, 110.0), _pair(100.0, None), _pair(100.0, 105.0)])
        assert summary.trade_count == 1
        assert summary.win_rate == pytest.approx(100.0)
        assert summary.total_pnl == pytest.approx(5.0)


# ---------------------------------------------------------------------------
# 5. End-to-end monthly performance
# ---------------------------------------------------------------------------

def test_monthly_performance_excludes_last_month():
    trades = [
        _trade("A", "entry", 100.0, datetime(2026, 9, 28)),
        _trade("A", "exit", 150.0, _day(2)),
        _trade("B", "entry", 50.0, _day(3)),
        _trade("B", "exit", 55.0, _day(4)),
    ]
    summary = monthly_performance(trades, now=NOW)
    assert summary.trade_count == 1
    assert summary.total_pnl == pytest.approx(5.0)
    assert summary.return_percent == pytest.approx(10.0)
    assert summary.open_positions == 0


def test_monthly_performance_counts_open_entries():
    trades = [
        _trade("A", "entry", 100.0, _day(2)),
        _trade("B", "entry", 50.0, _day(3)),
        _trade("B", "exit", 40.0, _day(4)),
    ]
    summary = monthly_performance(trades, now=NOW)
    assert summary.open_positions == 1
    assert summary.win_rate == 0.0
    assert summary.total_pnl == pytest.approx(-10.0)


def test_monthly_performance_accepts_ledger_rows():
    trades = [
        Trade(id=1, user_id=1, instrument="NIFTY24OCT", position="Buy", price=200.0,
              date_time=_day(5, 9)),
        Trade(id=2, user_id=1, instrument="NIFTY24OCT", position="Sell", price=230.0,
              date_time=_day(5, 15)),
    ]
    summary = monthly_performance(trades, now=NOW)
    assert summary.total_pnl == pytest.approx(30.0)
    assert summary.win_rate == pytest.approx(100.0)
