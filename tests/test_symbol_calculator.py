from datetime import date

import pytest

from models import Dividend, LongPosition, Option
from symbol_calculator import MONTH_NAMES, SymbolMonthlyCalculator


def _option(symbol, option_type, opened, premium, contracts=1):
    return Option(
        symbol=symbol,
        option_type=option_type,
        opened=opened,
        strike=50.0,
        expiration=date(opened.year, opened.month, 28),
        premium=premium,
        contracts=contracts,
    )


def test_always_twelve_months_in_calendar_order():
    results = SymbolMonthlyCalculator.build_symbol_monthly([])

    assert [r.month for r in results] == MONTH_NAMES
    assert results[0].month == "January"
    assert results[-1].month == "December"
    assert all(r.puts_count == 0 and r.calls_count == 0 and r.total == 0 for r in results)


def test_same_calendar_month_folds_across_years():
    options = [
        _option("XYZ", "Put", date(2023, 3, 3), 1.0),               # 100
        _option("XYZ", "Put", date(2024, 3, 20), 2.0),              # 200
        _option("XYZ", "Call", date(2024, 3, 21), 0.5, contracts=2),  # 100
        _option("XYZ", "Call", date(2024, 7, 1), 1.0),              # 100
    ]
    results = SymbolMonthlyCalculator.build_symbol_monthly(options)

    march = results[2]
    assert march.month == "March"
    assert march.puts_count == 2
    assert march.puts_total == 300.0
    assert march.calls_count == 1
    assert march.calls_total == 100.0
    assert march.total == 400.0

    july = results[6]
    assert (july.calls_count, july.total) == (1, 100.0)


def test_symbol_filter():
    options = [
        _option("XYZ", "Put", date(2024, 1, 3), 1.0),
        _option("ABC", "Put", date(2024, 1, 4), 5.0),
    ]
    results = SymbolMonthlyCalculator.build_symbol_monthly(options, symbol="ABC")

    assert results[0].puts_count == 1
    assert results[0].puts_total == 500.0


def test_symbol_summary_totals_and_cash_on_cash():
    options = [
        _option("XYZ", "Put", date(2024, 1, 3), 2.0),        # 200, open
        _option("XYZ", "Call", date(2024, 2, 3), 1.0),       # 100
        _option("ABC", "Put", date(2024, 1, 3), 9.0),
    ]
    options[1].closed = date(2024, 2, 20)
    dividends = [
        Dividend("XYZ", date(2024, 3, 1), 25.0),
        Dividend("ABC", date(2024, 3, 1), 99.0),
    ]
    positions = [
        LongPosition("XYZ", date(2023, 6, 1), 100, 40.0, closed=date(2024, 2, 1), exit_price=45.0),  # +500
        LongPosition("XYZ", date(2024, 2, 1), 100, 60.0),                                          # open
        LongPosition("XYZ", date(2023, 1, 1), 10, 10.0, closed=date(2023, 5, 1)),                  # no exit
    ]

    summary = SymbolMonthlyCalculator.build_symbol_summary("XYZ", options, dividends, positions)

    assert summary.options_gains == 300.0
    assert summary.cap_gains == 500.0
    assert summary.dividends_total == 25.0
    assert summary.total_profits == 825.0
    assert summary.total_invested == 4000.0 + 6000.0 + 100.0
    assert summary.cash_on_cash == pytest.approx(825.0 / 10100.0 * 100)


def test_symbol_summary_without_positions_has_zero_cash_on_cash():
    options = [_option("XYZ", "Put", date(2024, 1, 3), 1.5)]

    summary = SymbolMonthlyCalculator.build_symbol_summary("XYZ", options, [], [])

    assert summary.total_invested == 0.0
    assert summary.total_profits == 150.0
    assert summary.cash_on_cash == 0.0


def test_symbol_summary_lists_open_options_first():
    near = _option("XYZ", "Put", date(2024, 3, 1), 1.0)
    far = _option("XYZ", "Put", date(2024, 5, 1), 1.0)
    old_closed = _option("XYZ", "Call", date(2024, 1, 2), 1.0)
    new_closed = _option("XYZ", "Call", date(2024, 2, 2), 1.0)
    old_closed.closed = date(2024, 1, 20)
    new_closed.closed = date(2024, 2, 20)

    summary = SymbolMonthlyCalculator.build_symbol_summary(
        "XYZ", [old_closed, far, new_closed, near], [], []
    )

    assert summary.options == [near, far, new_closed, old_closed]
