from datetime import date

import pytest

from models import Dividend, LongPosition, Option
from monthly_calculator import MonthlyCalculator, calculate_apr, load_monthly_aggregate


def _option(symbol, option_type, opened, premium, contracts=1, strike=100.0,
            closed=None, exit_price=None, commission=0.0):
    return Option(
        symbol=symbol,
        option_type=option_type,
        opened=opened,
        closed=closed,
        strike=strike,
        expiration=date(opened.year, opened.month, 28),
        premium=premium,
        contracts=contracts,
        exit_price=exit_price,
        commission=commission,
    )


@pytest.fixture
def records():
    options = [
        _option("XYZ", "Put", date(2024, 1, 10), 2.5, contracts=2, closed=date(2024, 1, 25)),   # +500
        _option("XYZ", "Call", date(2024, 2, 5), 1.0, strike=110.0),                            # +100
        _option("ABC", "Put", date(2024, 2, 12), 1.5, strike=40.0, closed=date(2024, 2, 20),
                exit_price=0.5),                                                                 # +100
        _option("ABC", "Call", date(2024, 3, 1), 0.75, commission=1.0),                         # +74
    ]
    dividends = [
        Dividend(symbol="ABC", received=date(2024, 2, 15), amount=25.0),
        Dividend(symbol="KO", received=date(2024, 3, 31), amount=12.5),
    ]
    long_positions = [
        LongPosition(symbol="ABC", opened=date(2023, 6, 1), shares=100, buy_price=50.0),
        LongPosition(symbol="XYZ", opened=date(2024, 1, 26), shares=100, buy_price=90.0,
                     closed=date(2024, 3, 15), exit_price=95.0),                                 # +500
    ]
    return options, dividends, long_positions


def test_single_put_scenario():
    put = _option("XYZ", "Put", date(2024, 1, 10), 2.5, contracts=2, closed=date(2024, 1, 25))

    data = MonthlyCalculator.build_monthly_aggregate(["XYZ"], [put], [], [], "2024-01", "2024-01")

    assert data.months == ["2024-01"]
    assert data.puts.by_month[0].amount == 500.0
    assert data.collateral_by_month[0].amount == 20000.0
    assert data.apr_by_month[0].amount == pytest.approx(30.0)


def test_empty_records_give_empty_aggregate():
    data = MonthlyCalculator.build_monthly_aggregate([], [], [], [], "2024-01", "2024-12")

    assert data.grand_total == 0
    assert data.months == []
    assert data.table_rows == []
    assert data.collateral_by_month == []
    assert data.puts.by_ticker == []


def test_category_series(records):
    options, dividends, long_positions = records
    data = MonthlyCalculator.build_monthly_aggregate([], options, dividends, long_positions)

    assert data.months == ["2024-01", "2024-02", "2024-03"]
    assert data.month_labels == ["2024 Jan", "2024 Feb", "2024 Mar"]
    assert [m.amount for m in data.puts.by_month] == [500.0, 100.0, 0.0]
    assert [m.amount for m in data.calls.by_month] == [0.0, 100.0, 74.0]
    assert [m.amount for m in data.dividends.by_month] == [0.0, 25.0, 12.5]
    assert [m.amount for m in data.cap_gains.by_month] == [0.0, 0.0, 500.0]
    assert [(t.ticker, t.amount) for t in data.puts.by_ticker] == [("ABC", 100.0), ("XYZ", 500.0)]
    assert [(t.ticker, t.amount) for t in data.cap_gains.by_ticker] == [("XYZ", 500.0)]


def test_matrix_is_additive(records):
    options, dividends, long_positions = records
    data = MonthlyCalculator.build_monthly_aggregate([], options, dividends, long_positions)

    cell_sum = sum(v for row in data.table_rows for v in row.month_values.values())
    assert cell_sum == pytest.approx(data.grand_total)

    category_sum = sum(s.total for s in (data.puts, data.calls, data.cap_gains, data.dividends))
    assert category_sum == pytest.approx(data.grand_total)

    for total in data.totals_by_month:
        column = sum(row.month_values.get(total.month, 0.0) for row in data.table_rows)
        assert column == pytest.approx(total.amount)
        assert data.table_totals_by_month[total.month] == pytest.approx(total.amount)

    assert [row.ticker for row in data.table_rows] == ["ABC", "KO", "XYZ"]
    xyz = data.table_rows[2]
    assert xyz.month_values == {"2024-01": 500.0, "2024-02": 100.0, "2024-03": 500.0}
    assert xyz.total == 1100.0


def test_range_bounds_are_inclusive(records):
    options, dividends, long_positions = records
    data = MonthlyCalculator.build_monthly_aggregate([], options, dividends, long_positions,
                                                     "2024-02", "2024-02")

    assert data.months == ["2024-02"]
    assert data.grand_total == pytest.approx(225.0)
    assert [row.ticker for row in data.table_rows] == ["ABC", "XYZ"]
    assert data.cap_gains.by_ticker == []
    assert data.from_month == "2024-02"
    assert data.to_month == "2024-02"


def test_open_long_position_has_no_cap_gain_but_holds_collateral(records):
    options, dividends, long_positions = records
    data = MonthlyCalculator.build_monthly_aggregate([], options, dividends, long_positions,
                                                     "2024-01", "2024-01")

    # ABC shares (5000) carried in, XYZ put 20000 from Jan 10, XYZ shares 9000 from Jan 26
    # after the put closed on Jan 25
    assert data.cap_gains.by_month[0].amount == 0.0
    assert data.collateral_by_month[0].amount == 25000.0
    assert data.apr_by_month[0].amount == pytest.approx(500.0 / 25000.0 * 12 * 100)


def test_zero_collateral_gives_zero_apr():
    call = _option("XYZ", "Call", date(2024, 5, 3), 1.0)
    data = MonthlyCalculator.build_monthly_aggregate([], [call], [], [])

    assert data.collateral_by_month[0].amount == 0.0
    assert data.apr_by_month[0].amount == 0.0
    assert calculate_apr(250.0, 0.0) == 0.0


def test_option_profit_is_booked_in_open_month():
    put = _option("XYZ", "Put", date(2024, 1, 30), 1.0, closed=date(2024, 2, 5))
    data = MonthlyCalculator.build_monthly_aggregate([], [put], [], [])

    assert data.months == ["2024-01"]
    assert data.puts.by_month[0].amount == 100.0


def test_same_day_put_counts_premium_but_holds_no_collateral():
    put = _option("XYZ", "Put", date(2024, 6, 12), 1.0, closed=date(2024, 6, 12))
    data = MonthlyCalculator.build_monthly_aggregate([], [put], [], [])

    assert data.puts.total == 100.0
    assert data.collateral_by_month[0].amount == 0.0
    assert data.apr_by_month[0].amount == 0.0


def test_zero_total_rows_are_dropped():
    win = _option("ZZZ", "Put", date(2024, 4, 2), 1.0)
    loss = _option("ZZZ", "Put", date(2024, 5, 2), 1.0, exit_price=2.0)     # -100
    gain = _option("ZZZ", "Put", date(2024, 5, 9), 0.0)                      # 0
    data = MonthlyCalculator.build_monthly_aggregate([], [win, loss, gain], [], [])

    assert data.table_rows == []
    assert data.puts.by_ticker == []
    assert data.months == ["2024-04", "2024-05"]
    assert data.grand_total == 0.0


def test_closed_position_without_exit_price_loses_cost_basis():
    position = LongPosition(symbol="BAD", opened=date(2024, 1, 2), shares=10, buy_price=20.0,
                            closed=date(2024, 2, 2))
    data = MonthlyCalculator.build_monthly_aggregate([], [], [], [position])
    assert data.cap_gains.by_month[0].amount == -200.0


class _Provider:
    def __init__(self, options=None, fail=()):
        self._options = options or []
        self._fail = set(fail)

    def _maybe_fail(self, name, value):
        if name in self._fail:
            raise OSError(f"{name} unavailable")
        return value

    def list_symbols(self):
        return self._maybe_fail('symbols', ["XYZ"])

    def list_options(self):
        return self._maybe_fail('options', self._options)

    def list_dividends(self):
        return self._maybe_fail('dividends', [Dividend("KO", date(2024, 1, 5), 10.0)])

    def list_long_positions(self):
        return self._maybe_fail('long_positions', [])


def test_load_substitutes_empty_list_for_failed_source():
    put = _option("XYZ", "Put", date(2024, 1, 10), 2.5, contracts=2)
    provider = _Provider(options=[put], fail={'dividends'})

    data = load_monthly_aggregate(provider, "2024-01", "2024-12")

    assert data.symbols == ["XYZ"]
    assert data.dividends.by_ticker == []
    assert data.grand_total == 500.0


def test_load_with_every_source_failing_is_empty():
    provider = _Provider(fail={'symbols', 'options', 'dividends', 'long_positions'})
    data = load_monthly_aggregate(provider, "2024-01", "2024-12")
    assert data.months == []
    assert data.grand_total == 0


def test_load_defaults_to_trailing_window(monkeypatch):
    monkeypatch.setattr("monthly_calculator.default_month_range",
                        lambda months=12: ("2023-02", "2024-01"))
    old = _option("XYZ", "Put", date(2022, 6, 1), 1.0)
    recent = _option("XYZ", "Put", date(2024, 1, 3), 1.0)

    data = load_monthly_aggregate(_Provider(options=[old, recent]))

    assert data.from_month == "2023-02"
    assert data.to_month == "2024-01"
    assert data.months == ["2024-01"]


def test_load_single_bound_leaves_other_side_open():
    old = _option("XYZ", "Put", date(2019, 6, 1), 1.0)
    data = load_monthly_aggregate(_Provider(options=[old]), to_month="2020-01")
    assert data.months == ["2019-06"]
