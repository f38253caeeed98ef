"""
Monthly Calculator - income by month, by ticker and by ticker x month
Puts, calls, capital gains and dividends bucketed on their transaction dates,
plus peak collateral and annualized APR per month.
"""
import logging
from typing import Dict, List, Optional

import pandas as pd

from collateral_calculator import CollateralCalculator
from config import DEFAULT_LOOKBACK_MONTHS, MONTHS_PER_YEAR
from models import (
    CategorySeries,
    Dividend,
    LongPosition,
    MonthAmount,
    MonthlyAggregate,
    MonthlyTableRow,
    Option,
    TickerAmount,
)
from month_keys import default_month_range, in_range, month_key, month_label

logger = logging.getLogger(__name__)

PUTS = 'puts'
CALLS = 'calls'
CAP_GAINS = 'cap_gains'
DIVIDENDS = 'dividends'
CATEGORIES = [PUTS, CALLS, CAP_GAINS, DIVIDENDS]

OPTION_CATEGORY = {'Put': PUTS, 'Call': CALLS}


def calculate_apr(options_premium: float, max_collateral: float) -> float:
    """Annualized return on collateral; 0 when nothing was at risk"""
    if max_collateral > 0:
        return (options_premium / max_collateral) * MONTHS_PER_YEAR * 100
    return 0.0


class MonthlyCalculator:
    """Builds the monthly performance view from raw records"""

    @staticmethod
    def _contributions(options: List[Option],
                       dividends: List[Dividend],
                       long_positions: List[LongPosition],
                       from_month: Optional[str],
                       to_month: Optional[str]) -> pd.DataFrame:
        """
        One row per record that lands inside the month range.

        Columns: ticker, month, category, amount
        """
        rows = []

        # Options: full P&L attributed to the open month (premium realized at open)
        for option in options:
            category = OPTION_CATEGORY.get(option.option_type)
            if category is None:
                logger.warning(f"Skipping {option.symbol} option with unknown type '{option.option_type}'")
                continue
            ym = month_key(option.opened)
            if not in_range(ym, from_month, to_month):
                continue
            rows.append({'ticker': option.symbol, 'month': ym,
                         'category': category, 'amount': option.total_profit})

        # Dividends: received date
        for dividend in dividends:
            ym = month_key(dividend.received)
            if not in_range(ym, from_month, to_month):
                continue
            rows.append({'ticker': dividend.symbol, 'month': ym,
                         'category': DIVIDENDS, 'amount': dividend.amount})

        # Capital gains: realized only, on the close date
        for position in long_positions:
            if position.closed is None:
                continue
            ym = month_key(position.closed)
            if not in_range(ym, from_month, to_month):
                continue
            rows.append({'ticker': position.symbol, 'month': ym,
                         'category': CAP_GAINS, 'amount': position.capital_gain})

        return pd.DataFrame(rows, columns=['ticker', 'month', 'category', 'amount'])

    @staticmethod
    def _ticker_series(df: pd.DataFrame, category: str) -> List[TickerAmount]:
        """Per-ticker totals for one category, zero totals dropped, sorted by ticker"""
        totals = df[df['category'] == category].groupby('ticker')['amount'].sum()
        return [
            TickerAmount(ticker=ticker, amount=float(amount))
            for ticker, amount in totals.sort_index().items()
            if amount != 0
        ]

    @staticmethod
    def build_monthly_aggregate(symbols: List[str],
                                options: List[Option],
                                dividends: List[Dividend],
                                long_positions: List[LongPosition],
                                from_month: Optional[str] = None,
                                to_month: Optional[str] = None) -> MonthlyAggregate:
        """
        Aggregate records into the monthly view.

        Args:
            symbols: Ticker list passed through for navigation
            options: All options, open and closed
            dividends: All dividends
            long_positions: All long positions; open ones only count toward
                collateral, closed ones also toward capital gains
            from_month: Inclusive lower bound (YYYY-MM), None/"" for unbounded
            to_month: Inclusive upper bound (YYYY-MM), None/"" for unbounded

        Returns:
            MonthlyAggregate. Empty input gives empty series and zero totals.
        """
        from_month = from_month or ""
        to_month = to_month or ""

        df = MonthlyCalculator._contributions(options, dividends, long_positions, from_month, to_month)

        if df.empty:
            logger.info(f"No records between '{from_month}' and '{to_month}'")
            return MonthlyAggregate(symbols=list(symbols), from_month=from_month, to_month=to_month)

        year_months = sorted(df['month'].unique())

        # Month x category, missing combinations are zero
        by_month = (
            df.groupby(['month', 'category'])['amount'].sum()
            .unstack('category')
            .reindex(index=year_months, columns=CATEGORIES)
            .fillna(0.0)
        )

        series: Dict[str, CategorySeries] = {}
        for category in CATEGORIES:
            series[category] = CategorySeries(
                by_month=[MonthAmount(ym, float(by_month.at[ym, category])) for ym in year_months],
                by_ticker=MonthlyCalculator._ticker_series(df, category),
            )

        # Ticker x month table (all categories combined)
        cells = df.groupby(['ticker', 'month'])['amount'].sum()
        ticker_month_data: Dict[str, Dict[str, float]] = {}
        for (ticker, ym), amount in cells.items():
            ticker_month_data.setdefault(ticker, {})[ym] = float(amount)

        table_rows = []
        table_totals_by_month: Dict[str, float] = {}
        grand_total = 0.0
        for ticker in sorted(ticker_month_data):
            month_values = ticker_month_data[ticker]
            total = sum(month_values.values())
            for ym, amount in month_values.items():
                table_totals_by_month[ym] = table_totals_by_month.get(ym, 0.0) + amount
                grand_total += amount
            if total != 0:
                table_rows.append(MonthlyTableRow(ticker=ticker, total=total, month_values=month_values))

        totals_by_month = [
            MonthAmount(ym, float(by_month.loc[ym, CATEGORIES].sum())) for ym in year_months
        ]

        # Collateral and APR
        collateral_by_month = []
        apr_by_month = []
        for ym in year_months:
            max_collateral = CollateralCalculator.peak_collateral(ym, options, long_positions)
            options_premium = float(by_month.at[ym, PUTS] + by_month.at[ym, CALLS])
            collateral_by_month.append(MonthAmount(ym, max_collateral))
            apr_by_month.append(MonthAmount(ym, calculate_apr(options_premium, max_collateral)))

        logger.info(
            f"Built monthly data: {len(year_months)} months, {len(table_rows)} tickers, "
            f"grand total {grand_total:.2f}"
        )

        return MonthlyAggregate(
            symbols=list(symbols),
            months=year_months,
            month_labels=[month_label(ym) for ym in year_months],
            puts=series[PUTS],
            calls=series[CALLS],
            cap_gains=series[CAP_GAINS],
            dividends=series[DIVIDENDS],
            table_rows=table_rows,
            table_totals_by_month=table_totals_by_month,
            totals_by_month=totals_by_month,
            collateral_by_month=collateral_by_month,
            apr_by_month=apr_by_month,
            grand_total=grand_total,
            from_month=from_month,
            to_month=to_month,
        )


def load_monthly_aggregate(provider,
                           from_month: Optional[str] = None,
                           to_month: Optional[str] = None,
                           lookback_months: Optional[int] = None) -> MonthlyAggregate:
    """
    Fetch records from a provider and build the monthly view.

    With neither bound given the trailing lookback window (12 months by
    default) ending at the current month is used. A source that fails to
    load is treated as empty.
    """
    if not from_month and not to_month:
        from_month, to_month = default_month_range(months=lookback_months or DEFAULT_LOOKBACK_MONTHS)

    def _fetch(name: str, loader) -> list:
        try:
            return loader()
        except Exception as e:
            logger.warning(f"Could not load {name}, using empty list: {e}")
            return []

    symbols = _fetch('symbols', provider.list_symbols)
    options = _fetch('options', provider.list_options)
    dividends = _fetch('dividends', provider.list_dividends)
    long_positions = _fetch('long positions', provider.list_long_positions)

    return MonthlyCalculator.build_monthly_aggregate(
        symbols, options, dividends, long_positions, from_month, to_month
    )
