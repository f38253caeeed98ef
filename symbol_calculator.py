"""
Per-symbol results: monthly buckets folded across years, and lifetime totals
"""
import logging
from typing import Iterable, List, Optional

from models import Dividend, LongPosition, Option, SymbolMonthlyResult, SymbolSummary

logger = logging.getLogger(__name__)

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


class SymbolMonthlyCalculator:
    """Seasonal view of one ticker's option income"""

    @staticmethod
    def build_symbol_monthly(options: Iterable[Option],
                             symbol: Optional[str] = None) -> List[SymbolMonthlyResult]:
        """
        Bucket options by the calendar month they were opened in.

        Args:
            options: Options for the symbol (or all options when symbol is given)
            symbol: If set, only options for this ticker are counted

        Returns:
            Twelve SymbolMonthlyResult entries, January first, empty months included
        """
        month_map = {name: SymbolMonthlyResult(month=name) for name in MONTH_NAMES}

        for option in options:
            if symbol and option.symbol != symbol:
                continue
            month_data = month_map[MONTH_NAMES[option.opened.month - 1]]
            profit = option.total_profit

            if option.option_type == "Put":
                month_data.puts_count += 1
                month_data.puts_total += profit
            elif option.option_type == "Call":
                month_data.calls_count += 1
                month_data.calls_total += profit
            else:
                logger.warning(f"Skipping {option.symbol} option with unknown type '{option.option_type}'")
                continue
            month_data.total = month_data.puts_total + month_data.calls_total

        results = [month_map[name] for name in MONTH_NAMES]
        active = sum(1 for r in results if r.puts_count or r.calls_count)
        logger.debug(f"Built monthly results for {symbol or 'all symbols'}: {active} active months")
        return results

    @staticmethod
    def sort_open_first(options: Iterable[Option]) -> List[Option]:
        """Open options by nearest expiration, then closed options newest expiration first"""
        options = list(options)
        open_options = sorted((o for o in options if o.is_open), key=lambda o: o.expiration)
        closed_options = sorted((o for o in options if not o.is_open),
                                key=lambda o: o.expiration, reverse=True)
        return open_options + closed_options

    @staticmethod
    def build_symbol_summary(symbol: str,
                             options: Iterable[Option],
                             dividends: Iterable[Dividend],
                             long_positions: Iterable[LongPosition]) -> SymbolSummary:
        """
        Lifetime totals for one ticker.

        Options gains count every option, open or closed. Cap gains count only
        closed positions with an exit price. Cash-on-cash divides total profits
        by the cost basis of every position, open and closed, and is 0 when
        nothing is invested.
        """
        symbol_options = [o for o in options if o.symbol == symbol]
        symbol_positions = [p for p in long_positions if p.symbol == symbol]

        summary = SymbolSummary(symbol=symbol)
        summary.options = SymbolMonthlyCalculator.sort_open_first(symbol_options)
        summary.options_gains = sum(o.total_profit for o in symbol_options)
        summary.cap_gains = sum(
            p.capital_gain for p in symbol_positions
            if p.closed is not None and p.exit_price is not None
        )
        summary.dividends_total = sum(d.amount for d in dividends if d.symbol == symbol)
        summary.total_profits = summary.options_gains + summary.cap_gains + summary.dividends_total
        summary.total_invested = sum(p.cost_basis for p in symbol_positions)

        if summary.total_invested > 0:
            summary.cash_on_cash = summary.total_profits / summary.total_invested * 100

        logger.debug(
            f"{symbol}: options {summary.options_gains:.2f}, cap gains {summary.cap_gains:.2f}, "
            f"dividends {summary.dividends_total:.2f}, cash on cash {summary.cash_on_cash:.2f}%"
        )
        return summary
