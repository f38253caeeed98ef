"""
Collateral Calculator - peak capital at risk per calendar month
Collateral = Put collateral (Strike × Contracts × 100) + Long position cost basis (BuyPrice × Shares)
"""
import logging
from dataclasses import dataclass
from datetime import date
from itertools import groupby
from typing import Iterable, List, Optional, Tuple

from models import LongPosition, Option
from month_keys import month_start, next_month_start

logger = logging.getLogger(__name__)


@dataclass
class CollateralEvent:
    """Collateral entering (+) or leaving (-) the book"""
    date: date
    delta: float


class CollateralCalculator:
    """Sweep-line computation of simultaneous collateral within a month"""

    @staticmethod
    def _intervals(options: Iterable[Option],
                   long_positions: Iterable[LongPosition]) -> Iterable[Tuple[date, Optional[date], float]]:
        """(opened, closed, collateral) for every record that ties up capital"""
        for option in options:
            if option.option_type != "Put":
                continue
            yield option.opened, option.closed, option.collateral
        for position in long_positions:
            yield position.opened, position.closed, position.cost_basis

    @staticmethod
    def collect_events(month: str,
                       options: Iterable[Option],
                       long_positions: Iterable[LongPosition]) -> Tuple[float, List[CollateralEvent]]:
        """
        Split records overlapping the month into carried-in collateral and in-month events.

        Args:
            month: YYYY-MM
            options: All options (calls are ignored)
            long_positions: All long positions, open and closed

        Returns:
            (initial_collateral, events) with events in emission order
        """
        start = month_start(month)
        end = next_month_start(month)  # exclusive

        initial_collateral = 0.0
        events: List[CollateralEvent] = []

        for opened, closed, collateral in CollateralCalculator._intervals(options, long_positions):
            # No overlap with this month
            if opened >= end:
                continue
            if closed is not None and closed < start:
                continue

            closes_in_month = closed is not None and closed < end
            if opened < start:
                initial_collateral += collateral
            else:
                events.append(CollateralEvent(opened, collateral))
            if closes_in_month:
                events.append(CollateralEvent(closed, -collateral))

        return initial_collateral, events

    @staticmethod
    def peak_collateral(month: str,
                        options: Iterable[Option],
                        long_positions: Iterable[LongPosition]) -> float:
        """
        Peak simultaneous collateral during a month.

        Events sharing a date are netted before the running total is compared,
        so a same-day close and re-open (a roll) counts once.

        Returns:
            Peak collateral (float), 0.0 for a month with nothing active
        """
        initial_collateral, events = CollateralCalculator.collect_events(
            month, options, long_positions
        )

        current = initial_collateral
        max_collateral = initial_collateral
        events.sort(key=lambda e: e.date)
        for event_date, day_events in groupby(events, key=lambda e: e.date):
            current += sum(e.delta for e in day_events)
            if current > max_collateral:
                max_collateral = current

        logger.debug(
            f"Collateral {month}: initial={initial_collateral:.2f}, "
            f"events={len(events)}, peak={max_collateral:.2f}"
        )
        return max_collateral
