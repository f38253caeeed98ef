"""
Month key helpers

Month keys are zero-padded "YYYY-MM" strings, so plain string comparison
orders them chronologically.
"""
import re
from datetime import date
from typing import Optional, Tuple

import pandas as pd

from config import DEFAULT_LOOKBACK_MONTHS

MONTH_KEY_PATTERN = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


def month_key(d: date) -> str:
    """Format a date as YYYY-MM"""
    return f"{d.year:04d}-{d.month:02d}"


def in_range(key: str, from_month: Optional[str] = None, to_month: Optional[str] = None) -> bool:
    """
    True if from_month <= key <= to_month.
    An empty or None bound leaves that side open.
    """
    if from_month and key < from_month:
        return False
    if to_month and key > to_month:
        return False
    return True


def is_valid_month_key(key: str) -> bool:
    return bool(key) and MONTH_KEY_PATTERN.match(key) is not None


def month_start(key: str) -> date:
    """First day of the month"""
    return pd.Period(key, freq='M').start_time.date()


def next_month_start(key: str) -> date:
    """First day of the following month (exclusive end of the month)"""
    return (pd.Period(key, freq='M') + 1).start_time.date()


def month_label(key: str) -> str:
    """'2025-01' -> '2025 Jan'"""
    return month_start(key).strftime("%Y %b")


def default_month_range(today: Optional[date] = None,
                        months: int = DEFAULT_LOOKBACK_MONTHS) -> Tuple[str, str]:
    """Trailing window ending at the current month, e.g. 12 months -> (2024-11, 2025-10)"""
    if today is None:
        today = date.today()
    current = pd.Period(year=today.year, month=today.month, freq='M')
    first = current - (months - 1)
    return first.strftime('%Y-%m'), current.strftime('%Y-%m')
