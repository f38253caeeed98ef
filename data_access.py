"""
Unified Data Access Layer
Turns workbook DataFrames into typed records with proper field interpretation
"""

import logging
from datetime import date
from typing import List, Optional

import pandas as pd

from config import OPTIONS_SHEET, DIVIDENDS_SHEET, LONG_POSITIONS_SHEET
from data_schema import get_field_name
from models import Dividend, LongPosition, Option, RecordValidator

logger = logging.getLogger(__name__)


class DataAccess:
    """Unified data access layer with consistent field mapping"""

    @staticmethod
    def get_field(row: pd.Series, logical_name: str, sheet: str, default=None):
        """
        Get a field value from a row using its logical name

        Returns:
            Field value, or default if the column is missing or the cell is blank
        """
        column = get_field_name(logical_name, sheet)
        if column not in row.index:
            return default
        value = row[column]
        if pd.isna(value):
            return default
        if isinstance(value, str) and not value.strip():
            return default
        return value

    @staticmethod
    def get_date(row: pd.Series, logical_name: str, sheet: str) -> Optional[date]:
        """Date field as datetime.date, None when blank; raises ValueError if unparseable"""
        value = DataAccess.get_field(row, logical_name, sheet)
        if value is None:
            return None
        return pd.to_datetime(value).date()

    @staticmethod
    def get_float(row: pd.Series, logical_name: str, sheet: str,
                  default: Optional[float] = None) -> Optional[float]:
        value = DataAccess.get_field(row, logical_name, sheet)
        if value is None:
            return default
        return float(value)

    @staticmethod
    def _require(value, logical_name: str):
        if value is None:
            raise ValueError(f"missing {logical_name}")
        return value

    @staticmethod
    def options_from_frame(df: pd.DataFrame, default_commission: float = 0.0) -> List[Option]:
        """
        Convert the Options sheet into Option records.
        Malformed rows are logged and skipped.
        """
        options = []
        if df is None or df.empty:
            return options

        sheet = OPTIONS_SHEET
        for idx, row in df.iterrows():
            try:
                option_type = str(DataAccess._require(
                    DataAccess.get_field(row, 'option_type', sheet), 'option_type')).strip().capitalize()
                option = Option(
                    symbol=str(DataAccess._require(DataAccess.get_field(row, 'symbol', sheet), 'symbol')).strip().upper(),
                    option_type=option_type,
                    opened=DataAccess._require(DataAccess.get_date(row, 'opened', sheet), 'opened'),
                    closed=DataAccess.get_date(row, 'closed', sheet),
                    strike=DataAccess._require(DataAccess.get_float(row, 'strike', sheet), 'strike'),
                    expiration=DataAccess._require(DataAccess.get_date(row, 'expiration', sheet), 'expiration'),
                    premium=DataAccess._require(DataAccess.get_float(row, 'premium', sheet), 'premium'),
                    contracts=int(DataAccess._require(DataAccess.get_float(row, 'contracts', sheet), 'contracts')),
                    exit_price=DataAccess.get_float(row, 'exit_price', sheet),
                    commission=DataAccess.get_float(row, 'commission', sheet, default_commission),
                )
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping option row {idx}: {e}")
                continue

            valid, message = RecordValidator.validate_option(option)
            if not valid:
                logger.warning(f"Skipping option row {idx}: {message}")
                continue
            options.append(option)

        return options

    @staticmethod
    def dividends_from_frame(df: pd.DataFrame) -> List[Dividend]:
        """Convert the Dividends sheet into Dividend records"""
        dividends = []
        if df is None or df.empty:
            return dividends

        sheet = DIVIDENDS_SHEET
        for idx, row in df.iterrows():
            try:
                dividend = Dividend(
                    symbol=str(DataAccess._require(DataAccess.get_field(row, 'symbol', sheet), 'symbol')).strip().upper(),
                    received=DataAccess._require(DataAccess.get_date(row, 'received', sheet), 'received'),
                    amount=DataAccess._require(DataAccess.get_float(row, 'amount', sheet), 'amount'),
                )
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping dividend row {idx}: {e}")
                continue

            valid, message = RecordValidator.validate_dividend(dividend)
            if not valid:
                logger.warning(f"Skipping dividend row {idx}: {message}")
                continue
            dividends.append(dividend)

        return dividends

    @staticmethod
    def long_positions_from_frame(df: pd.DataFrame) -> List[LongPosition]:
        """Convert the Long Positions sheet into LongPosition records"""
        positions = []
        if df is None or df.empty:
            return positions

        sheet = LONG_POSITIONS_SHEET
        for idx, row in df.iterrows():
            try:
                position = LongPosition(
                    symbol=str(DataAccess._require(DataAccess.get_field(row, 'symbol', sheet), 'symbol')).strip().upper(),
                    opened=DataAccess._require(DataAccess.get_date(row, 'opened', sheet), 'opened'),
                    closed=DataAccess.get_date(row, 'closed', sheet),
                    shares=int(DataAccess._require(DataAccess.get_float(row, 'shares', sheet), 'shares')),
                    buy_price=DataAccess._require(DataAccess.get_float(row, 'buy_price', sheet), 'buy_price'),
                    exit_price=DataAccess.get_float(row, 'exit_price', sheet),
                )
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping long position row {idx}: {e}")
                continue

            valid, message = RecordValidator.validate_long_position(position)
            if not valid:
                logger.warning(f"Skipping long position row {idx}: {message}")
                continue
            positions.append(position)

        return positions
