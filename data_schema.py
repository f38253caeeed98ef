"""
Data Schema Definition - Single Source of Truth
Maps logical field names to actual workbook column names, per sheet
"""

from typing import Dict, Optional
import pandas as pd

from config import OPTIONS_SHEET, DIVIDENDS_SHEET, LONG_POSITIONS_SHEET

# Schema version for migration tracking
SCHEMA_VERSION = "2.0.0"

# Field mappings: sheet -> logical_name -> excel_column_name
SCHEMA = {
    OPTIONS_SHEET: {
        'symbol': 'Symbol',
        'option_type': 'Type',
        'opened': 'Opened',
        'closed': 'Closed',
        'strike': 'Strike',
        'expiration': 'Expiration',
        'premium': 'Premium',
        'contracts': 'Contracts',
        'exit_price': 'Exit_Price',
        'commission': 'Commission'
    },
    DIVIDENDS_SHEET: {
        'symbol': 'Symbol',
        'received': 'Received',
        'amount': 'Amount'
    },
    LONG_POSITIONS_SHEET: {
        'symbol': 'Symbol',
        'opened': 'Opened',
        'closed': 'Closed',
        'shares': 'Shares',
        'buy_price': 'Buy_Price',
        'exit_price': 'Exit_Price'
    }
}

# Columns that may be blank in the workbook
OPTIONAL_FIELDS = {
    OPTIONS_SHEET: {'closed', 'exit_price', 'commission'},
    DIVIDENDS_SHEET: set(),
    LONG_POSITIONS_SHEET: {'closed', 'exit_price'}
}


def get_field_name(logical_name: str, sheet: Optional[str] = None) -> str:
    """
    Get workbook column name from logical field name

    Args:
        logical_name: Logical field name (e.g., 'buy_price')
        sheet: Optional sheet name ('Options', 'Dividends', 'Long Positions')

    Returns:
        Workbook column name (e.g., 'Buy_Price')
    """
    if sheet:
        return SCHEMA.get(sheet, {}).get(logical_name, logical_name)

    # Search all sheets
    for sheet_schema in SCHEMA.values():
        if logical_name in sheet_schema:
            return sheet_schema[logical_name]

    return logical_name


def validate_schema(df: pd.DataFrame, sheet: str) -> Dict[str, any]:
    """
    Validate DataFrame against the sheet schema

    Returns:
        dict with 'valid': bool, 'missing_fields': list, 'extra_fields': list
    """
    sheet_schema = SCHEMA.get(sheet, {})
    optional = OPTIONAL_FIELDS.get(sheet, set())
    required_fields = [col for logical, col in sheet_schema.items() if logical not in optional]

    missing_fields = [f for f in required_fields if f not in df.columns]
    extra_fields = [f for f in df.columns if f not in sheet_schema.values()]

    return {
        'valid': len(missing_fields) == 0,
        'missing_fields': missing_fields,
        'extra_fields': extra_fields,
        'schema_version': SCHEMA_VERSION
    }
