"""
Excel read/write operations for the wheel workbook
Sheets: Options, Dividends, Long Positions
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import openpyxl
import pandas as pd

from config import EXCEL_PATH, OPTIONS_SHEET, DIVIDENDS_SHEET, LONG_POSITIONS_SHEET
from data_access import DataAccess
from data_schema import SCHEMA, validate_schema
from models import Dividend, LongPosition, Option
from persistence import get_default_commission

logger = logging.getLogger(__name__)


class ExcelHandler:
    """Record provider backed by the wheel workbook"""

    def __init__(self, excel_path: str = EXCEL_PATH):
        self.excel_path = Path(excel_path)

        if not self.excel_path.exists():
            raise FileNotFoundError(f"Excel file not found: {self.excel_path}")

        # sheet name -> (file mtime when read, frame)
        self._sheet_cache: Dict[str, Tuple[float, pd.DataFrame]] = {}

    def read_sheet(self, sheet_name: str) -> pd.DataFrame:
        """
        Read one sheet, reusing the parsed frame until the workbook changes on disk

        Returns:
            DataFrame with the sheet's rows
        """
        mtime = self.excel_path.stat().st_mtime
        cached = self._sheet_cache.get(sheet_name)
        if cached is not None and cached[0] == mtime:
            return cached[1]

        try:
            df = pd.read_excel(self.excel_path, sheet_name=sheet_name, engine='openpyxl')
        except Exception as e:
            logger.error(f"Error reading {sheet_name}: {e}")
            raise

        schema_check = validate_schema(df, sheet_name)
        if not schema_check['valid']:
            logger.warning(f"{sheet_name} is missing columns: {schema_check['missing_fields']}")
        logger.info(f"Loaded {len(df)} rows from {sheet_name}")
        self._sheet_cache[sheet_name] = (mtime, df)
        return df

    def list_options(self) -> List[Option]:
        return DataAccess.options_from_frame(
            self.read_sheet(OPTIONS_SHEET), default_commission=get_default_commission()
        )

    def list_dividends(self) -> List[Dividend]:
        return DataAccess.dividends_from_frame(self.read_sheet(DIVIDENDS_SHEET))

    def list_long_positions(self) -> List[LongPosition]:
        """All long positions, open and closed"""
        return DataAccess.long_positions_from_frame(self.read_sheet(LONG_POSITIONS_SHEET))

    def list_closed_long_positions(self) -> List[LongPosition]:
        return [p for p in self.list_long_positions() if p.closed is not None]

    def list_symbols(self) -> List[str]:
        """Distinct tickers across all sheets, sorted"""
        symbols = set()
        for sheet_name in (OPTIONS_SHEET, DIVIDENDS_SHEET, LONG_POSITIONS_SHEET):
            column = SCHEMA[sheet_name]['symbol']
            df = self.read_sheet(sheet_name)
            if column in df.columns:
                symbols.update(df[column].dropna().astype(str).str.strip().str.upper())
        symbols.discard('')
        return sorted(symbols)

    def load_all_records(self) -> Dict[str, list]:
        """
        Load all sheets at once

        Returns:
            dict with 'options', 'dividends', 'long_positions' record lists
        """
        return {
            'options': self.list_options(),
            'dividends': self.list_dividends(),
            'long_positions': self.list_long_positions()
        }

    @staticmethod
    def create_workbook(excel_path: str,
                        rows_by_sheet: Optional[Dict[str, List[dict]]] = None) -> Path:
        """
        Create a workbook with every sheet's header row, plus optional data rows.

        Args:
            excel_path: Destination .xlsx
            rows_by_sheet: sheet name -> list of {column: value} dicts

        Returns:
            Path to the workbook
        """
        rows_by_sheet = rows_by_sheet or {}
        path = Path(excel_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        for sheet_name, fields in SCHEMA.items():
            ws = wb.create_sheet(sheet_name)
            columns = list(fields.values())
            ws.append(columns)
            for row in rows_by_sheet.get(sheet_name, []):
                ws.append([row.get(col) for col in columns])

        wb.save(path)
        wb.close()
        logger.info(f"Created workbook: {path}")
        return path
