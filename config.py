"""
Configuration for Wheel Monthly Analytics
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Paths
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"
LOGS_DIR = BASE_DIR / "logs"

load_dotenv(BASE_DIR / ".env")

# Excel workbook holding options, dividends and long positions
EXCEL_PATH = os.getenv("WHEEL_DATA_FILE", str(DATA_DIR / "wheel_data.xlsx"))

# User config (default commission, lookback window, ...)
SETTINGS_PATH = Path(os.getenv("WHEEL_SETTINGS_FILE", str(DATA_DIR / "user_settings.json")))

# Workbook sheet names
OPTIONS_SHEET = "Options"
DIVIDENDS_SHEET = "Dividends"
LONG_POSITIONS_SHEET = "Long Positions"

# Calculation constants
OPTION_CONTRACT_MULTIPLIER = 100  # 1 contract = 100 shares
MONTHS_PER_YEAR = 12
DEFAULT_LOOKBACK_MONTHS = 12  # current month + preceding 11

# Logging
LOG_LEVEL = os.getenv("WHEEL_LOG_LEVEL", "INFO")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str = LOG_LEVEL):
    """Log to logs/wheel_analytics.log and stderr"""
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(LOGS_DIR / 'wheel_analytics.log'),
            logging.StreamHandler()
        ]
    )
