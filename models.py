"""
Data models for wheel records and monthly analytics results
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Literal, Optional

from config import OPTION_CONTRACT_MULTIPLIER


@dataclass
class Option:
    """A single put or call, sold to open"""
    symbol: str
    option_type: Literal["Put", "Call"]
    opened: date
    strike: float
    expiration: date
    premium: float  # per share
    contracts: int
    closed: Optional[date] = None
    exit_price: Optional[float] = None  # per share, paid to close
    commission: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.closed is None

    @property
    def exit_price_value(self) -> float:
        return self.exit_price if self.exit_price is not None else 0.0

    @property
    def total_profit(self) -> float:
        """Realized P&L: premium received less cost to close and commission"""
        return (
            (self.premium - self.exit_price_value) * self.contracts * OPTION_CONTRACT_MULTIPLIER
            - self.commission
        )

    @property
    def collateral(self) -> float:
        """Cash reserved to secure the position (puts only)"""
        if self.option_type != "Put":
            return 0.0
        return self.strike * self.contracts * OPTION_CONTRACT_MULTIPLIER


@dataclass
class Dividend:
    """Dividend payment received"""
    symbol: str
    received: date
    amount: float


@dataclass
class LongPosition:
    """Long stock position"""
    symbol: str
    opened: date
    shares: int
    buy_price: float
    closed: Optional[date] = None
    exit_price: Optional[float] = None

    @property
    def is_open(self) -> bool:
        return self.closed is None

    @property
    def exit_price_value(self) -> float:
        return self.exit_price if self.exit_price is not None else 0.0

    @property
    def cost_basis(self) -> float:
        return self.buy_price * self.shares

    @property
    def capital_gain(self) -> float:
        """Realized gain, meaningful only once the position is closed"""
        return (self.exit_price_value - self.buy_price) * self.shares


# ============================================================
# ANALYTICS RESULTS
# ============================================================

@dataclass
class MonthAmount:
    month: str  # YYYY-MM
    amount: float


@dataclass
class TickerAmount:
    ticker: str
    amount: float


@dataclass
class CategorySeries:
    """One income category (puts, calls, cap gains, dividends) by month and by ticker"""
    by_month: List[MonthAmount] = field(default_factory=list)
    by_ticker: List[TickerAmount] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(m.amount for m in self.by_month)


@dataclass
class MonthlyTableRow:
    """Row of the ticker x month table"""
    ticker: str
    total: float
    month_values: Dict[str, float]  # YYYY-MM -> amount


@dataclass
class MonthlyAggregate:
    """Everything the monthly page renders"""
    symbols: List[str] = field(default_factory=list)
    months: List[str] = field(default_factory=list)
    month_labels: List[str] = field(default_factory=list)
    puts: CategorySeries = field(default_factory=CategorySeries)
    calls: CategorySeries = field(default_factory=CategorySeries)
    cap_gains: CategorySeries = field(default_factory=CategorySeries)
    dividends: CategorySeries = field(default_factory=CategorySeries)
    table_rows: List[MonthlyTableRow] = field(default_factory=list)
    table_totals_by_month: Dict[str, float] = field(default_factory=dict)
    totals_by_month: List[MonthAmount] = field(default_factory=list)
    collateral_by_month: List[MonthAmount] = field(default_factory=list)
    apr_by_month: List[MonthAmount] = field(default_factory=list)
    grand_total: float = 0.0
    from_month: str = ""
    to_month: str = ""


@dataclass
class SymbolMonthlyResult:
    """Calendar-month bucket (all years folded together) for one ticker"""
    month: str  # "January" ... "December"
    puts_count: int = 0
    calls_count: int = 0
    puts_total: float = 0.0
    calls_total: float = 0.0
    total: float = 0.0


@dataclass
class SymbolSummary:
    """Lifetime totals for one ticker"""
    symbol: str
    options_gains: float = 0.0
    cap_gains: float = 0.0
    dividends_total: float = 0.0
    total_profits: float = 0.0
    total_invested: float = 0.0
    cash_on_cash: float = 0.0  # percent of total invested
    options: List[Option] = field(default_factory=list)  # open first


class RecordValidator:
    """Validates records before they reach the calculators"""

    @staticmethod
    def validate_option(option: Option) -> tuple[bool, str]:
        if option.option_type not in ("Put", "Call"):
            return False, f"Unknown option type '{option.option_type}' for {option.symbol}"
        if option.contracts <= 0:
            return False, f"Contracts must be positive for {option.symbol} (got {option.contracts})"
        if option.strike <= 0:
            return False, f"Strike must be positive for {option.symbol} (got {option.strike})"
        if option.closed is not None and option.closed < option.opened:
            return False, f"{option.symbol} option closed {option.closed} before it opened {option.opened}"
        return True, "OK"

    @staticmethod
    def validate_dividend(dividend: Dividend) -> tuple[bool, str]:
        if not dividend.symbol:
            return False, "Dividend has no symbol"
        return True, "OK"

    @staticmethod
    def validate_long_position(position: LongPosition) -> tuple[bool, str]:
        if position.shares <= 0:
            return False, f"Shares must be positive for {position.symbol} (got {position.shares})"
        if position.buy_price < 0:
            return False, f"Buy price cannot be negative for {position.symbol}"
        if position.closed is not None and position.closed < position.opened:
            return False, f"{position.symbol} position closed {position.closed} before it opened {position.opened}"
        return True, "OK"
