"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum


class TransactionType(str, Enum):
    """Closed set of transaction kinds recognised by the balance calculator"""

    INCOME = "income"
    EXPENSE = "expense"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> "TransactionType":
        """Case-insensitive parse; anything unrecognised maps to OTHER"""
        normalised = (value or "").strip().lower()
        if normalised == cls.INCOME.value:
            return cls.INCOME
        if normalised == cls.EXPENSE.value:
            return cls.EXPENSE
        return cls.OTHER


@dataclass(frozen=True)
class TransactionRecord:
    """Dated, amount-bearing record consumed by the summary calculator"""

    transaction_id: int
    date: datetime
    amount: float
    category: str
    image_url: str | None = None


@dataclass(frozen=True)
class BalanceRecord:
    """Typed, amount-bearing record consumed by the balance calculator"""

    transaction_id: int
    date: datetime
    amount: float
    transaction_type: TransactionType


@dataclass
class SummaryResult:
    """Output of summary calculation"""

    total_amount: float
    average_per_day: float
    total_transaction: int


@dataclass
class BalanceResult:
    """Output of balance calculation"""

    total_amount_earned: float
    total_amount_spent: float
    total_amount_saved: float


@dataclass
class PeriodFilter:
    """Inclusive date range used to restrict period queries"""

    start_date: date | None = None
    end_date: date | None = None

    def resolve(self, now: datetime) -> tuple[datetime | None, datetime]:
        """
        Expand the filter into concrete datetime bounds.

        Start covers the whole first day (00:00:00), end covers the whole
        last day (23:59:59). A missing end date falls back to the injected
        `now`; a missing start leaves the range open.
        """
        start = datetime.combine(self.start_date, time.min) if self.start_date else None
        if self.end_date is None:
            end = now
        else:
            end = datetime.combine(self.end_date, time(23, 59, 59))
        return start, end


@dataclass
class SlipReading:
    """Category and amount extracted from a slip image"""

    category: str
    amount: float


@dataclass
class TokenPair:
    """Access and refresh tokens issued on login"""

    access_token: str
    refresh_token: str
