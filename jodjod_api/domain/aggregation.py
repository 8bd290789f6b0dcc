"""Transaction aggregation - summary and balance calculations"""

from typing import Sequence
from jodjod_api.domain.models import (
    TransactionRecord,
    BalanceRecord,
    SummaryResult,
    BalanceResult,
    TransactionType,
)
from jodjod_api.domain.exceptions import MissingDateRangeError
from jodjod_api.utils.date_utils import elapsed_whole_days


def calculate_average_per_day(total_amount: float, min_date, max_date) -> float:
    """
    Spread a total over the whole days between the earliest and latest record.

    A zero-day span returns the total itself. No date range at all is an
    error rather than zero, since zero is a legitimate average.
    """
    if min_date is None or max_date is None:
        raise MissingDateRangeError("minDate or maxDate is empty")

    total_days = elapsed_whole_days(min_date, max_date)
    if total_days == 0:
        return total_amount

    return total_amount / total_days


def calculate_summary(records: Sequence[TransactionRecord]) -> SummaryResult:
    """
    Reduce records into total amount, count and average amount per day.

    Min/max dates are tracked in the same pass as the total, so input
    order does not matter.

    Raises:
        MissingDateRangeError: If records is empty
    """
    total_amount = 0.0
    total_transaction = 0
    min_date = None
    max_date = None

    for record in records:
        total_amount += record.amount
        total_transaction += 1

        if min_date is None or record.date < min_date:
            min_date = record.date
        if max_date is None or record.date > max_date:
            max_date = record.date

    average_per_day = calculate_average_per_day(total_amount, min_date, max_date)

    return SummaryResult(
        total_amount=total_amount,
        average_per_day=average_per_day,
        total_transaction=total_transaction,
    )


def calculate_balance(records: Sequence[BalanceRecord]) -> BalanceResult:
    """
    Net income against expense.

    Records typed OTHER count towards neither total. Never fails; an empty
    input gives an all-zero balance.
    """
    total_earned = 0.0
    total_spent = 0.0

    for record in records:
        if record.transaction_type is TransactionType.INCOME:
            total_earned += record.amount
        elif record.transaction_type is TransactionType.EXPENSE:
            total_spent += record.amount
        else:
            # Unrecognised types are skipped silently
            continue

    return BalanceResult(
        total_amount_earned=total_earned,
        total_amount_spent=total_spent,
        total_amount_saved=total_earned - total_spent,
    )
