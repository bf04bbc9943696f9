from itertools import groupby
from typing import Iterable

from budgeting.domain import Transaction
from budgeting.filters import in_month, local_datetime


def transactions_in_month(
    transactions: Iterable[Transaction], year: int, month: int
) -> list[Transaction]:
    """Transactions of one month (0-indexed), newest first."""
    return sorted(
        filter(in_month(year, month), transactions),
        key=lambda t: local_datetime(t.date),
        reverse=True,
    )


def group_by_day(transactions: Iterable[Transaction]):
    """Group transactions by local calendar day, newest day first.

    Returns a list of ``(date, [Transaction, ...])`` pairs; within a day the
    newest transaction comes first.
    """
    ordered = sorted(transactions, key=lambda t: local_datetime(t.date), reverse=True)
    return [
        (day, list(items))
        for day, items in groupby(ordered, key=lambda t: local_datetime(t.date).date())
    ]
