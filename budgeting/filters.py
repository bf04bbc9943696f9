from datetime import datetime
from typing import Callable

from budgeting.domain import Transaction, local_datetime

TransactionFilter = Callable[[Transaction], bool]


def by_source(source: str) -> TransactionFilter:
    def _filter(t: Transaction) -> bool:
        return t.source == source

    return _filter


def by_type(kind: str) -> TransactionFilter:
    def _filter(t: Transaction) -> bool:
        return t.type == kind

    return _filter


def by_category(category: str) -> TransactionFilter:
    # exact, case-sensitive
    def _filter(t: Transaction) -> bool:
        return t.category == category

    return _filter


def in_month(year: int, month: int) -> TransactionFilter:
    """Match transactions whose local date falls in ``year``/``month`` (0-indexed)."""

    def _filter(t: Transaction) -> bool:
        d = local_datetime(t.date)
        return d.year == year and d.month - 1 == month

    return _filter


def in_range(start: datetime, end: datetime) -> TransactionFilter:
    def _filter(t: Transaction) -> bool:
        return start <= local_datetime(t.date) <= end

    return _filter


def all_of(*preds: TransactionFilter) -> TransactionFilter:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter
