"""Derived figures folded out of the transaction and transfer history.

Every function here is pure: it takes the collections as arguments and
returns a fresh value, so the UI can call them on every rerun.
"""

from datetime import date, datetime, time
from functools import reduce
from typing import Iterable, NamedTuple, Optional, Sequence

from budgeting.constants import EXPENSE, FUND_SOURCES, INCOME
from budgeting.domain import Budget, Transaction, Transfer
from budgeting.filters import all_of, by_category, by_source, by_type, in_month, in_range
from budgeting.formatting import month_short_name

CHART_UNIT = 1_000_000


class PeriodTotals(NamedTuple):
    income: float
    expenses: float

    @property
    def net(self) -> float:
        return self.income - self.expenses


class ChartSeries(NamedTuple):
    months: list[str]
    income_data: list[float]
    expense_data: list[float]


class BudgetStatus(NamedTuple):
    budget: Budget
    spent: float
    percentage: float
    over_budget: bool

    @property
    def remaining(self) -> float:
        return self.budget.limit - self.spent


def _signed(t: Transaction) -> float:
    return t.amount if t.type == INCOME else -t.amount


def _transfer_delta(transfer: Transfer, source: str) -> float:
    if transfer.from_source == source:
        return -transfer.amount
    if transfer.to_source == source:
        return transfer.amount
    return 0


def calculate_balance(
    transactions: Iterable[Transaction], transfers: Iterable[Transfer], source: str
) -> float:
    """Current balance of one fund source; may go negative."""
    from_transactions = reduce(
        lambda acc, t: acc + _signed(t), filter(by_source(source), transactions), 0
    )
    from_transfers = reduce(lambda acc, tr: acc + _transfer_delta(tr, source), transfers, 0)
    return from_transactions + from_transfers


def total_balance(transactions: Sequence[Transaction], transfers: Sequence[Transfer]) -> float:
    return sum(calculate_balance(transactions, transfers, s) for s in FUND_SOURCES)


def _totals(transactions: Iterable[Transaction]) -> PeriodTotals:
    income = 0
    expenses = 0
    for t in transactions:
        if t.type == INCOME:
            income += t.amount
        elif t.type == EXPENSE:
            expenses += t.amount
    return PeriodTotals(income=income, expenses=expenses)


def get_monthly_data(transactions: Iterable[Transaction], year: int, month: int) -> PeriodTotals:
    """Income and expense totals for a calendar month; ``month`` is 0-indexed."""
    return _totals(filter(in_month(year, month), transactions))


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def get_date_range_data(
    transactions: Iterable[Transaction], start_date, end_date
) -> PeriodTotals:
    """Totals for an inclusive range of calendar days.

    ``start_date`` is widened to the start of its day and ``end_date`` to the
    last millisecond of its day. A reversed range simply matches nothing.
    """
    start = datetime.combine(_as_date(start_date), time.min)
    end = datetime.combine(_as_date(end_date), time(23, 59, 59, 999000))
    return _totals(filter(in_range(start, end), transactions))


def parse_month(month: str) -> tuple[int, int]:
    """Split "YYYY-MM" into (year, 0-indexed month)."""
    year, month_num = month.split("-")
    return int(year), int(month_num) - 1


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month + 1:02d}"


def get_category_spending(
    transactions: Iterable[Transaction], category: str, month: str
) -> float:
    year, month_index = parse_month(month)
    matches = filter(
        all_of(by_type(EXPENSE), by_category(category), in_month(year, month_index)),
        transactions,
    )
    return sum(t.amount for t in matches)


def budget_status(budget: Budget, transactions: Iterable[Transaction]) -> BudgetStatus:
    spent = get_category_spending(transactions, budget.category, budget.month)
    percentage = spent / budget.limit * 100 if budget.limit else 0.0
    return BudgetStatus(
        budget=budget,
        spent=spent,
        percentage=percentage,
        over_budget=spent > budget.limit,
    )


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + month + delta
    return index // 12, index % 12


def get_chart_data(
    transactions: Sequence[Transaction],
    months_count: int = 6,
    today: Optional[date] = None,
) -> ChartSeries:
    """Trailing income/expense series in millions, oldest month first."""
    today = today or date.today()
    series = ChartSeries(months=[], income_data=[], expense_data=[])
    for back in range(months_count - 1, -1, -1):
        year, month = shift_month(today.year, today.month - 1, -back)
        totals = get_monthly_data(transactions, year, month)
        series.months.append(month_short_name(month))
        series.income_data.append(totals.income / CHART_UNIT)
        series.expense_data.append(totals.expenses / CHART_UNIT)
    return series
