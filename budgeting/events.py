from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

from budgeting.calculations import get_category_spending, month_key
from budgeting.constants import EXPENSE
from budgeting.filters import local_datetime
from budgeting.formatting import format_currency

__all__ = [
    "Event",
    "EventBus",
    "TRANSACTION_ADDED",
    "TRANSFER_ADDED",
    "BUDGET_SET",
    "BUDGET_ALERT",
    "CATEGORIES_CHANGED",
    "DATA_IMPORTED",
    "check_budget_handler",
    "register_default_handlers",
]


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        """Run every handler for ``name`` in subscription order and collect their results."""
        handlers = self._subscribers.get(name)
        if not handlers:
            return []
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in handlers]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


TRANSACTION_ADDED = "TRANSACTION_ADDED"
TRANSFER_ADDED = "TRANSFER_ADDED"
BUDGET_SET = "BUDGET_SET"
BUDGET_ALERT = "BUDGET_ALERT"
CATEGORIES_CHANGED = "CATEGORIES_CHANGED"
DATA_IMPORTED = "DATA_IMPORTED"


def check_budget_handler(event: Event, payload: dict) -> dict:
    """Warn when an expense pushes its category over the month's budget.

    Expects ``transaction``, ``transactions`` (already including it) and
    ``budgets`` in the payload. Never blocks; returns ``{}`` when nothing is
    over budget.
    """
    t = payload["transaction"]
    if t.type != EXPENSE:
        return {}
    d = local_datetime(t.date)
    month = month_key(d.year, d.month - 1)
    budget = next(
        (b for b in payload["budgets"] if b.category == t.category and b.month == month),
        None,
    )
    if budget is None:
        return {}
    spent = get_category_spending(payload["transactions"], t.category, month)
    if spent <= budget.limit:
        return {"spent": spent}
    return {
        "alert": (
            f"Anda telah melebihi budget {t.category} sebesar "
            f"{format_currency(spent - budget.limit)}"
        ),
        "category": t.category,
        "month": month,
        "spent": spent,
        "limit": budget.limit,
    }


def register_default_handlers(bus: EventBus) -> EventBus:
    bus.subscribe(TRANSACTION_ADDED, check_budget_handler)
    return bus
