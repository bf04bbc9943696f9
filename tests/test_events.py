from datetime import datetime

from budgeting.domain import Budget, Transaction
from budgeting.events import (
    BUDGET_ALERT,
    TRANSACTION_ADDED,
    Event,
    EventBus,
    check_budget_handler,
    register_default_handlers,
)


def expense(id, amount, category="Makanan", date="2024-03-10"):
    return Transaction(id, "expense", amount, category, "Cash", date)


def payload_for(t, earlier=(), budgets=()):
    return {"transaction": t, "transactions": tuple(earlier) + (t,), "budgets": tuple(budgets)}


def event_for(payload):
    return Event(name=TRANSACTION_ADDED, ts=datetime.now().isoformat(), payload=payload)


def test_subscribe_publish_unsubscribe():
    bus = EventBus()
    calls = []

    def handler(event, payload):
        calls.append(event.name)
        return {"seen": payload["n"]}

    bus.subscribe(BUDGET_ALERT, handler)
    assert bus.publish(BUDGET_ALERT, {"n": 1}) == [{"seen": 1}]
    bus.unsubscribe(BUDGET_ALERT, handler)
    assert bus.publish(BUDGET_ALERT, {"n": 2}) == []
    assert calls == [BUDGET_ALERT]


def test_publish_without_subscribers():
    assert EventBus().publish(TRANSACTION_ADDED, {}) == []


def test_budget_handler_alerts_when_over_budget():
    budgets = [Budget("Makanan", 100_000, "2024-03")]
    t = expense("t2", 60_000)
    payload = payload_for(t, earlier=[expense("t1", 50_000)], budgets=budgets)
    result = check_budget_handler(event_for(payload), payload)
    assert result["spent"] == 110_000
    assert result["limit"] == 100_000
    assert "Rp 10.000" in result["alert"]


def test_budget_handler_quiet_within_budget():
    budgets = [Budget("Makanan", 100_000, "2024-03")]
    t = expense("t1", 40_000)
    payload = payload_for(t, budgets=budgets)
    result = check_budget_handler(event_for(payload), payload)
    assert "alert" not in result
    assert result["spent"] == 40_000


def test_budget_handler_ignores_income_and_unbudgeted():
    income = Transaction("t1", "income", 10, "Gaji", "Bank", "2024-03-10")
    payload = payload_for(income, budgets=[Budget("Gaji", 1, "2024-03")])
    assert check_budget_handler(event_for(payload), payload) == {}

    t = expense("t2", 10, category="Hiburan")
    payload = payload_for(t, budgets=[Budget("Makanan", 1, "2024-03")])
    assert check_budget_handler(event_for(payload), payload) == {}


def test_budget_handler_only_checks_the_transaction_month():
    budgets = [Budget("Makanan", 100, "2024-02")]
    t = expense("t1", 500, date="2024-03-01")
    payload = payload_for(t, budgets=budgets)
    assert check_budget_handler(event_for(payload), payload) == {}


def test_register_default_handlers():
    bus = register_default_handlers(EventBus())
    t = expense("t1", 200)
    results = bus.publish(TRANSACTION_ADDED, payload_for(t, budgets=[Budget("Makanan", 100, "2024-03")]))
    assert len(results) == 1
    assert "alert" in results[0]
