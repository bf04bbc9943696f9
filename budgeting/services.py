import logging
from datetime import datetime
from typing import Callable, List, Optional
from uuid import uuid4

from budgeting import storage, store
from budgeting.domain import Budget, ExpenseCategory, Transaction, Transfer
from budgeting.events import (
    BUDGET_ALERT,
    BUDGET_SET,
    CATEGORIES_CHANGED,
    DATA_IMPORTED,
    TRANSACTION_ADDED,
    TRANSFER_ADDED,
    EventBus,
    register_default_handlers,
)
from budgeting.storage import BudgetingError, ImportValidationError, KeyValueStore
from budgeting.store import AppState
from budgeting.validation import (
    Either,
    Right,
    failure,
    validate_budget,
    validate_category_name,
    validate_custom_category,
    validate_transaction,
    validate_transfer,
)

logger = logging.getLogger(__name__)


def _timestamp(when: Optional[datetime]) -> str:
    # naive datetimes are taken as local time
    return (when or datetime.now()).astimezone().isoformat(timespec="milliseconds")


class BudgetingService:
    """Owns the application state and runs every user mutation through
    validation, a pure reducer, persistence and the event bus.

    Mutations return an ``Either``: ``Right`` with the new record on success,
    ``Left`` with an error dict (``error`` code plus ``message``) otherwise.
    The in-memory state only changes after the collection has been saved.
    """

    def __init__(self, kv_store: KeyValueStore, bus: Optional[EventBus] = None):
        self.kv_store = kv_store
        self.bus = bus if bus is not None else register_default_handlers(EventBus())
        self.state = AppState()
        self.alerts: List[dict] = []

    def load(self) -> AppState:
        self.state = AppState(
            transactions=storage.load_transactions(self.kv_store),
            transfers=storage.load_transfers(self.kv_store),
            budgets=storage.load_budgets(self.kv_store),
            categories=storage.load_categories(self.kv_store),
        )
        logger.info(
            "Loaded %d transactions, %d transfers, %d budgets, %d categories",
            len(self.state.transactions),
            len(self.state.transfers),
            len(self.state.budgets),
            len(self.state.categories),
        )
        return self.state

    def _commit(self, new_state: AppState, save: Callable[[], None], result) -> Either:
        try:
            save()
        except BudgetingError as exc:
            logger.error("Persisting failed: %s", exc)
            return failure("storage_error", "Gagal menyimpan data", detail=str(exc))
        self.state = new_state
        return Right(result)

    def _rejected(self, outcome: Either) -> Either:
        logger.debug("Rejected: %s", outcome.get_error())
        return outcome

    # transactions

    def add_transaction(
        self,
        type: str,
        amount: float,
        category: str,
        source: str,
        when: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> Either:
        t = Transaction(
            id=uuid4().hex,
            type=type,
            amount=amount,
            category=category,
            source=source,
            date=_timestamp(when),
            description=(description or "").strip() or None,
        )
        checked = validate_transaction(t)
        if checked.is_left():
            return self._rejected(checked)
        new_state = store.add_transaction(self.state, t)
        outcome = self._commit(
            new_state, lambda: storage.save_transactions(self.kv_store, new_state.transactions), t
        )
        if outcome.is_right():
            logger.info("Added %s of %s in %s from %s", t.type, t.amount, t.category, t.source)
            self._publish_transaction(t)
        return outcome

    def _publish_transaction(self, t: Transaction) -> None:
        results = self.bus.publish(
            TRANSACTION_ADDED,
            {
                "transaction": t,
                "transactions": self.state.transactions,
                "budgets": self.state.budgets,
            },
        )
        for result in results:
            if "alert" in result:
                logger.info("Budget alert: %s", result["alert"])
                self.alerts.append(result)
                self.bus.publish(BUDGET_ALERT, result)

    def remove_transaction(self, tid: str) -> Either:
        new_state = store.remove_transaction(self.state, tid)
        return self._commit(
            new_state, lambda: storage.save_transactions(self.kv_store, new_state.transactions), tid
        )

    # transfers

    def add_transfer(
        self, from_source: str, to_source: str, amount: float, when: Optional[datetime] = None
    ) -> Either:
        transfer = Transfer(
            id=uuid4().hex,
            from_source=from_source,
            to_source=to_source,
            amount=amount,
            date=_timestamp(when),
        )
        checked = validate_transfer(transfer, self.state.transactions, self.state.transfers)
        if checked.is_left():
            return self._rejected(checked)
        new_state = store.add_transfer(self.state, transfer)
        outcome = self._commit(
            new_state, lambda: storage.save_transfers(self.kv_store, new_state.transfers), transfer
        )
        if outcome.is_right():
            logger.info("Transferred %s from %s to %s", amount, from_source, to_source)
            self.bus.publish(TRANSFER_ADDED, {"transfer": transfer})
        return outcome

    # budgets

    def set_budget(self, category: Optional[str], limit: float, month: str) -> Either:
        checked = validate_budget(category, limit, month, self.state.transactions)
        if checked.is_left():
            return self._rejected(checked)
        budget = Budget(category=category, limit=limit, month=month)
        new_state = store.set_budget(self.state, budget)
        outcome = self._commit(
            new_state, lambda: storage.save_budgets(self.kv_store, new_state.budgets), budget
        )
        if outcome.is_right():
            logger.info("Budget for %s in %s set to %s", category, month, limit)
            self.bus.publish(BUDGET_SET, {"budget": budget})
        return outcome

    def remove_budget(self, category: str, month: str) -> Either:
        new_state = store.remove_budget(self.state, category, month)
        return self._commit(
            new_state, lambda: storage.save_budgets(self.kv_store, new_state.budgets), (category, month)
        )

    # expense categories

    def _save_categories(self, new_state: AppState, result) -> Either:
        outcome = self._commit(
            new_state, lambda: storage.save_categories(self.kv_store, new_state.categories), result
        )
        if outcome.is_right():
            self.bus.publish(CATEGORIES_CHANGED, {"categories": new_state.categories})
        return outcome

    def add_category(self, name: str) -> Either:
        checked = validate_category_name(name, self.state.categories)
        if checked.is_left():
            return self._rejected(checked)
        category = ExpenseCategory(id=uuid4().hex, name=checked.get_or_else(name))
        return self._save_categories(store.add_category(self.state, category), category)

    def rename_category(self, old_name: str, new_name: str) -> Either:
        """Rename a custom category; existing transactions keep the old name."""
        current = next((c for c in self.state.categories if c.name == old_name), None)
        checked = validate_custom_category(current, old_name).bind(
            lambda c: validate_category_name(new_name, self.state.categories, editing=c)
        )
        if checked.is_left():
            return self._rejected(checked)
        cleaned = checked.get_or_else(new_name)
        return self._save_categories(
            store.rename_category(self.state, old_name, cleaned), cleaned
        )

    def remove_category(self, name: str) -> Either:
        current = next((c for c in self.state.categories if c.name == name), None)
        checked = validate_custom_category(current, name)
        if checked.is_left():
            return self._rejected(checked)
        return self._save_categories(store.remove_category(self.state, name), name)

    def reset_categories(self) -> Either:
        new_state = store.reset_default_categories(self.state)
        return self._save_categories(new_state, new_state.categories)

    # backup

    def export_json(self, now: Optional[datetime] = None) -> Either:
        try:
            return Right(storage.export_json(self.kv_store, now))
        except BudgetingError as exc:
            logger.error("Export failed: %s", exc)
            return failure("export_failed", "Gagal mengekspor data", detail=str(exc))

    def import_json(self, text: str) -> Either:
        try:
            data = storage.parse_import(text)
            transactions, budgets, transfers = storage.import_data(self.kv_store, data)
        except ImportValidationError as exc:
            logger.warning("Import rejected: %s", exc)
            return failure("import_failed", "File tidak valid atau tidak dapat dibaca", detail=str(exc))
        except BudgetingError as exc:
            logger.error("Import failed: %s", exc)
            return failure("import_failed", "Gagal mengimport data", detail=str(exc))
        self.state = store.set_budgets(
            store.set_transfers(store.set_transactions(self.state, transactions), transfers),
            budgets,
        )
        self.bus.publish(DATA_IMPORTED, {"state": self.state})
        return Right(self.state)
