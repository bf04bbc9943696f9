"""On-disk persistence for the budgeting collections.

Each collection is a JSON array stored under its own namespaced key, one
file per key inside the data directory. Reads never fail: a missing or
unreadable blob loads as an empty collection. Writes raise
:class:`StorageError` so the caller can report them.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, TypeVar

from budgeting import config
from budgeting.constants import BUDGETS_KEY, EXPENSES_KEY, TRANSACTIONS_KEY, TRANSFERS_KEY
from budgeting.domain import Budget, ExpenseCategory, Transaction, Transfer, default_categories

logger = logging.getLogger(__name__)

R = TypeVar("R")

EXPORT_FIELDS = ("transactions", "budgets", "transfers")


class BudgetingError(Exception):
    """Base class for errors surfaced to the user."""


class StorageError(BudgetingError):
    pass


class ImportValidationError(BudgetingError):
    pass


class KeyValueStore:
    """String blobs keyed by name, persisted as files under ``base_dir``."""

    def __init__(self, base_dir: Path | None = None, prefix: str = config.STORAGE_PREFIX):
        self.base_dir = Path(base_dir) if base_dir is not None else config.DATA_DIR
        self.prefix = prefix

    def path_for(self, key: str) -> Path:
        return self.base_dir / f"{self.prefix}{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        target = self.path_for(key)
        if not target.exists():
            return None
        try:
            return target.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not read %s: %s", target, exc)
            return None

    def set_item(self, key: str, value: str) -> None:
        target = self.path_for(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(value, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not write {target}: {exc}") from exc
        logger.debug("Saved %s (%d bytes)", target.name, len(value))


def _decode_records(raw: Optional[str], key: str, factory: Callable[[dict], R]) -> Tuple[R, ...]:
    if raw is None:
        return ()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring malformed %s data: %s", key, exc)
        return ()
    if not isinstance(data, list):
        logger.warning("Ignoring %s data: expected a list, got %s", key, type(data).__name__)
        return ()
    items = []
    for record in data:
        try:
            items.append(factory(record))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Skipping malformed %s record %r: %s", key, record, exc)
    return tuple(items)


def load_collection(store: KeyValueStore, key: str, factory: Callable[[dict], R]) -> Tuple[R, ...]:
    return _decode_records(store.get_item(key), key, factory)


def save_collection(store: KeyValueStore, key: str, items: Iterable[Any]) -> None:
    store.set_item(key, json.dumps([item.to_record() for item in items], ensure_ascii=False))


def load_transactions(store: KeyValueStore) -> Tuple[Transaction, ...]:
    return load_collection(store, TRANSACTIONS_KEY, Transaction.from_record)


def save_transactions(store: KeyValueStore, transactions: Iterable[Transaction]) -> None:
    save_collection(store, TRANSACTIONS_KEY, transactions)


def load_budgets(store: KeyValueStore) -> Tuple[Budget, ...]:
    return load_collection(store, BUDGETS_KEY, Budget.from_record)


def save_budgets(store: KeyValueStore, budgets: Iterable[Budget]) -> None:
    save_collection(store, BUDGETS_KEY, budgets)


def load_transfers(store: KeyValueStore) -> Tuple[Transfer, ...]:
    return load_collection(store, TRANSFERS_KEY, Transfer.from_record)


def save_transfers(store: KeyValueStore, transfers: Iterable[Transfer]) -> None:
    save_collection(store, TRANSFERS_KEY, transfers)


def load_categories(store: KeyValueStore) -> Tuple[ExpenseCategory, ...]:
    """Stored expense categories, seeding the defaults when none are stored."""
    categories = load_collection(store, EXPENSES_KEY, ExpenseCategory.from_record)
    if categories:
        return categories
    categories = default_categories()
    save_categories(store, categories)
    return categories


def save_categories(store: KeyValueStore, categories: Iterable[ExpenseCategory]) -> None:
    save_collection(store, EXPENSES_KEY, categories)


def export_data(store: KeyValueStore, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    return {
        "transactions": [t.to_record() for t in load_transactions(store)],
        "budgets": [b.to_record() for b in load_budgets(store)],
        "transfers": [t.to_record() for t in load_transfers(store)],
        "exportDate": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }


def export_json(store: KeyValueStore, now: Optional[datetime] = None) -> str:
    return json.dumps(export_data(store, now), indent=2, ensure_ascii=False)


def backup_file_name(today: Optional[date] = None) -> str:
    return f"budgeting-backup-{(today or date.today()).isoformat()}.json"


def parse_import(text: str) -> Dict[str, Any]:
    """Decode and check a backup document without touching storage."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ImportValidationError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ImportValidationError("Backup must be a JSON object")
    _require_fields(data)
    return data


def _require_fields(data: Dict[str, Any]) -> None:
    missing = [name for name in EXPORT_FIELDS if not isinstance(data.get(name), list)]
    if missing:
        raise ImportValidationError(f"Missing required fields: {', '.join(missing)}")


def _convert_all(records: list, factory: Callable[[dict], R], name: str) -> Tuple[R, ...]:
    try:
        return tuple(factory(record) for record in records)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ImportValidationError(f"Malformed {name} record: {exc}") from exc


def _restore(store: KeyValueStore, blobs: Dict[str, Optional[str]]) -> None:
    for key, raw in blobs.items():
        try:
            if raw is None:
                store.path_for(key).unlink(missing_ok=True)
            else:
                store.set_item(key, raw)
        except (OSError, StorageError) as exc:
            logger.error("Could not restore %s: %s", key, exc)


def import_data(
    store: KeyValueStore, data: Dict[str, Any]
) -> Tuple[Tuple[Transaction, ...], Tuple[Budget, ...], Tuple[Transfer, ...]]:
    """Replace the stored transactions, budgets and transfers wholesale.

    Every record is converted before anything is written, so a bad backup
    leaves storage as it was. A failed write puts back the blobs that were
    stored before the import and re-raises.
    """
    _require_fields(data)
    transactions = _convert_all(data["transactions"], Transaction.from_record, "transaction")
    budgets = _convert_all(data["budgets"], Budget.from_record, "budget")
    transfers = _convert_all(data["transfers"], Transfer.from_record, "transfer")

    previous = {key: store.get_item(key) for key in (TRANSACTIONS_KEY, BUDGETS_KEY, TRANSFERS_KEY)}
    try:
        save_transactions(store, transactions)
        save_budgets(store, budgets)
        save_transfers(store, transfers)
    except StorageError:
        logger.error("Import write failed, restoring previous data")
        _restore(store, previous)
        raise
    logger.info(
        "Imported %d transactions, %d budgets, %d transfers",
        len(transactions), len(budgets), len(transfers),
    )
    return transactions, budgets, transfers
