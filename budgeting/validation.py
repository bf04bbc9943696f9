from abc import ABC, abstractmethod
from typing import Callable, Generic, Optional, Sequence, TypeVar

from budgeting.calculations import calculate_balance, total_balance
from budgeting.constants import FUND_SOURCES, TRANSACTION_TYPES
from budgeting.domain import ExpenseCategory, Transaction, Transfer
from budgeting.formatting import format_currency

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


class Either(Generic[E, T], ABC):

    @abstractmethod
    def bind(self, f: Callable[[T], "Either[E, U]"]) -> "Either[E, U]":
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def bind(self, f):
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Right carries no error")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def bind(self, f):
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def failure(code: str, message: str, **details) -> Left:
    return Left({"error": code, "message": message, **details})


def validate_transaction(t: Transaction) -> Either[dict, Transaction]:
    if not t.amount or not t.category:
        return failure("missing_field", "Harap isi semua field yang wajib")
    if t.amount < 0:
        return failure("invalid_amount", "Jumlah tidak boleh negatif", amount=t.amount)
    if t.type not in TRANSACTION_TYPES:
        return failure("invalid_type", f"Tipe transaksi tidak dikenal: {t.type}", type=t.type)
    if t.source not in FUND_SOURCES:
        return failure("invalid_source", f"Sumber dana tidak dikenal: {t.source}", source=t.source)
    return Right(t)


def validate_transfer(
    transfer: Transfer,
    transactions: Sequence[Transaction],
    transfers: Sequence[Transfer],
) -> Either[dict, Transfer]:
    if not transfer.amount or transfer.amount <= 0:
        return failure("invalid_amount", "Masukkan jumlah transfer yang valid", amount=transfer.amount)
    if transfer.from_source == transfer.to_source:
        return failure(
            "same_source",
            "Sumber dan tujuan transfer tidak boleh sama",
            source=transfer.from_source,
        )
    available = calculate_balance(transactions, transfers, transfer.from_source)
    if transfer.amount > available:
        return failure(
            "insufficient_balance",
            "Saldo tidak mencukupi untuk transfer",
            available=available,
            amount=transfer.amount,
        )
    return Right(transfer)


def validate_budget(
    category: Optional[str],
    limit: float,
    month: str,
    transactions: Sequence[Transaction],
) -> Either[dict, tuple]:
    if not category or not limit:
        return failure("missing_field", "Harap pilih kategori dan masukkan jumlah budget")
    if limit < 0:
        return failure("invalid_amount", "Jumlah budget harus positif", limit=limit)
    # transfers only move money between sources, so they never change the total
    available = total_balance(transactions, ())
    if limit > available:
        return failure(
            "budget_exceeds_balance",
            f"Budget tidak boleh melebihi total saldo Anda ({format_currency(available)})",
            available=available,
            limit=limit,
        )
    return Right((category, limit, month))


def validate_category_name(
    name: str,
    categories: Sequence[ExpenseCategory],
    editing: Optional[ExpenseCategory] = None,
) -> Either[dict, str]:
    cleaned = (name or "").strip()
    if not cleaned:
        return failure("empty_name", "Nama kategori tidak boleh kosong")
    clash = any(
        c.name.lower() == cleaned.lower() and (editing is None or c.id != editing.id)
        for c in categories
    )
    if clash:
        return failure("duplicate_category", "Kategori sudah ada", name=cleaned)
    return Right(cleaned)


def validate_custom_category(category: Optional[ExpenseCategory], name: str) -> Either[dict, ExpenseCategory]:
    if category is None:
        return failure("category_not_found", f"Kategori {name} tidak ditemukan", name=name)
    if category.is_default:
        return failure(
            "default_category",
            "Kategori default tidak dapat diubah atau dihapus",
            name=category.name,
        )
    return Right(category)
