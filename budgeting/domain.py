from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from budgeting.constants import DEFAULT_EXPENSE_CATEGORIES


def local_datetime(ts: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive datetime in local time.

    Timestamps carrying an offset (or a trailing ``Z``) are converted to the
    local timezone; naive timestamps and bare dates are already local.
    """
    if ts.endswith("Z"):
        ts = ts[:-1] + "+00:00"
    parsed = datetime.fromisoformat(ts)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def checked_amount(value):
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"amount must be a number, got {value!r}")
    return value


def checked_date(value) -> str:
    if not isinstance(value, str):
        raise ValueError(f"date must be a string, got {value!r}")
    local_datetime(value)
    return value


def checked_month(value) -> str:
    if not isinstance(value, str):
        raise ValueError(f"month must be a string, got {value!r}")
    datetime.strptime(value, "%Y-%m")
    return value


@dataclass(frozen=True)
class Transaction:
    id: str
    type: str        # "income" or "expense"
    amount: float    # never negative, the sign comes from type
    category: str
    source: str      # one of FUND_SOURCES
    date: str        # ISO-8601, e.g. "2024-01-10T08:30:00.000Z"
    description: Optional[str] = None

    @classmethod
    def from_record(cls, record: dict) -> "Transaction":
        return cls(
            id=str(record["id"]),
            type=record["type"],
            amount=checked_amount(record["amount"]),
            category=record["category"],
            source=record["source"],
            date=checked_date(record["date"]),
            description=record.get("description") or None,
        )

    def to_record(self) -> dict:
        record = {
            "id": self.id,
            "type": self.type,
            "amount": self.amount,
            "category": self.category,
            "source": self.source,
            "date": self.date,
        }
        if self.description:
            record["description"] = self.description
        return record


@dataclass(frozen=True)
class Transfer:
    id: str
    from_source: str
    to_source: str
    amount: float
    date: str

    @classmethod
    def from_record(cls, record: dict) -> "Transfer":
        return cls(
            id=str(record["id"]),
            from_source=record["from"],
            to_source=record["to"],
            amount=checked_amount(record["amount"]),
            date=checked_date(record["date"]),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "from": self.from_source,
            "to": self.to_source,
            "amount": self.amount,
            "date": self.date,
        }


# A monthly ceiling for one expense category
@dataclass(frozen=True)
class Budget:
    category: str
    limit: float
    month: str  # "YYYY-MM"

    @classmethod
    def from_record(cls, record: dict) -> "Budget":
        return cls(
            category=record["category"],
            limit=checked_amount(record["limit"]),
            month=checked_month(record["month"]),
        )

    def to_record(self) -> dict:
        return {"category": self.category, "limit": self.limit, "month": self.month}


@dataclass(frozen=True)
class ExpenseCategory:
    id: str
    name: str
    is_default: bool = False

    @classmethod
    def from_record(cls, record: dict) -> "ExpenseCategory":
        return cls(
            id=str(record["id"]),
            name=record["name"],
            is_default=bool(record.get("isDefault", False)),
        )

    def to_record(self) -> dict:
        return {"id": self.id, "name": self.name, "isDefault": self.is_default}


def default_categories() -> tuple[ExpenseCategory, ...]:
    return tuple(
        ExpenseCategory(id=cid, name=name, is_default=True)
        for cid, name in DEFAULT_EXPENSE_CATEGORIES
    )
