from dataclasses import dataclass, field, replace
from typing import Iterable

from budgeting.domain import Budget, ExpenseCategory, Transaction, Transfer, default_categories


@dataclass(frozen=True)
class AppState:
    transactions: tuple[Transaction, ...] = ()
    transfers: tuple[Transfer, ...] = ()
    budgets: tuple[Budget, ...] = ()
    categories: tuple[ExpenseCategory, ...] = field(default_factory=default_categories)

    def category_names(self) -> list[str]:
        return [c.name for c in self.categories]


def add_transaction(state: AppState, t: Transaction) -> AppState:
    return replace(state, transactions=state.transactions + (t,))


def remove_transaction(state: AppState, tid: str) -> AppState:
    return replace(state, transactions=tuple(t for t in state.transactions if t.id != tid))


def set_transactions(state: AppState, transactions: Iterable[Transaction]) -> AppState:
    return replace(state, transactions=tuple(transactions))


def add_transfer(state: AppState, transfer: Transfer) -> AppState:
    return replace(state, transfers=state.transfers + (transfer,))


def set_transfers(state: AppState, transfers: Iterable[Transfer]) -> AppState:
    return replace(state, transfers=tuple(transfers))


def set_budget(state: AppState, budget: Budget) -> AppState:
    """Insert a budget, replacing an existing one for the same category and month in place."""
    same_slot = lambda b: b.category == budget.category and b.month == budget.month
    if any(same_slot(b) for b in state.budgets):
        budgets = tuple(budget if same_slot(b) else b for b in state.budgets)
    else:
        budgets = state.budgets + (budget,)
    return replace(state, budgets=budgets)


def remove_budget(state: AppState, category: str, month: str) -> AppState:
    return replace(
        state,
        budgets=tuple(
            b for b in state.budgets if not (b.category == category and b.month == month)
        ),
    )


def set_budgets(state: AppState, budgets: Iterable[Budget]) -> AppState:
    return replace(state, budgets=tuple(budgets))


def find_category(state: AppState, name: str):
    lowered = name.lower()
    return next((c for c in state.categories if c.name.lower() == lowered), None)


def add_category(state: AppState, category: ExpenseCategory) -> AppState:
    # names are unique ignoring case; a duplicate leaves the state untouched
    if find_category(state, category.name) is not None:
        return state
    custom = replace(category, is_default=False)
    return replace(state, categories=state.categories + (custom,))


def rename_category(state: AppState, old_name: str, new_name: str) -> AppState:
    """Rename a custom category. Transactions keep the old name."""
    return replace(
        state,
        categories=tuple(
            replace(c, name=new_name) if c.name == old_name and not c.is_default else c
            for c in state.categories
        ),
    )


def remove_category(state: AppState, name: str) -> AppState:
    return replace(
        state,
        categories=tuple(
            c for c in state.categories if not (c.name == name and not c.is_default)
        ),
    )


def set_categories(state: AppState, categories: Iterable[ExpenseCategory]) -> AppState:
    return replace(state, categories=tuple(categories))


def reset_default_categories(state: AppState) -> AppState:
    custom = tuple(c for c in state.categories if not c.is_default)
    return replace(state, categories=default_categories() + custom)
