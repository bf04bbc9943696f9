from budgeting import store
from budgeting.domain import Budget, ExpenseCategory, Transaction, Transfer
from budgeting.store import AppState


def make_tx(id):
    return Transaction(id=id, type="expense", amount=100, category="Makanan", source="Cash", date="2024-01-01")


def test_initial_state_is_seeded_with_default_categories():
    state = AppState()
    assert state.transactions == ()
    assert len(state.categories) == 8
    assert all(c.is_default for c in state.categories)
    assert state.category_names()[0] == "Makanan"


def test_add_transaction_returns_new_state():
    state = AppState()
    new_state = store.add_transaction(state, make_tx("t1"))
    assert len(new_state.transactions) == 1
    assert state.transactions == ()
    assert new_state is not state


def test_remove_transaction():
    state = store.set_transactions(AppState(), [make_tx("t1"), make_tx("t2")])
    new_state = store.remove_transaction(state, "t1")
    assert [t.id for t in new_state.transactions] == ["t2"]
    assert len(state.transactions) == 2


def test_add_transfer():
    transfer = Transfer("x1", "Bank", "Cash", 10, "2024-01-01")
    state = store.add_transfer(AppState(), transfer)
    assert state.transfers == (transfer,)


def test_set_budget_replaces_same_category_and_month_in_place():
    state = store.set_budgets(
        AppState(),
        [Budget("Makanan", 100, "2024-01"), Budget("Transport", 50, "2024-01")],
    )
    state = store.set_budget(state, Budget("Makanan", 300, "2024-01"))
    assert state.budgets == (Budget("Makanan", 300, "2024-01"), Budget("Transport", 50, "2024-01"))


def test_set_budget_appends_for_new_month():
    state = store.set_budget(AppState(), Budget("Makanan", 100, "2024-01"))
    state = store.set_budget(state, Budget("Makanan", 100, "2024-02"))
    assert len(state.budgets) == 2


def test_remove_budget():
    state = store.set_budget(AppState(), Budget("Makanan", 100, "2024-01"))
    state = store.remove_budget(state, "Makanan", "2024-01")
    assert state.budgets == ()


def test_add_category_ignores_case_insensitive_duplicate():
    state = AppState()
    same = store.add_category(state, ExpenseCategory("x", "makanan"))
    assert same is state


def test_add_category_is_never_default():
    state = store.add_category(AppState(), ExpenseCategory("x", "Kopi", is_default=True))
    assert state.categories[-1] == ExpenseCategory("x", "Kopi", is_default=False)


def test_rename_and_remove_skip_default_categories():
    state = AppState()
    assert store.rename_category(state, "Makanan", "Food").categories == state.categories
    assert store.remove_category(state, "Makanan").categories == state.categories


def test_rename_custom_category_does_not_touch_transactions():
    state = store.add_category(AppState(), ExpenseCategory("x", "Kopi"))
    state = store.add_transaction(
        state, Transaction("t1", "expense", 5, "Kopi", "Cash", "2024-01-01")
    )
    state = store.rename_category(state, "Kopi", "Coffee")
    assert "Coffee" in state.category_names()
    assert state.transactions[0].category == "Kopi"


def test_remove_custom_category():
    state = store.add_category(AppState(), ExpenseCategory("x", "Kopi"))
    state = store.remove_category(state, "Kopi")
    assert "Kopi" not in state.category_names()


def test_reset_default_categories_keeps_custom_after_defaults():
    state = store.set_categories(AppState(), [ExpenseCategory("x", "Kopi")])
    state = store.reset_default_categories(state)
    names = state.category_names()
    assert names[:8] == [c.name for c in AppState().categories]
    assert names[8:] == ["Kopi"]
