from budgeting.domain import ExpenseCategory, Transaction, Transfer, default_categories
from budgeting.validation import (
    Left,
    Right,
    validate_budget,
    validate_category_name,
    validate_custom_category,
    validate_transaction,
    validate_transfer,
)


def make_tx(type="income", amount=1000, category="Gaji", source="Bank"):
    return Transaction("t1", type, amount, category, source, "2024-01-10")


def test_either_bind():
    assert Right(2).bind(lambda x: Right(x * 3)) == Right(6)
    assert Right(2).bind(lambda x: Left("nope")) == Left("nope")
    left = Left("err")
    assert left.bind(lambda x: Right(x * 3)) is left
    assert left.get_or_else(0) == 0
    assert left.get_error() == "err"
    assert Right(1).is_right() and not Right(1).is_left()


def test_valid_transaction():
    t = make_tx()
    assert validate_transaction(t) == Right(t)


def test_transaction_missing_amount_or_category():
    assert validate_transaction(make_tx(amount=0)).get_error()["error"] == "missing_field"
    assert validate_transaction(make_tx(category="")).get_error()["error"] == "missing_field"


def test_transaction_negative_amount():
    assert validate_transaction(make_tx(amount=-5)).get_error()["error"] == "invalid_amount"


def test_transaction_unknown_source():
    assert validate_transaction(make_tx(source="Crypto")).get_error()["error"] == "invalid_source"


def test_transfer_rules():
    trans = (make_tx(amount=1000, source="Bank"),)
    ok = Transfer("x1", "Bank", "Cash", 1000, "2024-01-11")
    assert validate_transfer(ok, trans, ()).is_right()

    zero = Transfer("x2", "Bank", "Cash", 0, "2024-01-11")
    assert validate_transfer(zero, trans, ()).get_error()["error"] == "invalid_amount"

    same = Transfer("x3", "Bank", "Bank", 10, "2024-01-11")
    assert validate_transfer(same, trans, ()).get_error()["error"] == "same_source"

    too_much = Transfer("x4", "Bank", "Cash", 1001, "2024-01-11")
    error = validate_transfer(too_much, trans, ()).get_error()
    assert error["error"] == "insufficient_balance"
    assert error["available"] == 1000


def test_transfer_balance_includes_earlier_transfers():
    trans = (make_tx(amount=1000, source="Bank"),)
    earlier = (Transfer("x1", "Bank", "Cash", 800, "2024-01-11"),)
    again = Transfer("x2", "Bank", "E-Wallet", 300, "2024-01-12")
    assert validate_transfer(again, trans, earlier).get_error()["error"] == "insufficient_balance"


def test_budget_cannot_exceed_total_balance():
    trans = (make_tx(amount=500_000),)
    assert validate_budget("Makanan", 500_000, "2024-01", trans).is_right()
    error = validate_budget("Makanan", 500_001, "2024-01", trans).get_error()
    assert error["error"] == "budget_exceeds_balance"
    assert "Rp 500.000" in error["message"]


def test_budget_requires_category_and_amount():
    assert validate_budget(None, 100, "2024-01", ()).get_error()["error"] == "missing_field"
    assert validate_budget("Makanan", 0, "2024-01", ()).get_error()["error"] == "missing_field"


def test_category_name_rules():
    cats = default_categories()
    assert validate_category_name("  Kopi ", cats) == Right("Kopi")
    assert validate_category_name("   ", cats).get_error()["error"] == "empty_name"
    assert validate_category_name("TRANSPORT", cats).get_error()["error"] == "duplicate_category"


def test_category_name_may_keep_its_own_name_when_editing():
    kopi = ExpenseCategory("x", "Kopi")
    cats = default_categories() + (kopi,)
    assert validate_category_name("kopi", cats, editing=kopi) == Right("kopi")


def test_custom_category_rules():
    assert validate_custom_category(None, "Nope").get_error()["error"] == "category_not_found"
    default = default_categories()[0]
    assert validate_custom_category(default, default.name).get_error()["error"] == "default_category"
    kopi = ExpenseCategory("x", "Kopi")
    assert validate_custom_category(kopi, "Kopi") == Right(kopi)
