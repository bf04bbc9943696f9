FUND_SOURCES = ("Bank", "Cash", "E-Wallet")

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)

INCOME_CATEGORIES = (
    "Gaji",
    "Freelance",
    "Investasi",
    "Bonus",
    "Lainnya",
)

# (id, name) pairs seeded on first run; these cannot be renamed or removed
DEFAULT_EXPENSE_CATEGORIES = (
    ("1", "Makanan"),
    ("2", "Transport"),
    ("3", "Hiburan"),
    ("4", "Belanja"),
    ("5", "Tagihan"),
    ("6", "Kesehatan"),
    ("7", "Pendidikan"),
    ("8", "Lainnya"),
)

TRANSACTIONS_KEY = "transactions"
BUDGETS_KEY = "budgets"
TRANSFERS_KEY = "transfers"
EXPENSES_KEY = "expenses"
