"""Number and currency rendering for the id-ID locale.

Indonesian formatting groups thousands with "." and uses "," as the decimal
mark, so ``1500000`` renders as ``1.500.000``.
"""

import re

_NON_DIGITS = re.compile(r"[^\d]")

MONTH_SHORT_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "Mei", "Jun",
    "Jul", "Agu", "Sep", "Okt", "Nov", "Des",
)

MONTH_LONG_NAMES = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)


def _group(value: float) -> str:
    """Render a number with id-ID separators, at most two decimals."""
    if float(value).is_integer():
        text = f"{int(value):,}"
    else:
        text = f"{value:,.2f}".rstrip("0").rstrip(".")
    # swap "," and "." in one pass
    return text.translate(str.maketrans({",": ".", ".": ","}))


def format_number(value) -> str:
    """Format user input as a grouped integer, dropping every non-digit.

    >>> format_number("1500000")
    '1.500.000'
    >>> format_number("abc")
    ''
    """
    digits = _NON_DIGITS.sub("", str(value))
    if not digits:
        return ""
    return _group(int(digits))


def parse_formatted_number(text: str) -> int:
    digits = _NON_DIGITS.sub("", text or "")
    return int(digits) if digits else 0


def format_currency(amount: float) -> str:
    return f"Rp {_group(amount)}"


def format_millions(value: float) -> str:
    return f"{_group(round(value, 2))} jt"


def month_short_name(month: int) -> str:
    return MONTH_SHORT_NAMES[month]


def month_long_name(month: int) -> str:
    return MONTH_LONG_NAMES[month]
