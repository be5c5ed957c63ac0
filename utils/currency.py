import math
import re

from utils.constants import DEFAULT_CURRENCY_SYMBOL
from utils.errors import ValidationError

_NON_NUMERIC = re.compile(r"[^\d.,]")


def format_currency(amount: float, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format a float as currency string, e.g. '1,234.56 zł'."""
    return f"{amount:,.2f} {symbol}"


def format_signed(amount: float, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{abs(amount):,.2f} {symbol}"


def parse_amount(value) -> float:
    """Accept a number or a user-typed string such as '1 234,50 zł'.

    Everything except digits, '.' and ',' is dropped and ',' is read as the
    decimal separator. A minus sign is rejected rather than dropped.
    """
    if isinstance(value, bool):
        raise ValidationError("Amount must be a number.")
    if isinstance(value, (int, float)):
        amount = float(value)
    elif isinstance(value, str):
        if "-" in value:
            raise ValidationError("Amount must be positive.")
        cleaned = _NON_NUMERIC.sub("", value).replace(",", ".")
        try:
            amount = float(cleaned)
        except ValueError:
            raise ValidationError("Amount must be a number.") from None
    else:
        raise ValidationError("Amount must be a number.")
    if not math.isfinite(amount):
        raise ValidationError("Amount must be a number.")
    return amount
