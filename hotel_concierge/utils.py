"""Shared utilities used across the hotel concierge engine."""

import re
from decimal import Decimal


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("98765 43210")
        '9876543210'
        >>> normalize_phone("+91 (98765) 432-10")
        '+919876543210'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def format_price(amount: Decimal, symbol: str) -> str:
    """Format an amount with thousands separators, dropping zero paise.

    Examples:
        >>> format_price(Decimal("4000"), "Rs.")
        'Rs.4,000'
        >>> format_price(Decimal("1499.50"), "$")
        '$1,499.50'
    """
    if amount == amount.to_integral_value():
        return f"{symbol}{amount:,.0f}"
    return f"{symbol}{amount:,.2f}"
