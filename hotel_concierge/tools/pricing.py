"""Stay length and price quotes for room types."""

from datetime import date
from decimal import Decimal
from typing import Optional


def count_nights(check_in: date, check_out: date) -> int:
    """Calendar nights between check-in and check-out."""
    return (check_out - check_in).days


def stay_total(base_price: Optional[Decimal], nights: int) -> Optional[Decimal]:
    """Total for the stay, or None when the room's price is on request."""
    if base_price is None:
        return None
    return base_price * nights
