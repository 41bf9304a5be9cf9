"""
Booking identifiers and an in-memory booking store.

In production bookings live in the platform database, where staff tooling
later confirms, cancels or checks guests in. The engine writes a booking
once and afterwards only appends ID document references.
"""

import logging
import re
import secrets
from typing import Iterable, Iterator, Optional

from hotel_concierge.errors import DuplicateBookingIdError, PersistenceError
from hotel_concierge.schemas.booking_schema import Booking
from hotel_concierge.utils import normalize_phone

logger = logging.getLogger(__name__)

# No 0/O, 1/I/L or U, so ids read back over the phone without confusion.
BOOKING_ID_ALPHABET = "23456789ABCDEFGHJKMNPQRSTVWXYZ"
BOOKING_ID_LENGTH = 8
DEFAULT_PREFIX = "BK"


def booking_id_prefix(hotel_name: str) -> str:
    """Up to three initials of the hotel name, e.g. "Sea View Resort" -> "SVR"."""
    words = re.findall(r"[A-Za-z]+", hotel_name)
    initials = "".join(word[0] for word in words).upper()[:3]
    return initials if len(initials) >= 2 else DEFAULT_PREFIX


def generate_booking_id(hotel_name: str) -> str:
    suffix = "".join(secrets.choice(BOOKING_ID_ALPHABET) for _ in range(BOOKING_ID_LENGTH))
    return f"{booking_id_prefix(hotel_name)}-{suffix}"


class InMemoryBookingStore:
    """BookingWriter with a uniqueness constraint on the booking id."""

    def __init__(self, bookings: Iterable[Booking] = ()) -> None:
        self._bookings: dict[str, Booking] = {}
        self.fail_writes = False
        for booking in bookings:
            self._bookings[booking.booking_id.upper()] = booking

    async def create_booking(self, booking: Booking) -> Booking:
        if self.fail_writes:
            raise PersistenceError("booking store rejected the write")
        key = booking.booking_id.upper()
        if key in self._bookings:
            raise DuplicateBookingIdError(booking.booking_id)
        self._bookings[key] = booking
        logger.info(
            "Booking stored: %s for %s, %s to %s",
            booking.booking_id, booking.guest_name,
            booking.check_in_date.isoformat(), booking.check_out_date.isoformat(),
        )
        return booking

    async def find_booking_by_id(self, hotel_id: str, booking_id: str) -> Optional[Booking]:
        booking = self._bookings.get(booking_id.strip().upper())
        if booking is None or booking.hotel_id != hotel_id:
            return None
        return booking

    async def find_bookings_by_contact(
        self, hotel_id: str, contact_id: str, limit: int
    ) -> list[Booking]:
        phone = normalize_phone(contact_id)
        matches = [
            b for b in self._bookings.values()
            if b.hotel_id == hotel_id and normalize_phone(b.guest_phone) == phone
        ]
        matches.sort(key=lambda b: b.created_at, reverse=True)
        return matches[:limit]

    async def append_document_ref(self, booking_id: str, ref: str) -> None:
        key = booking_id.upper()
        booking = self._bookings.get(key)
        if booking is None:
            raise PersistenceError(f"Booking {booking_id} not found")
        self._bookings[key] = booking.model_copy(
            update={"id_documents": [*booking.id_documents, ref]}
        )

    def get(self, booking_id: str) -> Optional[Booking]:
        return self._bookings.get(booking_id.upper())

    def __iter__(self) -> Iterator[Booking]:
        return iter(list(self._bookings.values()))

    def __len__(self) -> int:
        return len(self._bookings)
