"""Booking records written by the engine and read back for status checks."""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from hotel_concierge.tools.pricing import count_nights


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"


# (emoji, label) shown to guests on a status lookup
BOOKING_STATUS_LABELS: dict[BookingStatus, tuple[str, str]] = {
    BookingStatus.PENDING: ("🟡", "Pending Confirmation"),
    BookingStatus.CONFIRMED: ("🟢", "Confirmed"),
    BookingStatus.CANCELLED: ("🔴", "Cancelled"),
    BookingStatus.CHECKED_IN: ("🔵", "Checked In"),
    BookingStatus.CHECKED_OUT: ("⚪", "Checked Out"),
}


class NewBooking(BaseModel):
    """Booking details collected by the dialogue, before an id is assigned."""
    hotel_id: str
    room_type_id: str
    room_name: str
    guest_name: str
    guest_phone: str
    check_in_date: date
    check_out_date: date
    adults: int
    children: int = 0
    total_price: Optional[Decimal] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _check_stay(self) -> "NewBooking":
        if self.check_out_date <= self.check_in_date:
            raise ValueError("check_out_date must be after check_in_date")
        return self


class Booking(NewBooking):
    """Persisted booking. Written once by the engine, then owned by staff tooling."""
    booking_id: str
    status: BookingStatus = BookingStatus.PENDING
    id_documents: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_new(cls, new: NewBooking, booking_id: str) -> "Booking":
        return cls(booking_id=booking_id, **new.model_dump())

    @property
    def nights(self) -> int:
        return count_nights(self.check_in_date, self.check_out_date)
