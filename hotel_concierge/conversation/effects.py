"""
I/O requests emitted by the state machine.

The state machine never touches a store or the network. When a step needs
a write or a lookup whose result shapes the reply, it returns one of these
effects; the engine performs it and feeds an EffectOutcome back through
``DialogueStateMachine.resume``.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from hotel_concierge.schemas.booking_schema import Booking, NewBooking
from hotel_concierge.schemas.message_schema import Attachment


@dataclass(frozen=True)
class CreateBooking:
    """Persist a pending booking; the engine assigns its identifier."""
    booking: NewBooking


@dataclass(frozen=True)
class StoreDocument:
    """Fetch an uploaded ID document and attach it to the booking."""
    booking_id: str
    attachment: Attachment


@dataclass(frozen=True)
class FindBookingById:
    hotel_id: str
    booking_id: str


@dataclass(frozen=True)
class FindBookingsByContact:
    hotel_id: str
    contact_id: str
    limit: int


Effect = Union[CreateBooking, StoreDocument, FindBookingById, FindBookingsByContact]


@dataclass(frozen=True)
class EffectOutcome:
    """What happened when the engine executed an effect."""
    ok: bool
    booking: Optional[Booking] = None
    bookings: list[Booking] = field(default_factory=list)
    document_ref: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "EffectOutcome":
        return cls(ok=False, error=error)
