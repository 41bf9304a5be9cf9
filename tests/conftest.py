"""Shared test fixtures and helpers."""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

import pytest

from hotel_concierge.config import BotConfig
from hotel_concierge.conversation.state_machine import DialogueStateMachine
from hotel_concierge.conversation.transitions import DialogueContext, TransitionResult
from hotel_concierge.engine import DialogueEngine
from hotel_concierge.schemas.booking_schema import Booking, BookingStatus
from hotel_concierge.schemas.catalog_schema import Hotel, RoomPhoto, RoomType
from hotel_concierge.schemas.message_schema import Attachment, InboundMessage
from hotel_concierge.schemas.session_schema import Session
from hotel_concierge.tools.booking import InMemoryBookingStore
from hotel_concierge.tools.catalog import InMemoryCatalog
from hotel_concierge.tools.media import InMemoryMediaRelay
from hotel_concierge.tools.sessions import InMemorySessionStore
from hotel_concierge.tools.transcript import InMemoryTranscriptSink

CHANNEL_ID = "wa-channel-1"
GUEST = "+919800000001"
TODAY = date(2026, 1, 15)
NOW = datetime(2026, 1, 15, 6, 0, tzinfo=timezone.utc)


def make_hotel(**overrides) -> Hotel:
    fields = dict(
        id="hotel-1",
        channel_id=CHANNEL_ID,
        name="Sea View Resort",
        description="Beachfront stay in Goa.",
        address="12 Beach Road, Calangute, Goa",
        phone="+91 832 555 0100",
        email="stay@seaview.example",
        website="https://seaview.example",
        google_maps_link="https://maps.example/seaview",
        reception_timing="24 hours",
        languages=["English", "Hindi"],
        cancellation_policy="Free cancellation up to 48 hours before check-in.",
    )
    fields.update(overrides)
    return Hotel(**fields)


def make_rooms() -> list[RoomType]:
    return [
        RoomType(
            id="room-deluxe", hotel_id="hotel-1", name="Deluxe Room",
            max_adults=2, max_children=1, base_price=Decimal("2000"),
            amenities=["Wi-Fi", "TV"], is_ac=True, display_order=1,
        ),
        RoomType(
            id="room-suite", hotel_id="hotel-1", name="Sea View Suite",
            max_adults=3, max_children=2, base_price=Decimal("4500"), display_order=2,
        ),
        RoomType(
            id="room-dorm", hotel_id="hotel-1", name="Backpacker Dorm",
            max_adults=1, display_order=3,
        ),
    ]


def make_photos() -> list[RoomPhoto]:
    return [
        RoomPhoto(id=f"p{i}", room_type_id="room-deluxe",
                  photo_url=f"https://cdn.example/deluxe-{i}.jpg", display_order=i)
        for i in range(1, 8)
    ]


def make_context(rooms: Optional[list[RoomType]] = None, today: date = TODAY) -> DialogueContext:
    photos = {"room-deluxe": make_photos()}
    return DialogueContext(
        hotel=make_hotel(),
        rooms=make_rooms() if rooms is None else rooms,
        photos=photos,
        contact_id=GUEST,
        today=today,
    )


def make_booking(booking_id: str = "SVR-ABCD2345", status: BookingStatus = BookingStatus.PENDING,
                 **overrides) -> Booking:
    fields = dict(
        booking_id=booking_id,
        hotel_id="hotel-1",
        room_type_id="room-deluxe",
        room_name="Deluxe Room",
        guest_name="John Smith",
        guest_phone=GUEST,
        check_in_date=date(2026, 2, 10),
        check_out_date=date(2026, 2, 12),
        adults=2,
        total_price=Decimal("4000"),
        status=status,
        created_at=datetime(2026, 1, 10, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Booking(**fields)


def msg(text: str = "", attachment: Optional[Attachment] = None) -> InboundMessage:
    return InboundMessage(channel_id=CHANNEL_ID, contact_id=GUEST, text=text, attachment=attachment)


def image(handle: str = "media-1", mime_type: str = "image/jpeg") -> Attachment:
    kind = "image" if mime_type.startswith("image/") else "document"
    return Attachment(kind=kind, handle=handle, mime_type=mime_type)


def walk(
    machine: DialogueStateMachine, ctx: DialogueContext, *texts: str,
    session: Optional[Session] = None,
) -> TransitionResult:
    """Feed several text messages through the machine, stopping at the first effect."""
    result = TransitionResult(session=session or Session())
    for text in texts:
        result = machine.transition(result.session, msg(text), ctx)
        if result.effect is not None:
            break
    return result


BOOKING_DETAILS = ("hi", "2", "John Smith", "10 Feb 2026", "12 Feb 2026", "2", "0")


@pytest.fixture
def bot_config():
    return BotConfig()


@pytest.fixture
def machine(bot_config):
    return DialogueStateMachine(bot_config)


@pytest.fixture
def ctx():
    return make_context()


@pytest.fixture
def catalog():
    return InMemoryCatalog(hotels=[make_hotel()], rooms=make_rooms(), photos=make_photos())


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def booking_store():
    return InMemoryBookingStore()


@pytest.fixture
def relay():
    return InMemoryMediaRelay()


@pytest.fixture
def transcript():
    return InMemoryTranscriptSink()


@pytest.fixture
def engine(catalog, session_store, booking_store, relay, transcript, bot_config):
    return DialogueEngine(
        catalog=catalog,
        sessions=session_store,
        bookings=booking_store,
        relay=relay,
        transcript=transcript,
        config=bot_config,
        clock=lambda: NOW,
    )
