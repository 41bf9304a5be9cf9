"""
Capabilities the dialogue engine needs from the outside world.

All of them are async so a database- or HTTP-backed implementation can be
dropped in without touching the engine. In-memory versions live next to
this module and back the tests and the console demo.
"""

from typing import Optional, Protocol

from hotel_concierge.schemas.booking_schema import Booking
from hotel_concierge.schemas.catalog_schema import Hotel, RoomPhoto, RoomType
from hotel_concierge.schemas.message_schema import TranscriptEntry
from hotel_concierge.schemas.session_schema import Session


class CatalogReader(Protocol):
    async def get_active_hotel(self, channel_id: str) -> Optional[Hotel]: ...

    async def list_available_rooms(self, hotel_id: str) -> list[RoomType]: ...

    async def get_room_photos(self, room_type_id: str) -> list[RoomPhoto]: ...


class SessionStore(Protocol):
    async def get(self, tenant_id: str, contact_id: str) -> Optional[Session]: ...

    async def upsert(self, tenant_id: str, contact_id: str, session: Session) -> None:
        """Raises SessionStoreError when the write is rejected."""
        ...


class BookingWriter(Protocol):
    async def create_booking(self, booking: Booking) -> Booking:
        """Raises DuplicateBookingIdError if the id is taken, PersistenceError otherwise."""
        ...

    async def find_booking_by_id(self, hotel_id: str, booking_id: str) -> Optional[Booking]: ...

    async def find_bookings_by_contact(
        self, hotel_id: str, contact_id: str, limit: int
    ) -> list[Booking]: ...

    async def append_document_ref(self, booking_id: str, ref: str) -> None: ...


class MediaRelay(Protocol):
    async def fetch_inbound_media(self, handle: str) -> tuple[bytes, str]:
        """Download an inbound attachment; returns its bytes and MIME type."""
        ...

    async def store_document(self, booking_id: str, content: bytes, mime_type: str) -> str:
        """Persist an ID document and return its storage reference."""
        ...

    async def send_text(self, contact_id: str, text: str) -> Optional[str]:
        """Send a text message; returns the gateway's message id when it has one."""
        ...

    async def send_image(
        self, contact_id: str, url: str, caption: Optional[str] = None
    ) -> Optional[str]: ...


class TranscriptSink(Protocol):
    async def append(self, entry: TranscriptEntry) -> None: ...
