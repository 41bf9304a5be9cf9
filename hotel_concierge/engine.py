"""
Dialogue engine facade.

One call to ``DialogueEngine.handle`` processes one inbound WhatsApp
message end to end:

    resolve hotel -> load session -> load context -> state machine
      -> run effects (booking insert, document storage, lookups)
      -> persist session -> send photos and reply -> record transcript

Messages from the same contact to the same hotel are processed strictly
one at a time in arrival order; different contacts run concurrently.
Outbound sends are best-effort. Persistence failures end the flow with an
apology. ``StoreUnavailableError`` propagates so the gateway redelivers.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from hotel_concierge.config import BotConfig, settings
from hotel_concierge.conversation import replies
from hotel_concierge.conversation.effects import (
    CreateBooking,
    Effect,
    EffectOutcome,
    FindBookingById,
    FindBookingsByContact,
    StoreDocument,
)
from hotel_concierge.conversation.state_machine import DialogueStateMachine
from hotel_concierge.conversation.transitions import DialogueContext, TransitionResult
from hotel_concierge.errors import (
    DeliveryError,
    DuplicateBookingIdError,
    MediaRelayError,
    PersistenceError,
    SessionStoreError,
)
from hotel_concierge.logging_context import get_conversation_logger, set_conversation_id
from hotel_concierge.schemas.booking_schema import Booking
from hotel_concierge.schemas.catalog_schema import Hotel, RoomPhoto
from hotel_concierge.schemas.message_schema import InboundMessage, MediaItem, TranscriptEntry
from hotel_concierge.schemas.session_schema import DialogueState, Session
from hotel_concierge.tools.booking import generate_booking_id
from hotel_concierge.tools.ports import (
    BookingWriter,
    CatalogReader,
    MediaRelay,
    SessionStore,
    TranscriptSink,
)

logger = get_conversation_logger(__name__)

ContactKey = tuple[str, str]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class EngineResult:
    """What happened to one inbound message."""
    processed: bool
    state: Optional[DialogueState] = None
    reply: Optional[str] = None
    media: list[MediaItem] = field(default_factory=list)
    delivered: bool = True
    reason: Optional[str] = None


class DialogueEngine:
    """Runs the state machine against real collaborators, one message at a time per contact."""

    def __init__(
        self,
        catalog: CatalogReader,
        sessions: SessionStore,
        bookings: BookingWriter,
        relay: MediaRelay,
        transcript: TranscriptSink,
        config: BotConfig = settings.bot,
        machine: Optional[DialogueStateMachine] = None,
        clock: Callable[[], datetime] = _utc_now,
        id_generator: Callable[[str], str] = generate_booking_id,
    ) -> None:
        self._catalog = catalog
        self._sessions = sessions
        self._bookings = bookings
        self._relay = relay
        self._transcript = transcript
        self._config = config
        self._machine = machine or DialogueStateMachine(config)
        self._clock = clock
        self._id_generator = id_generator
        self._timezone = ZoneInfo(config.hotel_timezone)
        self._locks: dict[ContactKey, asyncio.Lock] = {}
        self._lock_users: dict[ContactKey, int] = {}

    # ------------------------------------------------------------------ #
    # Per-contact ordering
    # ------------------------------------------------------------------ #

    def _checkout_lock(self, key: ContactKey) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        return lock

    def _return_lock(self, key: ContactKey) -> None:
        self._lock_users[key] -= 1
        if self._lock_users[key] == 0:
            del self._lock_users[key]
            del self._locks[key]

    @property
    def active_contacts(self) -> int:
        return len(self._locks)

    async def handle(self, message: InboundMessage) -> EngineResult:
        """
        Process one inbound message.

        Args:
            message: The normalized gateway event.

        Returns:
            EngineResult describing the reply that was sent.

        Raises:
            StoreUnavailableError: The data store could not be reached.
            SessionStoreError: The session could not be saved, even reset.
        """
        key = (message.channel_id, message.contact_id)
        lock = self._checkout_lock(key)
        try:
            async with lock:
                return await self._process(message)
        finally:
            self._return_lock(key)

    # ------------------------------------------------------------------ #
    # Processing
    # ------------------------------------------------------------------ #

    async def _process(self, message: InboundMessage) -> EngineResult:
        set_conversation_id(message.conversation_id)

        hotel = await self._catalog.get_active_hotel(message.channel_id)
        if hotel is None:
            logger.warning("No active hotel for channel %s, message ignored", message.channel_id)
            return EngineResult(processed=False, reason="no_hotel")

        session = await self._sessions.get(message.channel_id, message.contact_id)
        if session is None:
            session = Session()
            logger.info("New conversation started")

        ctx = await self._load_context(hotel, session, message.contact_id)
        result = self._machine.transition(session, message, ctx)
        created_booking_id: Optional[str] = None
        while result.effect is not None:
            effect = result.effect
            outcome = await self._execute(effect, hotel)
            if isinstance(effect, CreateBooking) and outcome.ok:
                created_booking_id = outcome.booking.booking_id
            result = self._machine.resume(result.session, effect, outcome, ctx)

        reply, media, final = await self._persist(message, result, created_booking_id)

        delivered = await self._deliver(message, media, reply)
        return EngineResult(
            processed=True,
            state=final.state,
            reply=reply,
            media=media,
            delivered=delivered,
        )

    async def _load_context(
        self, hotel: Hotel, session: Session, contact_id: str
    ) -> DialogueContext:
        rooms = await self._catalog.list_available_rooms(hotel.id)
        photos: dict[str, list[RoomPhoto]] = {}
        # Photos are only shown when a room is picked from the list.
        if session.state == DialogueState.ROOMS_LIST:
            fetched = await asyncio.gather(
                *(self._catalog.get_room_photos(option.id) for option in session.data.options)
            )
            photos = {
                option.id: room_photos
                for option, room_photos in zip(session.data.options, fetched)
            }
        today: date = self._clock().astimezone(self._timezone).date()
        return DialogueContext(
            hotel=hotel, rooms=rooms, photos=photos, contact_id=contact_id, today=today
        )

    async def _persist(
        self,
        message: InboundMessage,
        result: TransitionResult,
        created_booking_id: Optional[str] = None,
    ) -> tuple[Optional[str], list[MediaItem], Session]:
        """
        Save the successor session; fall back to a reset session once.

        A booking written during this message is still reported to the guest
        when only the session save failed.
        """
        session = result.session.touch(self._clock())
        try:
            await self._sessions.upsert(message.channel_id, message.contact_id, session)
            return result.reply, result.media, session
        except SessionStoreError as exc:
            logger.error("Session save failed, storing a reset session: %s", exc)

        reset = Session(state=DialogueState.MAIN_MENU).touch(self._clock())
        await self._sessions.upsert(message.channel_id, message.contact_id, reset)
        return replies.build_session_save_failed(created_booking_id), [], reset

    # ------------------------------------------------------------------ #
    # Effects
    # ------------------------------------------------------------------ #

    async def _execute(self, effect: Effect, hotel: Hotel) -> EffectOutcome:
        if isinstance(effect, CreateBooking):
            return await self._create_booking(effect, hotel)
        if isinstance(effect, StoreDocument):
            return await self._store_document(effect)
        if isinstance(effect, FindBookingById):
            try:
                booking = await self._bookings.find_booking_by_id(
                    effect.hotel_id, effect.booking_id
                )
            except PersistenceError as exc:
                return EffectOutcome.failed(str(exc))
            return EffectOutcome(ok=True, booking=booking)
        if isinstance(effect, FindBookingsByContact):
            try:
                bookings = await self._bookings.find_bookings_by_contact(
                    effect.hotel_id, effect.contact_id, effect.limit
                )
            except PersistenceError as exc:
                return EffectOutcome.failed(str(exc))
            return EffectOutcome(ok=True, bookings=bookings)
        raise TypeError(f"Unknown effect: {type(effect).__name__}")

    async def _create_booking(self, effect: CreateBooking, hotel: Hotel) -> EffectOutcome:
        """Insert the booking, drawing a fresh id whenever the store reports a clash."""
        attempts = self._config.booking_id_attempts
        for attempt in range(1, attempts + 1):
            booking = Booking.from_new(effect.booking, self._id_generator(hotel.name))
            try:
                stored = await self._bookings.create_booking(booking)
            except DuplicateBookingIdError:
                logger.warning(
                    "Booking id %s already taken (attempt %d/%d)",
                    booking.booking_id, attempt, attempts,
                )
                continue
            except PersistenceError as exc:
                logger.error("Booking insert failed: %s", exc)
                return EffectOutcome.failed(str(exc))
            logger.info("Booking %s created for %s", stored.booking_id, stored.guest_name)
            return EffectOutcome(ok=True, booking=stored)

        logger.error("No unique booking id after %d attempts", attempts)
        return EffectOutcome.failed("booking id space exhausted")

    async def _store_document(self, effect: StoreDocument) -> EffectOutcome:
        attachment = effect.attachment
        try:
            content, mime_type = await self._relay.fetch_inbound_media(attachment.handle)
            ref = await self._relay.store_document(effect.booking_id, content, mime_type)
            await self._bookings.append_document_ref(effect.booking_id, ref)
        except (MediaRelayError, PersistenceError) as exc:
            return EffectOutcome.failed(str(exc))
        logger.info("ID document stored for %s", effect.booking_id)
        return EffectOutcome(ok=True, document_ref=ref)

    # ------------------------------------------------------------------ #
    # Delivery
    # ------------------------------------------------------------------ #

    async def _deliver(
        self, message: InboundMessage, media: list[MediaItem], reply: Optional[str]
    ) -> bool:
        """Send photos first, then the text. Returns False if anything failed."""
        delivered = True
        for item in media:
            delivered &= await self._send(
                message, lambda: self._relay.send_image(message.contact_id, item.url, item.caption),
                media_url=item.url, text=item.caption,
            )
        if reply is not None:
            delivered &= await self._send(
                message, lambda: self._relay.send_text(message.contact_id, reply), text=reply,
            )
        return delivered

    async def _send(
        self,
        message: InboundMessage,
        send: Callable,
        text: Optional[str] = None,
        media_url: Optional[str] = None,
    ) -> bool:
        entry = TranscriptEntry(
            channel_id=message.channel_id,
            contact_id=message.contact_id,
            text=text,
            media_url=media_url,
            delivered=True,
        )
        try:
            entry.message_ref = await send()
        except DeliveryError as exc:
            logger.warning("Outbound message not delivered: %s", exc)
            entry.delivered = False
            entry.error = str(exc)
        await self._transcript.append(entry)
        return entry.delivered
