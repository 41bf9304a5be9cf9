"""
Booking orchestrator: a strictly ordered collection of guest details.

    name -> check-in -> check-out -> adults -> children -> confirm details
         -> room selection (skipped when a room was picked from its detail page)
         -> final price confirmation -> commit

Every step validates its answer before moving on. A rejected answer
re-prompts and leaves the session untouched, so nothing collected so far
is lost. The commit is requested as a CreateBooking effect; the outcome
arrives through ``complete``.
"""

import logging
import re
from typing import Optional

from hotel_concierge.config import BotConfig
from hotel_concierge.conversation import replies
from hotel_concierge.conversation.date_parser import format_display, parse_date
from hotel_concierge.conversation.effects import CreateBooking, EffectOutcome
from hotel_concierge.conversation.transitions import (
    DialogueContext,
    TransitionResult,
    normalize_reply,
    not_understood,
    parse_choice,
    stay,
    to_main_menu,
)
from hotel_concierge.schemas.booking_schema import NewBooking
from hotel_concierge.schemas.catalog_schema import RoomOption
from hotel_concierge.schemas.message_schema import InboundMessage
from hotel_concierge.schemas.session_schema import (
    BookingData,
    DialogueState,
    Session,
    UploadData,
)
from hotel_concierge.tools.pricing import stay_total

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
BOOKING_NOTE = "Booked via WhatsApp assistant"

_COUNT = re.compile(r"\d{1,3}")

CONFIRM_TOKENS = frozenset({"1", "yes", "y", "confirm", "ok", "okay"})
RESTART_TOKENS = frozenset({"2", "no", "n", "restart", "change", "start over"})
CANCEL_TOKENS = frozenset({"2", "no", "n", "cancel"})


def _normalize_name(raw: str) -> str:
    name = " ".join(raw.split())
    if name.islower():
        return name.title()
    return name


def _parse_count(text: str) -> Optional[int]:
    candidate = text.strip()
    if _COUNT.fullmatch(candidate):
        return int(candidate)
    return None


class BookingOrchestrator:
    """Collects, validates and commits a room booking one message at a time."""

    def __init__(self, config: BotConfig) -> None:
        self._config = config

    # ------------------------------------------------------------------ #
    # Entry
    # ------------------------------------------------------------------ #

    def start(
        self, session: Session, ctx: DialogueContext, room: Optional[RoomOption] = None
    ) -> TransitionResult:
        """Begin a booking, optionally for a room chosen from its detail page."""
        data = BookingData(room=room, room_preselected=room is not None)
        reply = replies.ASK_NAME
        if room is not None:
            reply = f"🛏️ Room: *{room.name}*\n\n{reply}"
        return TransitionResult(
            session=session.enter(DialogueState.BOOKING_NAME, data), reply=reply
        )

    # ------------------------------------------------------------------ #
    # Guest details
    # ------------------------------------------------------------------ #

    def handle_name(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        name = _normalize_name(message.text)
        if len(name) < MIN_NAME_LENGTH:
            return stay(session, replies.INVALID_NAME)
        data = session.data.model_copy(update={"guest_name": name})
        return TransitionResult(
            session=session.enter(DialogueState.BOOKING_CHECKIN, data),
            reply=replies.ask_check_in(name),
        )

    def handle_check_in(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        parsed = parse_date(message.text)
        if not parsed.valid:
            return stay(session, replies.invalid_date("check-in date"))
        if parsed.date < ctx.today:
            return stay(session, replies.CHECKIN_IN_PAST)
        data = session.data.model_copy(update={"check_in": parsed.date})
        return TransitionResult(
            session=session.enter(DialogueState.BOOKING_CHECKOUT, data),
            reply=replies.ask_check_out(parsed.display),
        )

    def handle_check_out(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        data: BookingData = session.data
        parsed = parse_date(message.text)
        if not parsed.valid:
            return stay(session, replies.invalid_date("check-out date"))
        if parsed.date <= data.check_in:
            return stay(session, replies.checkout_not_after(format_display(data.check_in)))
        data = data.model_copy(update={"check_out": parsed.date})
        return TransitionResult(
            session=session.enter(DialogueState.BOOKING_ADULTS, data),
            reply=replies.ask_adults(parsed.display, data.nights),
        )

    def handle_adults(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        adults = _parse_count(message.text)
        if adults is None or not 1 <= adults <= self._config.max_adults:
            return stay(session, replies.invalid_adults(self._config.max_adults))
        data = session.data.model_copy(update={"adults": adults})
        return TransitionResult(
            session=session.enter(DialogueState.BOOKING_CHILDREN, data),
            reply=replies.ASK_CHILDREN,
        )

    def handle_children(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        children = _parse_count(message.text)
        if children is None or not 0 <= children <= self._config.max_children:
            return stay(session, replies.invalid_children(self._config.max_children))
        data = session.data.model_copy(update={"children": children})
        return TransitionResult(
            session=session.enter(DialogueState.BOOKING_CONFIRM_DETAILS, data),
            reply=replies.build_booking_summary(data),
        )

    # ------------------------------------------------------------------ #
    # Confirmation gates
    # ------------------------------------------------------------------ #

    def handle_confirm_details(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        data: BookingData = session.data
        answer = normalize_reply(message.text)

        if answer in RESTART_TOKENS:
            return self.start(session, ctx, data.room if data.room_preselected else None)
        if answer not in CONFIRM_TOKENS:
            return not_understood(session)

        if data.room is not None:
            return self._ask_final_confirmation(session, data)

        # Freeze the list shown now; the next numeric reply resolves against it.
        options = tuple(RoomOption.from_room(room) for room in ctx.rooms)
        if not options:
            return to_main_menu(session, ctx, replies.NO_ROOMS)
        data = data.model_copy(update={"room_options": options})
        return TransitionResult(
            session=session.enter(DialogueState.BOOKING_ROOM_SELECT, data),
            reply=replies.build_room_selection(
                options, data.nights, self._config.currency_symbol
            ),
        )

    def handle_room_select(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        data: BookingData = session.data
        choice = parse_choice(message.text)
        if choice is None or not 1 <= choice <= len(data.room_options):
            return not_understood(session)
        data = data.model_copy(update={"room": data.room_options[choice - 1]})
        return self._ask_final_confirmation(session, data)

    def _ask_final_confirmation(self, session: Session, data: BookingData) -> TransitionResult:
        return TransitionResult(
            session=session.enter(DialogueState.BOOKING_FINAL_CONFIRM, data),
            reply=replies.build_final_confirmation(data, self._config.currency_symbol),
        )

    def handle_final_confirm(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        data: BookingData = session.data
        answer = normalize_reply(message.text)

        if answer in CANCEL_TOKENS:
            logger.info("Guest cancelled booking at final confirmation")
            return to_main_menu(session, ctx, replies.BOOKING_CANCELLED)
        if answer not in CONFIRM_TOKENS:
            return not_understood(session)

        booking = NewBooking(
            hotel_id=ctx.hotel.id,
            room_type_id=data.room.id,
            room_name=data.room.name,
            guest_name=data.guest_name,
            guest_phone=ctx.contact_id,
            check_in_date=data.check_in,
            check_out_date=data.check_out,
            adults=data.adults,
            children=data.children,
            total_price=stay_total(data.room.base_price, data.nights),
            notes=BOOKING_NOTE,
        )
        return TransitionResult(session=session, effect=CreateBooking(booking))

    # ------------------------------------------------------------------ #
    # Commit outcome
    # ------------------------------------------------------------------ #

    def complete(
        self, session: Session, outcome: EffectOutcome, ctx: DialogueContext
    ) -> TransitionResult:
        """Finish the flow once the engine has tried to persist the booking."""
        if not outcome.ok or outcome.booking is None:
            logger.error("Booking could not be saved: %s", outcome.error)
            return to_main_menu(session, ctx, replies.BOOKING_FAILED)

        booking = outcome.booking
        logger.info("Booking %s created, moving to ID upload", booking.booking_id)
        return TransitionResult(
            session=session.enter(
                DialogueState.ID_UPLOAD_PROMPT, UploadData(booking_id=booking.booking_id)
            ),
            reply=replies.build_booking_created(
                booking, self._config.currency_symbol, self._config.max_id_uploads
            ),
        )
