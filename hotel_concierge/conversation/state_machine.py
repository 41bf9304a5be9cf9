"""
Finite state machine for the WhatsApp booking assistant.

Every inbound message is dispatched on the session's current state:

    global command?  -> reset / handoff / greeting, whatever the state
    otherwise        -> the handler registered for the state

Handlers are pure. They read the session, the message and a preloaded
DialogueContext and return a TransitionResult. When a step needs I/O whose
result shapes the reply (saving a booking, storing a document, looking a
booking up) the result carries an Effect instead of a reply; the engine
performs it and calls ``resume`` with the outcome.

Usage:
    machine = DialogueStateMachine()
    result = machine.transition(Session(), message, ctx)
    assert result.state == DialogueState.MAIN_MENU
"""

import logging
from typing import Callable

from hotel_concierge.config import BotConfig, settings
from hotel_concierge.conversation import replies
from hotel_concierge.conversation.booking_flow import BookingOrchestrator
from hotel_concierge.conversation.commands import (
    CommandKind,
    GlobalCommand,
    GlobalCommandInterceptor,
)
from hotel_concierge.conversation.document_intake import DocumentIntake
from hotel_concierge.conversation.effects import (
    CreateBooking,
    Effect,
    EffectOutcome,
    FindBookingById,
    FindBookingsByContact,
    StoreDocument,
)
from hotel_concierge.conversation.intent import Intent, detect_intent
from hotel_concierge.conversation.status_lookup import StatusLookup
from hotel_concierge.conversation.transitions import (
    DialogueContext,
    TransitionResult,
    not_understood,
    parse_choice,
    to_handoff,
    to_main_menu,
)
from hotel_concierge.schemas.catalog_schema import RoomOption
from hotel_concierge.schemas.message_schema import InboundMessage, MediaItem
from hotel_concierge.schemas.session_schema import (
    DialogueState,
    RoomBrowseData,
    Session,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Session, InboundMessage, DialogueContext], TransitionResult]

# State -> name of the DialogueStateMachine method handling it
STATE_HANDLERS: dict[DialogueState, str] = {
    DialogueState.WELCOME: "_handle_welcome",
    DialogueState.MAIN_MENU: "_handle_main_menu",
    DialogueState.ROOMS_LIST: "_handle_rooms_list",
    DialogueState.ROOM_DETAIL: "_handle_room_detail",
    DialogueState.LOCATION: "_handle_location",
    DialogueState.HUMAN_HANDOFF: "_handle_handoff",
    DialogueState.BOOKING_NAME: "_handle_booking_name",
    DialogueState.BOOKING_CHECKIN: "_handle_booking_check_in",
    DialogueState.BOOKING_CHECKOUT: "_handle_booking_check_out",
    DialogueState.BOOKING_ADULTS: "_handle_booking_adults",
    DialogueState.BOOKING_CHILDREN: "_handle_booking_children",
    DialogueState.BOOKING_CONFIRM_DETAILS: "_handle_booking_confirm_details",
    DialogueState.BOOKING_ROOM_SELECT: "_handle_booking_room_select",
    DialogueState.BOOKING_FINAL_CONFIRM: "_handle_booking_final_confirm",
    DialogueState.ID_UPLOAD_PROMPT: "_handle_upload_prompt",
    DialogueState.ID_UPLOAD_WAITING: "_handle_upload_waiting",
    DialogueState.CHECK_BOOKING_ID: "_handle_check_booking_id",
    DialogueState.BOOKING_STATUS_OPTIONS: "_handle_status_options",
    DialogueState.BOOKING_NOT_FOUND: "_handle_booking_not_found",
}

_unhandled = set(DialogueState) - set(STATE_HANDLERS)
if _unhandled:
    raise RuntimeError(
        f"No handler registered for states: {sorted(s.value for s in _unhandled)}"
    )


class MainMenuChoice:
    """Numbered options of the main menu."""
    ROOMS = 1
    BOOK = 2
    LOCATION = 3
    RECEPTION = 4
    STATUS = 5
    STAFF = 6


INTENT_CHOICES: dict[Intent, int] = {
    Intent.ROOMS: MainMenuChoice.ROOMS,
    Intent.BOOK: MainMenuChoice.BOOK,
    Intent.LOCATION: MainMenuChoice.LOCATION,
    Intent.RECEPTION: MainMenuChoice.RECEPTION,
    Intent.STATUS: MainMenuChoice.STATUS,
}


class DialogueStateMachine:
    """
    Deterministic dialogue controller.

    Holds no per-conversation state: everything a step needs is in the
    session, the message and the context, so one instance serves every
    contact of every hotel.
    """

    def __init__(self, config: BotConfig = settings.bot) -> None:
        self._config = config
        self._interceptor = GlobalCommandInterceptor()
        self._booking = BookingOrchestrator(config)
        self._intake = DocumentIntake(config)
        self._lookup = StatusLookup(config)
        self._handlers: dict[DialogueState, Handler] = {
            state: getattr(self, name) for state, name in STATE_HANDLERS.items()
        }

    def transition(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        """
        Process one inbound message.

        Args:
            session: The contact's current session.
            message: The inbound message (text and optional attachment).
            ctx: Hotel, rooms, photos and today's date for this tenant.

        Returns:
            The successor session with a reply, or a pending effect.
        """
        command = self._interceptor.intercept(session, message.text)
        if command is not None:
            result = self._apply_command(session, command, ctx)
        else:
            result = self._handlers[session.state](session, message, ctx)

        self._log_transition(session, result)
        return result

    def resume(
        self,
        session: Session,
        effect: Effect,
        outcome: EffectOutcome,
        ctx: DialogueContext,
    ) -> TransitionResult:
        """Finish a step once the engine has executed its effect."""
        if isinstance(effect, CreateBooking):
            result = self._booking.complete(session, outcome, ctx)
        elif isinstance(effect, StoreDocument):
            result = self._intake.complete(session, outcome, ctx)
        elif isinstance(effect, FindBookingById):
            result = self._lookup.complete_by_id(session, outcome, ctx)
        elif isinstance(effect, FindBookingsByContact):
            result = self._lookup.complete_by_contact(session, outcome, ctx)
        else:
            raise TypeError(f"Unknown effect: {type(effect).__name__}")

        self._log_transition(session, result)
        return result

    def _apply_command(
        self, session: Session, command: GlobalCommand, ctx: DialogueContext
    ) -> TransitionResult:
        if command.kind == CommandKind.HANDOFF:
            return to_handoff(session, ctx)
        if command.kind == CommandKind.GREETING:
            return TransitionResult(
                session=session.enter(DialogueState.MAIN_MENU),
                reply=replies.build_welcome(ctx.hotel),
            )
        return to_main_menu(session, ctx)

    @staticmethod
    def _log_transition(before: Session, result: TransitionResult) -> None:
        if result.state != before.state:
            logger.info("State transition: %s -> %s", before.state.value, result.state.value)

    # ------------------------------------------------------------------ #
    # Top level
    # ------------------------------------------------------------------ #

    def _handle_welcome(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        return TransitionResult(
            session=session.enter(DialogueState.MAIN_MENU),
            reply=replies.build_welcome(ctx.hotel),
        )

    def _handle_main_menu(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        choice = parse_choice(message.text)
        if choice is None:
            intent = detect_intent(message.text.lower())
            choice = INTENT_CHOICES.get(intent)
            if choice is not None:
                logger.debug("Intent '%s' detected at main menu", intent.value)

        if choice == MainMenuChoice.ROOMS:
            return self._show_rooms(session, ctx)
        if choice == MainMenuChoice.BOOK:
            return self._booking.start(session, ctx)
        if choice == MainMenuChoice.LOCATION:
            return TransitionResult(
                session=session.enter(DialogueState.LOCATION),
                reply=replies.build_location(ctx.hotel),
            )
        if choice == MainMenuChoice.RECEPTION:
            return TransitionResult(
                session=session.enter(DialogueState.MAIN_MENU),
                reply=replies.build_reception(ctx.hotel),
            )
        if choice == MainMenuChoice.STATUS:
            return self._lookup.start(session, ctx)
        if choice == MainMenuChoice.STAFF:
            return to_handoff(session, ctx)
        return not_understood(session)

    def _handle_location(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        choice = parse_choice(message.text)
        if choice == 1:
            return self._booking.start(session, ctx)
        if choice == 2:
            return self._show_rooms(session, ctx)
        return not_understood(session)

    def _handle_handoff(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        # Staff reply from the live chat; the bot stays quiet.
        return TransitionResult(session=session)

    # ------------------------------------------------------------------ #
    # Room browsing
    # ------------------------------------------------------------------ #

    def _show_rooms(self, session: Session, ctx: DialogueContext) -> TransitionResult:
        options = tuple(RoomOption.from_room(room) for room in ctx.rooms)
        if not options:
            return to_main_menu(session, ctx, replies.NO_ROOMS)
        return self._list_rooms(session, ctx, options)

    def _list_rooms(
        self, session: Session, ctx: DialogueContext, options: tuple[RoomOption, ...]
    ) -> TransitionResult:
        return TransitionResult(
            session=session.enter(DialogueState.ROOMS_LIST, RoomBrowseData(options=options)),
            reply=replies.build_room_list(ctx.hotel, options, self._config.currency_symbol),
        )

    def _handle_rooms_list(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        data: RoomBrowseData = session.data
        choice = parse_choice(message.text)
        if choice is None or not 1 <= choice <= len(data.options):
            return not_understood(session)

        selected = data.options[choice - 1]
        photos = ctx.photos.get(selected.id, [])[: self._config.max_room_photos]
        media = [
            MediaItem(url=photo.photo_url, caption=selected.name if index == 0 else None)
            for index, photo in enumerate(photos)
        ]
        return TransitionResult(
            session=session.enter(
                DialogueState.ROOM_DETAIL, data.model_copy(update={"selected": selected})
            ),
            reply=replies.build_room_detail(selected, self._config.currency_symbol),
            media=media,
        )

    def _handle_room_detail(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        data: RoomBrowseData = session.data
        choice = parse_choice(message.text)
        if choice == 1:
            return self._booking.start(session, ctx, room=data.selected)
        if choice == 2:
            return self._list_rooms(session, ctx, data.options)
        return not_understood(session)

    # ------------------------------------------------------------------ #
    # Sub-flows
    # ------------------------------------------------------------------ #

    def _handle_booking_name(self, session, message, ctx):
        return self._booking.handle_name(session, message, ctx)

    def _handle_booking_check_in(self, session, message, ctx):
        return self._booking.handle_check_in(session, message, ctx)

    def _handle_booking_check_out(self, session, message, ctx):
        return self._booking.handle_check_out(session, message, ctx)

    def _handle_booking_adults(self, session, message, ctx):
        return self._booking.handle_adults(session, message, ctx)

    def _handle_booking_children(self, session, message, ctx):
        return self._booking.handle_children(session, message, ctx)

    def _handle_booking_confirm_details(self, session, message, ctx):
        return self._booking.handle_confirm_details(session, message, ctx)

    def _handle_booking_room_select(self, session, message, ctx):
        return self._booking.handle_room_select(session, message, ctx)

    def _handle_booking_final_confirm(self, session, message, ctx):
        return self._booking.handle_final_confirm(session, message, ctx)

    def _handle_upload_prompt(self, session, message, ctx):
        return self._intake.handle_prompt(session, message, ctx)

    def _handle_upload_waiting(self, session, message, ctx):
        return self._intake.handle_waiting(session, message, ctx)

    def _handle_check_booking_id(self, session, message, ctx):
        return self._lookup.handle_booking_id(session, message, ctx)

    def _handle_status_options(self, session, message, ctx):
        return self._lookup.handle_status_options(session, message, ctx)

    def _handle_booking_not_found(self, session, message, ctx):
        return self._lookup.handle_not_found(session, message, ctx)
