"""Read-only booking status lookup by booking id or by the guest's own number."""

import logging

from hotel_concierge.config import BotConfig
from hotel_concierge.conversation import replies
from hotel_concierge.conversation.effects import (
    EffectOutcome,
    FindBookingById,
    FindBookingsByContact,
)
from hotel_concierge.conversation.transitions import (
    DialogueContext,
    TransitionResult,
    not_understood,
    parse_choice,
    stay,
    to_handoff,
)
from hotel_concierge.schemas.message_schema import InboundMessage
from hotel_concierge.schemas.session_schema import DialogueState, LookupData, Session

logger = logging.getLogger(__name__)


class StatusLookup:

    def __init__(self, config: BotConfig) -> None:
        self._config = config

    def start(self, session: Session, ctx: DialogueContext) -> TransitionResult:
        return TransitionResult(
            session=session.enter(DialogueState.CHECK_BOOKING_ID, LookupData()),
            reply=replies.ASK_BOOKING_ID,
        )

    def handle_booking_id(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        query = "".join(message.text.split()).upper()
        if not query:
            return stay(session, replies.ASK_BOOKING_ID)
        data = LookupData(query=query)
        return TransitionResult(
            session=session.enter(DialogueState.CHECK_BOOKING_ID, data),
            effect=FindBookingById(hotel_id=ctx.hotel.id, booking_id=query),
        )

    def complete_by_id(
        self, session: Session, outcome: EffectOutcome, ctx: DialogueContext
    ) -> TransitionResult:
        data: LookupData = session.data
        if not outcome.ok:
            logger.error("Booking lookup for %s failed: %s", data.query, outcome.error)
            return stay(session, replies.LOOKUP_FAILED)
        booking = outcome.booking
        if booking is None:
            logger.info("Booking %s not found", data.query)
            return TransitionResult(
                session=session.enter(DialogueState.BOOKING_NOT_FOUND, data),
                reply=replies.build_booking_not_found(data.query),
            )
        data = data.model_copy(update={"booking_id": booking.booking_id})
        return TransitionResult(
            session=session.enter(DialogueState.BOOKING_STATUS_OPTIONS, data),
            reply=replies.build_booking_status(booking, self._config.currency_symbol),
        )

    def handle_status_options(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        data: LookupData = session.data
        choice = parse_choice(message.text)
        if choice == 1:
            return to_handoff(session, ctx, replies.build_modify_request(data.booking_id))
        if choice == 2:
            return self.start(session, ctx)
        if choice == 3:
            return to_handoff(session, ctx)
        return not_understood(session)

    def handle_not_found(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        choice = parse_choice(message.text)
        if choice == 1:
            return self.start(session, ctx)
        if choice == 2:
            return TransitionResult(
                session=session,
                effect=FindBookingsByContact(
                    hotel_id=ctx.hotel.id,
                    contact_id=ctx.contact_id,
                    limit=self._config.recent_bookings_limit,
                ),
            )
        if choice == 3:
            return to_handoff(session, ctx)
        return not_understood(session)

    def complete_by_contact(
        self, session: Session, outcome: EffectOutcome, ctx: DialogueContext
    ) -> TransitionResult:
        """List the guest's recent bookings; a booking id typed next is looked up."""
        if not outcome.ok:
            logger.error("Contact booking lookup failed: %s", outcome.error)
            return stay(session, replies.LOOKUP_FAILED)
        if not outcome.bookings:
            return stay(session, replies.build_no_contact_bookings())
        return TransitionResult(
            session=session.enter(DialogueState.CHECK_BOOKING_ID, LookupData()),
            reply=replies.build_contact_bookings(outcome.bookings),
        )
