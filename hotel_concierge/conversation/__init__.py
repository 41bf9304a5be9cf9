from hotel_concierge.conversation.commands import CommandKind, GlobalCommandInterceptor
from hotel_concierge.conversation.date_parser import ParsedDate, parse_date
from hotel_concierge.conversation.effects import (
    CreateBooking,
    EffectOutcome,
    FindBookingById,
    FindBookingsByContact,
    StoreDocument,
)
from hotel_concierge.conversation.intent import Intent, detect_intent
from hotel_concierge.conversation.state_machine import DialogueStateMachine
from hotel_concierge.conversation.transitions import DialogueContext, TransitionResult

__all__ = [
    "DialogueStateMachine",
    "DialogueContext",
    "TransitionResult",
    "GlobalCommandInterceptor",
    "CommandKind",
    "CreateBooking",
    "StoreDocument",
    "FindBookingById",
    "FindBookingsByContact",
    "EffectOutcome",
    "Intent",
    "detect_intent",
    "ParsedDate",
    "parse_date",
]
