"""Inputs and outputs of a single dialogue step, plus shared result builders."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from hotel_concierge.conversation import replies
from hotel_concierge.conversation.effects import Effect
from hotel_concierge.schemas.catalog_schema import Hotel, RoomPhoto, RoomType
from hotel_concierge.schemas.message_schema import MediaItem
from hotel_concierge.schemas.session_schema import DialogueState, Session


@dataclass(frozen=True)
class DialogueContext:
    """Everything a step may read besides the session and the message.

    Loaded by the engine before dispatch so the step itself stays pure.
    """
    hotel: Hotel
    rooms: list[RoomType]
    photos: dict[str, list[RoomPhoto]]
    contact_id: str
    today: date


@dataclass
class TransitionResult:
    """Outcome of one step.

    ``reply`` is None when nothing should be sent (a relayed message during
    a handoff, or a pending effect whose outcome decides the reply).
    """
    session: Session
    reply: Optional[str] = None
    media: list[MediaItem] = field(default_factory=list)
    effect: Optional[Effect] = None

    @property
    def state(self) -> DialogueState:
        return self.session.state


def parse_choice(text: str) -> Optional[int]:
    """Return the number a guest typed, or None when the reply isn't a bare number."""
    candidate = text.strip()
    if candidate.isdecimal():
        return int(candidate)
    return None


def normalize_reply(text: str) -> str:
    return " ".join(text.lower().split()).rstrip("!.")


def stay(session: Session, reply: str) -> TransitionResult:
    """Re-prompt without touching the session."""
    return TransitionResult(session=session, reply=reply)


def not_understood(session: Session) -> TransitionResult:
    return stay(session, replies.NOT_UNDERSTOOD)


def to_main_menu(
    session: Session, ctx: DialogueContext, notice: Optional[str] = None
) -> TransitionResult:
    """Return to the top-level menu, clearing flow data."""
    menu = replies.build_main_menu(ctx.hotel)
    reply = f"{notice}\n\n{menu}" if notice else menu
    return TransitionResult(session=session.enter(DialogueState.MAIN_MENU), reply=reply)


def to_handoff(
    session: Session, ctx: DialogueContext, reason: Optional[str] = None
) -> TransitionResult:
    return TransitionResult(
        session=session.enter(DialogueState.HUMAN_HANDOFF),
        reply=replies.build_handoff(ctx.hotel, reason),
    )
