"""
Universal commands recognized before any state-specific handling.

Three command families, each matched against the whole message:
1. RESET:    "0", "menu", "main menu": back to the main menu, flow data dropped
2. HANDOFF:  "#", "human", "reception", "staff", "help": hand over to hotel staff
3. GREETING: "hi", "hello", ...: back to the main menu, except during a handoff

The interceptor stays out of the document upload step, where short replies
belong to the upload flow itself, and lets a bare "0" through when it answers
"how many children?".
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hotel_concierge.conversation.transitions import normalize_reply
from hotel_concierge.schemas.session_schema import DialogueState, Session

logger = logging.getLogger(__name__)


class CommandKind(str, Enum):
    RESET = "reset"
    HANDOFF = "handoff"
    GREETING = "greeting"


@dataclass(frozen=True)
class GlobalCommand:
    """A recognized universal command."""
    kind: CommandKind
    token: str


class GlobalCommandInterceptor:
    """Short-circuits dispatch for commands that work from any state."""

    RESET_TOKENS = frozenset({"0", "menu", "main menu"})
    HANDOFF_TOKENS = frozenset({"#", "human", "reception", "staff", "help"})
    GREETING_TOKENS = frozenset({
        "hi", "hello", "hey", "hii", "start", "hola", "namaste",
        "good morning", "good afternoon", "good evening",
    })

    EXEMPT_STATES = frozenset({DialogueState.ID_UPLOAD_WAITING})
    # States where a bare "0" is a valid answer rather than a reset
    ZERO_ANSWER_STATES = frozenset({DialogueState.BOOKING_CHILDREN})

    def intercept(self, session: Session, text: str) -> Optional[GlobalCommand]:
        """Return the matching command, or None to continue normal dispatch."""
        if session.state in self.EXEMPT_STATES:
            return None

        token = normalize_reply(text)
        if not token:
            return None

        if token == "0" and session.state in self.ZERO_ANSWER_STATES:
            return None

        if token in self.RESET_TOKENS:
            command = GlobalCommand(CommandKind.RESET, token)
        elif token in self.HANDOFF_TOKENS:
            command = GlobalCommand(CommandKind.HANDOFF, token)
        elif token in self.GREETING_TOKENS:
            if session.state == DialogueState.HUMAN_HANDOFF:
                return None
            command = GlobalCommand(CommandKind.GREETING, token)
        else:
            return None

        logger.debug(
            "Global command '%s' intercepted in state %s", command.kind.value, session.state.value
        )
        return command
