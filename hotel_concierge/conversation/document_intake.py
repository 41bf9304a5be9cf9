"""
ID document intake after a booking is created.

The guest is first asked whether to upload now. While waiting for files,
each accepted attachment is handed to the engine as a StoreDocument effect
and counted once the engine reports it stored. Global commands are not
intercepted in the waiting state, so "0" or "menu" there only re-prompt.
"""

import logging

from hotel_concierge.config import BotConfig
from hotel_concierge.conversation import replies
from hotel_concierge.conversation.effects import EffectOutcome, StoreDocument
from hotel_concierge.conversation.transitions import (
    DialogueContext,
    TransitionResult,
    normalize_reply,
    stay,
    to_main_menu,
)
from hotel_concierge.schemas.message_schema import Attachment, InboundMessage
from hotel_concierge.schemas.session_schema import DialogueState, Session, UploadData

logger = logging.getLogger(__name__)

DOCUMENT_MIME_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
})

UPLOAD_TOKENS = frozenset({"1", "yes", "y", "upload"})
SKIP_TOKENS = frozenset({"2", "skip", "no", "n", "later"})
DONE_TOKENS = frozenset({"done", "finish", "finished", "complete"})


def is_accepted_media(attachment: Attachment) -> bool:
    """Images of any kind and PDF/Word documents are accepted as ID proof."""
    mime_type = attachment.mime_type.split(";")[0].strip().lower()
    return mime_type.startswith("image/") or mime_type in DOCUMENT_MIME_TYPES


class DocumentIntake:
    """Collects up to ``max_id_uploads`` ID documents for a fresh booking."""

    def __init__(self, config: BotConfig) -> None:
        self._config = config

    @property
    def max_uploads(self) -> int:
        return self._config.max_id_uploads

    def handle_prompt(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        data: UploadData = session.data
        waiting = session.enter(DialogueState.ID_UPLOAD_WAITING, data)

        if message.attachment is not None:
            return self._accept(waiting, message.attachment)

        answer = normalize_reply(message.text)
        if answer in UPLOAD_TOKENS:
            return TransitionResult(
                session=waiting, reply=replies.build_upload_instructions(self.max_uploads)
            )
        if answer in SKIP_TOKENS:
            return to_main_menu(session, ctx, replies.UPLOAD_SKIPPED)
        return stay(session, f"{replies.NOT_UNDERSTOOD}\n\n{replies.UPLOAD_PROMPT_HINT}")

    def handle_waiting(
        self, session: Session, message: InboundMessage, ctx: DialogueContext
    ) -> TransitionResult:
        data: UploadData = session.data

        if message.attachment is not None:
            return self._accept(session, message.attachment)

        answer = normalize_reply(message.text)
        if answer in DONE_TOKENS:
            logger.info("Guest finished ID upload for %s with %d file(s)",
                        data.booking_id, data.uploaded)
            return to_main_menu(session, ctx, replies.build_upload_summary(data.uploaded))
        if answer == "skip":
            return to_main_menu(session, ctx, replies.UPLOAD_SKIPPED)
        return stay(session, replies.build_upload_waiting_hint(data.uploaded, self.max_uploads))

    def _accept(self, session: Session, attachment: Attachment) -> TransitionResult:
        data: UploadData = session.data
        if data.uploaded >= self.max_uploads:
            return stay(session, replies.build_upload_cap_reached(self.max_uploads))
        if not is_accepted_media(attachment):
            logger.info("Rejected upload with MIME type %s", attachment.mime_type)
            return stay(session, replies.UPLOAD_REJECTED_TYPE)
        return TransitionResult(
            session=session, effect=StoreDocument(data.booking_id, attachment)
        )

    def complete(
        self, session: Session, outcome: EffectOutcome, ctx: DialogueContext
    ) -> TransitionResult:
        """Count a stored document, or keep the counter when storing failed."""
        data: UploadData = session.data
        if not outcome.ok:
            logger.warning("ID document for %s not stored: %s", data.booking_id, outcome.error)
            return stay(session, replies.UPLOAD_FAILED)

        data = data.model_copy(update={"uploaded": data.uploaded + 1})
        return TransitionResult(
            session=session.enter(DialogueState.ID_UPLOAD_WAITING, data),
            reply=replies.build_upload_received(data.uploaded, self.max_uploads),
        )
