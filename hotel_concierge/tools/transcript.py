"""In-memory transcript sink behind the hotel's live-chat view."""

from hotel_concierge.schemas.message_schema import TranscriptEntry


class InMemoryTranscriptSink:

    def __init__(self) -> None:
        self.entries: list[TranscriptEntry] = []

    async def append(self, entry: TranscriptEntry) -> None:
        self.entries.append(entry)

    def for_contact(self, contact_id: str) -> list[TranscriptEntry]:
        return [e for e in self.entries if e.contact_id == contact_id]
