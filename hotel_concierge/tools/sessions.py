"""In-memory session store keeping sessions as JSON, the way a database row would."""

import logging
from typing import Optional

from hotel_concierge.errors import SessionStoreError
from hotel_concierge.schemas.session_schema import Session

logger = logging.getLogger(__name__)


class InMemorySessionStore:
    """SessionStore keyed by (tenant, contact)."""

    def __init__(self) -> None:
        self._rows: dict[tuple[str, str], str] = {}
        self.fail_upserts = 0

    async def get(self, tenant_id: str, contact_id: str) -> Optional[Session]:
        raw = self._rows.get((tenant_id, contact_id))
        if raw is None:
            return None
        return Session.model_validate_json(raw)

    async def upsert(self, tenant_id: str, contact_id: str, session: Session) -> None:
        if self.fail_upserts > 0:
            self.fail_upserts -= 1
            raise SessionStoreError(f"upsert rejected for {tenant_id}:{contact_id}")
        self._rows[(tenant_id, contact_id)] = session.model_dump_json()

    def __len__(self) -> int:
        return len(self._rows)
