"""In-memory registry of import sessions."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .controller import StagingController
from .errors import DraftNotFound


@dataclass(slots=True)
class ImportSession:
    import_id: str
    filename: str
    controller: StagingController
    placemark_count: int = 0
    store_identifier: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SessionRegistry:
    def __init__(self) -> None:
        self._sessions: dict[str, ImportSession] = {}

    def create(
        self,
        filename: str,
        controller: StagingController,
        *,
        placemark_count: int = 0,
        store_identifier: str = "",
    ) -> ImportSession:
        session = ImportSession(
            import_id=uuid.uuid4().hex,
            filename=filename,
            controller=controller,
            placemark_count=placemark_count,
            store_identifier=store_identifier,
        )
        self._sessions[session.import_id] = session
        return session

    def get(self, import_id: str) -> ImportSession:
        try:
            return self._sessions[import_id]
        except KeyError:
            raise DraftNotFound(import_id) from None

    def drop(self, import_id: str) -> ImportSession:
        session = self.get(import_id)
        del self._sessions[import_id]
        return session

    def clear(self) -> None:
        self._sessions.clear()
