"""Staging, review and submission of assembled zone drafts.

Each staged draft moves through::

    PARSED -> (REVIEWED) -> SUBMITTING -> SUBMITTED | FAILED

A submitted draft leaves the staging set. A failed one goes back to PARSED
with ``last_error`` set so it can be edited and retried.
"""

from __future__ import annotations

import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Protocol

from ...schemas.zones import DeliveryZone, DeliveryZoneDraft, DeliveryZoneUpdate
from ..geospatial import zone_preview
from ..ingestion.assembler import AssembledZone
from .errors import DraftNotFound, StagingError, SubmissionFailed, UnresolvedStore

logger = logging.getLogger(__name__)


class ZoneBackend(Protocol):
    def create_zone(self, draft: DeliveryZoneDraft) -> DeliveryZone: ...


class DraftState(str, Enum):
    PARSED = "parsed"
    REVIEWED = "reviewed"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    FAILED = "failed"


@dataclass(slots=True)
class StagedDraft:
    draft_id: str
    draft: DeliveryZoneDraft
    state: DraftState = DraftState.PARSED
    source_name: str = ""
    geometry_status: str = "ok"
    warnings: list[str] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)
    preview: dict | None = None
    last_error: str | None = None


@dataclass(slots=True)
class SubmissionOutcome:
    draft_id: str
    zone_name: str
    state: DraftState
    zone: DeliveryZone | None = None
    error: str | None = None
    error_code: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is DraftState.SUBMITTED


class SubmissionQueue:
    """Processes queued drafts strictly one at a time.

    ``process`` performs the backend call for one draft and raises
    StagingError on failure; the callbacks turn each result into a
    SubmissionOutcome. A failure never stops the rest of the queue.
    """

    def __init__(
        self,
        draft_ids: Iterable[str],
        *,
        process: Callable[[str], DeliveryZone],
        on_success: Callable[[str, DeliveryZone], SubmissionOutcome],
        on_failure: Callable[[str, StagingError], SubmissionOutcome],
    ) -> None:
        self._pending: deque[str] = deque(draft_ids)
        self._process = process
        self._on_success = on_success
        self._on_failure = on_failure

    def __len__(self) -> int:
        return len(self._pending)

    def run(self) -> list[SubmissionOutcome]:
        outcomes: list[SubmissionOutcome] = []
        while self._pending:
            draft_id = self._pending.popleft()
            try:
                zone = self._process(draft_id)
            except StagingError as exc:
                outcomes.append(self._on_failure(draft_id, exc))
                continue
            outcomes.append(self._on_success(draft_id, zone))
        return outcomes


class StagingController:
    """Holds the drafts of one import session until they are submitted or discarded."""

    def __init__(self, backend: ZoneBackend) -> None:
        self._backend = backend
        self._drafts: dict[str, StagedDraft] = {}

    def __len__(self) -> int:
        return len(self._drafts)

    def stage(self, assembled: Iterable[AssembledZone]) -> list[StagedDraft]:
        staged: list[StagedDraft] = []
        for item in assembled:
            entry = StagedDraft(
                draft_id=uuid.uuid4().hex,
                draft=item.draft,
                source_name=item.source_name,
                geometry_status=item.geometry_status,
                warnings=list(item.warnings),
                metadata=item.attributes.to_dict(),
                preview=zone_preview(item.draft.coordinates),
            )
            self._drafts[entry.draft_id] = entry
            staged.append(entry)
        return staged

    def drafts(self) -> list[StagedDraft]:
        return list(self._drafts.values())

    def get(self, draft_id: str) -> StagedDraft:
        try:
            return self._drafts[draft_id]
        except KeyError:
            raise DraftNotFound(draft_id) from None

    def edit(self, draft_id: str, changes: DeliveryZoneUpdate) -> StagedDraft:
        """Apply a review edit. Invalid values raise and leave the draft untouched."""
        staged = self.get(draft_id)
        merged = {**staged.draft.model_dump(), **changes.changes()}
        staged.draft = DeliveryZoneDraft.model_validate(merged)
        staged.state = DraftState.REVIEWED
        staged.preview = zone_preview(staged.draft.coordinates)
        staged.last_error = None
        return staged

    def discard(self, draft_id: str) -> StagedDraft:
        staged = self.get(draft_id)
        del self._drafts[draft_id]
        return staged

    @staticmethod
    def validate(staged: StagedDraft) -> None:
        if not staged.draft.store_identifier.strip():
            raise UnresolvedStore(
                f"Zone '{staged.draft.zone_name}' has no store; pick a store before submitting."
            )
        if not staged.draft.coordinates:
            raise StagingError(f"Zone '{staged.draft.zone_name}' has no coordinates.")

    def _process(self, draft_id: str) -> DeliveryZone:
        staged = self.get(draft_id)
        staged.state = DraftState.SUBMITTING
        self.validate(staged)
        try:
            return self._backend.create_zone(staged.draft)
        except (ConnectionError, ValueError) as exc:
            raise SubmissionFailed(str(exc)) from exc
        except Exception as exc:
            logger.exception(f"Unexpected error while creating zone '{staged.draft.zone_name}'")
            raise SubmissionFailed(f"Unexpected error: {exc}") from exc

    def _on_success(self, draft_id: str, zone: DeliveryZone) -> SubmissionOutcome:
        staged = self._drafts.pop(draft_id)
        staged.state = DraftState.SUBMITTED
        logger.info(f"Created zone '{staged.draft.zone_name}' as {zone.zone_id}")
        return SubmissionOutcome(
            draft_id=draft_id,
            zone_name=staged.draft.zone_name,
            state=DraftState.SUBMITTED,
            zone=zone,
        )

    def _on_failure(self, draft_id: str, error: StagingError) -> SubmissionOutcome:
        staged = self._drafts[draft_id]
        staged.state = DraftState.PARSED
        staged.last_error = str(error)
        logger.warning(f"Zone '{staged.draft.zone_name}' was not created: {error}")
        return SubmissionOutcome(
            draft_id=draft_id,
            zone_name=staged.draft.zone_name,
            state=DraftState.FAILED,
            error=str(error),
            error_code=error.code,
        )

    def _queue(self, draft_ids: Iterable[str]) -> SubmissionQueue:
        return SubmissionQueue(
            draft_ids,
            process=self._process,
            on_success=self._on_success,
            on_failure=self._on_failure,
        )

    def submit(self, draft_id: str) -> SubmissionOutcome:
        self.get(draft_id)
        return self._queue([draft_id]).run()[0]

    def submit_all(self) -> list[SubmissionOutcome]:
        queue = self._queue(list(self._drafts))
        logger.info(f"Submitting {len(queue)} staged draft(s) sequentially")
        return queue.run()
