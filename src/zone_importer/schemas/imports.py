"""Pydantic request/response models for import and staging endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from ..services.staging import ImportSession, StagedDraft, SubmissionOutcome
from .zones import DeliveryZone, DeliveryZoneDraft


class StagedDraftModel(BaseModel):
    draft_id: str
    state: str
    draft: DeliveryZoneDraft
    source_name: str = ""
    geometry_status: str
    warnings: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    preview: Optional[dict[str, Any]] = None
    last_error: Optional[str] = None
    submittable: bool

    @classmethod
    def from_staged(cls, staged: StagedDraft) -> "StagedDraftModel":
        return cls(
            draft_id=staged.draft_id,
            state=staged.state.value,
            draft=staged.draft,
            source_name=staged.source_name,
            geometry_status=staged.geometry_status,
            warnings=staged.warnings,
            metadata=staged.metadata,
            preview=staged.preview,
            last_error=staged.last_error,
            submittable=bool(staged.draft.store_identifier.strip()) and bool(staged.draft.coordinates),
        )


class ImportSessionResponse(BaseModel):
    import_id: str
    filename: str
    store_identifier: str
    placemark_count: int
    created_at: datetime
    drafts: list[StagedDraftModel]

    @classmethod
    def from_session(cls, session: ImportSession) -> "ImportSessionResponse":
        return cls(
            import_id=session.import_id,
            filename=session.filename,
            store_identifier=session.store_identifier,
            placemark_count=session.placemark_count,
            created_at=session.created_at,
            drafts=[StagedDraftModel.from_staged(staged) for staged in session.controller.drafts()],
        )


class SubmissionOutcomeModel(BaseModel):
    draft_id: str
    zone_name: str
    state: str
    succeeded: bool
    zone: Optional[DeliveryZone] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: SubmissionOutcome) -> "SubmissionOutcomeModel":
        return cls(
            draft_id=outcome.draft_id,
            zone_name=outcome.zone_name,
            state=outcome.state.value,
            succeeded=outcome.succeeded,
            zone=outcome.zone,
            error=outcome.error,
            error_code=outcome.error_code,
        )


class BulkSubmissionResponse(BaseModel):
    import_id: str
    submitted: int
    failed: int
    remaining: int
    outcomes: list[SubmissionOutcomeModel]
