"""API routes for uploading zone documents and working through the staged drafts."""

from __future__ import annotations

import functools
import logging
from pathlib import Path

from fastapi import APIRouter, File, Form, HTTPException, Response, UploadFile, status
from pydantic import ValidationError

from ...config import settings
from ...schemas.imports import (
    BulkSubmissionResponse,
    ImportSessionResponse,
    StagedDraftModel,
    SubmissionOutcomeModel,
)
from ...schemas.zones import DeliveryZoneUpdate
from ...services.backend import ZoneServiceClient
from ...services.ingestion import IngestionError, NoGeometryFound, import_document
from ...services.staging import (
    DraftNotFound,
    ImportSession,
    SessionRegistry,
    StagingController,
    UnresolvedStore,
)
from ...services.stores import get_store_resolver
from ..errors import error_detail, unexpected_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/imports", tags=["imports"])

ALLOWED_SUFFIXES = {".kml", ".kmz", ".xml"}

registry = SessionRegistry()


@functools.lru_cache(maxsize=1)
def get_zone_client() -> ZoneServiceClient:
    return ZoneServiceClient()


def _session(import_id: str) -> ImportSession:
    try:
        return registry.get(import_id)
    except DraftNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("", response_model=ImportSessionResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    store_identifier: str | None = Form(default=None),
    store_name: str | None = Form(default=None),
) -> ImportSessionResponse:
    """Parse an uploaded KML/KMZ file and stage one draft per placemark."""
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Filename is required.")

    suffix = Path(file.filename).suffix.lower()
    if suffix not in ALLOWED_SUFFIXES:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only .kml, .kmz and .xml files are supported.",
        )

    contents = await file.read()
    if len(contents) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {settings.max_upload_bytes} byte upload limit.",
        )

    try:
        result = import_document(
            contents,
            file.filename,
            store_identifier=store_identifier,
            store_name=store_name,
            resolver=get_store_resolver(),
        )
    except NoGeometryFound as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=error_detail(exc.code, str(exc)),
        ) from exc
    except IngestionError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail(exc.code, str(exc)),
        ) from exc
    except Exception as exc:
        raise unexpected_error(exc, "import document") from exc

    controller = StagingController(get_zone_client())
    controller.stage(result.zones)
    session = registry.create(
        file.filename,
        controller,
        placemark_count=result.placemark_count,
        store_identifier=result.store_identifier,
    )
    return ImportSessionResponse.from_session(session)


@router.get("/{import_id}", response_model=ImportSessionResponse, status_code=status.HTTP_200_OK)
def get_import(import_id: str) -> ImportSessionResponse:
    return ImportSessionResponse.from_session(_session(import_id))


@router.delete("/{import_id}", status_code=status.HTTP_204_NO_CONTENT)
def discard_import(import_id: str) -> Response:
    _session(import_id)
    registry.drop(import_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch(
    "/{import_id}/drafts/{draft_id}",
    response_model=StagedDraftModel,
    status_code=status.HTTP_200_OK,
)
def review_draft(import_id: str, draft_id: str, payload: DeliveryZoneUpdate) -> StagedDraftModel:
    """Apply a manual review edit to a staged draft."""
    controller = _session(import_id).controller
    try:
        staged = controller.edit(draft_id, payload)
    except DraftNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=error_detail("invalid_draft", str(exc)),
        ) from exc
    return StagedDraftModel.from_staged(staged)


@router.delete("/{import_id}/drafts/{draft_id}", status_code=status.HTTP_204_NO_CONTENT)
def discard_draft(import_id: str, draft_id: str) -> Response:
    controller = _session(import_id).controller
    try:
        controller.discard(draft_id)
    except DraftNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{import_id}/drafts/{draft_id}/submit",
    response_model=SubmissionOutcomeModel,
    status_code=status.HTTP_201_CREATED,
)
def submit_draft(import_id: str, draft_id: str) -> SubmissionOutcomeModel:
    """Create one staged draft on the backend right away."""
    controller = _session(import_id).controller
    try:
        outcome = controller.submit(draft_id)
    except DraftNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    if not outcome.succeeded:
        status_code = (
            status.HTTP_409_CONFLICT
            if outcome.error_code == UnresolvedStore.code
            else status.HTTP_502_BAD_GATEWAY
        )
        raise HTTPException(
            status_code=status_code,
            detail=error_detail(outcome.error_code or "submission_failed", outcome.error or "", draft_id=draft_id),
        )
    return SubmissionOutcomeModel.from_outcome(outcome)


@router.post("/{import_id}/submit", response_model=BulkSubmissionResponse, status_code=status.HTTP_200_OK)
def submit_all(import_id: str) -> BulkSubmissionResponse:
    """Create every staged draft, one after another; failures stay staged."""
    controller = _session(import_id).controller
    outcomes = controller.submit_all()
    submitted = sum(1 for outcome in outcomes if outcome.succeeded)
    return BulkSubmissionResponse(
        import_id=import_id,
        submitted=submitted,
        failed=len(outcomes) - submitted,
        remaining=len(controller),
        outcomes=[SubmissionOutcomeModel.from_outcome(outcome) for outcome in outcomes],
    )
