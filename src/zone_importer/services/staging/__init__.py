"""Draft staging and submission."""

from .controller import DraftState, StagedDraft, StagingController, SubmissionOutcome, SubmissionQueue
from .errors import DraftNotFound, StagingError, SubmissionFailed, UnresolvedStore
from .sessions import ImportSession, SessionRegistry

__all__ = [
    "DraftNotFound",
    "DraftState",
    "ImportSession",
    "SessionRegistry",
    "StagedDraft",
    "StagingController",
    "StagingError",
    "SubmissionFailed",
    "SubmissionOutcome",
    "SubmissionQueue",
    "UnresolvedStore",
]
