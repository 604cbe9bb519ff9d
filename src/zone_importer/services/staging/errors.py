"""Errors raised while reviewing and submitting staged drafts."""

from __future__ import annotations


class StagingError(ValueError):
    """Base class for per-draft, recoverable staging errors."""

    code = "staging_error"


class UnresolvedStore(StagingError):
    """The draft has no store identifier and cannot be submitted."""

    code = "unresolved_store"


class SubmissionFailed(StagingError):
    """The backend refused or never received the zone creation call."""

    code = "submission_failed"


class DraftNotFound(KeyError):
    """No staged draft (or import session) with the given identifier."""

    def __init__(self, identifier: str) -> None:
        super().__init__(identifier)
        self.identifier = identifier

    def __str__(self) -> str:
        return f"No staged draft or import session '{self.identifier}'."
