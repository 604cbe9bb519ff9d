"""Error taxonomy for document ingestion."""

from __future__ import annotations


class IngestionError(ValueError):
    """Base class for errors that abort a whole import attempt."""

    code = "ingestion_error"


class DocumentUnparsable(IngestionError):
    """The uploaded bytes are not well-formed markup."""

    code = "document_unparsable"


class NoGeometryFound(IngestionError):
    """The document parsed but contains zero placemarks."""

    code = "no_geometry_found"
