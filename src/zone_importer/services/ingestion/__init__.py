"""Document ingestion: extraction, canonicalization and draft assembly."""

from .assembler import AssembledZone, assemble_draft, assemble_drafts
from .canonicalizer import CanonicalAttributes, canonicalize, coerce_value
from .errors import DocumentUnparsable, IngestionError, NoGeometryFound
from .extractor import iter_placemarks, load_document, parse_coordinate_text
from .pipeline import ImportResult, import_document

__all__ = [
    "AssembledZone",
    "CanonicalAttributes",
    "DocumentUnparsable",
    "ImportResult",
    "IngestionError",
    "NoGeometryFound",
    "assemble_draft",
    "assemble_drafts",
    "canonicalize",
    "coerce_value",
    "import_document",
    "iter_placemarks",
    "load_document",
    "parse_coordinate_text",
]
