"""High-level orchestration for document imports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..stores.resolver import StoreResolver
from .assembler import AssembledZone, assemble_drafts
from .canonicalizer import canonicalize
from .errors import NoGeometryFound
from .extractor import iter_placemarks, load_document

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportResult:
    filename: str
    store_identifier: str
    zones: list[AssembledZone] = field(default_factory=list)

    @property
    def placemark_count(self) -> int:
        return len(self.zones)


def resolve_session_store(
    store_identifier: str | None,
    store_name: str | None,
    resolver: StoreResolver | None,
) -> str:
    """An explicit identifier wins; otherwise the store name is resolved."""
    if store_identifier and store_identifier.strip():
        return store_identifier.strip()
    if store_name and store_name.strip() and resolver is not None:
        resolved = resolver.resolve(store_name)
        if resolved is None:
            logger.info(f"Store name '{store_name}' did not resolve; drafts stay unassigned")
        return resolved or ""
    return ""


def import_document(
    data: bytes,
    filename: str = "",
    *,
    store_identifier: str | None = None,
    store_name: str | None = None,
    resolver: StoreResolver | None = None,
) -> ImportResult:
    """Turn an uploaded KML/KMZ document into assembled zone drafts.

    Raises DocumentUnparsable or NoGeometryFound; both abort the whole
    import. Store resolution never fails the import.
    """
    root = load_document(data, filename)
    pairs = [(placemark, canonicalize(placemark.raw_description)) for placemark in iter_placemarks(root)]
    if not pairs:
        raise NoGeometryFound(f"No placemarks found in '{filename or 'uploaded document'}'.")

    session_store = resolve_session_store(store_identifier, store_name, resolver)
    zones = assemble_drafts(pairs, session_store, resolver=resolver)

    fallback_count = sum(1 for _, attributes in pairs if attributes.strategy == "lines")
    logger.info(
        f"Imported {len(zones)} placemark(s) from '{filename}' "
        f"({fallback_count} via line metadata, store='{session_store or 'unresolved'}')"
    )
    return ImportResult(filename=filename, store_identifier=session_store, zones=zones)
