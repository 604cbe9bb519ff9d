"""Placemark extraction from KML/KMZ documents.

Coordinates are normalized at the point of parsing: the source writes
``lon,lat[,alt]`` tuples, placemarks carry ``(lat, lon)`` pairs.
"""

from __future__ import annotations

import io
import logging
import math
import zipfile
from typing import Iterator

from lxml import etree

from ...models.domain import Placemark
from .errors import DocumentUnparsable

logger = logging.getLogger(__name__)

KMZ_MAGIC = b"PK\x03\x04"
KMZ_DEFAULT_MEMBER = "doc.kml"


def _parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False)


def _unpack_kmz(data: bytes) -> bytes:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            names = archive.namelist()
            member = KMZ_DEFAULT_MEMBER if KMZ_DEFAULT_MEMBER in names else None
            if member is None:
                member = next((name for name in names if name.lower().endswith(".kml")), None)
            if member is None:
                raise DocumentUnparsable("KMZ archive does not contain a .kml document.")
            return archive.read(member)
    except zipfile.BadZipFile as exc:
        raise DocumentUnparsable(f"Uploaded KMZ archive is corrupt: {exc}") from exc


def load_document(data: bytes, filename: str | None = None) -> etree._Element:
    """Parse uploaded bytes into an element tree root.

    KMZ archives are unpacked first. Raises DocumentUnparsable when the
    payload is empty or not well-formed markup.
    """
    if not data or not data.strip():
        raise DocumentUnparsable("Uploaded document is empty.")

    is_kmz = data.startswith(KMZ_MAGIC) or (filename or "").lower().endswith(".kmz")
    if is_kmz:
        data = _unpack_kmz(data)

    try:
        root = etree.fromstring(data, parser=_parser())
    except etree.XMLSyntaxError as exc:
        raise DocumentUnparsable(f"Uploaded document is not well-formed markup: {exc}") from exc
    if root is None:
        raise DocumentUnparsable("Uploaded document has no root element.")
    return root


def _find(node: etree._Element, tag: str, *, descendant: bool = False) -> etree._Element | None:
    """Direct lookup first, namespace-wildcard lookup second."""
    prefix = ".//" if descendant else ""
    found = node.find(f"{prefix}{tag}")
    if found is None:
        found = node.find(f"{prefix}{{*}}{tag}")
    return found


def _iter_placemark_nodes(root: etree._Element) -> Iterator[etree._Element]:
    matched = False
    for node in root.iter("Placemark"):
        matched = True
        yield node
    if not matched:
        yield from root.iter("{*}Placemark")


def _inner_markup(node: etree._Element) -> str:
    # descriptions may carry inline (non-CDATA) markup such as <br/>
    parts = [node.text or ""]
    for child in node:
        parts.append(etree.tostring(child, encoding="unicode", with_tail=True))
    return "".join(parts)


def parse_coordinate_text(text: str) -> list[tuple[float, float]]:
    """Parse KML coordinate text (``lon,lat[,alt] ...``) into (lat, lon) pairs.

    Malformed and non-finite tokens are dropped without shifting the
    position of the tokens that follow.
    """
    pairs: list[tuple[float, float]] = []
    for token in text.split():
        parts = token.split(",")
        if len(parts) < 2:
            continue
        try:
            lon = float(parts[0])
            lat = float(parts[1])
        except ValueError:
            continue
        if not (math.isfinite(lat) and math.isfinite(lon)):
            continue
        pairs.append((lat, lon))
    return pairs


def _placemark_from_node(node: etree._Element) -> Placemark:
    name_node = _find(node, "name")
    description_node = _find(node, "description")
    coordinates_node = _find(node, "coordinates", descendant=True)

    name = (name_node.text or "").strip() if name_node is not None else ""
    description = _inner_markup(description_node) if description_node is not None else ""

    if coordinates_node is None:
        return Placemark(name=name, raw_description=description, geometry_status="missing")

    coordinates = parse_coordinate_text(coordinates_node.text or "")
    return Placemark(
        name=name,
        raw_description=description,
        coordinates=coordinates,
        geometry_status="ok" if coordinates else "empty",
    )


def iter_placemarks(root: etree._Element) -> Iterator[Placemark]:
    """Yield one Placemark per placemark node, in document order."""
    for index, node in enumerate(_iter_placemark_nodes(root)):
        placemark = _placemark_from_node(node)
        if placemark.geometry_status != "ok":
            logger.debug(f"Placemark #{index} ('{placemark.name}') has {placemark.geometry_status} geometry")
        yield placemark
