"""Domain models for placemarks and store directory records."""

from dataclasses import dataclass, field
from typing import Literal

GeometryStatus = Literal["ok", "empty", "missing"]


@dataclass(slots=True)
class Placemark:
    """A named feature extracted from an uploaded geo document.

    ``coordinates`` are (lat, lon) pairs in the order they appear in the
    source; the boundary walk depends on that order.
    """

    name: str
    raw_description: str
    coordinates: list[tuple[float, float]] = field(default_factory=list)
    geometry_status: GeometryStatus = "missing"


@dataclass(frozen=True, slots=True)
class StoreDirectoryEntry:
    """Represents a store as listed by the store directory service."""

    identifier: str
    display_name: str
