"""Geospatial helper functions for zone map previews."""

from __future__ import annotations

from typing import Sequence

from shapely.geometry import MultiPoint, Polygon

MIN_POLYGON_VERTICES = 3


def zone_preview(coordinates: Sequence[tuple[float, float]]) -> dict | None:
    """Return a map center and bounding box for a (lat, lon) boundary.

    Degenerate boundaries (fewer than three vertices or zero area) fall
    back to the centroid of their points.
    """
    if not coordinates:
        return None

    points = [(lon, lat) for lat, lon in coordinates]
    multipoint = MultiPoint(points)
    centroid = multipoint.centroid
    if len(points) >= MIN_POLYGON_VERTICES:
        polygon = Polygon(points)
        if polygon.area > 0:
            centroid = polygon.centroid

    min_lon, min_lat, max_lon, max_lat = multipoint.bounds
    return {
        "center": (centroid.y, centroid.x),
        "bounds": {
            "south": min_lat,
            "west": min_lon,
            "north": max_lat,
            "east": max_lon,
        },
    }
