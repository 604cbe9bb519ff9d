"""Assemble submittable zone drafts from placemarks and their canonical attributes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from ...config import settings
from ...models.domain import Placemark
from ...schemas.zones import DeliveryZoneDraft
from ..stores.resolver import StoreResolver
from .canonicalizer import BoolValue, CanonicalAttributes, NumberValue

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = {
    "baseDeliveryFee": "base_delivery_fee",
    "perMileFee": "per_mile_fee",
    "minOrderAmount": "min_order_amount",
    "estimatedPreparationTime": "estimated_preparation_time",
}
STORE_REFERENCE_KEYS = ("storeuuid", "storeid", "storename", "store")
PLACEHOLDER_COORDINATES = [(0.0, 0.0)]


@dataclass(slots=True)
class AssembledZone:
    """A draft plus what the assembler noticed while building it."""

    draft: DeliveryZoneDraft
    source_name: str
    geometry_status: str
    attributes: CanonicalAttributes
    warnings: list[str] = field(default_factory=list)


def _zone_name(
    placemark: Placemark,
    attributes: CanonicalAttributes,
    index: int | None,
    default_name: str,
) -> str:
    value = attributes.get("zoneName")
    if value is not None and value.text:
        return value.text
    if placemark.name:
        return placemark.name
    return default_name if index is None else f"{default_name} {index + 1}"


def _numeric(attributes: CanonicalAttributes, key: str, warnings: list[str]) -> float:
    value = attributes.get(key)
    if value is None:
        return 0.0
    if isinstance(value, NumberValue) and value.value >= 0:
        return value.value
    warnings.append(f"{key} value '{value.text}' is not a non-negative number; using 0.")
    return 0.0


def _restricted(attributes: CanonicalAttributes) -> bool:
    value = attributes.get("isRestricted")
    if isinstance(value, BoolValue):
        return value.value
    if isinstance(value, NumberValue):
        return value.value != 0
    return False


def _store_from_metadata(attributes: CanonicalAttributes, resolver: StoreResolver | None) -> str:
    for key in STORE_REFERENCE_KEYS:
        value = attributes.extras.get(key)
        if value is None or not value.text:
            continue
        if key in ("storeuuid", "storeid"):
            return value.text
        if resolver is not None:
            return resolver.resolve(value.text) or ""
    return ""


def assemble_draft(
    placemark: Placemark,
    attributes: CanonicalAttributes,
    store_identifier: str = "",
    *,
    index: int | None = None,
    resolver: StoreResolver | None = None,
    default_name: str | None = None,
) -> AssembledZone:
    """Build a DeliveryZoneDraft from one placemark.

    ``index`` is the placemark's position in a multi-placemark batch and only
    affects the fallback zone name. The store identifier is never guessed: if
    neither the caller nor the placemark metadata names a resolvable store it
    stays empty and submission is blocked later.
    """
    warnings: list[str] = []
    coordinates = list(placemark.coordinates)
    if not coordinates:
        coordinates = list(PLACEHOLDER_COORDINATES)
        warnings.append(f"Placemark geometry is {placemark.geometry_status}; using a (0, 0) placeholder coordinate.")

    store = store_identifier.strip() or _store_from_metadata(attributes, resolver)

    values = {field_name: _numeric(attributes, key, warnings) for key, field_name in NUMERIC_FIELDS.items()}
    draft = DeliveryZoneDraft(
        zone_name=_zone_name(placemark, attributes, index, default_name or settings.default_zone_name),
        is_restricted=_restricted(attributes),
        coordinates=coordinates,
        store_identifier=store,
        **values,
    )
    return AssembledZone(
        draft=draft,
        source_name=placemark.name,
        geometry_status=placemark.geometry_status,
        attributes=attributes,
        warnings=warnings,
    )


def assemble_drafts(
    items: Iterable[tuple[Placemark, CanonicalAttributes]],
    store_identifier: str = "",
    *,
    resolver: StoreResolver | None = None,
) -> list[AssembledZone]:
    """Assemble a batch; fallback names are index-suffixed when it holds more than one placemark."""
    items = list(items)
    multiple = len(items) > 1
    assembled = [
        assemble_draft(
            placemark,
            attributes,
            store_identifier,
            index=position if multiple else None,
            resolver=resolver,
        )
        for position, (placemark, attributes) in enumerate(items)
    ]
    logger.debug(f"Assembled {len(assembled)} draft(s)")
    return assembled
