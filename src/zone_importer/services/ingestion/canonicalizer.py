"""Normalize free-text placemark descriptions into canonical zone attributes.

Descriptions arrive either as a JSON object or as loosely formatted
``key: value`` / ``key - value`` lines. Both shapes are mapped onto a fixed
vocabulary of canonical keys through ``KEY_SYNONYMS``.
"""

from __future__ import annotations

import html
import json
import logging
import math
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping

logger = logging.getLogger(__name__)

CANONICAL_KEYS = (
    "zoneName",
    "baseDeliveryFee",
    "perMileFee",
    "minOrderAmount",
    "estimatedPreparationTime",
    "isRestricted",
)

_SYNONYMS_BY_FIELD: dict[str, tuple[str, ...]] = {
    "zoneName": ("zonename", "zone", "name", "zonetitle", "areaname", "area"),
    "baseDeliveryFee": ("basedeliveryfee", "basefee", "deliveryfee", "base", "fee"),
    "perMileFee": ("permilefee", "permile", "milefee", "feepermile", "ratepermile", "mileagefee"),
    "minOrderAmount": (
        "minorderamount",
        "minorder",
        "minimumorder",
        "minimumorderamount",
        "minordervalue",
        "minamount",
    ),
    "estimatedPreparationTime": (
        "estimatedpreparationtime",
        "preparationtime",
        "estimatedpreptime",
        "preptime",
        "prepminutes",
        "prep",
    ),
    "isRestricted": ("isrestricted", "restricted", "restriction", "restrict"),
}

# cleaned key -> canonical key
KEY_SYNONYMS: Mapping[str, str] = MappingProxyType(
    {synonym: canonical for canonical, synonyms in _SYNONYMS_BY_FIELD.items() for synonym in synonyms}
)

_TRUE_WORDS = frozenset({"yes", "true"})
_FALSE_WORDS = frozenset({"no", "false"})
_UNIT_SUFFIX = re.compile(r"\s*(?:minutes?|mins?)\.?$", re.IGNORECASE)
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_LINE_BREAK_TAGS = re.compile(r"<\s*br\b[^>]*>|<\s*/\s*(?:p|div|li)\s*>", re.IGNORECASE)
_ANY_TAG = re.compile(r"<[^>]+>")
_NON_ALNUM = re.compile(r"[^a-z0-9]")
_DASH_SEPARATOR = " - "


@dataclass(frozen=True, slots=True)
class BoolValue:
    value: bool
    text: str


@dataclass(frozen=True, slots=True)
class NumberValue:
    value: float
    text: str


@dataclass(frozen=True, slots=True)
class TextValue:
    value: str
    text: str


CoercedValue = BoolValue | NumberValue | TextValue


@dataclass(slots=True)
class CanonicalAttributes:
    """Canonicalized metadata for one placemark.

    ``fields`` only ever holds keys from CANONICAL_KEYS. Keys missing from
    the synonym table are kept in ``extras`` under their cleaned form, and
    lines without a separator are kept verbatim in ``notes``.
    """

    strategy: Literal["structured", "lines"]
    fields: dict[str, CoercedValue] = field(default_factory=dict)
    extras: dict[str, CoercedValue] = field(default_factory=dict)
    notes: list[str] = field(default_factory=list)

    def get(self, key: str) -> CoercedValue | None:
        return self.fields.get(key)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {key: value.value for key, value in self.fields.items()}
        payload["extras"] = {key: value.value for key, value in self.extras.items()}
        payload["notes"] = list(self.notes)
        return payload


def clean_key(raw_key: str) -> str:
    """Lower-case a raw key and drop everything outside ``[a-z0-9]``."""
    return _NON_ALNUM.sub("", raw_key.lower())


def canonical_key(raw_key: str) -> str | None:
    """Return the canonical key for a raw key variant, if it has one."""
    return KEY_SYNONYMS.get(clean_key(raw_key))


def coerce_value(raw_value: str) -> CoercedValue:
    """Interpret a raw text value.

    Order is fixed: boolean words, then unit stripping, then the first
    signed decimal in the remaining text, then the original text.
    """
    text = raw_value.strip()
    lowered = text.lower()
    if lowered in _TRUE_WORDS:
        return BoolValue(True, text)
    if lowered in _FALSE_WORDS:
        return BoolValue(False, text)

    without_unit = _UNIT_SUFFIX.sub("", text).strip()
    match = _NUMBER.search(without_unit)
    if match:
        number = float(match.group(0))
        if math.isfinite(number):
            return NumberValue(number, text)
    return TextValue(text, text)


def _coerce_json_value(value: Any) -> CoercedValue | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return BoolValue(value, json.dumps(value))
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            number = math.inf
        if not math.isfinite(number):
            return TextValue(str(value), str(value))
        return NumberValue(number, str(value))
    if isinstance(value, str):
        return coerce_value(value)
    compact = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return TextValue(compact, compact)


def _store(attributes: CanonicalAttributes, raw_key: str, value: CoercedValue) -> bool:
    cleaned = clean_key(raw_key)
    if not cleaned:
        return False
    canonical = KEY_SYNONYMS.get(cleaned)
    if canonical is not None:
        attributes.fields[canonical] = value
    else:
        attributes.extras[cleaned] = value
    return True


def _from_structured(text: str) -> CanonicalAttributes | None:
    if not text.startswith("{"):
        return None
    try:
        parsed = json.loads(text)
    except ValueError as exc:
        logger.debug(f"Description looks like JSON but failed to parse, using line strategy: {exc}")
        return None
    if not isinstance(parsed, dict):
        return None

    attributes = CanonicalAttributes(strategy="structured")
    for raw_key, raw_value in parsed.items():
        value = _coerce_json_value(raw_value)
        if value is not None:
            _store(attributes, str(raw_key), value)
    return attributes


def _split_line(line: str) -> tuple[str, str] | None:
    if ":" in line:
        key, _, value = line.partition(":")
        return key, value
    if _DASH_SEPARATOR in line:
        key, _, value = line.partition(_DASH_SEPARATOR)
        return key, value
    return None


def description_lines(text: str) -> list[str]:
    """Break a description into non-empty trimmed lines, dropping markup."""
    text = _LINE_BREAK_TAGS.sub("\n", text)
    text = html.unescape(_ANY_TAG.sub("", text))
    return [line.strip() for line in text.splitlines() if line.strip()]


def _from_lines(text: str) -> CanonicalAttributes:
    attributes = CanonicalAttributes(strategy="lines")
    for line in description_lines(text):
        split = _split_line(line)
        if split is None or not _store(attributes, split[0], coerce_value(split[1])):
            attributes.notes.append(line)
    return attributes


def canonicalize(raw_description: str | None) -> CanonicalAttributes:
    """Convert a placemark description into CanonicalAttributes.

    A description that only looks like JSON falls back to the line
    strategy instead of failing the placemark.
    """
    text = (raw_description or "").strip()
    structured = _from_structured(text)
    if structured is not None:
        return structured
    return _from_lines(text)
