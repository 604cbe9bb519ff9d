from zone_importer.models.domain import Placemark, StoreDirectoryEntry
from zone_importer.services.ingestion.assembler import assemble_draft, assemble_drafts
from zone_importer.services.ingestion.canonicalizer import canonicalize
from zone_importer.services.stores.resolver import StoreResolver


def _placemark(name: str = "", description: str = "", coordinates=None) -> Placemark:
    coordinates = list(coordinates or [])
    return Placemark(
        name=name,
        raw_description=description,
        coordinates=coordinates,
        geometry_status="ok" if coordinates else "missing",
    )


def test_assemble_draft_uses_canonical_attributes():
    placemark = _placemark(
        "Ignored Name",
        "",
        [(37.1, -122.1), (37.2, -122.2), (37.2, -122.1)],
    )
    attributes = canonicalize(
        "Zone: Downtown\nBase Fee: 4.5\nPer Mile: 1.25\nMin Order: 20\nPrep Time: 15 mins\nRestricted: yes"
    )

    assembled = assemble_draft(placemark, attributes, "store-1")
    draft = assembled.draft

    assert draft.zone_name == "Downtown"
    assert draft.base_delivery_fee == 4.5
    assert draft.per_mile_fee == 1.25
    assert draft.min_order_amount == 20
    assert draft.estimated_preparation_time == 15
    assert draft.is_restricted is True
    assert draft.coordinates == [(37.1, -122.1), (37.2, -122.2), (37.2, -122.1)]
    assert draft.store_identifier == "store-1"
    assert assembled.warnings == []


def test_zone_name_falls_back_to_placemark_name_then_default():
    named = assemble_draft(_placemark("North Zone", "", [(1.0, 2.0)]), canonicalize(""))
    unnamed = assemble_draft(_placemark("", "", [(1.0, 2.0)]), canonicalize(""))

    assert named.draft.zone_name == "North Zone"
    assert unnamed.draft.zone_name == "Imported Zone"


def test_batch_fallback_names_are_index_suffixed():
    items = [
        (_placemark("", "", [(1.0, 2.0)]), canonicalize("")),
        (_placemark("Named", "", [(1.0, 2.0)]), canonicalize("")),
        (_placemark("", "", [(1.0, 2.0)]), canonicalize("")),
    ]

    names = [item.draft.zone_name for item in assemble_drafts(items)]

    assert names == ["Imported Zone 1", "Named", "Imported Zone 3"]


def test_missing_fields_default_to_zero_and_false():
    draft = assemble_draft(_placemark("Z", "", [(1.0, 2.0)]), canonicalize("")).draft

    assert draft.base_delivery_fee == 0
    assert draft.per_mile_fee == 0
    assert draft.min_order_amount == 0
    assert draft.estimated_preparation_time == 0
    assert draft.is_restricted is False


def test_missing_geometry_gets_placeholder_coordinate_and_warning():
    assembled = assemble_draft(_placemark("Z"), canonicalize(""))

    assert assembled.draft.coordinates == [(0.0, 0.0)]
    assert assembled.geometry_status == "missing"
    assert any("placeholder" in warning for warning in assembled.warnings)


def test_store_identifier_is_not_defaulted():
    assembled = assemble_draft(_placemark("Z", "", [(1.0, 2.0)]), canonicalize(""))

    assert assembled.draft.store_identifier == ""


def test_negative_or_textual_numbers_fall_back_to_zero_with_warning():
    assembled = assemble_draft(
        _placemark("Z", "", [(1.0, 2.0)]),
        canonicalize("Base Fee: -5\nMin Order: none"),
    )

    assert assembled.draft.base_delivery_fee == 0
    assert assembled.draft.min_order_amount == 0
    assert len(assembled.warnings) == 2


def test_numeric_restricted_flag_is_truthy():
    draft = assemble_draft(_placemark("Z", "", [(1.0, 2.0)]), canonicalize("Restricted: 1")).draft

    assert draft.is_restricted is True


def test_store_named_in_metadata_is_resolved():
    resolver = StoreResolver([StoreDirectoryEntry("s-9", "Harbor Market")])

    assembled = assemble_draft(
        _placemark("Z", "", [(1.0, 2.0)]),
        canonicalize("Store: harbor"),
        resolver=resolver,
    )

    assert assembled.draft.store_identifier == "s-9"


def test_store_uuid_in_metadata_is_used_verbatim_but_session_store_wins():
    attributes = canonicalize("Store UUID: abc-123")

    from_metadata = assemble_draft(_placemark("Z", "", [(1.0, 2.0)]), attributes)
    from_session = assemble_draft(_placemark("Z", "", [(1.0, 2.0)]), attributes, "session-store")

    assert from_metadata.draft.store_identifier == "abc-123"
    assert from_session.draft.store_identifier == "session-store"


def test_overflowing_fee_falls_back_to_zero_with_warning():
    assembled = assemble_draft(
        _placemark("Z", "", [(1.0, 2.0)]),
        canonicalize("Base Fee: " + "9" * 400),
        "s",
    )

    assert assembled.draft.base_delivery_fee == 0
    assert len(assembled.warnings) == 1
    assert assembled.draft.to_payload()["baseDeliveryFee"] == 0.0
