import pytest

from zone_importer.models.domain import StoreDirectoryEntry
from zone_importer.services.ingestion import DocumentUnparsable, NoGeometryFound, import_document
from zone_importer.services.stores.resolver import StoreResolver

KML_HEADER = '<?xml version="1.0" encoding="UTF-8"?><kml xmlns="http://www.opengis.net/kml/2.2"><Document>'
KML_FOOTER = "</Document></kml>"


def _document(*placemarks: str) -> bytes:
    return (KML_HEADER + "".join(placemarks) + KML_FOOTER).encode("utf-8")


def _placemark(name: str, description: str, coordinates: str) -> str:
    return (
        f"<Placemark><name>{name}</name>"
        f"<description><![CDATA[{description}]]></description>"
        "<Polygon><outerBoundaryIs><LinearRing>"
        f"<coordinates>{coordinates}</coordinates>"
        "</LinearRing></outerBoundaryIs></Polygon></Placemark>"
    )


def test_import_document_builds_drafts_from_line_metadata():
    data = _document(
        _placemark(
            "North Zone",
            "Base Fee: 5\nRestricted: Yes",
            "-122.1,37.1 -122.2,37.2 -122.1,37.2",
        )
    )

    result = import_document(data, "zones.kml", store_identifier="store-1")

    assert result.placemark_count == 1
    [zone] = result.zones
    assert zone.draft.zone_name == "North Zone"
    assert zone.draft.base_delivery_fee == 5
    assert zone.draft.is_restricted is True
    assert zone.draft.coordinates == [(37.1, -122.1), (37.2, -122.2), (37.2, -122.1)]
    assert zone.draft.store_identifier == "store-1"
    assert zone.attributes.strategy == "lines"


def test_import_document_reads_structured_descriptions():
    data = _document(_placemark("Ignored", '{"zoneName":"X","basefee":3}', "1,2 3,4 5,6"))

    [zone] = import_document(data, "zones.kml").zones

    assert zone.attributes.strategy == "structured"
    assert zone.draft.zone_name == "X"
    assert zone.draft.base_delivery_fee == 3


def test_document_without_placemarks_is_rejected():
    with pytest.raises(NoGeometryFound):
        import_document(_document(), "empty.kml")


def test_unparsable_document_is_rejected():
    with pytest.raises(DocumentUnparsable):
        import_document(b"<kml><Document><Placemark>", "broken.kml")


def test_store_name_is_resolved_for_the_whole_session():
    resolver = StoreResolver([StoreDirectoryEntry("s-1", "Main Street Store")])
    data = _document(_placemark("A", "", "1,2 3,4 5,6"), _placemark("B", "", "1,2 3,4 5,6"))

    result = import_document(data, "zones.kml", store_name="main st", resolver=resolver)

    assert result.store_identifier == "s-1"
    assert {zone.draft.store_identifier for zone in result.zones} == {"s-1"}


def test_unresolved_store_name_leaves_drafts_unassigned():
    resolver = StoreResolver([StoreDirectoryEntry("s-1", "Main Street Store")])
    data = _document(_placemark("A", "", "1,2 3,4 5,6"))

    result = import_document(data, "zones.kml", store_name="Harbor", resolver=resolver)

    assert result.store_identifier == ""
    assert result.zones[0].draft.store_identifier == ""


def test_malformed_placemark_does_not_block_its_siblings():
    data = _document(
        _placemark("Good", "Base Fee: 2", "1,2 3,4 5,6"),
        _placemark("Broken", "Base Fee: oops", "not-a-coordinate"),
        _placemark("Also Good", "", "7,8 9,10 11,12"),
    )

    result = import_document(data, "zones.kml")

    assert [zone.draft.zone_name for zone in result.zones] == ["Good", "Broken", "Also Good"]
    broken = result.zones[1]
    assert broken.geometry_status == "empty"
    assert broken.draft.coordinates == [(0.0, 0.0)]
    assert broken.warnings
    assert result.zones[2].draft.coordinates == [(8.0, 7.0), (10.0, 9.0), (12.0, 11.0)]


def test_oversized_structured_number_does_not_block_its_siblings():
    huge = "9" * 400
    data = _document(
        _placemark("Good", "Base Fee: 2", "1,2 3,4 5,6"),
        _placemark("Huge", f'{{"basefee": {huge}}}', "1,2 3,4 5,6"),
    )

    result = import_document(data, "zones.kml")

    assert [zone.draft.zone_name for zone in result.zones] == ["Good", "Huge"]
    huge_zone = result.zones[1]
    assert huge_zone.attributes.strategy == "structured"
    assert huge_zone.draft.base_delivery_fee == 0
    assert huge_zone.warnings
