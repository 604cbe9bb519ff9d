import pytest

from zone_importer.services.ingestion.canonicalizer import (
    KEY_SYNONYMS,
    BoolValue,
    NumberValue,
    TextValue,
    canonical_key,
    canonicalize,
    clean_key,
    coerce_value,
)


@pytest.mark.parametrize("raw_key", ["Zone", "zone ", "ZONE:", "Zone Name", "zone_name", "name"])
def test_zone_name_key_variants_share_one_canonical_key(raw_key):
    assert canonical_key(raw_key) == "zoneName"


@pytest.mark.parametrize(
    ("raw_key", "expected"),
    [
        ("Base Fee", "baseDeliveryFee"),
        ("base delivery fee", "baseDeliveryFee"),
        ("BaseDeliveryFee", "baseDeliveryFee"),
        ("Per-Mile Fee", "perMileFee"),
        ("Min. Order", "minOrderAmount"),
        ("Prep Time", "estimatedPreparationTime"),
        ("Restricted?", "isRestricted"),
        ("Colour", None),
    ],
)
def test_canonical_key_uses_synonym_table(raw_key, expected):
    assert canonical_key(raw_key) == expected


def test_clean_key_keeps_only_lowercase_alphanumerics():
    assert clean_key("  Min. Order (USD) #2 ") == "minorderusd2"


def test_synonym_table_cannot_be_mutated():
    with pytest.raises(TypeError):
        KEY_SYNONYMS["zonelabel"] = "zoneName"


def test_coerce_value_checks_boolean_words_before_numbers():
    assert coerce_value("Yes") == BoolValue(True, "Yes")
    assert coerce_value(" TRUE ") == BoolValue(True, "TRUE")
    assert coerce_value("No") == BoolValue(False, "No")
    assert coerce_value("false") == BoolValue(False, "false")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("15 mins", 15.0),
        ("20 Minutes", 20.0),
        ("1 min", 1.0),
        ("$5.50", 5.5),
        ("-3", -3.0),
        ("about 12.5 miles", 12.5),
    ],
)
def test_coerce_value_extracts_first_number(raw, expected):
    value = coerce_value(raw)

    assert isinstance(value, NumberValue)
    assert value.value == expected
    assert value.text == raw.strip()


def test_coerce_value_keeps_original_text_when_nothing_matches():
    assert coerce_value("  Downtown  ") == TextValue("Downtown", "Downtown")


def test_line_strategy_maps_known_keys_and_keeps_notes():
    attributes = canonicalize("Base Fee: 5<br>Restricted: Yes<br/>Open late on weekends")

    assert attributes.strategy == "lines"
    assert attributes.get("baseDeliveryFee") == NumberValue(5.0, "5")
    assert attributes.get("isRestricted") == BoolValue(True, "Yes")
    assert attributes.notes == ["Open late on weekends"]
    assert set(attributes.fields) <= {
        "zoneName",
        "baseDeliveryFee",
        "perMileFee",
        "minOrderAmount",
        "estimatedPreparationTime",
        "isRestricted",
    }


def test_line_strategy_uses_dash_separator_when_colon_is_absent():
    attributes = canonicalize("Prep Time - 20 mins\nMin Order - $12")

    assert attributes.get("estimatedPreparationTime").value == 20.0
    assert attributes.get("minOrderAmount").value == 12.0


def test_line_strategy_prefers_colon_over_dash():
    attributes = canonicalize("Delivery Fee - Weekend: 7")

    assert attributes.get("baseDeliveryFee") is None
    assert attributes.extras["deliveryfeeweekend"].value == 7.0


def test_unknown_keys_go_to_extras_without_touching_canonical_fields():
    attributes = canonicalize("Colour: red\nZone: North")

    assert attributes.extras == {"colour": TextValue("red", "red")}
    assert attributes.get("zoneName").value == "North"


def test_line_strategy_unescapes_entities_and_drops_other_markup():
    attributes = canonicalize("<p><b>Min Order</b>: &#36;12</p><div>Zone: East</div>")

    assert attributes.get("minOrderAmount").value == 12.0
    assert attributes.get("zoneName").value == "East"


def test_line_with_empty_key_is_kept_as_note():
    attributes = canonicalize(": orphan value")

    assert attributes.fields == {}
    assert attributes.notes == [": orphan value"]


def test_structured_strategy_still_canonicalizes_keys():
    attributes = canonicalize('{"zoneName":"X","basefee":3}')

    assert attributes.strategy == "structured"
    assert attributes.get("zoneName").value == "X"
    assert attributes.get("baseDeliveryFee").value == 3.0


def test_structured_strategy_types_json_values():
    attributes = canonicalize(
        '{"restricted": false, "prep time": "25 min", "tags": ["a", "b"], "per mile": null}'
    )

    assert attributes.get("isRestricted") == BoolValue(False, "false")
    assert attributes.get("estimatedPreparationTime").value == 25.0
    assert attributes.extras["tags"].value == '["a","b"]'
    assert attributes.get("perMileFee") is None


def test_malformed_json_falls_back_to_line_strategy():
    attributes = canonicalize('{"zoneName": "X", "basefee": 3\nRestricted: No')

    assert attributes.strategy == "lines"
    assert attributes.get("isRestricted") == BoolValue(False, "No")


def test_empty_description_yields_empty_line_attributes():
    attributes = canonicalize("")

    assert attributes.strategy == "lines"
    assert attributes.fields == {}
    assert attributes.notes == []


def test_later_duplicate_key_wins():
    attributes = canonicalize("Base Fee: 2\nbasefee: 4")

    assert attributes.get("baseDeliveryFee").value == 4.0


def test_to_dict_exposes_plain_values():
    payload = canonicalize("Zone: North\nBase Fee: 5\nColour: red\nhello").to_dict()

    assert payload == {
        "zoneName": "North",
        "baseDeliveryFee": 5.0,
        "extras": {"colour": "red"},
        "notes": ["hello"],
    }


def test_numbers_too_large_for_a_float_stay_text():
    digits = "9" * 400

    assert coerce_value(digits) == TextValue(digits, digits)
    structured = canonicalize(f'{{"basefee": {digits}, "per mile": 1e400}}')
    assert isinstance(structured.get("baseDeliveryFee"), TextValue)
    assert isinstance(structured.get("perMileFee"), TextValue)
