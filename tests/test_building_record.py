from footprints.services.building_record import BuildingRecord, FieldTyping


def test_from_source_keeps_values_verbatim():
    record = BuildingRecord.from_source({
        "bin": "1086410",
        "cnstrct_yr": "1930",
        "heightroof": "28.13",
        "shape_area": "942.4",
        "feat_code": "2100",
        "the_geom": {"type": "MultiPolygon"},
    })

    assert record == BuildingRecord(
        bin="1086410",
        construct_yr="1930",
        height_roof="28.13",
        shape_area="942.4",
        feat_code="2100",
    )


def test_from_source_without_bin_is_skipped():
    assert BuildingRecord.from_source({"cnstrct_yr": "1930"}) is None
    assert BuildingRecord.from_source({"bin": "  ", "cnstrct_yr": "1930"}) is None


def test_optional_fields_default_to_none():
    record = BuildingRecord.from_source({"bin": "1"})
    assert record.construct_yr is None
    assert record.feat_code is None
    assert record.height is None


def test_string_payload_uses_source_field_names():
    record = BuildingRecord(bin="7", construct_yr="2001", height_roof="300.75", shape_area="5000")

    assert record.to_payload(FieldTyping.STRING) == {
        "bin": "7",
        "cnstrct_yr": "2001",
        "heightroof": "300.75",
        "shape_area": "5000",
        "feat_code": None,
    }


def test_numeric_payload_parses_measurements_but_not_identifiers():
    record = BuildingRecord(bin="0007", construct_yr="2001", height_roof="300.75", shape_area="bad", feat_code="1006")

    assert record.to_payload(FieldTyping.NUMERIC) == {
        "bin": "0007",
        "cnstrct_yr": 2001,
        "heightroof": 300.75,
        "shape_area": None,
        "feat_code": "1006",
    }


def test_year_key_depends_on_typing():
    record = BuildingRecord(bin="1", construct_yr="1925.0")
    assert record.year_key(FieldTyping.STRING) == "1925.0"
    assert record.year_key(FieldTyping.NUMERIC) == 1925


def test_field_typing_coerce():
    assert FieldTyping.coerce("Numeric ") is FieldTyping.NUMERIC
    assert FieldTyping.coerce(FieldTyping.STRING) is FieldTyping.STRING
