import pytest

from footprints.services import building_queries
from footprints.services.building_record import BuildingRecord, FieldTyping
from footprints.utils.api_responses import InvalidQueryParameter


def _records(sample_rows):
    return [BuildingRecord.from_source(row) for row in sample_rows]


def test_parse_year_param_string_typing_keeps_text():
    assert building_queries.parse_year_param(" 1925 ", FieldTyping.STRING) == "1925"
    assert building_queries.parse_year_param("abc", FieldTyping.STRING) == "abc"


def test_parse_year_param_numeric_typing_requires_integer():
    assert building_queries.parse_year_param("1925", FieldTyping.NUMERIC) == 1925
    with pytest.raises(InvalidQueryParameter) as excinfo:
        building_queries.parse_year_param("nineteen", FieldTyping.NUMERIC)
    assert excinfo.value.name == "year"


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_parse_year_param_missing(raw):
    with pytest.raises(InvalidQueryParameter):
        building_queries.parse_year_param(raw, FieldTyping.STRING)


def test_parse_height_param():
    assert building_queries.parse_height_param("150") == 150.0
    for raw in (None, "", "tall", "nan"):
        with pytest.raises(InvalidQueryParameter) as excinfo:
            building_queries.parse_height_param(raw)
        assert excinfo.value.name == "height"


def test_filter_by_year_under_each_typing(sample_rows):
    records = _records(sample_rows)
    records.append(BuildingRecord(bin="1006", construct_yr="1925.0"))

    by_text = building_queries.filter_by_year(records, "1925", FieldTyping.STRING)
    by_number = building_queries.filter_by_year(records, 1925, FieldTyping.NUMERIC)

    assert [r.bin for r in by_text] == ["1001", "1002"]
    assert [r.bin for r in by_number] == ["1001", "1002", "1006"]


def test_filter_at_most_height_sorts_tallest_first(sample_rows):
    records = _records(sample_rows)

    result = building_queries.filter_at_most_height(records, 150)

    # 1002 and 1004 tie at 45 and keep load order; 1005 has no height.
    assert [r.bin for r in result] == ["1001", "1002", "1004"]


def test_filter_at_most_height_is_inclusive(sample_rows):
    result = building_queries.filter_at_most_height(_records(sample_rows), 45)
    assert [r.bin for r in result] == ["1002", "1004"]


def test_filter_at_most_height_does_not_accumulate_between_calls(sample_rows):
    records = _records(sample_rows)
    first = building_queries.filter_at_most_height(records, 400)
    second = building_queries.filter_at_most_height(records, 400)
    assert len(first) == len(second) == 4


def test_group_by_year_orders_years_and_puts_unknown_last(sample_rows):
    records = _records(sample_rows)
    records.append(BuildingRecord(bin="1006", construct_yr="circa 1900"))

    groups = building_queries.group_by_year(records, FieldTyping.STRING)

    assert [(g.construct_yr, g.buildings) for g in groups] == [
        ("1899", ["1004"]),
        ("1925", ["1001", "1002"]),
        ("2001", ["1003"]),
        ("circa 1900", ["1006"]),
        (None, ["1005"]),
    ]
    assert groups[1].to_payload() == {"construct_yr": "1925", "count": 2, "buildings": ["1001", "1002"]}


def test_group_by_year_numeric_merges_equivalent_text():
    records = [
        BuildingRecord(bin="1", construct_yr="1925"),
        BuildingRecord(bin="2", construct_yr="1925.0"),
        BuildingRecord(bin="3", construct_yr="junk"),
    ]

    groups = building_queries.group_by_year(records, FieldTyping.NUMERIC)

    assert [(g.construct_yr, g.buildings) for g in groups] == [(1925, ["1", "2"]), (None, ["3"])]


def test_summarize(sample_rows):
    stats = building_queries.summarize(_records(sample_rows))

    assert stats.total_area == pytest.approx(8020.75)
    assert stats.avg_height == pytest.approx(102.25)
    assert stats.building_count == 5
    assert set(stats.to_payload()) == {"totalArea", "avgHeight", "buildingCount"}


def test_summarize_empty_collection():
    stats = building_queries.summarize([])
    assert stats.to_payload() == {"totalArea": 0.0, "avgHeight": None, "buildingCount": 0}


def test_summarize_counts_missing_height_as_zero():
    records = [
        BuildingRecord.from_source({"bin": "1", "heightroof": "100"}),
        BuildingRecord.from_source({"bin": "2", "heightroof": ""}),
    ]

    stats = building_queries.summarize(records)

    assert stats.avg_height == pytest.approx(50.0)
    assert stats.building_count == 2


def test_summarize_without_any_height_averages_to_zero():
    stats = building_queries.summarize([BuildingRecord(bin="1", shape_area="10")])
    assert stats.to_payload() == {"totalArea": 10.0, "avgHeight": 0.0, "buildingCount": 1}
