"""データモデル・カタログのテスト"""
import json
from urllib.parse import parse_qs, urlparse

import pytest

from civic_api.errors import InvalidArgument
from civic_api.services.catalog import (
    TYSONS_CATALOG, load_catalog, parse_catalog, find_place,
)
from civic_api.services.places import (
    Coordinate, Place, PlaceType, Region, SearchContext, ResultSlot,
    PLACE_TYPE_STYLES, RADIUS_PRESETS, format_distance, format_distance_detail,
    directions_url,
)


class TestCoordinate:
    def test_rejects_out_of_range(self):
        with pytest.raises(InvalidArgument):
            Coordinate(91.0, 0.0)
        with pytest.raises(InvalidArgument):
            Coordinate(0.0, -180.5)

    def test_is_immutable(self):
        c = Coordinate(1.0, 2.0)
        with pytest.raises(AttributeError):
            c.latitude = 3.0


class TestPlaceType:
    def test_every_type_has_style(self):
        assert set(PLACE_TYPE_STYLES) == set(PlaceType)
        for t in PlaceType:
            assert {"label", "icon", "color"} <= set(t.style)

    def test_labels(self):
        assert PlaceType.COMMUNITY_CENTER.style["label"] == "Community Center"
        assert PlaceType.LIBRARY.style["color"] == "purple"
        assert PlaceType("school") is PlaceType.SCHOOL


class TestPlace:
    def test_with_distance_returns_copy(self):
        p = TYSONS_CATALOG[0]
        q = p.with_distance(12.5)
        assert q.distance == 12.5
        assert p.distance is None
        assert q.id == p.id


class TestRegion:
    def test_min_span_keeps_larger_span(self):
        r = Region(Coordinate(0.0, 0.0), 0.2, 0.001)
        floored = r.with_min_span(0.01)
        assert floored.latitude_delta == 0.2
        assert floored.longitude_delta == 0.01
        assert floored.center == r.center


class TestSearchContext:
    def test_default_radius(self):
        ctx = SearchContext(Coordinate(38.9, -77.2))
        assert ctx.radius_m == 5000
        assert ctx.sequence == 0

    def test_presets(self):
        assert RADIUS_PRESETS == (1000, 5000, 10000, 25000)
        for r in RADIUS_PRESETS:
            SearchContext(Coordinate(0.0, 0.0), r)

    @pytest.mark.parametrize("radius", [0, -5000, 2000])
    def test_rejects_non_preset(self, radius):
        with pytest.raises(InvalidArgument):
            SearchContext(Coordinate(0.0, 0.0), radius)

    def test_replace_makes_new_value(self):
        ctx = SearchContext(Coordinate(38.9, -77.2))
        wider = ctx.replace_radius(25000)
        moved = wider.replace_reference(Coordinate(38.91, -77.22))
        assert ctx.radius_m == 5000
        assert (wider.radius_m, wider.sequence) == (25000, 1)
        assert moved.reference == Coordinate(38.91, -77.22)
        assert moved.radius_m == 25000
        assert moved.sequence == 2

    def test_replace_radius_validates(self):
        ctx = SearchContext(Coordinate(38.9, -77.2))
        with pytest.raises(InvalidArgument):
            ctx.replace_radius(0)


class TestResultSlot:
    def test_latest_wins(self):
        slot = ResultSlot()
        assert slot.offer(1, ["a"])
        assert slot.offer(3, ["c"])
        # 遅れて届いた古い結果は捨てる
        assert not slot.offer(2, ["b"])
        assert slot.snapshot() == (3, ["c"])

    def test_same_sequence_replaces(self):
        slot = ResultSlot()
        slot.offer(1, "first")
        assert slot.offer(1, "again")
        assert slot.result == "again"


class TestFormatDistance:
    @pytest.mark.parametrize("meters,expected", [
        (0, "0m"),
        (297.4, "297m"),
        (999.9, "999m"),
        (1000, "1.0km"),
        (1057.3, "1.1km"),
        (25000, "25.0km"),
    ])
    def test_format(self, meters, expected):
        assert format_distance(meters) == expected


class TestCatalog:
    def test_builtin_catalog(self):
        assert len(TYSONS_CATALOG) == 8
        ids = [p.id for p in TYSONS_CATALOG]
        assert len(set(ids)) == 8
        assert all(p.distance is None for p in TYSONS_CATALOG)

    def test_find_place(self):
        assert find_place(TYSONS_CATALOG, "tysons-06").name == "Vienna Town Hall"
        assert find_place(TYSONS_CATALOG, "nope") is None

    def test_load_catalog(self, tmp_path):
        path = tmp_path / "places.json"
        path.write_text(json.dumps([
            {"id": "p1", "name": "Null Island School", "type": "school",
             "address": "", "latitude": 0, "longitude": 0},
            {"id": "p2", "name": "Somewhere", "type": "stadium",
             "latitude": 38.9, "longitude": -77.2},
        ]), encoding="utf-8")
        places = load_catalog(path)
        assert [p.id for p in places] == ["p1", "p2"]
        assert places[0].coordinate == Coordinate(0.0, 0.0)
        assert places[0].type is PlaceType.SCHOOL
        assert places[1].type is PlaceType.OTHER

    def test_duplicate_ids(self):
        records = [
            {"id": "p1", "name": "A", "latitude": 1, "longitude": 1},
            {"id": "p1", "name": "B", "latitude": 2, "longitude": 2},
        ]
        with pytest.raises(InvalidArgument):
            parse_catalog(records)

    @pytest.mark.parametrize("record", [
        {"name": "no id", "latitude": 1, "longitude": 1},
        {"id": "p1", "name": "bad lat", "latitude": 95, "longitude": 1},
        {"id": "p1", "name": "bad number", "latitude": "north", "longitude": 1},
        {"id": "", "name": "blank id", "latitude": 1, "longitude": 1},
        "not an object",
    ])
    def test_invalid_records(self, record):
        with pytest.raises(InvalidArgument):
            parse_catalog([record])

    def test_not_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidArgument):
            load_catalog(path)

    def test_not_array(self):
        with pytest.raises(InvalidArgument):
            parse_catalog({"id": "p1"})


class TestDetailHelpers:
    @pytest.mark.parametrize("meters,expected", [
        (297.4, "297 meters"),
        (1057.3, "1.06 kilometers"),
        (2019.3, "2.02 kilometers"),
    ])
    def test_format_distance_detail(self, meters, expected):
        assert format_distance_detail(meters) == expected

    def test_directions_url_uses_driving_mode(self):
        place = find_place(TYSONS_CATALOG, "tysons-06")
        url = directions_url(place)
        parts = urlparse(url)
        query = parse_qs(parts.query)
        assert parts.netloc == "maps.apple.com"
        assert query["daddr"] == ["38.93,-77.225"]
        assert query["q"] == ["Vienna Town Hall"]
        assert query["dirflg"] == ["d"]
