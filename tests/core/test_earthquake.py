"""Unit tests for earthquake parsing.

These tests demonstrate the benefit of the Functional Core pattern:
- No mocks needed
- Fast, deterministic execution
- Simple assertions on pure functions
"""

from datetime import datetime, timezone

import pytest

from src.core.earthquake import (
    Earthquake,
    ParseResult,
    parse_earthquakes,
    parse_geonet_feature,
    parse_geonet_time,
    parse_usgs_feature,
)


EVENT_TIME = datetime(2024, 3, 1, 11, 30, 0, tzinfo=timezone.utc)

# Sample USGS summary-feed feature for testing
SAMPLE_USGS_FEATURE = {
    "type": "Feature",
    "id": "us7000m1ab",
    "properties": {
        "mag": 5.3,
        "place": "45 km SE of Hualien City, Taiwan",
        "time": int(EVENT_TIME.timestamp() * 1000),
        "url": "https://earthquake.usgs.gov/earthquakes/eventpage/us7000m1ab",
        "alert": "yellow",
        "type": "earthquake",
        "title": "M 5.3 - 45 km SE of Hualien City, Taiwan",
    },
    "geometry": {
        "type": "Point",
        "coordinates": [121.9, 23.7, 24.5],  # lon, lat, depth
    },
}

# Sample GeoNet quake-API feature for testing
SAMPLE_GEONET_FEATURE = {
    "type": "Feature",
    "geometry": {
        "type": "Point",
        "coordinates": [175.95, -38.77],
    },
    "properties": {
        "publicID": "2024p163000",
        "time": "2024-03-01T11:30:00.250Z",
        "depth": 5.1,
        "magnitude": 3.4,
        "mmi": 4,
        "locality": "10 km north of Taupo",
        "quality": "best",
    },
}


class TestParseUsgsFeature:
    """Tests for parse_usgs_feature() pure function."""

    def test_parses_valid_feature(self):
        """Should parse a valid USGS feature into Earthquake."""
        result = parse_usgs_feature(SAMPLE_USGS_FEATURE)

        assert result is not None
        assert result.id == "us7000m1ab"
        assert result.magnitude == 5.3
        assert result.place == "45 km SE of Hualien City, Taiwan"
        assert result.longitude == 121.9
        assert result.latitude == 23.7
        assert result.depth_km == 24.5
        assert result.alert == "yellow"
        assert result.event_type == "earthquake"
        assert result.title == "M 5.3 - 45 km SE of Hualien City, Taiwan"

    def test_parses_time_correctly(self):
        """Should convert milliseconds to an aware UTC datetime."""
        result = parse_usgs_feature(SAMPLE_USGS_FEATURE)

        assert result is not None
        assert result.time == EVENT_TIME

    def test_two_element_coordinates_default_depth_to_zero(self):
        """Depth is 0 when the coordinate array has no third element."""
        feature = {
            **SAMPLE_USGS_FEATURE,
            "geometry": {"type": "Point", "coordinates": [121.9, 23.7]},
        }
        result = parse_usgs_feature(feature)

        assert result is not None
        assert result.depth_km == 0.0

    def test_null_depth_defaults_to_zero(self):
        """Depth is 0 when the third coordinate is null."""
        feature = {
            **SAMPLE_USGS_FEATURE,
            "geometry": {"type": "Point", "coordinates": [121.9, 23.7, None]},
        }
        result = parse_usgs_feature(feature)

        assert result is not None
        assert result.depth_km == 0.0

    def test_returns_none_for_null_magnitude(self):
        """USGS sometimes publishes events without a magnitude yet."""
        feature = {
            **SAMPLE_USGS_FEATURE,
            "properties": {**SAMPLE_USGS_FEATURE["properties"], "mag": None},
        }
        assert parse_usgs_feature(feature) is None

    def test_returns_none_for_missing_time(self):
        """Should return None if time is missing."""
        feature = {
            "id": "test",
            "properties": {"mag": 3.0},
            "geometry": {"coordinates": [0, 0, 0]},
        }
        assert parse_usgs_feature(feature) is None

    def test_returns_none_for_missing_coordinates(self):
        """Should return None if coordinates are missing."""
        feature = {
            "id": "test",
            "properties": {"mag": 3.0, "time": 1709292600000},
            "geometry": {"coordinates": []},
        }
        assert parse_usgs_feature(feature) is None

    def test_returns_none_for_missing_id(self):
        """Should return None if the feature has no ID."""
        feature = {k: v for k, v in SAMPLE_USGS_FEATURE.items() if k != "id"}
        assert parse_usgs_feature(feature) is None

    def test_returns_none_for_non_numeric_magnitude(self):
        """Should return None if magnitude is not a number."""
        feature = {
            **SAMPLE_USGS_FEATURE,
            "properties": {**SAMPLE_USGS_FEATURE["properties"], "mag": "big"},
        }
        assert parse_usgs_feature(feature) is None

    def test_handles_null_properties(self):
        """Should return None when properties is null."""
        assert parse_usgs_feature({"id": "x", "properties": None, "geometry": None}) is None

    @pytest.mark.parametrize("field,value", [
        ("properties", ["bad"]),
        ("properties", "bad"),
        ("geometry", ["bad"]),
        ("geometry", 42),
    ])
    def test_returns_none_for_non_object_members(self, field, value):
        """Should return None when properties or geometry is not an object."""
        feature = {**SAMPLE_USGS_FEATURE, field: value}
        assert parse_usgs_feature(feature) is None


class TestParseGeonetFeature:
    """Tests for parse_geonet_feature() pure function."""

    def test_parses_valid_feature(self):
        """Should parse a valid GeoNet feature into Earthquake."""
        result = parse_geonet_feature(SAMPLE_GEONET_FEATURE)

        assert result is not None
        assert result.id == "2024p163000"
        assert result.magnitude == 3.4
        assert result.place == "10 km north of Taupo"
        assert result.longitude == 175.95
        assert result.latitude == -38.77
        assert result.depth_km == 5.1
        assert result.mmi == 4
        assert result.quality == "best"
        assert result.alert is None

    def test_builds_event_url(self):
        """Detail URL is built from the public ID."""
        result = parse_geonet_feature(SAMPLE_GEONET_FEATURE)

        assert result is not None
        assert result.url == "https://www.geonet.org.nz/earthquake/2024p163000"

    def test_parses_iso_time(self):
        """Time string is parsed to an aware UTC datetime."""
        result = parse_geonet_feature(SAMPLE_GEONET_FEATURE)

        assert result is not None
        assert result.time == datetime(2024, 3, 1, 11, 30, 0, 250000, tzinfo=timezone.utc)

    def test_missing_depth_defaults_to_zero(self):
        """Depth is 0 when GeoNet omits it."""
        props = {k: v for k, v in SAMPLE_GEONET_FEATURE["properties"].items() if k != "depth"}
        result = parse_geonet_feature({**SAMPLE_GEONET_FEATURE, "properties": props})

        assert result is not None
        assert result.depth_km == 0.0

    def test_returns_none_for_missing_public_id(self):
        """Should return None without a publicID."""
        props = {k: v for k, v in SAMPLE_GEONET_FEATURE["properties"].items() if k != "publicID"}
        assert parse_geonet_feature({**SAMPLE_GEONET_FEATURE, "properties": props}) is None

    def test_returns_none_for_bad_time(self):
        """Should return None when time does not parse."""
        props = {**SAMPLE_GEONET_FEATURE["properties"], "time": "yesterday"}
        assert parse_geonet_feature({**SAMPLE_GEONET_FEATURE, "properties": props}) is None


class TestParseGeonetTime:
    """Tests for parse_geonet_time()."""

    def test_naive_time_is_treated_as_utc(self):
        """A timestamp without offset is taken as UTC."""
        assert parse_geonet_time("2024-03-01T11:30:00") == datetime(
            2024, 3, 1, 11, 30, tzinfo=timezone.utc
        )

    def test_offset_is_normalized_to_utc(self):
        """A timestamp with an offset is converted to UTC."""
        assert parse_geonet_time("2024-03-02T00:30:00+13:00") == datetime(
            2024, 3, 1, 11, 30, tzinfo=timezone.utc
        )


class TestParseEarthquakes:
    """Tests for parse_earthquakes() pure function."""

    def test_parses_geojson_response(self):
        """Should parse a full GeoJSON response."""
        result = parse_earthquakes({"features": [SAMPLE_USGS_FEATURE]})

        assert isinstance(result, ParseResult)
        assert len(result.earthquakes) == 1
        assert isinstance(result.earthquakes[0], Earthquake)
        assert result.skipped == 0

    def test_uses_given_parser(self):
        """Should use the feed-specific feature parser."""
        result = parse_earthquakes(
            {"features": [SAMPLE_GEONET_FEATURE]},
            parse_geonet_feature,
        )

        assert len(result.earthquakes) == 1
        assert result.earthquakes[0].id == "2024p163000"

    def test_counts_and_skips_invalid_features(self):
        """Malformed features are skipped and counted."""
        geojson = {
            "features": [
                SAMPLE_USGS_FEATURE,
                {"properties": {}, "geometry": {"coordinates": []}},
                "not a feature",
            ]
        }
        result = parse_earthquakes(geojson)

        assert len(result.earthquakes) == 1
        assert result.skipped == 2
        assert result.total == 3

    def test_preserves_feed_order(self):
        """Earthquakes are returned in feed order."""
        second = {**SAMPLE_USGS_FEATURE, "id": "us7000m1ac"}
        result = parse_earthquakes({"features": [SAMPLE_USGS_FEATURE, second]})

        assert [e.id for e in result.earthquakes] == ["us7000m1ab", "us7000m1ac"]

    def test_empty_features(self):
        """Should return empty result for no features."""
        result = parse_earthquakes({"features": []})

        assert result.earthquakes == []
        assert result.total == 0
