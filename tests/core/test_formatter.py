"""Unit tests for feature formatting.

Pure function tests - no mocks needed.
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from src.core.earthquake import Earthquake
from src.core.feeds import GEONET_FEED, USGS_FEED
from src.core.formatter import (
    build_feature,
    build_feature_collection,
    build_geometry,
    build_links,
    format_label,
    format_number,
    format_remarks,
    format_timestamp,
    get_output_schema,
)
from src.core.symbology import ALERT_LEVELS, DEFAULT_ICON, INTENSITY_LEVELS


@pytest.fixture
def usgs_earthquake():
    """Create a sample USGS earthquake for testing."""
    return Earthquake(
        id="us7000m1ab",
        magnitude=5.3,
        place="45 km SE of Hualien City, Taiwan",
        time=datetime(2024, 3, 1, 11, 30, 0, tzinfo=timezone.utc),
        latitude=23.7,
        longitude=121.9,
        depth_km=24.5,
        url="https://earthquake.usgs.gov/earthquakes/eventpage/us7000m1ab",
        title="M 5.3 - 45 km SE of Hualien City, Taiwan",
        alert="orange",
        event_type="earthquake",
    )


@pytest.fixture
def geonet_earthquake():
    """Create a sample GeoNet earthquake for testing."""
    return Earthquake(
        id="2024p163000",
        magnitude=3.4,
        place="10 km north of Taupo",
        time=datetime(2024, 3, 1, 11, 30, 0, 250000, tzinfo=timezone.utc),
        latitude=-38.77,
        longitude=175.95,
        depth_km=5.1,
        url="https://www.geonet.org.nz/earthquake/2024p163000",
        mmi=4,
        quality="best",
    )


class TestFormatTimestamp:
    """Tests for format_timestamp()."""

    def test_millisecond_precision(self):
        """Timestamps carry milliseconds and a Z suffix."""
        value = datetime(2024, 3, 1, 11, 30, 0, 250999, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2024-03-01T11:30:00.250Z"

    def test_whole_seconds(self):
        """Whole seconds still show .000."""
        value = datetime(2023, 12, 19, 12, 0, 0, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2023-12-19T12:00:00.000Z"

    def test_converts_to_utc(self):
        """Non-UTC times are normalized."""
        nzdt = timezone(timedelta(hours=13))
        value = datetime(2024, 3, 2, 0, 30, 0, tzinfo=nzdt)
        assert format_timestamp(value) == "2024-03-01T11:30:00.000Z"


class TestFormatNumber:
    """Tests for format_number()."""

    @pytest.mark.parametrize("value,expected", [
        (5.0, "5"),
        (12, "12"),
        (0.0, "0"),
        (4.25, "4.25"),
        (-1.5, "-1.5"),
    ])
    def test_formats(self, value, expected):
        """Whole numbers drop the decimal part."""
        assert format_number(value) == expected


class TestFormatLabel:
    """Tests for format_label()."""

    def test_uses_feed_title(self, usgs_earthquake):
        """USGS labels use the feed's own title."""
        assert format_label(usgs_earthquake, USGS_FEED) == "M 5.3 - 45 km SE of Hualien City, Taiwan"

    def test_synthesizes_without_title(self, usgs_earthquake):
        """Without a title the label is synthesized."""
        earthquake = replace(usgs_earthquake, title=None)
        assert format_label(earthquake, USGS_FEED) == "M5.3 45 km SE of Hualien City, Taiwan"

    def test_geonet_synthesizes(self, geonet_earthquake):
        """GeoNet labels are always synthesized."""
        assert format_label(geonet_earthquake, GEONET_FEED) == "M3.4 10 km north of Taupo"


class TestFormatRemarks:
    """Tests for format_remarks()."""

    def test_usgs_remarks(self, usgs_earthquake):
        """USGS remarks include PAGER impact estimates."""
        remarks = format_remarks(usgs_earthquake, USGS_FEED)

        assert remarks.split("\n") == [
            "Magnitude: 5.3",
            "Place: 45 km SE of Hualien City, Taiwan",
            "Time: 2024-03-01T11:30:00.000Z",
            "Depth: 24.5 km",
            "Alert Level: Orange",
            "Estimated Fatalities: 100 - 999",
            "Estimated Losses: $100 million - $1 billion",
            "More info: https://earthquake.usgs.gov/earthquakes/eventpage/us7000m1ab",
        ]

    def test_usgs_remarks_without_alert(self, usgs_earthquake):
        """Missing alert levels use the 'none' row."""
        remarks = format_remarks(replace(usgs_earthquake, alert=None), USGS_FEED)

        assert "Alert Level: None" in remarks
        assert "Estimated Fatalities: Not estimated" in remarks
        assert "Estimated Losses: Not estimated" in remarks

    def test_geonet_remarks(self, geonet_earthquake):
        """GeoNet remarks include intensity and quality."""
        remarks = format_remarks(geonet_earthquake, GEONET_FEED)

        assert remarks.split("\n") == [
            "Magnitude: 3.4",
            "Place: 10 km north of Taupo",
            "Time: 2024-03-01T11:30:00.250Z",
            "Depth: 5.1 km",
            "Intensity: MMI 4 (Light)",
            "Quality: best",
            "More info: https://www.geonet.org.nz/earthquake/2024p163000",
        ]

    def test_geonet_remarks_without_intensity(self, geonet_earthquake):
        """Missing intensity is reported as unknown."""
        remarks = format_remarks(replace(geonet_earthquake, mmi=None), GEONET_FEED)
        assert "Intensity: MMI unknown (Unknown)" in remarks

    def test_no_url_line_without_url(self, usgs_earthquake):
        """The More info line needs a URL."""
        remarks = format_remarks(replace(usgs_earthquake, url=""), USGS_FEED)
        assert "More info" not in remarks

    def test_whole_magnitude(self, usgs_earthquake):
        """A whole magnitude is written without a decimal part."""
        remarks = format_remarks(replace(usgs_earthquake, magnitude=5.0), USGS_FEED)
        assert "Magnitude: 5\n" in remarks


class TestBuildGeometry:
    """Tests for build_geometry()."""

    def test_usgs_is_three_dimensional(self, usgs_earthquake):
        """Elevation is negative depth."""
        geometry = build_geometry(usgs_earthquake, USGS_FEED)

        assert geometry == {"type": "Point", "coordinates": [121.9, 23.7, -24.5]}

    def test_zero_depth_is_zero_elevation(self, usgs_earthquake):
        """Zero depth gives 0.0, not -0.0."""
        geometry = build_geometry(replace(usgs_earthquake, depth_km=0.0), USGS_FEED)

        assert geometry["coordinates"][2] == 0.0
        assert str(geometry["coordinates"][2]) == "0.0"

    def test_geonet_is_two_dimensional(self, geonet_earthquake):
        """GeoNet emits [lon, lat] only."""
        geometry = build_geometry(geonet_earthquake, GEONET_FEED)

        assert geometry == {"type": "Point", "coordinates": [175.95, -38.77]}


class TestBuildLinks:
    """Tests for build_links()."""

    def test_links_to_detail_page(self, usgs_earthquake):
        """One link to the event page."""
        links = build_links(usgs_earthquake, USGS_FEED, "earthquake-us7000m1ab")

        assert links == [{
            "uid": "earthquake-us7000m1ab",
            "relation": "r-u",
            "mime": "text/html",
            "url": usgs_earthquake.url,
            "remarks": "USGS Event Page",
        }]

    def test_no_links_without_url(self, usgs_earthquake):
        """No URL, no links."""
        assert build_links(replace(usgs_earthquake, url=""), USGS_FEED, "x") == []


class TestBuildFeature:
    """Tests for build_feature()."""

    def test_usgs_feature(self, usgs_earthquake):
        """USGS feature carries alert-level symbology and expiry."""
        feature = build_feature(usgs_earthquake, USGS_FEED, timedelta(seconds=600))
        props = feature["properties"]

        assert feature["id"] == "earthquake-us7000m1ab"
        assert feature["type"] == "Feature"
        assert props["callsign"] == "M 5.3 - 45 km SE of Hualien City, Taiwan"
        assert props["type"] == "a-f-X-i-g-e"
        assert props["icon"] == ALERT_LEVELS["orange"].icon
        assert props["marker-color"] == "#FF9900"
        assert props["time"] == "2024-03-01T11:30:00.000Z"
        assert props["start"] == "2024-03-01T11:30:00.000Z"
        assert props["stale"] == "2024-03-01T11:40:00.000Z"
        assert props["remarks"].startswith("Magnitude: 5.3\n")
        assert props["links"][0]["url"] == usgs_earthquake.url
        assert feature["geometry"]["coordinates"] == [121.9, 23.7, -24.5]

    def test_no_stale_without_lifetime(self, usgs_earthquake):
        """No lifetime, no stale time."""
        feature = build_feature(usgs_earthquake, USGS_FEED)
        assert "stale" not in feature["properties"]

    def test_unknown_alert_gets_default_symbology(self, usgs_earthquake):
        """Unrecognized alert levels fall back to the neutral row."""
        feature = build_feature(replace(usgs_earthquake, alert="pending"), USGS_FEED)

        assert feature["properties"]["marker-color"] == ALERT_LEVELS["none"].color
        assert feature["properties"]["icon"] == DEFAULT_ICON

    def test_geonet_feature(self, geonet_earthquake):
        """GeoNet feature carries intensity symbology and no marker color."""
        feature = build_feature(geonet_earthquake, GEONET_FEED, timedelta(minutes=5))
        props = feature["properties"]

        assert feature["id"] == "geonet-2024p163000"
        assert props["type"] == "a-u-G"
        assert props["icon"] == INTENSITY_LEVELS[4].icon
        assert "marker-color" not in props
        assert props["stale"] == "2024-03-01T11:35:00.250Z"
        assert feature["geometry"]["coordinates"] == [175.95, -38.77]

    def test_is_deterministic(self, usgs_earthquake):
        """The same earthquake always maps to the same feature."""
        first = build_feature(usgs_earthquake, USGS_FEED, timedelta(seconds=600))
        second = build_feature(usgs_earthquake, USGS_FEED, timedelta(seconds=600))
        assert first == second


class TestBuildFeatureCollection:
    """Tests for build_feature_collection()."""

    def test_wraps_features(self):
        """Features are wrapped in order."""
        features = [{"id": "a"}, {"id": "b"}]
        assert build_feature_collection(features) == {
            "type": "FeatureCollection",
            "features": features,
        }

    def test_empty(self):
        """An empty run still produces a collection."""
        assert build_feature_collection([])["features"] == []


class TestOutputSchema:
    """Tests for get_output_schema()."""

    def test_coordinate_count_follows_feed(self):
        """USGS points are 3-D, GeoNet points are 2-D."""
        usgs = get_output_schema(USGS_FEED)["properties"]["geometry"]
        geonet = get_output_schema(GEONET_FEED)["properties"]["geometry"]

        assert usgs["properties"]["coordinates"]["maxItems"] == 3
        assert geonet["properties"]["coordinates"]["maxItems"] == 2

    def test_type_is_feed_constant(self):
        """The type property is fixed per feed."""
        schema = get_output_schema(USGS_FEED)
        assert schema["properties"]["properties"]["properties"]["type"] == {"const": "a-f-X-i-g-e"}
