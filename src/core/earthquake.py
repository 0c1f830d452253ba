"""Earthquake data models and parsing - Pure functions.

This module parses upstream GeoJSON features (USGS and GeoNet) into typed
Earthquake objects. All functions are pure with no side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable


# GeoNet publishes an event page per public ID
GEONET_EVENT_URL = "https://www.geonet.org.nz/earthquake/{public_id}"


@dataclass(frozen=True)
class Earthquake:
    """Immutable earthquake record as read from an upstream feed.

    Attributes:
        id: Unique event ID assigned by the feed
        magnitude: Earthquake magnitude
        place: Human-readable location description
        time: Event timestamp (UTC)
        latitude: Epicenter latitude
        longitude: Epicenter longitude
        depth_km: Depth in kilometers (0 when the feed omits it)
        url: Event detail page URL (empty when unknown)
        title: Feed-provided display title (optional)
        alert: PAGER alert level (green/yellow/orange/red) (optional)
        mmi: Modified Mercalli Intensity (optional)
        quality: Data-quality flag, e.g. 'best' or 'preliminary' (optional)
        event_type: Event classification, e.g. 'earthquake' (optional)
    """
    id: str
    magnitude: float
    place: str
    time: datetime
    latitude: float
    longitude: float
    depth_km: float = 0.0
    url: str = ""
    title: str | None = None
    alert: str | None = None
    mmi: int | None = None
    quality: str | None = None
    event_type: str | None = None


FeatureParser = Callable[[dict[str, Any]], Earthquake | None]


def parse_usgs_feature(feature: dict[str, Any]) -> Earthquake | None:
    """Parse a single USGS summary-feed feature into an Earthquake.

    Pure function: takes raw dict, returns typed Earthquake or None if invalid.

    Args:
        feature: GeoJSON feature dict from the USGS summary feed

    Returns:
        Earthquake object or None if parsing fails
    """
    try:
        props = feature.get("properties") or {}
        geometry = feature.get("geometry") or {}
        coords = geometry.get("coordinates") or []

        if len(coords) < 2:
            return None

        event_id = feature.get("id")
        if not event_id:
            return None

        # USGS uses milliseconds since epoch
        time_ms = props.get("time")
        if time_ms is None:
            return None

        magnitude = props.get("mag")
        if magnitude is None:
            return None

        depth = coords[2] if len(coords) > 2 and coords[2] is not None else 0.0

        return Earthquake(
            id=str(event_id),
            magnitude=float(magnitude),
            place=props.get("place") or "Unknown location",
            time=datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc),
            longitude=float(coords[0]),
            latitude=float(coords[1]),
            depth_km=float(depth),
            url=props.get("url") or "",
            title=props.get("title"),
            alert=props.get("alert"),
            event_type=props.get("type"),
        )
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError, OSError):
        return None


def parse_geonet_time(value: str) -> datetime:
    """Parse a GeoNet ISO-8601 timestamp ('2024-02-14T10:15:07.839Z').

    Pure function.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_geonet_feature(feature: dict[str, Any]) -> Earthquake | None:
    """Parse a single GeoNet quake-API feature into an Earthquake.

    GeoNet carries the event ID and depth in the properties rather than in
    the feature ID and third coordinate.

    Args:
        feature: GeoJSON feature dict from the GeoNet quake API

    Returns:
        Earthquake object or None if parsing fails
    """
    try:
        props = feature.get("properties") or {}
        coords = (feature.get("geometry") or {}).get("coordinates") or []

        if len(coords) < 2:
            return None

        public_id = props.get("publicID")
        time_str = props.get("time")
        magnitude = props.get("magnitude")
        if not public_id or not time_str or magnitude is None:
            return None

        mmi = props.get("mmi")
        depth = props.get("depth")

        return Earthquake(
            id=str(public_id),
            magnitude=float(magnitude),
            place=props.get("locality") or "Unknown location",
            time=parse_geonet_time(time_str),
            longitude=float(coords[0]),
            latitude=float(coords[1]),
            depth_km=float(depth) if depth is not None else 0.0,
            url=GEONET_EVENT_URL.format(public_id=public_id),
            mmi=int(mmi) if mmi is not None else None,
            quality=props.get("quality"),
        )
    except (KeyError, TypeError, ValueError, AttributeError):
        return None


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing a feed document.

    Attributes:
        earthquakes: Successfully parsed records, in feed order
        skipped: Number of features that could not be parsed
    """
    earthquakes: list[Earthquake]
    skipped: int = 0

    @property
    def total(self) -> int:
        """Total number of features in the feed."""
        return len(self.earthquakes) + self.skipped


def parse_earthquakes(
    geojson: dict[str, Any],
    parse_feature: FeatureParser = parse_usgs_feature,
) -> ParseResult:
    """Parse a GeoJSON FeatureCollection into Earthquakes.

    Pure function: malformed features are counted and skipped, valid ones are
    returned in feed order.

    Args:
        geojson: Full GeoJSON FeatureCollection from the feed
        parse_feature: Feed-specific feature parser

    Returns:
        ParseResult with the parsed earthquakes and skipped count
    """
    earthquakes = []
    skipped = 0

    for feature in geojson.get("features", []):
        earthquake = parse_feature(feature) if isinstance(feature, dict) else None
        if earthquake is None:
            skipped += 1
        else:
            earthquakes.append(earthquake)

    return ParseResult(earthquakes=earthquakes, skipped=skipped)
