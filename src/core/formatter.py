"""Feature formatting - Pure functions.

This module maps earthquakes to GeoJSON point features carrying map
symbology and a human-readable remarks block.
All functions are pure with no side effects.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from src.core.earthquake import Earthquake
from src.core.feeds import SYMBOLOGY_ALERT_LEVEL, SYMBOLOGY_INTENSITY, FeedDefinition
from src.core.symbology import get_alert_level_info, get_intensity_info


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with millisecond precision.

    Pure function. E.g. '2023-12-19T12:00:00.000Z'.
    """
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def format_number(value: float) -> str:
    """Format a number without a trailing '.0' for whole values.

    Pure function. 5.0 -> '5', 4.25 -> '4.25'.
    """
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_label(earthquake: Earthquake, feed: FeedDefinition) -> str:
    """Get the display label (callsign) for an earthquake.

    Pure function.
    """
    if feed.use_feed_title and earthquake.title:
        return earthquake.title
    return f"M{earthquake.magnitude:.1f} {earthquake.place}"


def format_remarks(earthquake: Earthquake, feed: FeedDefinition) -> str:
    """Format the multi-line remarks block for an earthquake.

    Pure function.

    Args:
        earthquake: Earthquake to describe
        feed: Feed the earthquake came from

    Returns:
        Newline-joined remarks
    """
    lines = [
        f"Magnitude: {format_number(earthquake.magnitude)}",
        f"Place: {earthquake.place}",
        f"Time: {format_timestamp(earthquake.time)}",
        f"Depth: {format_number(earthquake.depth_km)} km",
    ]

    if feed.symbology == SYMBOLOGY_ALERT_LEVEL:
        info = get_alert_level_info(earthquake.alert)
        lines.append(f"Alert Level: {info.level.capitalize()}")
        lines.append(f"Estimated Fatalities: {info.fatalities}")
        lines.append(f"Estimated Losses: {info.losses}")

    if feed.symbology == SYMBOLOGY_INTENSITY:
        info = get_intensity_info(earthquake.mmi)
        mmi = "unknown" if earthquake.mmi is None else earthquake.mmi
        lines.append(f"Intensity: MMI {mmi} ({info.description})")

    if earthquake.quality:
        lines.append(f"Quality: {earthquake.quality}")

    if earthquake.url:
        lines.append(f"More info: {earthquake.url}")

    return "\n".join(lines)


def build_geometry(earthquake: Earthquake, feed: FeedDefinition) -> dict[str, Any]:
    """Build the GeoJSON point geometry for an earthquake.

    Pure function. Elevation is negative depth in kilometers when the feed
    emits 3-D points.
    """
    coordinates = [earthquake.longitude, earthquake.latitude]
    if feed.include_elevation:
        coordinates.append(-earthquake.depth_km if earthquake.depth_km else 0.0)

    return {
        "type": "Point",
        "coordinates": coordinates,
    }


def build_links(
    earthquake: Earthquake,
    feed: FeedDefinition,
    feature_id: str,
) -> list[dict[str, str]]:
    """Build hyperlinks to the source detail page.

    Pure function. Empty when the feed gave no URL.
    """
    if not earthquake.url:
        return []

    return [{
        "uid": feature_id,
        "relation": "r-u",
        "mime": "text/html",
        "url": earthquake.url,
        "remarks": feed.link_remarks,
    }]


def build_feature(
    earthquake: Earthquake,
    feed: FeedDefinition,
    lifetime: timedelta | None = None,
) -> dict[str, Any]:
    """Map an earthquake to a GeoJSON feature with map symbology.

    Pure function.

    Args:
        earthquake: Earthquake to map
        feed: Feed the earthquake came from
        lifetime: Offset from event time to marker expiry (optional)

    Returns:
        GeoJSON Feature dict
    """
    feature_id = f"{feed.id_prefix}-{earthquake.id}"
    event_time = format_timestamp(earthquake.time)

    properties: dict[str, Any] = {
        "callsign": format_label(earthquake, feed),
        "type": feed.cot_type,
        "time": event_time,
        "start": event_time,
    }

    if lifetime is not None:
        properties["stale"] = format_timestamp(earthquake.time + lifetime)

    if feed.symbology == SYMBOLOGY_ALERT_LEVEL:
        info = get_alert_level_info(earthquake.alert)
        properties["icon"] = info.icon
        properties["marker-color"] = info.color
    else:
        properties["icon"] = get_intensity_info(earthquake.mmi).icon

    properties["remarks"] = format_remarks(earthquake, feed)

    links = build_links(earthquake, feed, feature_id)
    if links:
        properties["links"] = links

    return {
        "id": feature_id,
        "type": "Feature",
        "properties": properties,
        "geometry": build_geometry(earthquake, feed),
    }


def build_feature_collection(features: list[dict[str, Any]]) -> dict[str, Any]:
    """Wrap features in a GeoJSON FeatureCollection.

    Pure function.
    """
    return {
        "type": "FeatureCollection",
        "features": features,
    }


def get_output_schema(feed: FeedDefinition) -> dict[str, Any]:
    """Describe the features a task emits as a JSON schema.

    Pure function.
    """
    coordinate_count = 3 if feed.include_elevation else 2
    return {
        "type": "object",
        "properties": {
            "id": {"type": "string"},
            "type": {"const": "Feature"},
            "properties": {
                "type": "object",
                "properties": {
                    "callsign": {"type": "string"},
                    "type": {"const": feed.cot_type},
                    "icon": {"type": "string"},
                    "time": {"type": "string", "format": "date-time"},
                    "start": {"type": "string", "format": "date-time"},
                    "stale": {"type": "string", "format": "date-time"},
                    "marker-color": {"type": "string"},
                    "remarks": {"type": "string"},
                    "links": {"type": "array", "items": {"type": "object"}},
                },
                "required": ["callsign", "type", "icon", "time", "start", "remarks"],
            },
            "geometry": {
                "type": "object",
                "properties": {
                    "type": {"const": "Point"},
                    "coordinates": {
                        "type": "array",
                        "items": {"type": "number"},
                        "minItems": coordinate_count,
                        "maxItems": coordinate_count,
                    },
                },
            },
        },
        "required": ["id", "type", "properties", "geometry"],
    }
