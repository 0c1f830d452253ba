"""Feed definitions - Pure data.

Each supported upstream feed is described by a FeedDefinition: where to fetch
it, how to parse it, which threshold gates it, and how its events are
symbolized. The pipeline itself is generic over these definitions.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from src.core.earthquake import FeatureParser, parse_geonet_feature, parse_usgs_feature


# Gate types
GATE_MAGNITUDE = "magnitude"
GATE_INTENSITY = "intensity"

# Symbology keys
SYMBOLOGY_ALERT_LEVEL = "alert_level"
SYMBOLOGY_INTENSITY = "intensity"

# Environment field names
FIELD_MIN_MAGNITUDE = "Min Magnitude"
FIELD_MMI = "MMI"
FIELD_BOUNDING_BOX = "Bounding Box"
FIELD_MAX_AGE_MINUTES = "Max Age Minutes"
FIELD_LIFETIME_SECONDS = "CoT Lifetime Seconds"

WORLD_BOUNDING_BOX = "-90,90,-180,180"

# The USGS "all_week" summary feed only covers the last 7 days
USGS_MAX_AGE_MINUTES = 7 * 24 * 60


@dataclass(frozen=True)
class EnvironmentField:
    """A named string configuration field.

    Attributes:
        name: Field name as it appears in the task environment
        description: Human-readable description
        default: Default value (always a string)
    """
    name: str
    description: str
    default: str


@dataclass(frozen=True)
class FeedDefinition:
    """Task-specific parameters for one upstream feed.

    Attributes:
        name: Task name ('usgs', 'geonet')
        url: Feed URL, may contain a '{mmi}' placeholder
        parse_feature: Parser for a single GeoJSON feature
        gate: GATE_MAGNITUDE or GATE_INTENSITY
        fields: Environment fields the task accepts
        id_prefix: Prefix for emitted feature IDs
        cot_type: Fixed domain/classification code of emitted features
        symbology: SYMBOLOGY_ALERT_LEVEL or SYMBOLOGY_INTENSITY
        include_elevation: Emit [lon, lat, -depth] instead of [lon, lat]
        use_feed_title: Use the feed's own title as the label when present
        max_age_cap_minutes: Upper bound on Max Age Minutes (None for no cap)
        intensity_range: Valid (min, max) MMI for intensity-gated feeds
        event_type: Required event classification (None when not exposed)
        link_remarks: Label for the detail-page link
        headers: Extra HTTP request headers
    """
    name: str
    url: str
    parse_feature: FeatureParser
    gate: str
    fields: tuple[EnvironmentField, ...]
    id_prefix: str
    cot_type: str
    symbology: str
    include_elevation: bool = True
    use_feed_title: bool = False
    max_age_cap_minutes: float | None = None
    intensity_range: tuple[int, int] | None = None
    event_type: str | None = None
    link_remarks: str = "Event Page"
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def defaults(self) -> dict[str, str]:
        """Default environment, keyed by field name."""
        return {f.name: f.default for f in self.fields}

    def has_field(self, name: str) -> bool:
        """Check if the task accepts an environment field."""
        return any(f.name == name for f in self.fields)


_BOUNDING_BOX_FIELD = EnvironmentField(
    name=FIELD_BOUNDING_BOX,
    description="Bounding box as minLat,maxLat,minLon,maxLon",
    default=WORLD_BOUNDING_BOX,
)

_LIFETIME_FIELD = EnvironmentField(
    name=FIELD_LIFETIME_SECONDS,
    description="Lifetime of CoT markers in seconds",
    default="600",
)


USGS_FEED = FeedDefinition(
    name="usgs",
    url="https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/all_week.geojson",
    parse_feature=parse_usgs_feature,
    gate=GATE_MAGNITUDE,
    fields=(
        EnvironmentField(
            name=FIELD_MIN_MAGNITUDE,
            description="Minimum earthquake magnitude to include",
            default="2.5",
        ),
        _BOUNDING_BOX_FIELD,
        EnvironmentField(
            name=FIELD_MAX_AGE_MINUTES,
            description=(
                "Maximum age of displayed earthquakes in minutes. "
                "Maximum possible value is 7 days (10080 minutes)."
            ),
            default="60",
        ),
        _LIFETIME_FIELD,
    ),
    id_prefix="earthquake",
    cot_type="a-f-X-i-g-e",
    symbology=SYMBOLOGY_ALERT_LEVEL,
    include_elevation=True,
    use_feed_title=True,
    max_age_cap_minutes=USGS_MAX_AGE_MINUTES,
    event_type="earthquake",
    link_remarks="USGS Event Page",
)


GEONET_FEED = FeedDefinition(
    name="geonet",
    url="https://api.geonet.org.nz/quake?MMI={mmi}",
    parse_feature=parse_geonet_feature,
    gate=GATE_INTENSITY,
    fields=(
        EnvironmentField(
            name=FIELD_MMI,
            description="Minimum Modified Mercalli Intensity to include (-1 to 8)",
            default="3",
        ),
        _BOUNDING_BOX_FIELD,
        EnvironmentField(
            name=FIELD_MAX_AGE_MINUTES,
            description="Maximum age of displayed earthquakes in minutes",
            default="60",
        ),
        _LIFETIME_FIELD,
    ),
    id_prefix="geonet",
    cot_type="a-u-G",
    symbology=SYMBOLOGY_INTENSITY,
    include_elevation=False,
    intensity_range=(-1, 8),
    link_remarks="GeoNet Event Page",
    headers=MappingProxyType({"Accept": "application/vnd.geo+json;version=2"}),
)


FEEDS: Mapping[str, FeedDefinition] = MappingProxyType({
    USGS_FEED.name: USGS_FEED,
    GEONET_FEED.name: GEONET_FEED,
})


def get_feed(name: str) -> FeedDefinition:
    """Look up a feed definition by task name.

    Raises:
        KeyError: If no feed has that name
    """
    try:
        return FEEDS[name.strip().lower()]
    except KeyError:
        raise KeyError(
            f"Unknown feed task '{name}', expected one of: {', '.join(FEEDS)}"
        ) from None
