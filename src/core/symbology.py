"""Map symbology lookup tables - Pure functions.

Static tables for icons, marker colors and PAGER impact estimates. Every
lookup falls back to an explicit default row, so callers never special-case
missing or unknown keys.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


# Iconset shipped with the map server
ICONSET = "f7f71666-8b28-4b57-9fbb-e38e61d33b79"

DEFAULT_ICON = f"{ICONSET}/Google/earthquake.png"


@dataclass(frozen=True)
class AlertLevelInfo:
    """Symbology and impact estimates for a PAGER alert level.

    Attributes:
        level: Normalized alert level name
        color: Marker color (hex)
        icon: Icon reference
        fatalities: Estimated fatalities range
        losses: Estimated economic losses range (USD)
    """
    level: str
    color: str
    icon: str
    fatalities: str
    losses: str


ALERT_LEVELS: Mapping[str, AlertLevelInfo] = MappingProxyType({
    "none": AlertLevelInfo(
        level="none",
        color="#808080",
        icon=DEFAULT_ICON,
        fatalities="Not estimated",
        losses="Not estimated",
    ),
    "green": AlertLevelInfo(
        level="green",
        color="#00FF00",
        icon=f"{ICONSET}/Google/earthquake-green.png",
        fatalities="0",
        losses="< $1 million",
    ),
    "yellow": AlertLevelInfo(
        level="yellow",
        color="#FFFF00",
        icon=f"{ICONSET}/Google/earthquake-yellow.png",
        fatalities="1 - 99",
        losses="$1 million - $100 million",
    ),
    "orange": AlertLevelInfo(
        level="orange",
        color="#FF9900",
        icon=f"{ICONSET}/Google/earthquake-orange.png",
        fatalities="100 - 999",
        losses="$100 million - $1 billion",
    ),
    "red": AlertLevelInfo(
        level="red",
        color="#FF0000",
        icon=f"{ICONSET}/Google/earthquake-red.png",
        fatalities="1,000+",
        losses="$1 billion+",
    ),
})

DEFAULT_ALERT_LEVEL = ALERT_LEVELS["none"]


@dataclass(frozen=True)
class IntensityInfo:
    """Symbology for a Modified Mercalli Intensity value.

    Attributes:
        description: Felt-shaking descriptor
        icon: Icon reference
    """
    description: str
    icon: str


# GeoNet publishes MMI -1..8; -1 means intensity was not calculated
INTENSITY_LEVELS: Mapping[int, IntensityInfo] = MappingProxyType({
    -1: IntensityInfo("Not calculated", DEFAULT_ICON),
    0: IntensityInfo("Unnoticeable", f"{ICONSET}/Google/earthquake-mmi-0.png"),
    1: IntensityInfo("Unnoticeable", f"{ICONSET}/Google/earthquake-mmi-1.png"),
    2: IntensityInfo("Unnoticeable", f"{ICONSET}/Google/earthquake-mmi-2.png"),
    3: IntensityInfo("Weak", f"{ICONSET}/Google/earthquake-mmi-3.png"),
    4: IntensityInfo("Light", f"{ICONSET}/Google/earthquake-mmi-4.png"),
    5: IntensityInfo("Moderate", f"{ICONSET}/Google/earthquake-mmi-5.png"),
    6: IntensityInfo("Strong", f"{ICONSET}/Google/earthquake-mmi-6.png"),
    7: IntensityInfo("Severe", f"{ICONSET}/Google/earthquake-mmi-7.png"),
    8: IntensityInfo("Extreme", f"{ICONSET}/Google/earthquake-mmi-8.png"),
})

DEFAULT_INTENSITY = IntensityInfo("Unknown", DEFAULT_ICON)


def get_alert_level_info(alert: str | None) -> AlertLevelInfo:
    """Look up symbology for a PAGER alert level.

    Pure function. Matching is case-insensitive; None, empty and unknown
    levels get the "none" row.
    """
    if not isinstance(alert, str):
        return DEFAULT_ALERT_LEVEL
    return ALERT_LEVELS.get(alert.strip().lower(), DEFAULT_ALERT_LEVEL)


def get_intensity_info(mmi: int | None) -> IntensityInfo:
    """Look up symbology for an MMI value.

    Pure function. None and values outside -1..8 get the default row.
    """
    if mmi is None:
        return DEFAULT_INTENSITY
    return INTENSITY_LEVELS.get(mmi, DEFAULT_INTENSITY)
