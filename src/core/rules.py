"""Feed filter rule evaluation - Pure functions.

This module decides which earthquakes survive a feed run based on the
configured thresholds. All functions are pure with no side effects; "now" is
always passed in.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from src.core.earthquake import Earthquake
from src.core.geo import BoundingBox, is_within_bounds


@dataclass(frozen=True)
class FilterCriteria:
    """Thresholds an earthquake must meet to be emitted.

    Attributes:
        max_age: Maximum age relative to now (inclusive)
        min_magnitude: Minimum magnitude (inclusive), None for no magnitude gate
        min_intensity: Minimum MMI (inclusive), None for no intensity gate
        bounds: Geographic bounding box (optional)
        event_type: Required event classification (optional)
    """
    max_age: timedelta
    min_magnitude: float | None = None
    min_intensity: int | None = None
    bounds: BoundingBox | None = None
    event_type: str | None = None


def matches_magnitude_rule(earthquake: Earthquake, criteria: FilterCriteria) -> bool:
    """Check if earthquake magnitude meets the minimum.

    Pure function.
    """
    if criteria.min_magnitude is None:
        return True
    return earthquake.magnitude >= criteria.min_magnitude


def matches_intensity_rule(earthquake: Earthquake, criteria: FilterCriteria) -> bool:
    """Check if earthquake intensity meets the minimum.

    Pure function. An earthquake without an intensity never meets a
    configured minimum.
    """
    if criteria.min_intensity is None:
        return True
    if earthquake.mmi is None:
        return False
    return earthquake.mmi >= criteria.min_intensity


def matches_location_rule(earthquake: Earthquake, criteria: FilterCriteria) -> bool:
    """Check if earthquake location is inside the configured box.

    Pure function. Matches all locations when no box is configured.
    """
    if criteria.bounds is None:
        return True
    return is_within_bounds(earthquake, criteria.bounds)


def matches_age_rule(
    earthquake: Earthquake,
    criteria: FilterCriteria,
    now: datetime,
) -> bool:
    """Check if earthquake is no older than the maximum age.

    Pure function. An event exactly max_age old is included.
    """
    return now - earthquake.time <= criteria.max_age


def matches_event_type_rule(earthquake: Earthquake, criteria: FilterCriteria) -> bool:
    """Check if earthquake has the required classification.

    Pure function. Excludes e.g. quarry blasts and explosions from a feed
    that carries them alongside earthquakes.
    """
    if criteria.event_type is None:
        return True
    return earthquake.event_type == criteria.event_type


def evaluate_filter(
    earthquake: Earthquake,
    criteria: FilterCriteria,
    now: datetime,
) -> bool:
    """Evaluate if an earthquake meets every filter criterion.

    Pure function.

    Args:
        earthquake: Earthquake to evaluate
        criteria: Criteria to check against
        now: Reference time for the age test

    Returns:
        True if the earthquake should be emitted
    """
    return (
        matches_magnitude_rule(earthquake, criteria)
        and matches_intensity_rule(earthquake, criteria)
        and matches_location_rule(earthquake, criteria)
        and matches_age_rule(earthquake, criteria, now)
        and matches_event_type_rule(earthquake, criteria)
    )


def filter_earthquakes(
    earthquakes: list[Earthquake],
    criteria: FilterCriteria,
    now: datetime,
) -> list[Earthquake]:
    """Filter earthquakes to only those meeting the criteria.

    Pure function. Order is preserved.

    Args:
        earthquakes: List of earthquakes to filter
        criteria: Criteria to filter by
        now: Reference time for the age test

    Returns:
        Earthquakes that meet the criteria
    """
    return [e for e in earthquakes if evaluate_filter(e, criteria, now)]
