"""Geographic calculations - Pure functions.

This module provides bounding-box tests for earthquake locations, including
boxes that wrap across the antimeridian. All functions are pure with no side
effects.
"""

from dataclasses import dataclass

from src.core.earthquake import Earthquake


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box.

    A box whose min_longitude is greater than its max_longitude wraps across
    the ±180° line (e.g. 170..-170 covers the 20° around the antimeridian).

    Attributes:
        min_latitude: Southern boundary
        max_latitude: Northern boundary
        min_longitude: Western boundary
        max_longitude: Eastern boundary
    """
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    @property
    def crosses_antimeridian(self) -> bool:
        """True if the box wraps across the ±180° line."""
        return self.min_longitude > self.max_longitude

    def contains(self, latitude: float, longitude: float) -> bool:
        """Check if a point is within this bounding box (edges inclusive)."""
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and longitude_in_range(longitude, self.min_longitude, self.max_longitude)
        )


def longitude_in_range(longitude: float, min_longitude: float, max_longitude: float) -> bool:
    """Check if a longitude falls within a west-to-east range.

    Pure function.

    Args:
        longitude: Longitude to test
        min_longitude: Western edge of the range
        max_longitude: Eastern edge of the range

    Returns:
        True if longitude is within the range (edges inclusive)
    """
    if min_longitude <= max_longitude:
        return min_longitude <= longitude <= max_longitude

    # Range wraps across the antimeridian
    return longitude >= min_longitude or longitude <= max_longitude


def is_within_bounds(earthquake: Earthquake, bounds: BoundingBox) -> bool:
    """Check if an earthquake is within a bounding box.

    Pure function.

    Args:
        earthquake: Earthquake to check
        bounds: Bounding box to check against

    Returns:
        True if earthquake is within bounds
    """
    return bounds.contains(earthquake.latitude, earthquake.longitude)
