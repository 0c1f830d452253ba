"""Configuration models and parsing - Pure functions.

These are domain models for configuration. Task environments arrive as named
string fields; they are parsed once, at the start of a run, into a typed
TaskSettings. The actual loading (I/O) is handled by the shell layer.
"""

import math
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Mapping

from src.core.errors import InvalidConfiguration
from src.core.feeds import (
    FIELD_BOUNDING_BOX,
    FIELD_LIFETIME_SECONDS,
    FIELD_MAX_AGE_MINUTES,
    FIELD_MIN_MAGNITUDE,
    FIELD_MMI,
    GATE_INTENSITY,
    GATE_MAGNITUDE,
    FeedDefinition,
)
from src.core.geo import BoundingBox
from src.core.rules import FilterCriteria


DEFAULT_TASK = "usgs"

# Default timeout for HTTP requests (seconds)
DEFAULT_TIMEOUT_SECONDS = 30

# Upper bounds for durations read from the task environment
MAX_AGE_LIMIT_MINUTES = 10 * 365 * 24 * 60
MAX_LIFETIME_SECONDS = 365 * 24 * 60 * 60


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        task: Feed task to run ('usgs' or 'geonet')
        environment: Task environment, named string fields
        submit_url: Layer endpoint the feature collection is POSTed to
        submit_token: Bearer token for the layer endpoint (optional)
        timeout_seconds: Timeout for fetch and submit requests
    """
    task: str = DEFAULT_TASK
    environment: dict[str, str] = field(default_factory=dict)
    submit_url: str | None = None
    submit_token: str | None = None
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class TaskSettings:
    """Typed settings for a single feed run.

    Attributes:
        criteria: Filter thresholds
        lifetime: Offset from event time to marker expiry (None for no expiry)
        warnings: Non-fatal configuration notices (e.g. a clamped max age)
    """
    criteria: FilterCriteria
    lifetime: timedelta | None = None
    warnings: tuple[str, ...] = ()


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def resolve_environment(
    environment: Mapping[str, Any],
    feed: FeedDefinition,
) -> dict[str, str]:
    """Merge a task environment over the feed's defaults.

    Pure function. Values are coerced to strings; None means "use default".
    """
    resolved = feed.defaults
    for name, value in environment.items():
        if value is not None:
            resolved[name] = str(value)
    return resolved


def _parse_number(
    value: str,
    field_name: str,
    errors: list[ValidationError],
) -> float | None:
    """Parse a decimal string, recording an error if it is not a finite number."""
    try:
        number = float(value.strip())
    except ValueError:
        errors.append(ValidationError(
            field=field_name,
            message=f"'{value}' is not a number",
        ))
        return None

    if not math.isfinite(number):
        errors.append(ValidationError(
            field=field_name,
            message=f"'{value}' is not a finite number",
        ))
        return None

    return number


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_bounds(bounds: BoundingBox, field_name: str) -> list[ValidationError]:
    """Validate a bounding box.

    Pure function. min_longitude > max_longitude is allowed: it describes a
    box that wraps across the antimeridian.

    Args:
        bounds: Bounding box to validate
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    errors.extend(validate_coordinates(
        bounds.min_latitude, bounds.min_longitude,
        f"{field_name}.min",
    ))
    errors.extend(validate_coordinates(
        bounds.max_latitude, bounds.max_longitude,
        f"{field_name}.max",
    ))

    if bounds.min_latitude > bounds.max_latitude:
        errors.append(ValidationError(
            field=field_name,
            message=f"min_latitude ({bounds.min_latitude}) > max_latitude ({bounds.max_latitude})",
        ))

    return errors


def parse_bounding_box(
    value: str,
    errors: list[ValidationError],
) -> BoundingBox | None:
    """Parse 'minLat,maxLat,minLon,maxLon' into a BoundingBox.

    Pure function. Problems are appended to errors.
    """
    parts = value.split(",")
    if len(parts) != 4:
        errors.append(ValidationError(
            field=FIELD_BOUNDING_BOX,
            message=f"Expected 4 comma-separated numbers (minLat,maxLat,minLon,maxLon), got {len(parts)}",
        ))
        return None

    numbers = [_parse_number(p, FIELD_BOUNDING_BOX, errors) for p in parts]
    if any(n is None for n in numbers):
        return None

    bounds = BoundingBox(
        min_latitude=numbers[0],
        max_latitude=numbers[1],
        min_longitude=numbers[2],
        max_longitude=numbers[3],
    )

    bounds_errors = validate_bounds(bounds, FIELD_BOUNDING_BOX)
    errors.extend(bounds_errors)
    return None if bounds_errors else bounds


def _parse_intensity(
    value: str,
    feed: FeedDefinition,
    errors: list[ValidationError],
) -> int | None:
    """Parse an integer MMI and check it against the feed's domain."""
    try:
        mmi = int(value.strip())
    except ValueError:
        errors.append(ValidationError(
            field=FIELD_MMI,
            message=f"'{value}' is not an integer",
        ))
        return None

    if feed.intensity_range is not None:
        low, high = feed.intensity_range
        if not low <= mmi <= high:
            errors.append(ValidationError(
                field=FIELD_MMI,
                message=f"MMI {mmi} out of range [{low}, {high}]",
            ))
            return None

    return mmi


def _parse_max_age(
    value: str,
    feed: FeedDefinition,
    errors: list[ValidationError],
) -> float | None:
    """Parse the max age in minutes, clamping it to the feed's cap."""
    minutes = _parse_number(value, FIELD_MAX_AGE_MINUTES, errors)
    if minutes is None:
        return None

    if minutes < 0:
        errors.append(ValidationError(
            field=FIELD_MAX_AGE_MINUTES,
            message=f"Max age must not be negative, got {minutes}",
        ))
        return None

    cap = feed.max_age_cap_minutes
    if cap is not None and minutes > cap:
        errors.append(ValidationError(
            field=FIELD_MAX_AGE_MINUTES,
            message=f"{minutes:g} minutes exceeds the feed limit, using {cap:g}",
            severity="warning",
        ))
        return cap

    if minutes > MAX_AGE_LIMIT_MINUTES:
        errors.append(ValidationError(
            field=FIELD_MAX_AGE_MINUTES,
            message=f"Max age must not exceed {MAX_AGE_LIMIT_MINUTES} minutes, got {minutes:g}",
        ))
        return None

    return minutes


def _parse_lifetime(
    value: str,
    errors: list[ValidationError],
) -> timedelta | None:
    """Parse the marker lifetime in seconds; empty disables expiry."""
    if not value.strip():
        return None

    seconds = _parse_number(value, FIELD_LIFETIME_SECONDS, errors)
    if seconds is None:
        return None

    if seconds < 0:
        errors.append(ValidationError(
            field=FIELD_LIFETIME_SECONDS,
            message=f"Lifetime must not be negative, got {seconds}",
        ))
        return None

    if seconds > MAX_LIFETIME_SECONDS:
        errors.append(ValidationError(
            field=FIELD_LIFETIME_SECONDS,
            message=f"Lifetime must not exceed {MAX_LIFETIME_SECONDS} seconds, got {seconds:g}",
        ))
        return None

    return timedelta(seconds=seconds)


def validate_environment(
    environment: Mapping[str, Any],
    feed: FeedDefinition,
) -> tuple[ValidationResult, TaskSettings | None]:
    """Validate a task environment and build its settings.

    Pure function. Every field is checked before returning, so all problems
    are reported together.

    Args:
        environment: Task environment (named string fields)
        feed: Feed the environment is for

    Returns:
        (ValidationResult, TaskSettings or None if invalid)
    """
    errors: list[ValidationError] = []
    env = resolve_environment(environment, feed)

    known_fields = {f.name for f in feed.fields}
    for name in sorted(set(environment) - known_fields):
        errors.append(ValidationError(
            field=name,
            message=f"Unknown field for the {feed.name} task, ignored",
            severity="warning",
        ))

    min_magnitude = None
    if feed.gate == GATE_MAGNITUDE:
        min_magnitude = _parse_number(env[FIELD_MIN_MAGNITUDE], FIELD_MIN_MAGNITUDE, errors)

    min_intensity = None
    if feed.gate == GATE_INTENSITY:
        min_intensity = _parse_intensity(env[FIELD_MMI], feed, errors)

    bounds = None
    if feed.has_field(FIELD_BOUNDING_BOX):
        bounds = parse_bounding_box(env[FIELD_BOUNDING_BOX], errors)

    max_age_minutes = _parse_max_age(env[FIELD_MAX_AGE_MINUTES], feed, errors)

    lifetime = None
    if feed.has_field(FIELD_LIFETIME_SECONDS):
        lifetime = _parse_lifetime(env[FIELD_LIFETIME_SECONDS], errors)

    has_critical = any(e.severity == "error" for e in errors)
    result = ValidationResult(valid=not has_critical, errors=errors)
    if has_critical:
        return result, None

    criteria = FilterCriteria(
        max_age=timedelta(minutes=max_age_minutes),
        min_magnitude=min_magnitude,
        min_intensity=min_intensity,
        bounds=bounds,
        event_type=feed.event_type,
    )

    settings = TaskSettings(
        criteria=criteria,
        lifetime=lifetime,
        warnings=tuple(str(w) for w in result.warnings),
    )
    return result, settings


def parse_task_settings(
    environment: Mapping[str, Any],
    feed: FeedDefinition,
) -> TaskSettings:
    """Parse a task environment into TaskSettings, failing fast.

    Pure function.

    Args:
        environment: Task environment (named string fields)
        feed: Feed the environment is for

    Returns:
        Parsed TaskSettings

    Raises:
        InvalidConfiguration: If any field is malformed or out of range
    """
    result, settings = validate_environment(environment, feed)
    if settings is None:
        raise InvalidConfiguration([str(e) for e in result.critical_errors])
    return settings


def build_feed_url(feed: FeedDefinition, settings: TaskSettings) -> str:
    """Fill the feed URL template from the parsed settings.

    Pure function.
    """
    return feed.url.format(mmi=settings.criteria.min_intensity)


def get_environment_schema(feed: FeedDefinition) -> dict[str, Any]:
    """Describe a task's environment as a JSON schema.

    Pure function.
    """
    return {
        "type": "object",
        "properties": {
            f.name: {
                "type": "string",
                "description": f.description,
                "default": f.default,
            }
            for f in feed.fields
        },
        "required": [f.name for f in feed.fields],
    }
