"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Earthquake data parsing
- Bounding box tests
- Configuration parsing and validation
- Filter rule evaluation
- Feature formatting and symbology

All functions here are deterministic and have no I/O.
"""

from src.core.earthquake import Earthquake, parse_earthquakes
from src.core.errors import (
    FetchFailure,
    InvalidConfiguration,
    PipelineError,
    SubmitFailure,
    UnexpectedFailure,
)
from src.core.feeds import FEEDS, FeedDefinition, get_feed
from src.core.geo import BoundingBox, is_within_bounds, longitude_in_range
from src.core.rules import FilterCriteria, evaluate_filter, filter_earthquakes
from src.core.config import Config, TaskSettings, parse_task_settings
from src.core.formatter import build_feature, build_feature_collection
from src.core.transform import TransformResult, transform_feed

__all__ = [
    # Earthquake
    "Earthquake",
    "parse_earthquakes",
    # Errors
    "PipelineError",
    "InvalidConfiguration",
    "FetchFailure",
    "UnexpectedFailure",
    "SubmitFailure",
    # Feeds
    "FEEDS",
    "FeedDefinition",
    "get_feed",
    # Geo
    "BoundingBox",
    "is_within_bounds",
    "longitude_in_range",
    # Rules
    "FilterCriteria",
    "evaluate_filter",
    "filter_earthquakes",
    # Config
    "Config",
    "TaskSettings",
    "parse_task_settings",
    # Formatter
    "build_feature",
    "build_feature_collection",
    # Transform
    "TransformResult",
    "transform_feed",
]
