"""Feed transformation - Pure functions.

Turns a fetched feed document into the FeatureCollection to submit:
parse, filter, then map each surviving earthquake to a feature.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.core.config import TaskSettings
from src.core.earthquake import parse_earthquakes
from src.core.errors import UnexpectedFailure
from src.core.feeds import FeedDefinition
from src.core.formatter import build_feature, build_feature_collection
from src.core.rules import filter_earthquakes


@dataclass(frozen=True)
class TransformResult:
    """Result of transforming one feed document.

    Attributes:
        collection: FeatureCollection to submit
        fetched: Number of features in the upstream document
        skipped: Features that could not be parsed
        matched: Earthquakes that passed the filter
    """
    collection: dict[str, Any]
    fetched: int
    skipped: int
    matched: int


def check_feed_document(document: Any) -> dict[str, Any]:
    """Check that a decoded feed body is a GeoJSON FeatureCollection.

    Pure function.

    Raises:
        UnexpectedFailure: If the body has no 'features' array
    """
    if not isinstance(document, dict):
        raise UnexpectedFailure(
            f"Feed body is a {type(document).__name__}, expected a JSON object"
        )
    if not isinstance(document.get("features"), list):
        raise UnexpectedFailure("Feed body has no 'features' array")
    return document


def transform_feed(
    document: Any,
    feed: FeedDefinition,
    settings: TaskSettings,
    now: datetime,
) -> TransformResult:
    """Transform a feed document into a FeatureCollection.

    Pure function: the same document, settings and now always give the same
    collection.

    Args:
        document: Decoded feed body
        feed: Feed the document came from
        settings: Parsed task settings
        now: Reference time for the age filter

    Returns:
        TransformResult with the collection and counts

    Raises:
        UnexpectedFailure: If the document is not a FeatureCollection
    """
    geojson = check_feed_document(document)
    parsed = parse_earthquakes(geojson, feed.parse_feature)
    matching = filter_earthquakes(parsed.earthquakes, settings.criteria, now)

    features = [
        build_feature(earthquake, feed, settings.lifetime)
        for earthquake in matching
    ]

    return TransformResult(
        collection=build_feature_collection(features),
        fetched=parsed.total,
        skipped=parsed.skipped,
        matched=len(matching),
    )
