"""Orchestrator - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components. It's the "glue" that
makes one feed run work: parse settings, fetch, transform, submit.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from src.core.config import Config, TaskSettings, build_feed_url, parse_task_settings
from src.core.errors import InvalidConfiguration, PipelineError, UnexpectedFailure
from src.core.feeds import FeedDefinition, get_feed
from src.core.transform import transform_feed
from src.shell.feed_client import FeedClient
from src.shell.submit_client import ConsoleSink, SubmitClient, Submitter


logger = logging.getLogger(__name__)


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


@dataclass
class ProcessingResult:
    """Result of a complete feed run.

    Attributes:
        task: Feed task that ran
        earthquakes_fetched: Features in the upstream feed
        earthquakes_skipped: Features that could not be parsed
        features_submitted: Features in the submitted collection
        collection: The submitted FeatureCollection
    """
    task: str
    earthquakes_fetched: int
    earthquakes_skipped: int
    features_submitted: int
    collection: dict[str, Any]

    @property
    def summary(self) -> str:
        """Human-readable summary of the run."""
        return (
            f"Fetched {self.earthquakes_fetched} earthquakes, "
            f"{self.earthquakes_skipped} skipped, "
            f"{self.features_submitted} submitted"
        )


class Orchestrator:
    """Runs the fetch -> filter -> transform -> submit pipeline for one feed.

    This class wires together:
    - Core functions (settings parsing, filtering, formatting)
    - Feed client (fetches the upstream feed)
    - Submitter (hands the collection to the output sink)

    Nothing is kept between runs; each call to process() starts from the
    raw configuration.
    """

    def __init__(
        self,
        config: Config,
        feed_client: FeedClient | None = None,
        submitter: Submitter | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize orchestrator with configuration.

        Args:
            config: Application configuration
            feed_client: Feed client (created if not provided)
            submitter: Output sink (SubmitClient if a submit URL is
                configured, ConsoleSink otherwise)
            clock: Source of "now" for the age filter

        Raises:
            InvalidConfiguration: If the configured task is unknown
        """
        self.config = config
        self.feed = self._get_feed(config.task)
        self.feed_client = feed_client or FeedClient(timeout=config.timeout_seconds)
        self.submitter = submitter or self._default_submitter(config)
        self.clock = clock

    @staticmethod
    def _get_feed(task: str) -> FeedDefinition:
        try:
            return get_feed(task)
        except KeyError as e:
            logger.error("Cannot start feed run: %s", e.args[0])
            raise InvalidConfiguration([str(e.args[0])]) from None

    @staticmethod
    def _default_submitter(config: Config) -> Submitter:
        if config.submit_url:
            return SubmitClient(
                config.submit_url,
                token=config.submit_token,
                timeout=config.timeout_seconds,
            )
        return ConsoleSink()

    def _parse_settings(self) -> TaskSettings:
        """Parse the task environment, logging any warnings."""
        settings = parse_task_settings(self.config.environment, self.feed)
        for warning in settings.warnings:
            logger.warning("Configuration: %s", warning)
        return settings

    def process(self) -> ProcessingResult:
        """Run a complete feed cycle.

        This is the main entry point that:
        1. Parses and validates the task environment
        2. Fetches the upstream feed
        3. Filters and maps earthquakes to features
        4. Submits the FeatureCollection

        Returns:
            ProcessingResult with details of what happened

        Raises:
            InvalidConfiguration: Before any fetch, if settings are invalid
            FetchFailure: If the feed could not be fetched
            UnexpectedFailure: If the feed body is malformed, or anything else fails
            SubmitFailure: If the sink rejects the collection
        """
        try:
            # Step 1: Settings (pure core function)
            settings = self._parse_settings()

            # Step 2: Fetch
            url = build_feed_url(self.feed, settings)
            document = self.feed_client.fetch(url, headers=self.feed.headers)

            # Step 3: Filter and map (pure core function)
            result = transform_feed(document, self.feed, settings, self.clock())

            if result.skipped:
                logger.warning(
                    "Skipped %d malformed features (of %d)",
                    result.skipped,
                    result.fetched,
                )

            # Step 4: Submit
            self.submitter(result.collection)
            logger.info("ok - fetched %d earthquakes", result.matched)

        except PipelineError as e:
            logger.error("%s run failed: %s", self.feed.name, e)
            raise
        except Exception as e:
            logger.exception("%s run failed unexpectedly", self.feed.name)
            raise UnexpectedFailure(str(e)) from e

        return ProcessingResult(
            task=self.feed.name,
            earthquakes_fetched=result.fetched,
            earthquakes_skipped=result.skipped,
            features_submitted=result.matched,
            collection=result.collection,
        )
