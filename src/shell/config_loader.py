"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, TaskSettings) are defined in src/core/config.py
to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import DEFAULT_TASK, DEFAULT_TIMEOUT_SECONDS, Config
from src.core.errors import InvalidConfiguration
from src.core.feeds import FEEDS


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"


def env_var_name(field_name: str) -> str:
    """Get the environment variable for a task field.

    'Min Magnitude' -> 'MIN_MAGNITUDE', 'CoT Lifetime Seconds' -> 'COT_LIFETIME_SECONDS'.
    """
    return "_".join(field_name.upper().split())


def _resolve_value(value: Any) -> Any:
    """Resolve a value that may be a ${VAR} environment placeholder.

    Args:
        value: Value to resolve

    Returns:
        Resolved value (the placeholder itself if the variable is unset)
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _resolve_optional(value: Any) -> str | None:
    """Resolve an optional setting; an unset placeholder means not configured."""
    resolved = _resolve_value(value)
    if isinstance(resolved, str) and resolved.startswith("${"):
        return None
    return resolved


def _parse_timeout(value: Any, source: str) -> int:
    """Parse a request timeout in whole seconds.

    Raises:
        InvalidConfiguration: If the value is not a positive integer
    """
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        raise InvalidConfiguration([f"{source}: '{value}' is not an integer"]) from None

    if seconds <= 0:
        raise InvalidConfiguration([f"{source}: timeout must be positive, got {seconds}"])

    return seconds


def _known_field_names() -> list[str]:
    """All environment field names across the supported feeds."""
    names: list[str] = []
    for feed in FEEDS.values():
        for f in feed.fields:
            if f.name not in names:
                names.append(f.name)
    return names


def _parse_environment(data: dict[str, Any] | None) -> dict[str, str]:
    """Parse the task environment block, coercing values to strings."""
    environment: dict[str, str] = {}
    for name, value in (data or {}).items():
        if value is None:
            continue
        environment[str(name)] = str(_resolve_value(value))
    return environment


def _environment_overrides() -> dict[str, str]:
    """Read task fields set in the process environment."""
    overrides = {}
    for name in _known_field_names():
        value = os.environ.get(env_var_name(name))
        if value is not None:
            overrides[name] = value
    return overrides


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    submit_url = _resolve_optional(data.get("submit_url"))
    submit_token = _resolve_optional(data.get("submit_token"))

    return Config(
        task=str(data.get("task", DEFAULT_TASK)),
        environment=_parse_environment(data.get("environment")),
        submit_url=submit_url or None,
        submit_token=submit_token or None,
        timeout_seconds=_parse_timeout(
            data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
            "timeout_seconds",
        ),
    )


def apply_env_overrides(config: Config) -> Config:
    """Apply process environment variables on top of a Config.

    Environment variables:
        FEED_TASK: Feed task to run ('usgs' or 'geonet')
        SUBMIT_URL: Layer endpoint for the feature collection
        SUBMIT_TOKEN: Bearer token for the layer endpoint
        REQUEST_TIMEOUT: Timeout for HTTP requests in seconds
        MIN_MAGNITUDE, MMI, BOUNDING_BOX, MAX_AGE_MINUTES,
        COT_LIFETIME_SECONDS: Task environment fields

    Returns:
        New Config with overrides applied

    Raises:
        InvalidConfiguration: If REQUEST_TIMEOUT is not a positive integer
    """
    environment = dict(config.environment)
    environment.update(_environment_overrides())

    timeout = os.environ.get("REQUEST_TIMEOUT")

    return Config(
        task=os.environ.get("FEED_TASK", config.task),
        environment=environment,
        submit_url=os.environ.get("SUBMIT_URL", config.submit_url),
        submit_token=os.environ.get("SUBMIT_TOKEN", config.submit_token),
        timeout_seconds=(
            _parse_timeout(timeout, "REQUEST_TIMEOUT") if timeout else config.timeout_seconds
        ),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file, then apply env overrides.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
        InvalidConfiguration: If a request timeout is not a positive integer
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return apply_env_overrides(Config())

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return apply_env_overrides(Config())

    config = apply_env_overrides(load_config_from_dict(data))

    logger.info(
        "Loaded config: task %s, %d environment fields, submit to %s",
        config.task,
        len(config.environment),
        config.submit_url or "stdout",
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables only.

    Useful for simple deployments without a YAML file.

    Returns:
        Config object from environment
    """
    return apply_env_overrides(Config())
