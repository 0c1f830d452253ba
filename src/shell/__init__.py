"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Feed client (HTTP fetch)
- Submit client (HTTP sink) and console sink
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.feed_client import FeedClient
from src.shell.submit_client import ConsoleSink, SubmitClient
from src.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "FeedClient",
    "SubmitClient",
    "ConsoleSink",
    "load_config",
    "load_config_from_env",
]
