"""Configuration for newsdesk."""

from .settings import PROVIDER_ENV_VARS, Settings, get_settings
from .feeds import load_feed_config, parse_feed_config

__all__ = [
    "PROVIDER_ENV_VARS",
    "Settings",
    "get_settings",
    "load_feed_config",
    "parse_feed_config",
]
