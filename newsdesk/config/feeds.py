"""
Feed configuration loading.

The feed file is YAML:

    feeds:
      tech:
        - name: Ars Technica
          url: https://feeds.arstechnica.com/arstechnica/index
          type: trade
          priority: high
    source_trust_scores:
      social: 0.3
    settings:
      max_items_per_feed: 20
      max_age_hours: 48
      dedup_threshold: 0.8
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigError
from ..models.content import FeedConfig

logger = logging.getLogger(__name__)


def parse_feed_config(data: Optional[dict[str, Any]]) -> FeedConfig:
    """
    Validate a feed config mapping.

    Raises:
        ConfigError: if the mapping does not describe a valid config
    """
    if not data:
        return FeedConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Feed config must be a mapping, got {type(data).__name__}")

    data = {**data, "feeds": data.get("feeds") or {}}
    try:
        return FeedConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid feed config: {e.error_count()} validation error(s)") from e


def load_feed_config(path: Optional[Union[str, Path]]) -> FeedConfig:
    """
    Load feed config from a YAML file.

    A missing file yields an empty config. Invalid content is logged and
    also yields an empty config.
    """
    if not path:
        return FeedConfig()

    config_path = Path(path)
    if not config_path.exists():
        logger.info(f"No feed config at {config_path}, starting with zero categories")
        return FeedConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        config = parse_feed_config(data)
    except yaml.YAMLError as e:
        error = ConfigError(f"Feed config is not valid YAML: {e}", config_path=str(config_path))
        logger.error(error.to_user_message())
        return FeedConfig()
    except ConfigError as e:
        e.config_path = str(config_path)
        logger.error(f"{e.message} ({config_path})")
        return FeedConfig()

    logger.info(
        f"Loaded {sum(len(s) for s in config.feeds.values())} feeds "
        f"in {len(config.feeds)} categories from {config_path}"
    )
    return config
