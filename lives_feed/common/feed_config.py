"""
Feed configuration loader.

This module centralizes reading and validating feed settings from
`config/feed.yml`. The CLI, the publisher and the tests all go through
`load_feed_config` so that defaults and environment overrides are applied in
one place.

Sections:
- source: where the raw JSON document lives
- columns: names of the source columns the normalizer reads
- feed: static feed_info values, reporting timezone and archive name
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_URL = "https://data.austintexas.gov/api/views/ecmv-9xxi/rows.json?accessType=DOWNLOAD"

# Environment variables that override values from the YAML file
ENV_SOURCE_URL = "LIVES_SOURCE_URL"
ENV_FEED_TIMEZONE = "LIVES_FEED_TIMEZONE"


@dataclass(frozen=True)
class SourceSettings:
    """Location of the raw inspection document."""

    url: str = DEFAULT_SOURCE_URL
    timeout_seconds: float = 60.0


@dataclass(frozen=True)
class ColumnNames:
    """Source column names read by the normalizer."""

    name: str = "Restaurant Name"
    address: str = "Address"
    facility_id: str = "Facility ID"
    score: str = "Score"
    date: str = "Inspection Date"


@dataclass(frozen=True)
class FeedSettings:
    """Static feed_info values and packaging options."""

    version: str = "1.0"
    municipality_name: str = "Austin, TX"
    municipality_url: str = "https://data.austintexas.gov"
    contact_email: str = ""
    timezone: str = "UTC"
    archive_name: str = "austin_lives.zip"

    @property
    def tzinfo(self) -> tzinfo:
        """Reporting zone used to turn inspection timestamps into civil dates."""
        return _resolve_timezone(self.timezone)


@dataclass(frozen=True)
class FeedConfig:
    """Complete feed configuration."""

    source: SourceSettings = field(default_factory=SourceSettings)
    columns: ColumnNames = field(default_factory=ColumnNames)
    feed: FeedSettings = field(default_factory=FeedSettings)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> "FeedConfig":
        """Create FeedConfig from a parsed YAML mapping, filling in defaults."""
        source = SourceSettings(**_section(config_dict, "source", SourceSettings))
        columns = ColumnNames(**_section(config_dict, "columns", ColumnNames))
        feed = FeedSettings(**_section(config_dict, "feed", FeedSettings))

        if source.timeout_seconds <= 0:
            raise ConfigError("`source.timeout_seconds` must be positive")

        # Fail on an unknown zone at load time rather than mid-run
        _resolve_timezone(feed.timezone)

        return cls(source=source, columns=columns, feed=feed)


def _section(config_dict: Mapping[str, Any], name: str, settings_cls: type) -> dict[str, Any]:
    """
    Extract and type-check one section of the configuration.

    Unknown keys are rejected so that typos do not silently fall back to
    defaults.
    """
    section = config_dict.get(name) or {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"`{name}` section must be a mapping")

    defaults = settings_cls()
    values: dict[str, Any] = {}
    for key, value in section.items():
        if not hasattr(defaults, key) or key == "tzinfo":
            raise ConfigError(f"Unknown key `{name}.{key}` in feed configuration")

        expected = type(getattr(defaults, key))
        if expected is float and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        if not isinstance(value, expected):
            raise ConfigError(
                f"`{name}.{key}` must be {expected.__name__}, got {type(value).__name__}"
            )
        values[key] = value

    return values


def _resolve_timezone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown timezone: {name!r}") from exc


def _project_root() -> Path:
    """Return the project root path based on this file's location."""
    return Path(__file__).resolve().parent.parent.parent


def _apply_env_overrides(config: FeedConfig) -> FeedConfig:
    source_url = os.getenv(ENV_SOURCE_URL)
    if source_url:
        config = replace(config, source=replace(config.source, url=source_url))

    feed_timezone = os.getenv(ENV_FEED_TIMEZONE)
    if feed_timezone:
        _resolve_timezone(feed_timezone)
        config = replace(config, feed=replace(config.feed, timezone=feed_timezone))

    return config


def load_feed_config(config_path: str | None = None) -> FeedConfig:
    """
    Load feed configuration from YAML file.

    Args:
        config_path: Optional override for the config file path. When omitted,
            the function reads `config/feed.yml` relative to the project root
            and falls back to built-in defaults if that file is absent.

    Returns:
        FeedConfig with environment overrides applied.

    Raises:
        FileNotFoundError: If an explicitly given configuration file does not exist.
        ConfigError: If the YAML cannot be parsed or has invalid structure.

    Example:
        >>> config = load_feed_config('config/feed.yml')
        >>> config.columns.facility_id
        'Facility ID'
    """
    path = Path(config_path) if config_path else _project_root() / "config" / "feed.yml"

    if not path.exists():
        if config_path:
            logger.error("Feed configuration file not found: %s", path)
            raise FileNotFoundError(f"Feed configuration file not found: {path}")
        logger.info("No feed configuration file found, using defaults")
        return _apply_env_overrides(FeedConfig())

    try:
        with path.open("r", encoding="utf-8") as handle:
            raw_config: Mapping[str, Any] | None = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse feed configuration: %s", exc)
        raise ConfigError(f"Invalid YAML in feed configuration: {exc}") from exc

    if not raw_config:
        logger.warning("Feed configuration file is empty: %s", path)
        raw_config = {}

    if not isinstance(raw_config, Mapping):
        raise ConfigError("Feed configuration must be a mapping at the top level")

    config = _apply_env_overrides(FeedConfig.from_dict(raw_config))

    logger.info(
        "Loaded feed configuration",
        extra={
            "config_path": str(path),
            "source_url": config.source.url,
            "timezone": config.feed.timezone,
        },
    )
    return config


__all__ = [
    "ColumnNames",
    "FeedConfig",
    "FeedSettings",
    "SourceSettings",
    "load_feed_config",
]
