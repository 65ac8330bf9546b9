"""
Configuration loading.

Settings come from a YAML file, after which a few values can be
overridden from the environment (a ``.env`` file in the working
directory is read first).  Every key is optional:

    site_url: https://osu.wd1.myworkdayjobs.com/en-US/OSUCareers
    date_field: startDate
    limit: 50
    display_names:
      startDate: Posted On
      locationsText: Location
    logging:
      level: INFO
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

ENV_LOG_LEVEL = "JOBFACETS_LOG_LEVEL"
ENV_SITE_URL = "JOBFACETS_SITE_URL"
ENV_LIMIT = "JOBFACETS_LIMIT"


@dataclass
class Settings:
    """Resolved configuration values."""

    site_url: str = ""
    date_field: str = "startDate"
    limit: Optional[int] = None
    display_names: Dict[str, str] = field(default_factory=dict)
    log_level: str = "INFO"


def _parse_limit(value: Any, source: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        limit = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{source}: limit must be an integer, got {value!r}") from exc
    if limit < 0:
        raise ConfigError(f"{source}: limit must not be negative")
    return limit


def settings_from_dict(raw: Dict[str, Any], source: str = "config") -> Settings:
    if not isinstance(raw, dict):
        raise ConfigError(f"{source}: top level must be a mapping")
    names = raw.get("display_names") or {}
    if not isinstance(names, dict):
        raise ConfigError(f"{source}: display_names must be a mapping")
    log_cfg = raw.get("logging") or {}
    return Settings(
        site_url=str(raw.get("site_url") or ""),
        date_field=str(raw.get("date_field") or "startDate"),
        limit=_parse_limit(raw.get("limit"), source),
        display_names={str(k): str(v) for k, v in names.items()},
        log_level=str(log_cfg.get("level", "INFO")).upper(),
    )


def apply_env_overrides(settings: Settings) -> Settings:
    if os.getenv(ENV_LOG_LEVEL):
        settings.log_level = os.environ[ENV_LOG_LEVEL].upper()
    if os.getenv(ENV_SITE_URL):
        settings.site_url = os.environ[ENV_SITE_URL]
    if os.getenv(ENV_LIMIT):
        settings.limit = _parse_limit(os.environ[ENV_LIMIT], ENV_LIMIT)
    return settings


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from YAML, then apply environment overrides.

    Args:
        path: YAML file to read.  When omitted only defaults and the
            environment are used.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ConfigError: If the YAML is invalid or has the wrong types.
    """
    load_dotenv()
    raw: Dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse YAML configuration {config_path}: {exc}") from exc
        logger.info("Loaded configuration from %s", config_path)
    return apply_env_overrides(settings_from_dict(raw, str(path or "defaults")))


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s")
