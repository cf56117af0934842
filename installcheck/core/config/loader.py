"""
Configuration loader — ``installcheck.yml`` → ``Settings``.

The file is optional.  Commands look for it in the current directory
and its parents (or take ``--config``); when there is none, the
built-in defaults describe the stdlib package.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from installcheck.core.models.settings import Settings

logger = logging.getLogger(__name__)

CONFIG_FILE = "installcheck.yml"


class ConfigError(Exception):
    """The configuration file exists but cannot be used."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Nearest ``installcheck.yml`` at or above ``start_dir`` (default: cwd)."""
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def config_root(config_path: Path | None) -> Path:
    """Directory relative tool paths are resolved against."""
    if config_path is None:
        config_path = find_config_file()
    return config_path.parent.resolve() if config_path else Path.cwd()


def load_settings(path: Path | None = None) -> Settings:
    """Read and validate settings.

    An explicit ``path`` must exist.  Without one, the nearest config
    file is used, and defaults apply when there is none.  An empty file
    also means defaults.

    Raises:
        ConfigError: unreadable file, bad YAML, or a schema violation.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return Settings()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.debug("Loaded %s (target %s)", path, settings.target.package)
    return settings
