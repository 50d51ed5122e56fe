import logging
import os
import tomllib
from logging.handlers import TimedRotatingFileHandler
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from splititer.util.constants import ENV_PREFIX, SPLITITER_THREADSAFE, LOGGER_LEVELS, LOGGER_FILES

logger = logging.getLogger(__name__)

_config = None


class SplitSettings(BaseModel):
    """Defaults applied by `split()` when the caller leaves them unset."""

    model_config = ConfigDict(extra="ignore")

    threadsafe: bool = False


def parse_logger_assignments(spec: str, default: Optional[str] = None) -> Dict[str, str]:
    """Parse a "logger:value,logger:value" string from the logger_levels or
    logger_files settings.

    A logger named without a value gets `default`; "root" names the root logger.
    Empty entries are skipped.

    Raises:
        ValueError: If a logger has no value and there is no default.
    """
    result = {}
    for entry in spec.split(","):
        name, _, value = entry.partition(":")
        name, value = name.strip(), value.strip()
        if not name:
            continue
        if not value:
            if default is None:
                raise ValueError(f"No value given for logger '{name}'")
            value = default
        result[name] = value
    return result


def reset_config():
    """Reset the cached configuration so the next get_config() reloads it."""
    global _config
    _config = None


def get_config(reload=False, path="~/.splititer.toml", ignore_env=False):
    """Return the settings dict, loading it on first use.

    Values come from the TOML file at `path` (if present), overridden by
    SPLITITER_<KEY> environment variables unless `ignore_env` is set.  The
    result is cached until reset_config() or reload=True.
    """
    global _config
    if _config is None or reload:
        config_path = os.path.expanduser(path)
        loaded = {}
        if os.path.exists(config_path):
            logger.info(f"Reading config from {config_path}")
            with open(config_path, 'rb') as f:
                loaded = tomllib.load(f)
        else:
            logger.debug(f"No config file at {config_path}")

        if not ignore_env:
            overrides = {
                name[len(ENV_PREFIX):].lower(): value
                for name, value in os.environ.items()
                if name.startswith(ENV_PREFIX)
            }
            if overrides:
                logger.debug(f"Settings overridden from environment: {sorted(overrides)}")
            loaded.update(overrides)

        _config = loaded

    return _config


def get_split_settings() -> SplitSettings:
    """Build SplitSettings from the current configuration.

    Raises:
        pydantic.ValidationError: If a configured value cannot be coerced.
    """
    config = get_config()
    values = {}
    if SPLITITER_THREADSAFE in config:
        values["threadsafe"] = config[SPLITITER_THREADSAFE]
    return SplitSettings.model_validate(values)


def configure_logger(logger_levels: Optional[str] = None, base_level="WARNING", logger_files: Optional[str] = None):
    """Attach formatted console (and optionally file) handlers to loggers.

    Unset arguments fall back to the logger_levels and logger_files settings,
    e.g. SPLITITER_LOGGER_LEVELS="splititer:DEBUG".  A logger listed in
    logger_levels without a level gets `base_level`.

    Examples:
        >>> configure_logger("splititer.util.iterators:DEBUG")
    """
    if not logger_levels:
        logger_levels = get_config().get(LOGGER_LEVELS, None)

    if not logger_files:
        logger_files = get_config().get(LOGGER_FILES, None)

    logging.basicConfig(level=base_level.upper())

    formatter = logging.Formatter('%(asctime)s - %(levelname)s:%(name)s:%(message)s')

    if logger_levels:
        for logger_name, level in parse_logger_assignments(logger_levels, default=base_level).items():
            level = level.upper()
            target = logging.getLogger(logger_name if logger_name != "root" else None)
            target.setLevel(level)

            # Replace rather than stack handlers on repeated calls
            target.handlers.clear()

            console_handler = logging.StreamHandler()
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            target.addHandler(console_handler)

    if logger_files:
        for logger_name, file_name in parse_logger_assignments(logger_files).items():
            target = logging.getLogger(logger_name if logger_name != "root" else None)

            file_handler = TimedRotatingFileHandler(file_name, when='midnight', backupCount=7)
            file_handler.setLevel(target.level)
            file_handler.setFormatter(formatter)
            target.addHandler(file_handler)
