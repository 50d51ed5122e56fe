"""Config keys read through get_config().

Set via ~/.splititer.toml or SPLITITER_* environment variables
(e.g. SPLITITER_SPLIT_THREADSAFE=true).
"""
# Default for split(..., threadsafe=None)
SPLITITER_THREADSAFE = "split_threadsafe"

# Used by configure_logger when no explicit arguments are given
LOGGER_LEVELS = "logger_levels"
LOGGER_FILES = "logger_files"

# Environment variables with this prefix override config file values
ENV_PREFIX = "SPLITITER_"
