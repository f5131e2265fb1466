"""
Default configuration values for domchain.
"""

from typing import Any

# Chain defaults
DEFAULT_TRACE_INDENT = "  "
DEFAULT_LOG_STEPS = True

# Static backend defaults
DEFAULT_NORMALIZE_WHITESPACE = True

# Wait defaults (seconds)
DEFAULT_WAIT_TIMEOUT = 5.0
DEFAULT_POLLING_INTERVAL = 0.1
DEFAULT_IGNORE_EXCEPTIONS = True

# Config file discovery
DEFAULT_CONFIG_FILENAME = "domchain.config"
DEFAULT_CONFIG_EXTENSIONS = [".json", ".yaml", ".yml", ".toml"]
DEFAULT_CONFIG_SEARCH_PATHS = [
    ".",
    "~/.config/domchain",
    "~",
]

# Environment variable prefix
ENV_PREFIX = "DOMCHAIN_"

CONFIG_SECTIONS = ("chain", "static", "wait")


def get_default_config() -> dict[str, Any]:
    """Get default configuration as a dictionary."""
    return {
        "chain": {
            "trace_indent": DEFAULT_TRACE_INDENT,
            "log_steps": DEFAULT_LOG_STEPS,
        },
        "static": {
            "normalize_whitespace": DEFAULT_NORMALIZE_WHITESPACE,
        },
        "wait": {
            "timeout": DEFAULT_WAIT_TIMEOUT,
            "polling_interval": DEFAULT_POLLING_INTERVAL,
            "ignore_exceptions": DEFAULT_IGNORE_EXCEPTIONS,
        },
    }
