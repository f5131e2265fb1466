"""
Environment variable support for domchain configuration.

Every option can be overridden by a ``DOMCHAIN_<SECTION>_<OPTION>``
variable, e.g. ``DOMCHAIN_WAIT_TIMEOUT=10``.
"""

import os
from typing import Any, Optional, Union, get_args, get_origin

from .defaults import ENV_PREFIX


def get_env_key(key: str, prefix: str = ENV_PREFIX) -> str:
    """Convert a configuration key to environment variable name.

    Args:
        key: Configuration key (e.g., "wait.timeout")
        prefix: Environment variable prefix

    Returns:
        Environment variable name (e.g., "DOMCHAIN_WAIT_TIMEOUT")
    """
    return f"{prefix}{key.upper().replace('.', '_').replace('-', '_')}"


def parse_bool(value: str) -> bool:
    """Parse string to boolean."""
    return value.strip().lower() in ("true", "1", "yes", "on", "enabled")


def parse_value(value: str, target_type: Any) -> Any:
    """Parse string value to target type.

    Args:
        value: String value
        target_type: Target type

    Returns:
        Parsed value
    """
    if get_origin(target_type) is Union:
        non_none_types = [t for t in get_args(target_type) if t is not type(None)]
        if non_none_types:
            return parse_value(value, non_none_types[0])
        return value

    if target_type is bool:
        return parse_bool(value)

    if target_type is int:
        return int(value)

    if target_type is float:
        return float(value)

    return value


def get_env(
    key: str,
    default: Optional[Any] = None,
    target_type: Optional[Any] = None,
    prefix: str = ENV_PREFIX,
) -> Any:
    """Get configuration value from environment variable.

    Args:
        key: Configuration key (e.g., "wait.timeout")
        default: Default value if not set
        target_type: Target type for parsing, inferred from default if omitted
        prefix: Environment variable prefix

    Returns:
        Parsed value or default
    """
    value = os.environ.get(get_env_key(key, prefix))

    if value is None:
        return default

    if target_type is not None:
        return parse_value(value, target_type)

    if default is not None:
        return parse_value(value, type(default))

    return value


# Predefined environment variable mappings
ENV_MAPPINGS = {
    "chain.trace_indent": ("DOMCHAIN_CHAIN_TRACE_INDENT", str),
    "chain.log_steps": ("DOMCHAIN_CHAIN_LOG_STEPS", bool),
    "static.normalize_whitespace": ("DOMCHAIN_STATIC_NORMALIZE_WHITESPACE", bool),
    "wait.timeout": ("DOMCHAIN_WAIT_TIMEOUT", float),
    "wait.polling_interval": ("DOMCHAIN_WAIT_POLLING_INTERVAL", float),
    "wait.ignore_exceptions": ("DOMCHAIN_WAIT_IGNORE_EXCEPTIONS", bool),
}


def load_env_config() -> dict[str, Any]:
    """Load configuration from predefined environment variables.

    Returns:
        Nested dictionary holding only the sections and options that are set
    """
    result: dict[str, Any] = {}

    for key, (env_var, target_type) in ENV_MAPPINGS.items():
        value = os.environ.get(env_var)
        if value is not None:
            section, option = key.split(".", 1)
            result.setdefault(section, {})[option] = parse_value(value, target_type)

    return result


__all__ = [
    "ENV_MAPPINGS",
    "get_env",
    "get_env_key",
    "load_env_config",
    "parse_bool",
    "parse_value",
]
