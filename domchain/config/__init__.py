"""
Configuration module for domchain.

- Strongly-typed option classes (ChainOptions, StaticOptions, WaitOptions)
- Configuration file loading (JSON, YAML, TOML)
- Environment variable support
- Validation via Pydantic

Example usage:
    from domchain.config import load_config

    config = load_config("domchain.config.yaml")
    chain = select("#list", document, options=config.chain)

Environment variables:
    DOMCHAIN_CHAIN_LOG_STEPS=false
    DOMCHAIN_STATIC_NORMALIZE_WHITESPACE=false
    DOMCHAIN_WAIT_TIMEOUT=10
    DOMCHAIN_WAIT_POLLING_INTERVAL=0.25
"""

from domchain.errors import ConfigurationError

from .defaults import (
    DEFAULT_POLLING_INTERVAL,
    DEFAULT_TRACE_INDENT,
    DEFAULT_WAIT_TIMEOUT,
    ENV_PREFIX,
    get_default_config,
)
from .env import ENV_MAPPINGS, get_env, get_env_key, load_env_config
from .loader import (
    ConfigLoader,
    find_config_file,
    load_config,
    load_file,
    merge_configs,
    save_config,
)
from .options import ChainOptions, DomChainConfig, StaticOptions, WaitOptions

__all__ = [
    # Options
    "ChainOptions",
    "DomChainConfig",
    "StaticOptions",
    "WaitOptions",
    # Loading
    "ConfigLoader",
    "ConfigurationError",
    "find_config_file",
    "load_config",
    "load_file",
    "merge_configs",
    "save_config",
    # Environment
    "ENV_MAPPINGS",
    "ENV_PREFIX",
    "get_env",
    "get_env_key",
    "load_env_config",
    # Defaults
    "DEFAULT_POLLING_INTERVAL",
    "DEFAULT_TRACE_INDENT",
    "DEFAULT_WAIT_TIMEOUT",
    "get_default_config",
]
