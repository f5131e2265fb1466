"""
Configuration options classes for domchain.

Strongly-typed option classes for the chain, the static backend and
waiters, validated by Pydantic.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from .defaults import (
    DEFAULT_IGNORE_EXCEPTIONS,
    DEFAULT_LOG_STEPS,
    DEFAULT_NORMALIZE_WHITESPACE,
    DEFAULT_POLLING_INTERVAL,
    DEFAULT_TRACE_INDENT,
    DEFAULT_WAIT_TIMEOUT,
)


class ChainOptions(BaseModel):
    """Selector chain options."""

    trace_indent: str = Field(
        default=DEFAULT_TRACE_INDENT,
        description="Indentation of every step after the first in the chain trace",
    )
    log_steps: bool = Field(
        default=DEFAULT_LOG_STEPS,
        description="Log every replay and step result at DEBUG level",
    )

    def merge(self, other: "ChainOptions") -> "ChainOptions":
        """Merge with another ChainOptions, explicitly set fields of other win."""
        return self.model_copy(update=other.model_dump(exclude_unset=True))


class StaticOptions(BaseModel):
    """Static (lxml) backend options."""

    normalize_whitespace: bool = Field(
        default=DEFAULT_NORMALIZE_WHITESPACE,
        description="Collapse runs of whitespace in element text",
    )

    def merge(self, other: "StaticOptions") -> "StaticOptions":
        """Merge with another StaticOptions, explicitly set fields of other win."""
        return self.model_copy(update=other.model_dump(exclude_unset=True))


class WaitOptions(BaseModel):
    """Options for waiting on chain conditions."""

    timeout: float = Field(
        default=DEFAULT_WAIT_TIMEOUT, gt=0, description="Maximum wait in seconds"
    )
    polling_interval: float = Field(
        default=DEFAULT_POLLING_INTERVAL,
        gt=0,
        description="Time between condition checks in seconds",
    )
    ignore_exceptions: bool = Field(
        default=DEFAULT_IGNORE_EXCEPTIONS,
        description="Keep polling when a check raises",
    )

    @model_validator(mode="after")
    def check_interval(self) -> "WaitOptions":
        """Polling interval cannot exceed the timeout."""
        if self.polling_interval > self.timeout:
            raise ValueError("polling_interval cannot exceed timeout")
        return self

    def merge(self, other: "WaitOptions") -> "WaitOptions":
        """Merge with another WaitOptions, explicitly set fields of other win."""
        return WaitOptions(
            **{**self.model_dump(), **other.model_dump(exclude_unset=True)}
        )


class DomChainConfig(BaseModel):
    """Main configuration class combining all options."""

    chain: ChainOptions = Field(
        default_factory=ChainOptions, description="Chain options"
    )
    static: StaticOptions = Field(
        default_factory=StaticOptions, description="Static backend options"
    )
    wait: WaitOptions = Field(
        default_factory=WaitOptions, description="Wait options"
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DomChainConfig":
        """Create configuration from dictionary."""
        return cls(**data)

    def merge(self, other: "DomChainConfig") -> "DomChainConfig":
        """Merge with another DomChainConfig, other takes precedence."""
        return DomChainConfig(
            chain=self.chain.merge(other.chain),
            static=self.static.merge(other.static),
            wait=self.wait.merge(other.wait),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()


__all__ = [
    "ChainOptions",
    "DomChainConfig",
    "StaticOptions",
    "WaitOptions",
]
