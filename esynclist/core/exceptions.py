# esynclist/core/exceptions.py
from __future__ import annotations


class CoreError(Exception):
    """Base error for all core-domain exceptions."""


# ---- Validation / construction errors ----
class InvalidSegment(CoreError):
    """Raised when a TraceSegment is constructed with invalid inputs."""


class InvalidTraceList(CoreError):
    """Raised when a TraceID / TraceList is constructed with invalid inputs."""


# ---- Lookup errors (also behave like KeyError for dict-like APIs) ----
class TraceNotFound(CoreError, KeyError):
    """Raised when a requested source identifier is not present."""


# ---- Run-level errors ----
class ConfigError(CoreError):
    """Raised for invalid or missing configuration values."""


class InvalidTimeString(ConfigError):
    """Raised when a time string cannot be parsed."""


class DecodeError(CoreError):
    """Raised when an input file cannot be decoded."""

    def __init__(self, path: str, cause: object) -> None:
        super().__init__(f"Cannot read {path}: {cause}")
        self.path = path
        self.cause = cause


class TrimError(CoreError):
    """Raised when a sample buffer cannot be reallocated while trimming."""
