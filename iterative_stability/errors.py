"""Exceptions raised by the stability computations."""

from __future__ import annotations


class StabilityError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(StabilityError, ValueError):
    """Raised when a caller supplies a configuration the core cannot evaluate."""


class BackendUnavailableError(StabilityError, RuntimeError):
    """Raised when the batch offload backend cannot be acquired or fails mid-call."""
