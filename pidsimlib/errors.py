"""Exception types raised by the pidsim library."""

from __future__ import annotations

import math
from typing import Any


class ConfigurationError(ValueError):
    """Raised when a simulation or model is configured with invalid constants."""


class InputParseError(ValueError):
    """Raised when a raw UI value cannot be parsed into a real-valued gain."""


def require_positive_finite(name: str, value: Any) -> None:
    """Raise :class:`ConfigurationError` unless ``value`` is a positive finite real."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive finite number")


__all__ = ["ConfigurationError", "InputParseError", "require_positive_finite"]
