"""
Validation helpers for model parameters and update arguments.

Every helper raises ConfigurationError naming the offending parameter, so a
rejected update call can be traced back to the field that caused it.
"""

import math

from crane3d.errors import ConfigurationError


def validate_finite(value: float, name: str) -> None:
    """Validate that a value is a finite real number."""
    try:
        finite = math.isfinite(value)
    except TypeError:
        raise ConfigurationError(f"{name} must be a real number, got {value!r}") from None
    if not finite:
        raise ConfigurationError(f"{name} must be finite, got {value}")


def validate_positive(value: float, name: str) -> None:
    """
    Validate that a scalar value is finite and strictly positive.

    Args:
        value: Value to validate
        name: Parameter name for error messages

    Raises:
        ConfigurationError: If value <= 0 or not finite
    """
    validate_finite(value, name)
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """Validate that a value is finite and non-negative."""
    validate_finite(value, name)
    if value < 0:
        raise ConfigurationError(f"{name} must be non-negative, got {value}")


def validate_limits(lower: float, upper: float, name: str) -> None:
    """
    Validate a closed [lower, upper] mechanical limit pair.

    Args:
        lower: Inclusive minimum
        upper: Inclusive maximum
        name: Axis name for error messages

    Raises:
        ConfigurationError: If either bound is not finite or lower > upper
    """
    validate_finite(lower, f"{name} lower limit")
    validate_finite(upper, f"{name} upper limit")
    if lower > upper:
        raise ConfigurationError(
            f"{name} limits are inverted: min {lower} > max {upper}"
        )
