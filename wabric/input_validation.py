"""Input validation utilities for mesh construction and configuration.

These functions reject bad dimensions and coefficients before anything is
allocated or mutated, so a failed call leaves the previous configuration in
effect.
"""

import math
from numbers import Integral, Real
from typing import Any


class ValidationError(ValueError):
    """Raised when input validation fails."""
    pass


class InvalidDimension(ValidationError):
    """Raised for non-positive or non-integer grid dimensions."""
    pass


class InvalidCoefficient(ValidationError):
    """Raised for out-of-range force or cooling coefficients."""
    pass


class InvalidTarget(ValidationError):
    """Raised when a pin or drag names a vertex, link or face that does not exist."""
    pass


def validate_dimension(value: Any, name: str) -> int:
    """Validate a grid dimension and return it as an int.

    Args:
        value: The value to check
        name: Parameter name for error messages

    Raises:
        InvalidDimension: If value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidDimension(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidDimension(f"{name} must be positive, got {value}")
    return int(value)


def _as_real(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidCoefficient(f"{name} must be a number, got {value!r}")
    value = float(value)
    if math.isnan(value):
        raise InvalidCoefficient(f"{name} must not be NaN")
    return value


def validate_positive(value: Any, name: str) -> float:
    """Validate that a value is strictly positive and finite.

    Raises:
        InvalidCoefficient: If value <= 0 or infinite
    """
    value = _as_real(value, name)
    if value <= 0 or math.isinf(value):
        raise InvalidCoefficient(f"{name} must be positive, got {value}")
    return value


def validate_non_negative(value: Any, name: str, allow_infinite: bool = False) -> float:
    """Validate that a value is non-negative and, by default, finite.

    Pass ``allow_infinite=True`` for cutoff distances, where infinity
    means "no limit".

    Raises:
        InvalidCoefficient: If value < 0, or infinite when not allowed
    """
    value = _as_real(value, name)
    if value < 0 or (math.isinf(value) and not allow_infinite):
        raise InvalidCoefficient(f"{name} must be non-negative, got {value}")
    return value


def validate_non_positive(value: Any, name: str) -> float:
    """Validate that a value is zero or negative (repulsive strengths).

    Raises:
        InvalidCoefficient: If value > 0 or infinite
    """
    value = _as_real(value, name)
    if value > 0 or math.isinf(value):
        raise InvalidCoefficient(f"{name} must be zero or negative, got {value}")
    return value


def validate_range(value: Any, low: float, high: float, name: str) -> float:
    """Validate that low <= value <= high.

    Raises:
        InvalidCoefficient: If value is outside [low, high]
    """
    value = _as_real(value, name)
    if not low <= value <= high:
        raise InvalidCoefficient(f"{name} must be in [{low}, {high}], got {value}")
    return value


def validate_iterations(value: Any, max_iterations: int) -> int:
    """Validate the number of link relaxation passes.

    Raises:
        InvalidCoefficient: If value is not an integer in [1, max_iterations]
    """
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidCoefficient(f"iterations must be an integer, got {value!r}")
    if not 1 <= value <= max_iterations:
        raise InvalidCoefficient(
            f"iterations must be in [1, {max_iterations}], got {value}"
        )
    return int(value)


def validate_vertex_id(vertex_id: Any, n_vertices: int) -> int:
    """Validate a vertex id against the current topology.

    Raises:
        InvalidTarget: If vertex_id is not an index into the vertex array
    """
    if isinstance(vertex_id, bool) or not isinstance(vertex_id, Integral):
        raise InvalidTarget(f"vertex id must be an integer, got {vertex_id!r}")
    if not 0 <= vertex_id < n_vertices:
        raise InvalidTarget(
            f"vertex id {vertex_id} out of range for {n_vertices} vertices"
        )
    return int(vertex_id)
