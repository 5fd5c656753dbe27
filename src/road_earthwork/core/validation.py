"""
Input Validation Module

Provides validation functions and custom exceptions for the road_earthwork package.
All validation functions provide clear, actionable error messages.
"""

from __future__ import annotations

import math
import os
import warnings
from pathlib import Path
from typing import Optional, Union


class ValidationError(ValueError):
    """Base exception for validation errors with user-friendly messages."""
    pass


class MissingColumnError(ValidationError):
    """A required column could not be located in the header row."""

    def __init__(self, column: str, message: Optional[str] = None):
        self.column = column
        super().__init__(message or f"Missing '{column}' column.")


class EmptyInputError(ValidationError):
    """Input has no header row or no data rows."""
    pass


class SlopeRatioError(ValidationError):
    """Invalid cut/fill side slope ratio."""
    pass


class FilePermissionError(ValidationError):
    """Cannot write to specified path."""
    pass


def _require_number(value, name: str, error_cls=ValidationError) -> float:
    if value is None:
        raise error_cls(f"{name} cannot be None")

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise error_cls(
            f"{name} must be a number, got {type(value).__name__}"
        )

    if not math.isfinite(value):
        raise error_cls(f"{name} must be finite, got {value}")

    return float(value)


def validate_slope_ratio(ratio: float, name: str = "slope") -> float:
    """
    Validate a side slope ratio (horizontal run per unit rise, the M in 1:M).

    Args:
        ratio: The slope ratio to validate
        name: Name of the ratio (e.g., "cut_slope", "fill_slope")

    Returns:
        The validated ratio as a float

    Raises:
        SlopeRatioError: If ratio is None, not a number, or <= 0
    """
    ratio = _require_number(ratio, name, SlopeRatioError)

    if ratio <= 0:
        raise SlopeRatioError(
            f"{name} must be positive, got {ratio}. "
            "Typical cut slopes are 0.5-1.5, fill slopes 1.5-3.0 (horizontal:1 vertical)."
        )

    if ratio > 10:
        warnings.warn(
            f"{name} of 1:{ratio} is unusually flat. "
            "Verify this is intentional.",
            UserWarning,
            stacklevel=2
        )

    return ratio


def validate_formation_width(width: float, name: str = "formation_width") -> float:
    """
    Validate formation width is a positive number.

    Raises:
        ValidationError: If width is None, not a number, or <= 0
    """
    width = _require_number(width, name)

    if width <= 0:
        raise ValidationError(
            f"{name} must be positive, got {width}. "
            "Typical two-lane formations are 10-15 meters wide."
        )

    return width


def validate_median_width(width: float, name: str = "median_width") -> float:
    """
    Validate median width is non-negative.

    A median wider than 30 m places the median ground offsets outside the
    +/-15 m offsets. This is legal (points are sorted) but unusual.

    Raises:
        ValidationError: If width is None, not a number, or negative
    """
    width = _require_number(width, name)

    if width < 0:
        raise ValidationError(
            f"{name} cannot be negative, got {width}. Use 0 for an undivided road."
        )

    if width > 30:
        warnings.warn(
            f"{name} of {width} m puts the median offsets outside the 15 m "
            "ground offsets. Verify this is intentional.",
            UserWarning,
            stacklevel=2
        )

    return width


def validate_camber(camber: float, name: str = "camber") -> float:
    """
    Validate camber percentage.

    Negative camber (a dished section) is accepted since the drop is
    symmetric either way.

    Raises:
        ValidationError: If camber is None, not a number, or not finite
    """
    camber = _require_number(camber, name)

    if abs(camber) > 10:
        warnings.warn(
            f"{name} of {camber}% is unusually steep for a road surface. "
            "Typical values are 2-4%.",
            UserWarning,
            stacklevel=2
        )

    return camber


def validate_spacing(spacing: Optional[float], name: str = "spacing") -> Optional[float]:
    """
    Validate an optional fixed station spacing override.

    Args:
        spacing: Fixed spacing in meters, or None to use chainage differences

    Returns:
        The spacing as a float, or None when no override applies. Zero,
        negative and NaN values are treated as "no override".

    Raises:
        ValidationError: If spacing is not a number
    """
    if spacing is None:
        return None

    if isinstance(spacing, bool) or not isinstance(spacing, (int, float)):
        raise ValidationError(
            f"{name} must be a number, got {type(spacing).__name__}"
        )

    if math.isnan(spacing):
        return None

    if math.isinf(spacing):
        raise ValidationError(f"{name} must be finite, got {spacing}")

    if spacing <= 0:
        warnings.warn(
            f"{name} of {spacing} is not positive; chainage differences "
            "will be used instead.",
            UserWarning,
            stacklevel=2
        )
        return None

    return float(spacing)


def validate_output_path(filepath: Union[str, Path], context: str = "output file") -> Path:
    """
    Validate output path is writable before attempting to write.

    Args:
        filepath: The path to validate
        context: Description of what will be written (used in error messages)

    Returns:
        The validated path as a Path object

    Raises:
        FilePermissionError: If directory doesn't exist or isn't writable
    """
    path = Path(filepath)
    parent = path.parent

    if str(parent) == '.':
        parent = Path.cwd()

    if not parent.exists():
        raise FilePermissionError(
            f"Cannot write {context}: directory '{parent}' does not exist. "
            "Create the directory first or specify a different path."
        )

    if not os.access(parent, os.W_OK):
        raise FilePermissionError(
            f"Cannot write {context}: no write permission for directory '{parent}'."
        )

    if path.exists() and not os.access(path, os.W_OK):
        raise FilePermissionError(
            f"Cannot overwrite {context}: file '{path}' exists but is not writable."
        )

    return path
