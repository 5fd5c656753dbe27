"""
Design Parameters

Scalar inputs shared by every station of a run: formation width, median
width, camber and side slopes, plus the optional fixed station spacing.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, replace
from typing import Optional


@dataclass(frozen=True)
class SectionParameters:
    """
    Road template parameters for a cross-section run.

    Attributes:
        formation_width: Total formation width B in meters
        median_width: Total median width; ground is sampled at +/- half of it
        camber: Crown-to-edge transverse slope in percent
        cut_slope: Cut side slope as horizontal run per unit rise (1:M)
        fill_slope: Fill side slope as horizontal run per unit rise (1:M)
        spacing: Fixed station spacing override; None uses chainage differences
    """
    formation_width: float = 20.0
    median_width: float = 4.0
    camber: float = 2.5
    cut_slope: float = 1.0
    fill_slope: float = 2.0
    spacing: Optional[float] = None

    @property
    def half_median(self) -> float:
        return self.median_width / 2

    def validated(self) -> SectionParameters:
        """Return a copy with every field passed through its validator."""
        from .validation import (
            validate_formation_width,
            validate_median_width,
            validate_camber,
            validate_slope_ratio,
            validate_spacing,
        )

        return replace(
            self,
            formation_width=validate_formation_width(self.formation_width),
            median_width=validate_median_width(self.median_width),
            camber=validate_camber(self.camber),
            cut_slope=validate_slope_ratio(self.cut_slope, "cut_slope"),
            fill_slope=validate_slope_ratio(self.fill_slope, "fill_slope"),
            spacing=validate_spacing(self.spacing),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
