"""
Ground Profile Module

Models the existing ground across a station as a piecewise-linear
elevation function through the surveyed offset points.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

from .validation import ValidationError

# Lateral offset of the outer ground readings (meters from centerline)
OUTER_OFFSET = 15.0


class GroundSource(Enum):
    """Where a station's four ground levels came from."""
    EXPLICIT = "explicit"      # Four dedicated offset columns
    GENERIC = "generic"        # One ground column applied to all offsets
    POSITIONAL = "positional"  # Fields 3-6 taken by position
    FLAT = "flat"              # No ground data: ground at formation level


@dataclass(frozen=True)
class ProfilePoint:
    """A point in the cross-section plane (offset from centerline, elevation)."""
    offset: float
    elevation: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.offset, self.elevation)


class GroundProfile:
    """
    Existing ground line of one cross-section.

    Elevations between survey points are interpolated linearly. Beyond the
    outermost points the ground is held flat at the outermost elevation,
    never extrapolated along the last segment.

    Attributes:
        points: Survey points sorted ascending by offset
    """

    def __init__(self, points: Sequence[ProfilePoint]):
        if len(points) < 4:
            raise ValidationError(
                f"Ground profile needs at least 4 points, got {len(points)}"
            )
        # Stable sort: coincident offsets keep their survey order
        self.points: List[ProfilePoint] = sorted(points, key=lambda p: p.offset)

    @classmethod
    def from_station(
        cls,
        left_outer: float,
        left_median: float,
        right_median: float,
        right_outer: float,
        median_width: float,
    ) -> GroundProfile:
        """
        Build the four-point profile of a station.

        Args:
            left_outer: Ground level at -15 m
            left_median: Ground level at -median_width/2
            right_median: Ground level at +median_width/2
            right_outer: Ground level at +15 m
            median_width: Total median width

        Returns:
            GroundProfile with points sorted by offset
        """
        half_median = median_width / 2
        return cls([
            ProfilePoint(-OUTER_OFFSET, left_outer),
            ProfilePoint(-half_median, left_median),
            ProfilePoint(half_median, right_median),
            ProfilePoint(OUTER_OFFSET, right_outer),
        ])

    @property
    def offsets(self) -> List[float]:
        return [p.offset for p in self.points]

    @property
    def min_offset(self) -> float:
        return self.points[0].offset

    @property
    def max_offset(self) -> float:
        return self.points[-1].offset

    def elevation_at(self, x: float) -> float:
        """Ground elevation at lateral offset x (flat beyond the end points)."""
        first, last = self.points[0], self.points[-1]

        if x <= first.offset:
            return first.elevation
        if x >= last.offset:
            return last.elevation

        for p1, p2 in zip(self.points, self.points[1:]):
            if p1.offset <= x <= p2.offset:
                t = (x - p1.offset) / (p2.offset - p1.offset)
                return p1.elevation + t * (p2.elevation - p1.elevation)

        return first.elevation

    def extended(self, extent: float) -> List[ProfilePoint]:
        """
        Profile points with flat extensions out to +/- extent.

        Used as the target polyline for slope rays.
        """
        return [
            ProfilePoint(-extent, self.points[0].elevation),
            *self.points,
            ProfilePoint(extent, self.points[-1].elevation),
        ]

    def __repr__(self) -> str:
        pts = ", ".join(f"({p.offset:g}, {p.elevation:g})" for p in self.points)
        return f"GroundProfile([{pts}])"
