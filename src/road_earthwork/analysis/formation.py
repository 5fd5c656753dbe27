"""
Formation Geometry Module

Defines the design road template of a cross-section: a cambered
formation between two edges and a cut or fill side slope beyond each edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..core.ground import ProfilePoint


class Side(Enum):
    """Side of the centerline, with its outward direction along the offset axis."""
    LEFT = -1
    RIGHT = 1

    @property
    def direction(self) -> int:
        return self.value


@dataclass(frozen=True)
class FormationGeometry:
    """
    Cambered formation surface.

    The crown sits on the centerline; both edges drop by the same camber
    (no superelevation).

    Attributes:
        formation_width: Total formation width B
        camber_percent: Crown-to-edge slope in percent
        crown_elevation: Design level at the centerline
    """
    formation_width: float
    camber_percent: float
    crown_elevation: float

    @property
    def half_width(self) -> float:
        return self.formation_width / 2

    @property
    def camber_drop(self) -> float:
        """Vertical drop from crown to either edge."""
        return self.half_width * (self.camber_percent / 100)

    @property
    def edge_elevation(self) -> float:
        return self.crown_elevation - self.camber_drop

    @property
    def left_edge(self) -> ProfilePoint:
        return ProfilePoint(-self.half_width, self.edge_elevation)

    @property
    def right_edge(self) -> ProfilePoint:
        return ProfilePoint(self.half_width, self.edge_elevation)

    def edge(self, side: Side) -> ProfilePoint:
        return self.left_edge if side is Side.LEFT else self.right_edge

    def surface_elevation_at(self, x: float) -> float:
        """Formation level at offset x, valid for |x| <= B/2."""
        return self.crown_elevation - (abs(x) / self.half_width) * self.camber_drop


@dataclass(frozen=True)
class SideSlope:
    """
    Cut or fill batter running outward from a formation edge.

    Attributes:
        side: Which edge the slope starts from
        is_cut: True for a cut slope (rising outward), False for fill
        ratio: Horizontal run per unit rise (the M in 1:M)
    """
    side: Side
    is_cut: bool
    ratio: float

    @property
    def gradient(self) -> float:
        """
        dy/dx of the slope line in offset coordinates.

        Cut rises outward and fill falls outward, so the sign depends on
        both the side and the slope kind:
        left-cut -1/M, left-fill +1/M, right-cut +1/M, right-fill -1/M.
        """
        rise = 1.0 if self.is_cut else -1.0
        return rise * self.side.direction / self.ratio

    @property
    def kind(self) -> str:
        return "cut" if self.is_cut else "fill"

    @classmethod
    def choose(
        cls,
        side: Side,
        ground_at_edge: float,
        edge_elevation: float,
        cut_slope: float,
        fill_slope: float,
    ) -> SideSlope:
        """Pick cut when ground stands above the edge, otherwise fill."""
        is_cut = ground_at_edge - edge_elevation > 0
        return cls(side=side, is_cut=is_cut, ratio=cut_slope if is_cut else fill_slope)


@dataclass(frozen=True)
class RoadTemplate:
    """
    Complete design line of a cross-section: formation plus both side slopes.

    Beyond each edge the line follows that side's slope indefinitely; it is
    only meaningful up to the toe on that side.
    """
    formation: FormationGeometry
    left: SideSlope
    right: SideSlope

    def slope(self, side: Side) -> SideSlope:
        return self.left if side is Side.LEFT else self.right

    def target_elevation_at(self, x: float) -> float:
        half = self.formation.half_width
        edge = self.formation.edge_elevation

        if x < -half:
            return edge + self.left.gradient * (x + half)
        if x > half:
            return edge + self.right.gradient * (x - half)
        return self.formation.surface_elevation_at(x)

    def description(self) -> str:
        return (
            f"B={self.formation.formation_width:g} m, camber "
            f"{self.formation.camber_percent:g}%, left {self.left.kind} 1:{self.left.ratio:g}, "
            f"right {self.right.kind} 1:{self.right.ratio:g}"
        )


def formation_width_from_lanes(
    lanes_per_side: int,
    lane_width: float,
    shoulder_width: float,
    median_width: float,
) -> float:
    """
    Formation width of a divided carriageway built up from its parts.

    Args:
        lanes_per_side: Number of lanes in each direction
        lane_width: Width of one lane
        shoulder_width: Width of the shoulder on each side
        median_width: Total median width

    Returns:
        2 * lanes * lane_width + median_width + 2 * shoulder_width
    """
    return lanes_per_side * lane_width * 2 + median_width + 2 * shoulder_width
