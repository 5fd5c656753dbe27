"""
Section Geometry Utilities

Re-derives drawable cross-section geometry from computed rows, for the
plotting and CAD/GIS exporters. Nothing here recomputes areas, volumes
or the cut/fill classification.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, TYPE_CHECKING

from shapely.geometry import LineString, Point

from ..core.ground import GroundProfile, OUTER_OFFSET

if TYPE_CHECKING:
    from ..core.section import CrossSectionRow


@dataclass
class SectionGeometry:
    """
    Drawable lines of one cross-section in (offset, elevation) coordinates.

    Attributes:
        road: Toe - edge - crown - edge - toe design line
        ground: Existing ground, extended a little past the wider toe
        toe_left, toe_right: Toe points on the ground line
    """
    road: LineString
    ground: LineString
    toe_left: Point
    toe_right: Point
    crown: Point
    edge_left: Point
    edge_right: Point

    @classmethod
    def from_row(cls, row: 'CrossSectionRow', margin: float = 1.0) -> SectionGeometry:
        """
        Build section geometry from a row's stored fields.

        Args:
            row: Computed cross-section row
            margin: How far the ground line runs past the outermost of
                the toes and the 15 m offsets

        Returns:
            SectionGeometry
        """
        profile: GroundProfile = row.ground_profile()
        half = row.formation_width / 2
        edge_elev = row.formation_level - row.camber_drop

        edge_left = Point(-half, edge_elev)
        edge_right = Point(half, edge_elev)
        crown = Point(0.0, row.formation_level)

        toe_left_x = row.toe_offset_left
        toe_right_x = row.toe_offset_right
        toe_left = Point(toe_left_x, profile.elevation_at(toe_left_x))
        toe_right = Point(toe_right_x, profile.elevation_at(toe_right_x))

        road = LineString([toe_left, edge_left, crown, edge_right, toe_right])

        reach_left = max(OUTER_OFFSET + margin, -toe_left_x + margin)
        reach_right = max(OUTER_OFFSET + margin, toe_right_x + margin)
        ground_coords: List[Tuple[float, float]] = [
            (-reach_left, profile.elevation_at(-reach_left)),
            *(p.as_tuple() for p in profile.points),
            (reach_right, profile.elevation_at(reach_right)),
        ]
        ground = LineString(ground_coords)

        return cls(
            road=road,
            ground=ground,
            toe_left=toe_left,
            toe_right=toe_right,
            crown=crown,
            edge_left=edge_left,
            edge_right=edge_right,
        )

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_offset, min_elevation, max_offset, max_elevation) of both lines."""
        r = self.road.bounds
        g = self.ground.bounds
        return (min(r[0], g[0]), min(r[1], g[1]), max(r[2], g[2]), max(r[3], g[3]))

    def slope_label_anchor(self, side: str) -> Tuple[float, float]:
        """Midpoint of the side slope line, for '1:M' labels."""
        if side == "left":
            a, b = self.edge_left, self.toe_left
        else:
            a, b = self.edge_right, self.toe_right
        return ((a.x + b.x) / 2, (a.y + b.y) / 2)
