"""
Cross Section Module

Builds the design template of each station, solves its toes and
integrates cut and fill areas between them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

import numpy as np

from .ground import GroundProfile, GroundSource, ProfilePoint
from .intersection import find_toe, SLOPE_RAY_EXTENT
from .parameters import SectionParameters
from ..analysis.formation import FormationGeometry, RoadTemplate, Side, SideSlope

if TYPE_CHECKING:
    from ..io.station_table import Station

# Areas at or below this (m2) count as zero for classification
AREA_EPSILON = 0.01

# Critical offsets closer than this (m) are merged / skipped as strips
STRIP_TOLERANCE = 0.001


def round3(value: float) -> float:
    """Round half-up to 3 decimals. All stored figures go through this."""
    return math.floor(value * 1000 + 0.5) / 1000


class SectionType(Enum):
    """Earthwork classification of a cross-section."""
    CUT = "Cut"
    FILL = "Fill"
    MIXED = "Mixed"
    LEVEL = "Level"

    @classmethod
    def classify(
        cls,
        area_cut: float,
        area_fill: float,
        epsilon: float = AREA_EPSILON,
    ) -> SectionType:
        has_cut = area_cut > epsilon
        has_fill = area_fill > epsilon

        if has_cut and has_fill:
            return cls.MIXED
        if has_cut:
            return cls.CUT
        if has_fill:
            return cls.FILL
        return cls.LEVEL

    def __str__(self) -> str:
        return self.value


@dataclass
class CrossSectionRow:
    """
    Computed cross-section of one station.

    All numeric fields are rounded to 3 decimals when stored. ``spacing``
    and ``segment_volume`` are filled in by the volume pass; the last row
    of a run never gets a segment volume.
    """
    chainage: str
    chainage_m: float
    formation_level: float

    # Ground levels at -15, -median/2, +median/2, +15
    egl_left_outer: float
    egl_left_median: float
    egl_right_median: float
    egl_right_outer: float

    camber_drop: float
    height_left: float  # Road minus ground at the left edge (+ = fill)
    height_right: float
    section_type: SectionType

    formation_width: float
    median_width: float
    slope_left: float  # 1:M ratio used on each side
    slope_right: float

    toe_distance_left: float  # Horizontal, formation edge to toe
    toe_distance_right: float
    bottom_width: float  # Toe to toe

    area: float
    area_cut: float
    area_fill: float

    ground_source: GroundSource = GroundSource.EXPLICIT
    spacing: Optional[float] = None
    segment_volume: Optional[float] = None

    @property
    def used_slope(self) -> float:
        """Slope ratio reported for the section (the left side's)."""
        return self.slope_left

    @property
    def toe_offset_left(self) -> float:
        return -(self.formation_width / 2 + self.toe_distance_left)

    @property
    def toe_offset_right(self) -> float:
        return self.formation_width / 2 + self.toe_distance_right

    def ground_profile(self) -> GroundProfile:
        """Rebuild the ground profile from the stored levels."""
        return GroundProfile.from_station(
            self.egl_left_outer,
            self.egl_left_median,
            self.egl_right_median,
            self.egl_right_outer,
            self.median_width,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["section_type"] = self.section_type.value
        data["ground_source"] = self.ground_source.value
        data["used_slope"] = self.used_slope
        return data


def integrate_areas(
    template: RoadTemplate,
    ground: GroundProfile,
    toe_left: ProfilePoint,
    toe_right: ProfilePoint,
) -> Tuple[float, float]:
    """
    Cut and fill areas between the two toes.

    Strips are bounded by every offset where either line changes slope:
    both edges, the crown, both toes and the ground breakpoints. Each strip
    is sampled at its midpoint, so the sum is exact for the piecewise-linear
    lines involved.

    Returns:
        (area_cut, area_fill), both >= 0
    """
    half = template.formation.half_width
    critical = np.unique(np.array(
        [-half, 0.0, half, toe_left.offset, toe_right.offset, *ground.offsets],
        dtype=np.float64,
    ))
    inside = (
        (critical >= toe_left.offset - STRIP_TOLERANCE)
        & (critical <= toe_right.offset + STRIP_TOLERANCE)
    )
    offsets = critical[inside]

    area_cut = 0.0
    area_fill = 0.0

    for x1, x2 in zip(offsets[:-1], offsets[1:]):
        width = float(x2 - x1)
        if abs(width) < STRIP_TOLERANCE:
            continue

        mid = float(x1 + x2) / 2
        height = template.target_elevation_at(mid) - ground.elevation_at(mid)

        # Road above ground is fill
        if height > 0:
            area_fill += height * width
        else:
            area_cut += abs(height) * width

    return area_cut, area_fill


class SectionCalculator:
    """
    Computes cross-section rows station by station.

    Each station is independent; the calculator only holds the shared
    design parameters.
    """

    def __init__(self, parameters: SectionParameters, extent: float = SLOPE_RAY_EXTENT):
        """
        Args:
            parameters: Validated design parameters
            extent: Reach of slope rays and of the flat ground extension
        """
        self.parameters = parameters
        self.extent = extent

    def build_template(
        self,
        formation: FormationGeometry,
        ground: GroundProfile,
    ) -> RoadTemplate:
        """Choose cut or fill independently on each side from the ground at the edge."""
        params = self.parameters
        slopes = {}
        for side in Side:
            edge = formation.edge(side)
            slopes[side] = SideSlope.choose(
                side,
                ground.elevation_at(edge.offset),
                edge.elevation,
                params.cut_slope,
                params.fill_slope,
            )
        return RoadTemplate(formation, slopes[Side.LEFT], slopes[Side.RIGHT])

    def calculate(self, station: 'Station') -> CrossSectionRow:
        """
        Compute the cross-section of one parsed station.

        Args:
            station: Station with resolved ground levels

        Returns:
            CrossSectionRow with rounded figures (no volume yet)
        """
        params = self.parameters

        ground = GroundProfile.from_station(
            station.egl_left_outer,
            station.egl_left_median,
            station.egl_right_median,
            station.egl_right_outer,
            params.median_width,
        )
        formation = FormationGeometry(
            formation_width=params.formation_width,
            camber_percent=params.camber,
            crown_elevation=station.formation_level,
        )
        template = self.build_template(formation, ground)

        toes = {}
        for side in Side:
            edge = formation.edge(side)
            toes[side] = find_toe(
                edge,
                template.slope(side).gradient,
                side.direction,
                ground,
                self.extent,
            )
        toe_left, toe_right = toes[Side.LEFT], toes[Side.RIGHT]

        area_cut, area_fill = integrate_areas(template, ground, toe_left, toe_right)

        stored_cut = round3(area_cut)
        stored_fill = round3(area_fill)
        half = formation.half_width
        edge_elevation = formation.edge_elevation

        return CrossSectionRow(
            chainage=station.chainage,
            chainage_m=station.chainage_m,
            formation_level=round3(station.formation_level),
            egl_left_outer=round3(station.egl_left_outer),
            egl_left_median=round3(station.egl_left_median),
            egl_right_median=round3(station.egl_right_median),
            egl_right_outer=round3(station.egl_right_outer),
            camber_drop=round3(formation.camber_drop),
            height_left=round3(edge_elevation - ground.elevation_at(-half)),
            height_right=round3(edge_elevation - ground.elevation_at(half)),
            section_type=SectionType.classify(stored_cut, stored_fill),
            formation_width=round3(params.formation_width),
            median_width=round3(params.median_width),
            slope_left=template.left.ratio,
            slope_right=template.right.ratio,
            toe_distance_left=round3(abs(toe_left.offset + half)),
            toe_distance_right=round3(abs(toe_right.offset - half)),
            bottom_width=round3(toe_right.offset - toe_left.offset),
            area=round3(area_cut + area_fill),
            area_cut=stored_cut,
            area_fill=stored_fill,
            ground_source=station.ground_source,
        )
