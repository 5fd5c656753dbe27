"""
Tests for ground profile, road template and toe intersection geometry.
"""

import pytest

from road_earthwork.core.ground import GroundProfile, ProfilePoint, OUTER_OFFSET
from road_earthwork.core.intersection import find_toe, segment_intersection
from road_earthwork.core.validation import ValidationError
from road_earthwork.analysis.formation import (
    FormationGeometry,
    RoadTemplate,
    Side,
    SideSlope,
    formation_width_from_lanes,
)


def flat_ground(elevation, median_width=4.0):
    return GroundProfile.from_station(elevation, elevation, elevation, elevation, median_width)


class TestGroundProfile:
    """Tests for the piecewise-linear ground line."""

    def test_points_sorted_by_offset(self):
        profile = GroundProfile.from_station(95, 96, 97, 98, median_width=4.0)
        assert profile.offsets == [-OUTER_OFFSET, -2.0, 2.0, OUTER_OFFSET]

    def test_wide_median_points_sorted(self):
        """Test median offsets outside 15 m are sorted into place."""
        profile = GroundProfile.from_station(95, 96, 97, 98, median_width=40.0)

        assert profile.offsets == [-20.0, -15.0, 15.0, 20.0]
        assert profile.elevation_at(-20.0) == 96
        assert profile.elevation_at(20.0) == 97

    def test_linear_interpolation(self):
        profile = GroundProfile.from_station(95, 96, 96, 98, median_width=4.0)

        assert profile.elevation_at(-2.0) == 96
        assert profile.elevation_at(0.0) == pytest.approx(96.0)
        assert profile.elevation_at(8.5) == pytest.approx(97.0)

    @pytest.mark.parametrize("x", [15.0, 15.001, 20.0, 1e3, 1e9])
    def test_flat_extrapolation_right(self, x):
        """Test ground beyond the last point is held at its elevation."""
        profile = GroundProfile.from_station(95, 96, 97, 98, median_width=4.0)
        assert profile.elevation_at(x) == 98

    @pytest.mark.parametrize("x", [-15.0, -15.001, -20.0, -1e3, -1e9])
    def test_flat_extrapolation_left(self, x):
        profile = GroundProfile.from_station(95, 96, 97, 98, median_width=4.0)
        assert profile.elevation_at(x) == 95

    def test_too_few_points(self):
        with pytest.raises(ValidationError, match="at least 4 points"):
            GroundProfile([ProfilePoint(0, 0), ProfilePoint(1, 1)])

    def test_extended_adds_flat_ends(self):
        profile = GroundProfile.from_station(95, 96, 97, 98, median_width=4.0)
        extended = profile.extended(100.0)

        assert extended[0] == ProfilePoint(-100.0, 95)
        assert extended[-1] == ProfilePoint(100.0, 98)
        assert len(extended) == 6


class TestFormation:
    """Tests for the cambered formation and side slopes."""

    def test_camber_drop(self):
        formation = FormationGeometry(formation_width=20.0, camber_percent=2.5, crown_elevation=100.0)

        assert formation.half_width == 10.0
        assert formation.camber_drop == pytest.approx(0.25)
        assert formation.edge_elevation == pytest.approx(99.75)
        assert formation.edge(Side.LEFT) == ProfilePoint(-10.0, formation.edge_elevation)
        assert formation.surface_elevation_at(5.0) == pytest.approx(99.875)

    @pytest.mark.parametrize("side, is_cut, expected", [
        (Side.LEFT, True, -1.0),
        (Side.LEFT, False, 0.5),
        (Side.RIGHT, True, 1.0),
        (Side.RIGHT, False, -0.5),
    ])
    def test_gradient_signs(self, side, is_cut, expected):
        """Test cut rises outward and fill falls outward on both sides."""
        ratio = 1.0 if is_cut else 2.0
        assert SideSlope(side, is_cut, ratio).gradient == expected

    def test_choose_cut_when_ground_above_edge(self):
        slope = SideSlope.choose(Side.LEFT, 101.0, 100.0, cut_slope=1.0, fill_slope=2.0)
        assert slope.is_cut
        assert slope.ratio == 1.0

    def test_choose_fill_when_ground_at_edge(self):
        slope = SideSlope.choose(Side.RIGHT, 100.0, 100.0, cut_slope=1.0, fill_slope=2.0)
        assert not slope.is_cut
        assert slope.ratio == 2.0

    def test_template_elevation(self):
        formation = FormationGeometry(20.0, 0.0, 100.0)
        template = RoadTemplate(
            formation,
            SideSlope(Side.LEFT, True, 1.0),
            SideSlope(Side.RIGHT, False, 2.0),
        )

        assert template.target_elevation_at(0.0) == 100.0
        assert template.target_elevation_at(-12.0) == pytest.approx(102.0)
        assert template.target_elevation_at(14.0) == pytest.approx(98.0)
        assert "left cut 1:1" in template.description()

    def test_width_from_lanes(self):
        assert formation_width_from_lanes(2, 3.5, 1.5, 4.0) == pytest.approx(21.0)
        assert formation_width_from_lanes(1, 3.5, 1.0, 0.0) == pytest.approx(9.0)


class TestIntersection:
    """Tests for the slope-ray toe solver."""

    def test_crossing_segments(self):
        hit = segment_intersection(
            ProfilePoint(0, 0), ProfilePoint(2, 2),
            ProfilePoint(0, 2), ProfilePoint(2, 0),
        )
        assert hit == ProfilePoint(1.0, 1.0)

    def test_parallel_segments(self):
        hit = segment_intersection(
            ProfilePoint(0, 0), ProfilePoint(1, 1),
            ProfilePoint(0, 1), ProfilePoint(1, 2),
        )
        assert hit is None

    def test_disjoint_segments(self):
        hit = segment_intersection(
            ProfilePoint(0, 0), ProfilePoint(1, 0),
            ProfilePoint(2, -1), ProfilePoint(2, 1),
        )
        assert hit is None

    def test_fill_toe_on_flat_extension(self):
        """Test a 1:2 fill from 100 meets flat ground at 95 ten meters out."""
        ground = flat_ground(95.0)

        left = find_toe(ProfilePoint(-10.0, 100.0), 0.5, -1, ground)
        right = find_toe(ProfilePoint(10.0, 100.0), -0.5, 1, ground)

        assert left.offset == pytest.approx(-20.0)
        assert left.elevation == pytest.approx(95.0)
        assert right.offset == pytest.approx(20.0)

    def test_cut_toe_inside_profile(self):
        ground = GroundProfile.from_station(102, 102, 98, 98, median_width=4.0)
        toe = find_toe(ProfilePoint(-10.0, 100.0), -1.0, -1, ground)

        assert toe.offset == pytest.approx(-12.0)
        assert toe.elevation == pytest.approx(102.0)

    def test_first_hit_in_scan_order_not_nearest(self):
        """Test a dip-then-ridge ground keeps the outer hit found first."""
        ground = GroundProfile([
            ProfilePoint(-15.0, 90.0),
            ProfilePoint(-12.0, 103.0),
            ProfilePoint(2.0, 100.0),
            ProfilePoint(15.0, 100.0),
        ])

        toe = find_toe(ProfilePoint(-10.0, 100.0), 0.5, -1, ground)

        # The ray also crosses the ridge flank near -13.04, closer to the edge
        assert toe.offset == pytest.approx(-30.0)
        assert toe.elevation == pytest.approx(90.0)
        assert toe.offset != pytest.approx(-13.043, abs=0.01)

    def test_ground_at_edge_gives_zero_width_slope(self):
        toe = find_toe(ProfilePoint(10.0, 100.0), -0.5, 1, flat_ground(100.0))
        assert toe.offset == pytest.approx(10.0)

    def test_no_hit_falls_back_to_edge(self):
        """Test a ray that never reaches the ground leaves the toe at the edge."""
        ground = flat_ground(0.0)
        toe = find_toe(ProfilePoint(-10.0, 100.0), 0.5, -1, ground, extent=20.0)

        assert toe == ProfilePoint(-10.0, 0.0)
