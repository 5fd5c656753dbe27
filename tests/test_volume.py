"""
Tests for volume accumulation and the end-to-end pipeline.
"""

import math

import pytest

from road_earthwork.core.parameters import SectionParameters
from road_earthwork.core.section import CrossSectionRow, SectionType, round3
from road_earthwork.core.validation import MissingColumnError, SlopeRatioError
from road_earthwork.core.volume import VolumeCalculator, compute_earthwork


def make_row(chainage_m, area_cut, area_fill):
    """Row with only the fields the volume pass reads being meaningful."""
    return CrossSectionRow(
        chainage=str(chainage_m),
        chainage_m=chainage_m,
        formation_level=100.0,
        egl_left_outer=100.0,
        egl_left_median=100.0,
        egl_right_median=100.0,
        egl_right_outer=100.0,
        camber_drop=0.0,
        height_left=0.0,
        height_right=0.0,
        section_type=SectionType.classify(area_cut, area_fill),
        formation_width=20.0,
        median_width=4.0,
        slope_left=2.0,
        slope_right=2.0,
        toe_distance_left=0.0,
        toe_distance_right=0.0,
        bottom_width=20.0,
        area=area_cut + area_fill,
        area_cut=area_cut,
        area_fill=area_fill,
    )


class TestVolumeCalculator:
    """Tests for average-end-area accumulation."""

    def test_two_fill_stations(self):
        rows = [make_row(0.0, 0.0, 150.0), make_row(20.0, 0.0, 150.0)]
        summary = VolumeCalculator().accumulate(rows)

        assert rows[0].segment_volume == 3000.0
        assert rows[0].spacing == 20.0
        assert summary.total_fill == 3000.0
        assert summary.total_cut == 0.0
        assert summary.net == -3000.0

    def test_last_row_has_no_volume(self):
        rows = [make_row(0.0, 10.0, 0.0), make_row(20.0, 10.0, 0.0), make_row(40.0, 5.0, 0.0)]
        VolumeCalculator().accumulate(rows)

        assert rows[-1].segment_volume is None
        assert rows[-1].spacing is None
        assert rows[1].segment_volume == 150.0

    def test_volume_uses_first_row_type(self):
        """Test a segment is apportioned by the type of its first row."""
        rows = [make_row(0.0, 100.0, 0.0), make_row(10.0, 0.0, 100.0)]
        summary = VolumeCalculator().accumulate(rows)

        assert summary.total_cut == 1000.0
        assert summary.total_fill == 0.0

    def test_mixed_apportionment(self):
        """Test a 30/70 mixed row splits a 50 m3 segment 15/35."""
        rows = [make_row(0.0, 30.0, 70.0), make_row(1.0, 0.0, 0.0)]
        summary = VolumeCalculator().accumulate(rows)

        assert rows[0].section_type is SectionType.MIXED
        assert rows[0].segment_volume == 50.0
        assert summary.total_cut == pytest.approx(15.0)
        assert summary.total_fill == pytest.approx(35.0)

    def test_zero_area_level_row(self):
        """Test a level row with zero area contributes nothing."""
        rows = [make_row(0.0, 0.0, 0.0), make_row(20.0, 0.0, 0.0)]
        summary = VolumeCalculator().accumulate(rows)

        assert rows[0].segment_volume == 0.0
        assert summary.total_cut == 0.0
        assert summary.total_fill == 0.0

    def test_spacing_override(self):
        rows = [make_row(0.0, 0.0, 150.0), make_row(20.0, 0.0, 150.0)]
        summary = VolumeCalculator(spacing=25.0).accumulate(rows)

        assert rows[0].spacing == 25.0
        assert summary.total_fill == 3750.0

    @pytest.mark.parametrize("spacing", [None, 0.0, -5.0, math.nan])
    def test_non_positive_spacing_ignored(self, spacing):
        rows = [make_row(0.0, 0.0, 150.0), make_row(20.0, 0.0, 150.0)]
        VolumeCalculator(spacing=spacing).accumulate(rows)

        assert rows[0].spacing == 20.0

    def test_descending_chainage_uses_absolute_length(self):
        rows = [make_row(40.0, 0.0, 10.0), make_row(20.0, 0.0, 10.0)]
        VolumeCalculator().accumulate(rows)

        assert rows[0].spacing == 20.0
        assert rows[0].segment_volume == 200.0

    def test_single_row(self):
        rows = [make_row(0.0, 0.0, 150.0)]
        summary = VolumeCalculator().accumulate(rows)

        assert rows[0].segment_volume is None
        assert summary.net == 0.0


class TestComputeEarthwork:
    """Tests for the complete text-to-result pipeline."""

    def test_two_station_fill(self, fill_result):
        """Test two flat-ground fill stations 20 m apart."""
        assert fill_result.num_rows == 2
        assert all(row.section_type is SectionType.FILL for row in fill_result.rows)
        assert fill_result.rows[0].area_fill == pytest.approx(150.0)
        assert fill_result.rows[0].segment_volume == 3000.0
        assert fill_result.summary.total_fill == 3000.0
        assert fill_result.summary.total_cut == 0.0

    def test_sample_table(self, sample_text, default_parameters):
        result = compute_earthwork(sample_text, default_parameters)

        assert result.num_rows == 5
        assert result.rows[0].section_type is SectionType.FILL
        assert result.rows[3].section_type is SectionType.CUT
        assert result.rows[4].section_type is SectionType.CUT
        assert result.summary.total_cut > 0
        assert result.summary.total_fill > 0
        assert result.summary.net == round3(result.summary.total_cut - result.summary.total_fill)

    def test_overrides(self, fill_text):
        result = compute_earthwork(fill_text, camber=0.0, spacing=10.0)

        assert result.parameters.spacing == 10.0
        assert result.rows[0].spacing == 10.0

    def test_idempotent(self, sample_text, default_parameters):
        first = compute_earthwork(sample_text, default_parameters)
        second = compute_earthwork(sample_text, default_parameters)

        assert first.rows == second.rows
        assert first.summary == second.summary

    def test_classification_consistent(self, sample_text, default_parameters):
        result = compute_earthwork(sample_text, default_parameters)

        for row in result.rows:
            has_cut = row.area_cut > 0.01
            has_fill = row.area_fill > 0.01
            if row.section_type is SectionType.LEVEL:
                assert not has_cut and not has_fill
            elif row.section_type is SectionType.MIXED:
                assert has_cut and has_fill
            elif row.section_type is SectionType.CUT:
                assert has_cut and not has_fill
            else:
                assert has_fill and not has_cut

    def test_skipped_lines_reported(self):
        text = "Chainage,FRL\n0+000,100\nbad,100\n0+020,100"
        result = compute_earthwork(text)

        assert result.num_rows == 2
        assert result.skipped_lines == [3]
        assert "Skipped lines:" in result.summary_text()

    def test_missing_column_produces_nothing(self):
        with pytest.raises(MissingColumnError):
            compute_earthwork("Station,Level\n0+000,100\n0+020,101")

    def test_invalid_parameters(self, fill_text):
        with pytest.raises(SlopeRatioError):
            compute_earthwork(fill_text, SectionParameters(fill_slope=0.0))

    def test_summary_text(self, fill_result):
        text = fill_result.summary_text()

        assert "EARTHWORK SUMMARY" in text
        assert "TOTAL FILL:        3,000.000 m3" in text
        assert "(Fill shortfall)" in text

    def test_to_dict(self, fill_result):
        data = fill_result.to_dict()

        assert data["summary"] == {"total_cut": 0.0, "total_fill": 3000.0, "net": -3000.0}
        assert data["parameters"]["camber"] == 0.0
        assert len(data["rows"]) == 2
        assert "rows" not in fill_result.to_dict(include_rows=False)
