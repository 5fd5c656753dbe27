"""
Volume Calculator Module

Accumulates earthwork volumes between consecutive cross-sections
using the average-end-area method.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TYPE_CHECKING

from .parameters import SectionParameters
from .section import CrossSectionRow, SectionCalculator, SectionType, round3

if TYPE_CHECKING:
    from ..io.station_table import StationTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationSummary:
    """Run totals in cubic meters."""
    total_cut: float
    total_fill: float
    net: float  # Positive = surplus cut, negative = fill shortfall

    def to_dict(self) -> dict:
        return {
            "total_cut": self.total_cut,
            "total_fill": self.total_fill,
            "net": self.net,
        }


@dataclass
class EarthworkResult:
    """
    Complete earthwork results of a run.

    All areas are in m2 and volumes in m3.
    """
    rows: List[CrossSectionRow]
    summary: CalculationSummary
    parameters: SectionParameters
    skipped_lines: List[int] = field(default_factory=list)

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def rows_of_type(self, section_type: SectionType) -> List[CrossSectionRow]:
        return [row for row in self.rows if row.section_type is section_type]

    def summary_text(self) -> str:
        """Return human-readable summary."""
        counts = {t: len(self.rows_of_type(t)) for t in SectionType}
        first = self.rows[0].chainage if self.rows else "-"
        last = self.rows[-1].chainage if self.rows else "-"
        params = self.parameters
        net = self.summary.net

        lines = [
            "=" * 50,
            "EARTHWORK SUMMARY",
            "=" * 50,
            f"Stations:          {self.num_rows} ({first} to {last})",
            f"  Cut / Fill:      {counts[SectionType.CUT]} / {counts[SectionType.FILL]}",
            f"  Mixed / Level:   {counts[SectionType.MIXED]} / {counts[SectionType.LEVEL]}",
            f"",
            f"Template:",
            f"  Formation width: {params.formation_width:.2f} m",
            f"  Median width:    {params.median_width:.2f} m",
            f"  Camber:          {params.camber:.2f} %",
            f"  Cut slope:       1:{params.cut_slope:g}",
            f"  Fill slope:      1:{params.fill_slope:g}",
            f"",
            f"TOTAL CUT:         {self.summary.total_cut:,.3f} m3",
            f"TOTAL FILL:        {self.summary.total_fill:,.3f} m3",
            f"NET VOLUME:        {net:,.3f} m3",
            f"  {'(Surplus cut)' if net > 0 else '(Fill shortfall)' if net < 0 else '(Balanced)'}",
        ]

        if self.skipped_lines:
            lines.append(f"")
            lines.append(
                f"Skipped lines:     {', '.join(str(n) for n in self.skipped_lines)}"
            )

        lines.append("=" * 50)
        return "\n".join(lines)

    def to_dict(self, include_rows: bool = True) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "summary": self.summary.to_dict(),
            "parameters": self.parameters.to_dict(),
            "num_rows": self.num_rows,
            "skipped_lines": list(self.skipped_lines),
        }
        if include_rows:
            data["rows"] = [row.to_dict() for row in self.rows]
        return data


class VolumeCalculator:
    """
    Average-end-area volumes between adjacent stations.

    Mixed sections are apportioned to cut and fill by the section's own
    area ratio. This approximates, rather than computes, the true mixed
    solid between stations.
    """

    def __init__(self, spacing: Optional[float] = None):
        """
        Args:
            spacing: Fixed station spacing in meters; None, zero, negative
                or NaN falls back to chainage differences
        """
        self.spacing = spacing

    def segment_length(self, row: CrossSectionRow, next_row: CrossSectionRow) -> float:
        spacing = self.spacing
        if spacing is not None and not math.isnan(spacing) and spacing > 0:
            return spacing
        return abs(next_row.chainage_m - row.chainage_m)

    @staticmethod
    def split_volume(row: CrossSectionRow, volume: float) -> tuple:
        """
        Apportion a segment volume to (cut, fill) by the row's type.

        Returns:
            (cut_volume, fill_volume)
        """
        if row.section_type is SectionType.CUT:
            return volume, 0.0
        if row.section_type is SectionType.FILL:
            return 0.0, volume

        # Mixed or Level: split by area ratio, zero area -> zero volume
        denominator = row.area or 1
        return (
            volume * (row.area_cut / denominator),
            volume * (row.area_fill / denominator),
        )

    def accumulate(self, rows: Sequence[CrossSectionRow]) -> CalculationSummary:
        """
        Set spacing and segment volume on every row but the last.

        Rows must be in chainage order as surveyed; each volume is stored
        on the first row of its segment.

        Returns:
            CalculationSummary with rounded totals
        """
        total_cut = 0.0
        total_fill = 0.0

        for row, next_row in zip(rows, rows[1:]):
            length = self.segment_length(row, next_row)
            row.spacing = round3(length)

            volume = round3((row.area + next_row.area) / 2 * length)
            row.segment_volume = volume

            cut, fill = self.split_volume(row, volume)
            total_cut += cut
            total_fill += fill

        return CalculationSummary(
            total_cut=round3(total_cut),
            total_fill=round3(total_fill),
            net=round3(total_cut - total_fill),
        )


def calculate_table(
    table: 'StationTable',
    parameters: SectionParameters,
) -> EarthworkResult:
    """
    Run both passes over an already-parsed station table.

    Args:
        table: Parsed stations in input order
        parameters: Design parameters (validated here)

    Returns:
        EarthworkResult
    """
    parameters = parameters.validated()
    calculator = SectionCalculator(parameters)

    rows = [calculator.calculate(station) for station in table.stations]
    summary = VolumeCalculator(parameters.spacing).accumulate(rows)

    logger.debug(
        "Computed %d section(s): cut %.3f m3, fill %.3f m3",
        len(rows), summary.total_cut, summary.total_fill,
    )

    return EarthworkResult(
        rows=rows,
        summary=summary,
        parameters=parameters,
        skipped_lines=list(table.skipped_lines),
    )


def compute_earthwork(
    text: str,
    parameters: Optional[SectionParameters] = None,
    **overrides,
) -> EarthworkResult:
    """
    Compute cross-section areas and volumes from station text.

    Args:
        text: Delimited station data with a header row
        parameters: Design parameters (defaults if None)
        **overrides: Individual SectionParameters fields, e.g. camber=3.0

    Returns:
        EarthworkResult with rows in input order and the run summary

    Raises:
        MissingColumnError: If chainage or formation level column is missing
        EmptyInputError: If there is no data row
        ValidationError: If a parameter is invalid
    """
    from dataclasses import replace
    from ..io.station_table import parse_station_table

    if parameters is None:
        parameters = SectionParameters()
    if overrides:
        parameters = replace(parameters, **overrides)

    table = parse_station_table(text)
    return calculate_table(table, parameters)
