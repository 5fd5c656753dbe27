"""
Station Table Loading Module

Parses delimited survey text (chainage, formation level and ground
levels) into Station records ready for cross-section calculation.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..core.ground import GroundSource
from ..core.validation import EmptyInputError, MissingColumnError

logger = logging.getLogger(__name__)

CHAINAGE = "chainage"
FORMATION_LEVEL = "formation_level"
LEFT_OUTER = "left_outer"
LEFT_MEDIAN = "left_median"
RIGHT_MEDIAN = "right_median"
RIGHT_OUTER = "right_outer"
GROUND_GENERIC = "ground_generic"

GROUND_SLOTS = (LEFT_OUTER, LEFT_MEDIAN, RIGHT_MEDIAN, RIGHT_OUTER)

# Ordered (predicate, slot) rules; the first rule matching a header wins.
# Headers are lower-cased and stripped before matching.
COLUMN_RULES: Sequence[Tuple[Callable[[str], bool], str]] = (
    (lambda h: "chain" in h, CHAINAGE),
    (lambda h: "prop" in h or "frl" in h or "fgl" in h, FORMATION_LEVEL),
    (lambda h: "15m_left" in h or h == "l15" or "egl_15m_l" in h, LEFT_OUTER),
    (lambda h: "median_lhs" in h or "med_l" in h, LEFT_MEDIAN),
    (lambda h: "median_rhs" in h or "med_r" in h, RIGHT_MEDIAN),
    (lambda h: "15m_right" in h or h == "r15" or "egl_15m_r" in h, RIGHT_OUTER),
    (lambda h: h == "egl" or "ground" in h, GROUND_GENERIC),
)

_CHAINAGE_STATION = re.compile(r"^(\d+)\+(\d{1,3})$")
_NUMERIC_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_PLAIN_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")

SAMPLE_STATION_TABLE = """\
Chainage, Proposed_FRL, EGL_15m_Left, EGL_Median_LHS, EGL_Median_RHS, EGL_15m_Right
0+000, 100.000, 99.500, 99.800, 99.800, 99.400
0+020, 100.200, 99.600, 99.900, 99.900, 99.500
0+040, 100.400, 99.700, 100.000, 100.000, 99.600
0+060, 100.600, 101.500, 101.200, 101.200, 101.400
0+080, 100.800, 102.000, 101.800, 101.800, 101.900
"""


def parse_number(value: Optional[str]) -> float:
    """
    Parse a numeric field, tolerating thousands separators.

    Commas and surrounding whitespace are removed and the leading numeric
    part is parsed, so trailing units are ignored ("99.5m" -> 99.5).

    Returns:
        The parsed value, or nan when no number can be read
    """
    if value is None:
        return math.nan

    cleaned = str(value).replace(",", "").strip()
    match = _NUMERIC_PREFIX.match(cleaned)
    if not match:
        return math.nan
    return float(match.group(0))


def chainage_to_meters(token: Optional[str]) -> float:
    """
    Convert a chainage token to meters.

    Accepts station notation "K+MMM" (kilometers, then a 1-3 digit meter
    remainder: "1+005" -> 1005) or plain meters with optional commas and
    a trailing "m" ("12,500m" -> 12500). Plain values are rounded to the
    nearest meter.

    Returns:
        Chainage in meters, or nan for unreadable tokens
    """
    if token is None:
        return math.nan

    token = str(token).strip()
    match = _CHAINAGE_STATION.match(token)
    if match:
        return float(int(match.group(1)) * 1000 + int(match.group(2)))

    plain = re.sub(r"m$", "", token, flags=re.IGNORECASE)
    plain = plain.replace(",", "").replace(" ", "")
    if not _PLAIN_NUMBER.match(plain):
        return math.nan

    number = float(plain)
    if not math.isfinite(number):
        return math.nan
    return float(math.floor(number + 0.5))


def resolve_ground_values(
    formation_level: float,
    values: Sequence[float],
) -> Tuple[float, float, float, float]:
    """
    Fill missing ground levels from their left neighbour.

    The chain runs left to right: left outer falls back to the formation
    level, and each following value falls back to the already-resolved
    value before it. Missing data therefore yields flat ground rather than
    zeros.

    Args:
        formation_level: Design level at the centerline
        values: Left outer, left median, right median, right outer (nan = missing)

    Returns:
        Four resolved levels
    """
    resolved: List[float] = []
    fallback = formation_level
    for value in values:
        if math.isnan(value):
            value = fallback
        resolved.append(value)
        fallback = value
    return tuple(resolved)


def split_fields(line: str, delimiter: str) -> List[str]:
    return [part.strip() for part in line.split(delimiter)]


def detect_delimiter(header: str) -> str:
    """Tab when the header has one, otherwise comma."""
    return "\t" if "\t" in header else ","


def infer_columns(headers: Sequence[str]) -> Dict[str, int]:
    """
    Map header names to column slots using COLUMN_RULES.

    A header takes the slot of the first rule it matches. When several
    headers match the same slot, the last one wins.

    Returns:
        Dict of slot name -> column index
    """
    column_map: Dict[str, int] = {}
    for index, header in enumerate(headers):
        name = header.strip().lower()
        for predicate, slot in COLUMN_RULES:
            if predicate(name):
                column_map[slot] = index
                break
    return column_map


@dataclass
class Station:
    """One accepted survey line."""
    line_number: int
    chainage: str
    chainage_m: float
    formation_level: float
    egl_left_outer: float
    egl_left_median: float
    egl_right_median: float
    egl_right_outer: float
    ground_source: GroundSource = GroundSource.EXPLICIT

    @property
    def ground_levels(self) -> Tuple[float, float, float, float]:
        return (
            self.egl_left_outer,
            self.egl_left_median,
            self.egl_right_median,
            self.egl_right_outer,
        )


@dataclass
class StationTable:
    """
    Parsed station data in input order.

    Attributes:
        stations: Accepted stations
        column_map: Inferred slot -> column index mapping
        delimiter: Field delimiter detected from the header
        skipped_lines: 1-based line numbers dropped because chainage or
            formation level could not be read
    """
    stations: List[Station]
    column_map: Dict[str, int]
    delimiter: str = ","
    headers: List[str] = field(default_factory=list)
    skipped_lines: List[int] = field(default_factory=list)

    @property
    def num_stations(self) -> int:
        return len(self.stations)

    @property
    def has_explicit_ground(self) -> bool:
        return all(slot in self.column_map for slot in GROUND_SLOTS)

    def __iter__(self):
        return iter(self.stations)

    def __len__(self) -> int:
        return len(self.stations)


def _field(fields: Sequence[str], index: Optional[int]) -> Optional[str]:
    if index is None or index >= len(fields):
        return None
    return fields[index]


def _read_ground(
    fields: Sequence[str],
    column_map: Dict[str, int],
    formation_level: float,
) -> Tuple[List[float], GroundSource]:
    """Pick the ground source for one row, in priority order."""
    if all(slot in column_map for slot in GROUND_SLOTS):
        values = [parse_number(_field(fields, column_map[slot])) for slot in GROUND_SLOTS]
        return values, GroundSource.EXPLICIT

    if GROUND_GENERIC in column_map:
        value = parse_number(_field(fields, column_map[GROUND_GENERIC]))
        return [value] * 4, GroundSource.GENERIC

    if (
        len(fields) >= 6
        and not math.isnan(parse_number(fields[2]))
        and not math.isnan(parse_number(fields[5]))
    ):
        return [parse_number(v) for v in fields[2:6]], GroundSource.POSITIONAL

    return [formation_level] * 4, GroundSource.FLAT


def parse_station_table(text: str) -> StationTable:
    """
    Parse delimited station text.

    The first non-blank line is the header. Data lines whose chainage or
    formation level cannot be read are dropped and their line numbers
    recorded in ``skipped_lines``.

    Args:
        text: Raw comma- or tab-delimited text

    Returns:
        StationTable

    Raises:
        EmptyInputError: If there is no header plus at least one data line
        MissingColumnError: If no chainage or formation level column is found
    """
    numbered = [
        (number, line)
        for number, line in enumerate(re.split(r"\r?\n", text or ""), start=1)
        if line.strip()
    ]
    if len(numbered) < 2:
        raise EmptyInputError(
            "Please enter data with a header row and at least one data row."
        )

    _, header_line = numbered[0]
    delimiter = detect_delimiter(header_line)
    headers = split_fields(header_line, delimiter)
    column_map = infer_columns(headers)

    if CHAINAGE not in column_map:
        raise MissingColumnError(CHAINAGE, "Missing 'Chainage' column.")
    if FORMATION_LEVEL not in column_map:
        raise MissingColumnError(FORMATION_LEVEL, "Missing 'Proposed_FRL' column.")

    stations: List[Station] = []
    skipped: List[int] = []

    for line_number, line in numbered[1:]:
        fields = split_fields(line, delimiter)
        if len(fields) < 2:
            continue

        chainage = _field(fields, column_map[CHAINAGE])
        chainage_m = chainage_to_meters(chainage)
        formation_level = parse_number(_field(fields, column_map[FORMATION_LEVEL]))

        if math.isnan(chainage_m) or math.isnan(formation_level):
            logger.debug("Skipping line %d: unreadable chainage or formation level", line_number)
            skipped.append(line_number)
            continue

        raw_ground, source = _read_ground(fields, column_map, formation_level)
        left_outer, left_median, right_median, right_outer = resolve_ground_values(
            formation_level, raw_ground
        )

        stations.append(Station(
            line_number=line_number,
            chainage=chainage,
            chainage_m=chainage_m,
            formation_level=formation_level,
            egl_left_outer=left_outer,
            egl_left_median=left_median,
            egl_right_median=right_median,
            egl_right_outer=right_outer,
            ground_source=source,
        ))

    if skipped:
        logger.info("Skipped %d line(s) with unreadable chainage or level", len(skipped))

    return StationTable(
        stations=stations,
        column_map=column_map,
        delimiter=delimiter,
        headers=headers,
        skipped_lines=skipped,
    )


class StationTableLoader:
    """
    Factory for loading station tables from text or files.

    Supported formats:
        - CSV (comma-delimited, .csv)
        - TSV / copy-paste from spreadsheets (tab-delimited, .tsv, .txt)
    """

    SUPPORTED_SUFFIXES = ('.csv', '.tsv', '.txt')

    @classmethod
    def load(cls, filepath: str | Path, encoding: str = "utf-8") -> StationTable:
        """
        Load a station table from file.

        Args:
            filepath: Path to a delimited text file
            encoding: Text encoding (a UTF-8 BOM is tolerated)

        Returns:
            StationTable
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()

        if suffix not in cls.SUPPORTED_SUFFIXES:
            raise ValueError(f"Unsupported format: {suffix}")

        text = filepath.read_text(encoding=encoding)
        return cls.from_text(text.lstrip("\ufeff"))

    @classmethod
    def from_text(cls, text: str) -> StationTable:
        return parse_station_table(text)


def generate_sample_table() -> str:
    """Five-station example data set (chainage 0+000 to 0+080)."""
    return SAMPLE_STATION_TABLE
