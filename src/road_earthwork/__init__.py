"""
Road Earthwork Cross-Section Calculator

A Python library for computing cut/fill areas and average-end-area
volumes of a road template along a chainage-ordered station table.
"""

__version__ = "0.1.0"

from .core.parameters import SectionParameters
from .core.section import SectionCalculator, SectionType, CrossSectionRow
from .core.volume import VolumeCalculator, EarthworkResult, compute_earthwork
from .io.station_table import StationTableLoader, parse_station_table
from .analysis.formation import RoadTemplate, formation_width_from_lanes

__all__ = [
    "SectionParameters",
    "SectionCalculator",
    "SectionType",
    "CrossSectionRow",
    "VolumeCalculator",
    "EarthworkResult",
    "compute_earthwork",
    "StationTableLoader",
    "parse_station_table",
    "RoadTemplate",
    "formation_width_from_lanes",
]
