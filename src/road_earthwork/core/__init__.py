"""Core data structures and algorithms."""

from .ground import GroundProfile, ProfilePoint
from .parameters import SectionParameters
from .section import SectionCalculator, SectionType, CrossSectionRow
from .volume import VolumeCalculator, EarthworkResult, compute_earthwork

__all__ = [
    "GroundProfile",
    "ProfilePoint",
    "SectionParameters",
    "SectionCalculator",
    "SectionType",
    "CrossSectionRow",
    "VolumeCalculator",
    "EarthworkResult",
    "compute_earthwork",
]
