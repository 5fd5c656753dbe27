"""Utility modules."""

from .geometry import SectionGeometry
from .visualization import plot_cross_section, plot_volume_profile, export_sections_pdf

__all__ = ["SectionGeometry", "plot_cross_section", "plot_volume_profile", "export_sections_pdf"]
