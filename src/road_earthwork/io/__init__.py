"""I/O modules for loading and saving data."""

from .station_table import StationTableLoader, StationTable, Station
from .exporters import (
    generate_csv,
    export_rows_csv,
    export_summary_json,
    export_sections_geojson,
    export_sections_dxf,
)

__all__ = [
    "StationTableLoader",
    "StationTable",
    "Station",
    "generate_csv",
    "export_rows_csv",
    "export_summary_json",
    "export_sections_geojson",
    "export_sections_dxf",
]
