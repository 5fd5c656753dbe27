"""
Export utilities for earthwork results.

Provides the CSV re-serialization, a JSON summary, GeoJSON section lines
and DXF cross-section drawings. Exporters only read row fields; they never
alter area or volume figures.
"""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from ..core.section import CrossSectionRow
    from ..core.volume import EarthworkResult

CSV_HEADER = [
    'Chainage', 'Proposed_FRL', 'EGL_15m_L', 'EGL_Med_L', 'EGL_Med_R', 'EGL_15m_R',
    'Type', 'Width_Formation', 'Width_ToeToToe', 'Area_Cut_m2', 'Area_Fill_m2',
    'Spacing_m', 'Vol_m3',
]

# DXF layer name -> (ACI color, linetype)
DXF_LAYERS = {
    "CS_ROAD": (4, "Continuous"),
    "CS_EGL": (3, "DASHDOT"),
    "CS_TEXT": (2, "Continuous"),
}

# Vertical distance between stacked sections in model space
DXF_SECTION_SPACING = 30.0


def _fmt3(value: Optional[float]) -> str:
    return "" if value is None else f"{value:.3f}"


def generate_csv(result: 'EarthworkResult') -> str:
    """
    Serialize rows and totals as CSV text.

    Numeric fields carry exactly 3 decimals. Spacing and volume are empty
    on the last row. Totals follow a blank line as
    ``TotalCut_m3``, ``TotalFill_m3`` and ``Net_m3`` rows.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(CSV_HEADER)
    for row in result.rows:
        writer.writerow([
            row.chainage,
            _fmt3(row.formation_level),
            _fmt3(row.egl_left_outer),
            _fmt3(row.egl_left_median),
            _fmt3(row.egl_right_median),
            _fmt3(row.egl_right_outer),
            row.section_type.value,
            _fmt3(row.formation_width),
            _fmt3(row.bottom_width),
            _fmt3(row.area_cut),
            _fmt3(row.area_fill),
            _fmt3(row.spacing),
            _fmt3(row.segment_volume),
        ])

    writer.writerow([])
    writer.writerow(['TotalCut_m3', _fmt3(result.summary.total_cut)])
    writer.writerow(['TotalFill_m3', _fmt3(result.summary.total_fill)])
    writer.writerow(['Net_m3', _fmt3(result.summary.net)])

    return buffer.getvalue()


def export_rows_csv(result: 'EarthworkResult', filepath: str | Path) -> None:
    """
    Export section rows and totals to CSV.

    Args:
        result: EarthworkResult from compute_earthwork
        filepath: Output CSV file path
    """
    with open(Path(filepath), 'w', newline='', encoding='utf-8') as f:
        f.write(generate_csv(result))


def export_summary_json(
    result: 'EarthworkResult',
    filepath: str | Path,
    include_rows: bool = False,
    indent: int = 2,
) -> None:
    """
    Export earthwork summary to JSON.

    Args:
        result: EarthworkResult from compute_earthwork
        filepath: Output JSON file path
        include_rows: Include every section row
        indent: JSON indentation level (default: 2)
    """
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(include_rows=include_rows), f, indent=indent)


def _row_properties(row: 'CrossSectionRow') -> Dict[str, Any]:
    return {
        "chainage": row.chainage,
        "chainage_m": row.chainage_m,
        "type": row.section_type.value,
        "formation_level": row.formation_level,
        "area_cut": row.area_cut,
        "area_fill": row.area_fill,
        "area": row.area,
        "toe_distance_left": row.toe_distance_left,
        "toe_distance_right": row.toe_distance_right,
        "segment_volume": row.segment_volume,
    }


def export_sections_geojson(result: 'EarthworkResult', filepath: str | Path) -> None:
    """
    Export section lines as GeoJSON.

    Coordinates are local (offset, elevation) pairs, one feature per row
    and role ("road" or "ground"). There is no CRS.

    Args:
        result: EarthworkResult from compute_earthwork
        filepath: Output GeoJSON file path
    """
    from shapely.geometry import mapping
    from ..utils.geometry import SectionGeometry

    features: List[Dict[str, Any]] = []

    for row in result.rows:
        geometry = SectionGeometry.from_row(row)
        for role, line in (("road", geometry.road), ("ground", geometry.ground)):
            properties = _row_properties(row)
            properties["role"] = role
            features.append({
                "type": "Feature",
                "geometry": mapping(line),
                "properties": properties,
            })

    geojson = {
        "type": "FeatureCollection",
        "features": features,
        "properties": result.summary.to_dict(),
    }

    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(geojson, f, indent=2)


def build_sections_dxf(result: 'EarthworkResult', row_index: Optional[int] = None):
    """
    Build a DXF drawing of the cross-sections.

    Sections are drawn at true elevation with local offsets, stacked
    DXF_SECTION_SPACING units apart. Requires ezdxf.

    Args:
        result: EarthworkResult from compute_earthwork
        row_index: Draw only this row (default: all rows)

    Returns:
        ezdxf Drawing
    """
    try:
        import ezdxf
        from ezdxf.enums import TextEntityAlignment
    except ImportError:
        raise ImportError(
            "ezdxf required for DXF export. "
            "Install with: pip install ezdxf"
        )

    from ..utils.geometry import SectionGeometry

    doc = ezdxf.new(dxfversion="R2010", setup=True)
    for name, (color, linetype) in DXF_LAYERS.items():
        doc.layers.add(name=name, color=color, linetype=linetype)
    msp = doc.modelspace()

    rows = result.rows if row_index is None else [result.rows[row_index]]

    def line(a, b, layer, dy):
        msp.add_line((a[0], a[1] + dy), (b[0], b[1] + dy), dxfattribs={"layer": layer})

    def text(value, x, y, height):
        label = msp.add_text(value, height=height, dxfattribs={"layer": "CS_TEXT"})
        label.set_placement((x, y), align=TextEntityAlignment.CENTER)

    for i, row in enumerate(rows):
        dy = i * DXF_SECTION_SPACING
        geometry = SectionGeometry.from_row(row)
        frl = row.formation_level

        # Centerline tick
        line((0, frl - 5), (0, frl + 5), "CS_TEXT", dy)

        road = list(geometry.road.coords)
        for a, b in zip(road, road[1:]):
            line(a, b, "CS_ROAD", dy)

        # Formation edge markers
        for edge in (geometry.edge_left, geometry.edge_right):
            line((edge.x, edge.y), (edge.x, edge.y - 1), "CS_TEXT", dy)

        msp.add_lwpolyline(
            [(x, y + dy) for x, y in geometry.ground.coords],
            dxfattribs={"layer": "CS_EGL"},
        )

        text(f"CH: {row.chainage}", 0, dy + frl + 4, 1.5)
        text(f"FRL: {frl:.3f}", 0, dy + frl + 0.5, 0.5)
        text(f"Cut: {row.area_cut:.2f}m2", 0, dy + frl - 3, 0.8)
        text(f"Fill: {row.area_fill:.2f}m2", 0, dy + frl - 4.2, 0.8)

        for side, ratio in (("left", row.slope_left), ("right", row.slope_right)):
            x, y = geometry.slope_label_anchor(side)
            text(f"1:{ratio:g}", x, dy + y + 0.5, 0.4)

        # Datum line 10 m below formation level
        line((-15, frl - 10), (15, frl - 10), "CS_TEXT", dy)
        text(f"Datum: {frl - 10:.0f}", 0, dy + frl - 11, 0.5)

    return doc


def export_sections_dxf(
    result: 'EarthworkResult',
    filepath: str | Path,
    row_index: Optional[int] = None,
) -> None:
    """
    Export cross-section drawings to DXF.

    Args:
        result: EarthworkResult from compute_earthwork
        filepath: Output DXF file path
        row_index: Export only this row (default: all rows)
    """
    doc = build_sections_dxf(result, row_index=row_index)
    doc.saveas(str(filepath))
