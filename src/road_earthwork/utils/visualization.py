"""
Visualization Utilities

Plotting functions for cross-sections, volume profiles and section sheets.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple, TYPE_CHECKING
import numpy as np

try:
    import matplotlib.pyplot as plt
    from matplotlib.backends.backend_pdf import PdfPages
    HAS_MATPLOTLIB = True
except ImportError:
    HAS_MATPLOTLIB = False

from .geometry import SectionGeometry

if TYPE_CHECKING:
    from ..core.section import CrossSectionRow
    from ..core.volume import EarthworkResult


def require_matplotlib():
    if not HAS_MATPLOTLIB:
        raise ImportError("matplotlib is required. Install with: pip install matplotlib")


# Red = cut, blue = fill
CUT_COLOR = (0.8, 0.2, 0.2)
FILL_COLOR = (0.2, 0.2, 0.8)

# A4 landscape, inches
A4_LANDSCAPE = (11.69, 8.27)


def plot_cross_section(
    row: 'CrossSectionRow',
    ax: Optional[plt.Axes] = None,
    title: Optional[str] = None,
    num_points: int = 400,
    show_labels: bool = True,
    figsize: Tuple[int, int] = (12, 5),
) -> plt.Figure:
    """
    Plot one cross-section: design line, existing ground and shaded areas.

    Red = Cut (ground above the design line)
    Blue = Fill (design line above ground)

    Args:
        row: Computed cross-section row
        ax: Optional matplotlib axes (creates new figure if None)
        title: Plot title (defaults to the chainage)
        num_points: Samples between the toes used for shading
        show_labels: Annotate FRL, slopes and areas
        figsize: Figure size if creating new figure

    Returns:
        matplotlib Figure
    """
    require_matplotlib()

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    geometry = SectionGeometry.from_row(row)
    road_x, road_y = (np.asarray(c) for c in geometry.road.xy)
    ground_x, ground_y = (np.asarray(c) for c in geometry.ground.xy)

    # Shade between the toes
    offsets = np.linspace(geometry.toe_left.x, geometry.toe_right.x, num_points)
    road_z = np.interp(offsets, road_x, road_y)
    ground_z = np.interp(offsets, ground_x, ground_y)

    ax.fill_between(
        offsets, road_z, ground_z,
        where=ground_z > road_z,
        interpolate=True,
        alpha=0.5,
        color=CUT_COLOR,
        label='Cut',
    )
    ax.fill_between(
        offsets, road_z, ground_z,
        where=road_z > ground_z,
        interpolate=True,
        alpha=0.5,
        color=FILL_COLOR,
        label='Fill',
    )

    ax.plot(ground_x, ground_y, color='green', linestyle='-.', linewidth=1.5, label='Existing Ground')
    ax.plot(road_x, road_y, 'k-', linewidth=2, label='Design')
    ax.axvline(0.0, color='grey', linewidth=0.8, linestyle=':')

    if show_labels:
        ax.annotate(
            f"FRL {row.formation_level:.3f}",
            xy=(geometry.crown.x, geometry.crown.y),
            xytext=(0, 8),
            textcoords='offset points',
            ha='center',
            fontsize=8,
        )
        for side, ratio in (("left", row.slope_left), ("right", row.slope_right)):
            x, y = geometry.slope_label_anchor(side)
            ax.annotate(f"1:{ratio:g}", xy=(x, y), ha='center', fontsize=8)

        area_text = (
            f"Type: {row.section_type.value}\n"
            f"Cut:  {row.area_cut:.2f} m2\n"
            f"Fill: {row.area_fill:.2f} m2"
        )
        ax.text(
            0.02, 0.98, area_text,
            transform=ax.transAxes,
            verticalalignment='top',
            fontfamily='monospace',
            fontsize=9,
            bbox=dict(boxstyle='round', facecolor='white', alpha=0.8),
        )

    min_x, min_y, max_x, max_y = geometry.bounds
    padding = max((max_y - min_y) * 0.2, 1.0)
    ax.set_xlim(min_x, max_x)
    ax.set_ylim(min_y - padding, max_y + padding)

    ax.set_xlabel('Offset from centerline (m)')
    ax.set_ylabel('Elevation (m)')
    ax.set_title(f"Cross Section @ Ch: {row.chainage}" if title is None else title)
    ax.legend(loc='upper right')
    ax.grid(True, alpha=0.3)

    return fig


def plot_volume_profile(
    result: 'EarthworkResult',
    ax: Optional[plt.Axes] = None,
    title: str = "Earthwork Profile",
    figsize: Tuple[int, int] = (12, 5),
) -> plt.Figure:
    """
    Plot cut and fill areas per station with cumulative net volume.

    Args:
        result: EarthworkResult
        ax: Optional axes
        title: Plot title
        figsize: Figure size

    Returns:
        matplotlib Figure
    """
    require_matplotlib()

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    chainages = np.array([row.chainage_m for row in result.rows], dtype=np.float64)
    cut = np.array([row.area_cut for row in result.rows], dtype=np.float64)
    fill = np.array([row.area_fill for row in result.rows], dtype=np.float64)

    ax.plot(chainages, cut, color=CUT_COLOR, marker='o', label='Cut area')
    ax.plot(chainages, -fill, color=FILL_COLOR, marker='o', label='Fill area')
    ax.axhline(0.0, color='black', linewidth=0.8)
    ax.set_xlabel('Chainage (m)')
    ax.set_ylabel('Cut (+) / Fill (-) Area (m2)')
    ax.set_title(title)
    ax.grid(True, alpha=0.3)

    # Cumulative net volume, plotted at the end of each segment
    net = [0.0]
    for row in result.rows[:-1]:
        volume = row.segment_volume or 0.0
        cut_volume, fill_volume = _split(row, volume)
        net.append(net[-1] + cut_volume - fill_volume)

    ax2 = ax.twinx()
    ax2.plot(chainages, net, 'k--', linewidth=1.5, label='Cumulative net')
    ax2.set_ylabel('Cumulative Net Volume (m3)')

    lines, labels = ax.get_legend_handles_labels()
    lines2, labels2 = ax2.get_legend_handles_labels()
    ax.legend(lines + lines2, labels + labels2, loc='upper left')

    return fig


def _split(row: 'CrossSectionRow', volume: float) -> Tuple[float, float]:
    from ..core.volume import VolumeCalculator
    return VolumeCalculator.split_volume(row, volume)


def create_report_figure(
    result: 'EarthworkResult',
    row_index: int = 0,
) -> plt.Figure:
    """
    Create a report figure with a section, the profile and the summary.

    Args:
        result: EarthworkResult
        row_index: Row drawn in the cross-section panel

    Returns:
        matplotlib Figure with 3 panels
    """
    require_matplotlib()

    fig = plt.figure(figsize=(16, 12))

    ax1 = fig.add_subplot(221)
    if result.rows:
        plot_cross_section(result.rows[row_index], ax=ax1)
    else:
        ax1.axis('off')

    ax2 = fig.add_subplot(222)
    if result.rows:
        plot_volume_profile(result, ax=ax2)
    else:
        ax2.axis('off')

    ax3 = fig.add_subplot(212)
    ax3.axis('off')
    ax3.text(
        0.1, 0.95, result.summary_text(),
        transform=ax3.transAxes,
        verticalalignment='top',
        fontfamily='monospace',
        fontsize=10,
    )

    plt.tight_layout()
    return fig


def save_report(
    figure: plt.Figure,
    filepath: str | Path,
    dpi: int = 150,
) -> None:
    """Save report figure to file."""
    figure.savefig(filepath, dpi=dpi, bbox_inches='tight')


def export_sections_pdf(
    result: 'EarthworkResult',
    filepath: str | Path,
    row_index: Optional[int] = None,
) -> int:
    """
    Write one A4 landscape page per cross-section.

    Args:
        result: EarthworkResult
        filepath: Output PDF path
        row_index: Export only this row (default: all rows)

    Returns:
        Number of pages written
    """
    require_matplotlib()

    rows = result.rows if row_index is None else [result.rows[row_index]]

    with PdfPages(str(filepath)) as pdf:
        for page, row in enumerate(rows, start=1):
            fig = plt.figure(figsize=A4_LANDSCAPE)
            fig.suptitle(f"Cross Section @ Ch: {row.chainage}", fontsize=16, fontweight='bold')

            ax = fig.add_axes([0.07, 0.14, 0.88, 0.74])
            plot_cross_section(row, ax=ax, title="")

            fig.text(
                0.5, 0.03,
                f"Formation {row.formation_width:g} m | Median {row.median_width:g} m | "
                f"Slopes 1:{row.slope_left:g} / 1:{row.slope_right:g}    "
                f"Page {page} of {len(rows)}",
                ha='center',
                fontsize=8,
                color='grey',
            )

            pdf.savefig(fig)
            plt.close(fig)

    return len(rows)
