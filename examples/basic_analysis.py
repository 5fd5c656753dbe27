"""
Basic Earthwork Calculation Example

This example demonstrates:
1. Parsing a station table
2. Computing cross-sections with the default road template
3. Comparing a narrower template with a fixed station spacing
4. Exporting CSV and DXF, and plotting sections

Run from the project root:
    python examples/basic_analysis.py
"""

import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from road_earthwork.io.station_table import StationTableLoader, generate_sample_table
from road_earthwork.core.parameters import SectionParameters
from road_earthwork.core.section import SectionType
from road_earthwork.core.volume import calculate_table
from road_earthwork.analysis.formation import formation_width_from_lanes


def main():
    print("=" * 60)
    print("ROAD EARTHWORK CALCULATION - EXAMPLE")
    print("=" * 60)

    # =========================================================================
    # Step 1: Parse the station table
    # =========================================================================
    print("\n[1] Parsing sample station table...")

    # Replace with StationTableLoader.load("stations.csv") for real data
    table = StationTableLoader.from_text(generate_sample_table())

    print(f"   Stations: {table.num_stations}")
    print(f"   Chainage: {table.stations[0].chainage} to {table.stations[-1].chainage}")
    print(f"   Explicit ground columns: {table.has_explicit_ground}")

    # =========================================================================
    # Step 2: Default template (20 m formation, 1:1 cut, 1:2 fill)
    # =========================================================================
    print("\n[2] Computing with the default template...")

    result = calculate_table(table, SectionParameters())

    for row in result.rows:
        print(
            f"   {row.chainage:>7}  {row.section_type.value:<5}  "
            f"cut {row.area_cut:8.3f} m2  fill {row.area_fill:8.3f} m2  "
            f"toe-toe {row.bottom_width:7.3f} m"
        )

    print("\n" + result.summary_text())

    # =========================================================================
    # Step 3: Narrower template from the lane build-up
    # =========================================================================
    print("\n[3] Two-lane divided road, fixed 20 m spacing...")

    width = formation_width_from_lanes(
        lanes_per_side=1,
        lane_width=3.5,
        shoulder_width=1.0,
        median_width=2.0,
    )
    narrow = calculate_table(
        table,
        SectionParameters(formation_width=width, median_width=2.0, spacing=20.0),
    )

    print(f"   Formation width: {width:.2f} m")
    print(f"   Cut sections:  {len(narrow.rows_of_type(SectionType.CUT))}")
    print(f"   Fill sections: {len(narrow.rows_of_type(SectionType.FILL))}")
    print(f"   Net volume:    {narrow.summary.net:,.3f} m3")

    saved = result.summary.total_fill - narrow.summary.total_fill
    print(f"   Fill saved vs default: {saved:,.3f} m3")

    # =========================================================================
    # Step 4: Exports and plots
    # =========================================================================
    print("\n[4] Exporting...")

    from road_earthwork.io.exporters import export_rows_csv

    output_dir = Path(__file__).parent
    export_rows_csv(result, output_dir / "sections.csv")
    print(f"   CSV saved to: {output_dir / 'sections.csv'}")

    try:
        from road_earthwork.io.exporters import export_sections_dxf
        export_sections_dxf(result, output_dir / "sections.dxf")
        print(f"   DXF saved to: {output_dir / 'sections.dxf'}")
    except ImportError:
        print("   (ezdxf not available - skipping DXF)")

    try:
        from road_earthwork.utils.visualization import create_report_figure
        import matplotlib.pyplot as plt

        fig = create_report_figure(result, row_index=3)
        output_path = output_dir / "earthwork_report.png"
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        print(f"   Report saved to: {output_path}")

        plt.show()

    except ImportError:
        print("   (matplotlib not available - skipping visualization)")

    print("\n" + "=" * 60)
    print("Calculation complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
