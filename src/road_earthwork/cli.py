"""
Command Line Interface for Road Earthwork Calculation

Usage:
    road-earthwork compute <input> [--formation-width B] [--camber C] ...
    road-earthwork info <input>
    road-earthwork template --output <file>
    road-earthwork width --lanes N --lane-width W --shoulder S --median-width M
"""

import json
import logging
import sys
from typing import Optional

import click

from .io.station_table import StationTableLoader, generate_sample_table
from .core.parameters import SectionParameters
from .core.validation import ValidationError
from .core.volume import calculate_table, EarthworkResult
from .analysis.formation import formation_width_from_lanes


def _echo_rows(result: EarthworkResult) -> None:
    header = (
        f"{'Chainage':>10} {'FRL':>9} {'Type':>6} {'Toe-Toe':>8} "
        f"{'Cut m2':>9} {'Fill m2':>9} {'Vol m3':>11}"
    )
    click.echo(header)
    click.echo("-" * len(header))
    for row in result.rows:
        volume = "" if row.segment_volume is None else f"{row.segment_volume:,.3f}"
        click.echo(
            f"{row.chainage:>10} {row.formation_level:>9.3f} {row.section_type.value:>6} "
            f"{row.bottom_width:>8.3f} {row.area_cut:>9.3f} {row.area_fill:>9.3f} {volume:>11}"
        )


@click.group()
@click.version_option(version="0.1.0")
def main():
    """Road Earthwork Cross-Section Calculator

    Compute cut/fill areas and volumes of a road cross-section
    template along a chainage-ordered station table.
    """
    pass


@main.command()
@click.argument('input_file', type=click.Path(exists=True))
@click.option('--formation-width', '-b', default=20.0, show_default=True,
              help='Formation (carriageway) width B in meters')
@click.option('--median-width', default=4.0, show_default=True,
              help='Median width in meters (ground sampled at +/- median/2)')
@click.option('--camber', default=2.5, show_default=True, help='Camber in percent')
@click.option('--cut-slope', default=1.0, show_default=True, help='Cut slope 1:M (M horizontal)')
@click.option('--fill-slope', default=2.0, show_default=True, help='Fill slope 1:M (M horizontal)')
@click.option('--spacing', type=float, default=None,
              help='Fixed station spacing; default uses chainage differences')
@click.option('--output', '-o', type=click.Path(), help='Output JSON file for results')
@click.option('--export-csv', type=click.Path(), help='Export section rows and totals to CSV')
@click.option('--export-dxf', type=click.Path(), help='Export cross-section drawings to DXF')
@click.option('--export-geojson', type=click.Path(), help='Export section lines to GeoJSON')
@click.option('--report', type=click.Path(),
              help='Save report (.pdf = one page per section, otherwise a summary image)')
@click.option('--plot', is_flag=True, help='Show visualization plots')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def compute(
    input_file: str,
    formation_width: float,
    median_width: float,
    camber: float,
    cut_slope: float,
    fill_slope: float,
    spacing: Optional[float],
    output: Optional[str],
    export_csv: Optional[str],
    export_dxf: Optional[str],
    export_geojson: Optional[str],
    report: Optional[str],
    plot: bool,
    verbose: bool,
):
    """Compute cross-section areas and earthwork volumes.

    INPUT_FILE is a comma- or tab-delimited station table with a header
    row naming at least the chainage and proposed FRL columns.

    Examples:

        # Default 20 m formation, 1:1 cut, 1:2 fill
        road-earthwork compute stations.csv

        # Narrower road, fixed 25 m spacing, CSV and DXF output
        road-earthwork compute stations.csv -b 14 --spacing 25 \\
            --export-csv sections.csv --export-dxf sections.dxf
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    click.echo(f"Loading station table: {input_file}")
    try:
        table = StationTableLoader.load(input_file)
        click.echo(f"  Loaded {table.num_stations:,} station(s)")
    except Exception as e:
        click.echo(f"Error loading file: {e}", err=True)
        sys.exit(1)

    parameters = SectionParameters(
        formation_width=formation_width,
        median_width=median_width,
        camber=camber,
        cut_slope=cut_slope,
        fill_slope=fill_slope,
        spacing=spacing,
    )

    try:
        result = calculate_table(table, parameters)
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    # Display results
    click.echo("")
    _echo_rows(result)
    click.echo("\n" + result.summary_text())

    if result.skipped_lines:
        click.echo(f"{len(result.skipped_lines)} line(s) skipped", err=True)

    from .core.validation import validate_output_path

    # Save JSON output
    if output:
        try:
            output_path = validate_output_path(output, "output JSON file")
            with open(output_path, 'w') as f:
                json.dump(result.to_dict(), f, indent=2)
            click.echo(f"\nResults saved to: {output}")
        except Exception as e:
            click.echo(f"Error saving output: {e}", err=True)
            sys.exit(1)

    if export_csv:
        try:
            from .io.exporters import export_rows_csv
            csv_path = validate_output_path(export_csv, "CSV output")
            export_rows_csv(result, csv_path)
            click.echo(f"Section rows exported to: {export_csv}")
        except Exception as e:
            click.echo(f"Error exporting CSV: {e}", err=True)
            sys.exit(1)

    if export_dxf:
        try:
            from .io.exporters import export_sections_dxf
            dxf_path = validate_output_path(export_dxf, "DXF output")
            export_sections_dxf(result, dxf_path)
            click.echo(f"Cross-sections exported to: {export_dxf}")
        except Exception as e:
            click.echo(f"Error exporting DXF: {e}", err=True)
            sys.exit(1)

    if export_geojson:
        try:
            from .io.exporters import export_sections_geojson
            geojson_path = validate_output_path(export_geojson, "GeoJSON output")
            export_sections_geojson(result, geojson_path)
            click.echo(f"Section lines exported to: {export_geojson}")
        except Exception as e:
            click.echo(f"Error exporting GeoJSON: {e}", err=True)
            sys.exit(1)

    # Show plots
    if plot or report:
        try:
            from .utils.visualization import (
                create_report_figure,
                export_sections_pdf,
                save_report,
            )
            import matplotlib.pyplot as plt

            if report:
                report_path = validate_output_path(report, "report")
                if report_path.suffix.lower() == '.pdf':
                    pages = export_sections_pdf(result, report_path)
                    click.echo(f"Report saved to: {report} ({pages} page(s))")
                else:
                    fig = create_report_figure(result)
                    save_report(fig, report_path)
                    click.echo(f"Report saved to: {report}")

            if plot:
                create_report_figure(result)
                plt.show()

        except ImportError:
            click.echo("Warning: matplotlib required for plotting", err=True)
        except ValidationError as e:
            click.echo(f"Error saving report: {e}", err=True)
            sys.exit(1)


@main.command()
@click.argument('input_file', type=click.Path(exists=True))
def info(input_file: str):
    """Display how a station table is read, without computing areas."""
    click.echo(f"Loading: {input_file}")

    try:
        table = StationTableLoader.load(input_file)
    except Exception as e:
        click.echo(f"Error loading file: {e}", err=True)
        sys.exit(1)

    delimiter = "tab" if table.delimiter == "\t" else "comma"

    click.echo("\n" + "=" * 50)
    click.echo("STATION TABLE INFO")
    click.echo("=" * 50)
    click.echo(f"File:           {input_file}")
    click.echo(f"Delimiter:      {delimiter}")
    click.echo(f"Stations:       {table.num_stations:,}")
    click.echo(f"")
    click.echo(f"Columns:")
    for slot, index in sorted(table.column_map.items(), key=lambda item: item[1]):
        click.echo(f"  {slot:<16}{table.headers[index]} (column {index + 1})")

    if table.stations:
        first, last = table.stations[0], table.stations[-1]
        click.echo(f"")
        click.echo(f"Chainage:       {first.chainage} to {last.chainage}")

        sources = {}
        for station in table:
            sources[station.ground_source.value] = sources.get(station.ground_source.value, 0) + 1
        click.echo(f"Ground source:")
        for name, count in sources.items():
            click.echo(f"  {name}: {count:,}")

    if table.skipped_lines:
        click.echo(f"")
        click.echo(f"Skipped lines:  {', '.join(str(n) for n in table.skipped_lines)}")

    click.echo("=" * 50)


@main.command()
@click.option('--output', '-o', required=True, type=click.Path(),
              help='Output file path (.csv or .txt)')
def template(output: str):
    """Write a sample station table to start from.

    Example:
        road-earthwork template -o stations.csv
    """
    from .core.validation import validate_output_path

    try:
        output_path = validate_output_path(output, "station table template")
        output_path.write_text(generate_sample_table(), encoding="utf-8")
        click.echo(f"Saved to: {output}")
    except Exception as e:
        click.echo(f"Error saving template: {e}", err=True)
        sys.exit(1)


@main.command()
@click.option('--lanes', default=2, show_default=True, help='Lanes per direction')
@click.option('--lane-width', default=3.5, show_default=True, help='Width of one lane')
@click.option('--shoulder', default=1.5, show_default=True, help='Shoulder width per side')
@click.option('--median-width', default=4.0, show_default=True, help='Total median width')
def width(lanes: int, lane_width: float, shoulder: float, median_width: float):
    """Compute formation width from the lane build-up.

    Width = lanes x lane width x 2 + median + 2 x shoulder

    Example:
        road-earthwork width --lanes 2 --lane-width 3.5 --shoulder 1.5 --median-width 4
    """
    total = formation_width_from_lanes(lanes, lane_width, shoulder, median_width)
    click.echo(f"Formation width: {total:.2f} m")


if __name__ == '__main__':
    main()
