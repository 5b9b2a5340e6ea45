"""
Command-line interface for loopmesh.

Provides commands for:
- subdivide: Apply one step of Loop subdivision to a mesh file
- info: Show counts, boundary status and quality of a mesh file
"""

import logging
import sys
from pathlib import Path

import click

from loopcore.display import RefinementDisplay
from loopmesh import __version__
from loopmesh.errors import MeshTopologyError
from loopmesh.io import load_mesh, save_mesh
from loopmesh.quality import MeshQuality
from loopmesh.refine import LoopSubdivider, Stage

STATS_HEADERS = ["Stage", "Vertices", "Edges", "Faces"]
STATS_WIDTHS = [16, 10, 10, 10]


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )


def _log_counts(display, label, mesh):
    display.log_stats(label, mesh.n_vertices, mesh.n_edges, mesh.n_faces)


@click.group()
@click.version_option(version=__version__, prog_name="loopmesh")
def main():
    """
    loopmesh - One-step Loop subdivision of triangle meshes.

    Use 'loopmesh COMMAND --help' for more information on each command.
    """
    pass


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("output_path", type=click.Path(dir_okay=False))
@click.option("--quality", "-q", is_flag=True, help="Print quality reports before and after")
@click.option("--overwrite", is_flag=True, help="Overwrite existing output files")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def subdivide(input_path: str, output_path: str, quality: bool, overwrite: bool,
              verbose: bool):
    """
    Refine INPUT_PATH by one Loop subdivision step and write OUTPUT_PATH.

    Example:
        loopmesh subdivide model.obj model_loop.obj
    """
    setup_logging(verbose)
    logger = logging.getLogger(__name__)

    output_path = Path(output_path)
    if output_path.exists() and not overwrite:
        click.echo(f"Error: Output file exists: {output_path}")
        click.echo("Use --overwrite to replace it.")
        sys.exit(1)

    try:
        mesh = load_mesh(input_path)
    except (OSError, ValueError) as e:
        click.echo(f"Error: Could not load {input_path}: {e}")
        sys.exit(1)

    display = RefinementDisplay("Loop Subdivision",
                                f"{Path(input_path).name} | {mesh.n_faces} faces")
    display.header()

    if quality:
        display.section("Input Quality")
        MeshQuality(mesh).print_report()
        print("")

    display.section("Refinement")
    display.setup_stats_columns(STATS_HEADERS, STATS_WIDTHS)
    _log_counts(display, Stage.INITIAL.name, mesh)

    subdivider = LoopSubdivider(mesh)
    try:
        subdivider.compute_even()
        subdivider.compute_odd()
        subdivider.commit()
        subdivider.split()
        _log_counts(display, Stage.SPLIT.name, mesh)
        subdivider.flip()
        subdivider.finish()
    except MeshTopologyError as e:
        display.error(str(e))
        logger.debug("Refinement aborted at stage %s", subdivider.stage.name)
        sys.exit(1)
    _log_counts(display, Stage.DONE.name, mesh)
    print("")

    if quality:
        display.section("Output Quality")
        MeshQuality(mesh).print_report()
        print("")

    try:
        save_mesh(mesh, output_path)
    except (OSError, ValueError) as e:
        display.error(f"Could not save {output_path}: {e}")
        sys.exit(1)

    display.success(f"Saved {output_path}")


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--plot", "plot_path", type=click.Path(dir_okay=False),
              help="Save quality histograms to this image file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def info(input_path: str, plot_path, verbose: bool):
    """
    Show statistics for a mesh file.

    Example:
        loopmesh info model.obj
    """
    setup_logging(verbose)

    try:
        mesh = load_mesh(input_path)
    except (OSError, ValueError) as e:
        click.echo(f"Error: Could not load {input_path}: {e}")
        sys.exit(1)

    click.echo(f"Vertices:       {mesh.n_vertices}")
    click.echo(f"Edges:          {mesh.n_edges}")
    click.echo(f"Faces:          {mesh.n_faces}")
    click.echo(f"Boundary edges: {mesh.n_boundary_edges}")
    click.echo(f"Closed:         {'yes' if mesh.is_closed else 'no'}")
    click.echo(f"Euler char.:    {mesh.euler_characteristic}")
    click.echo("")

    inspector = MeshQuality(mesh)
    inspector.print_report()

    if plot_path:
        fig = inspector.plot_histograms()
        fig.savefig(plot_path)
        click.echo(f"\nHistograms written to {plot_path}")


if __name__ == "__main__":
    main()
