"""Command-line interface for PaletteGen."""

import json
import logging
import sys
from pathlib import Path

import click
import rich.traceback
from rich.console import Console
from rich.table import Table

from . import __version__
from .core.extractor import Palette, PaletteExtractor
from .image.sampler import DecodeError, load_image
from .output.exporter import SUPPORTED_FORMATS, PaletteExporter
from .utils.config import ConfigManager
from .utils.logging import setup_logging

# Rich console setup
console = Console()
rich.traceback.install(console=console)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--quiet", "-q", is_flag=True, help="Suppress output")
@click.option(
    "--config", type=click.Path(exists=True), help="Path to configuration file"
)
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool, config):
    """PaletteGen: extract perceptually diverse color palettes from images."""
    ctx.ensure_object(dict)

    setup_logging(verbose=verbose, quiet=quiet)

    try:
        ctx.obj["config_manager"] = ConfigManager.from_env(config)
    except ValueError as e:
        raise click.ClickException(str(e))

    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


def _print_palette(palette: Palette) -> None:
    if palette.opaque_pixels == 0:
        click.echo("No opaque pixels found, palette is empty")
        return
    if palette.is_empty:
        click.echo("No colors extracted")
        return

    table = Table(title=f"Palette ({len(palette)} colors)")
    table.add_column("#", justify="right")
    table.add_column("Swatch")
    table.add_column("Hex")
    table.add_column("RGB")
    table.add_column("Score", justify="right")

    for index, color in enumerate(palette, start=1):
        table.add_row(
            str(index),
            f"[on {color.hex}]      [/]",
            color.hex,
            color.rgb,
            f"{color.bucket.final_score:.4f}",
        )

    console.print(table)


@cli.command()
@click.argument("input_image", type=click.Path(exists=True))
@click.option("--count", "-n", type=int, help="Number of colors to extract")
@click.option(
    "--profile",
    type=click.Choice(["fast", "balanced", "detailed", "vibrant"]),
    help="Apply a predefined extraction profile",
)
@click.option(
    "--max-dimension", type=int, help="Largest working width/height in pixels"
)
@click.option("--output", "-o", type=click.Path(), help="Output directory for exports")
@click.option(
    "--export-format",
    type=str,
    help=f"Export formats to generate (comma-separated): {', '.join(SUPPORTED_FORMATS)}",
)
@click.option("--project-name", help="Base name for generated files")
@click.option("--preview", is_flag=True, help="Save a palette preview image")
@click.option(
    "--json", "as_json", is_flag=True, help="Print the palette JSON to stdout"
)
@click.pass_context
def extract(
    ctx,
    input_image,
    count,
    profile,
    max_dimension,
    output,
    export_format,
    project_name,
    preview,
    as_json,
):
    """Extract a color palette from an image."""
    logger = logging.getLogger(__name__)
    config_manager: ConfigManager = ctx.obj["config_manager"]

    try:
        if profile:
            config_manager.apply_profile(profile)
        if count is not None:
            config_manager.set("extraction.palette_size", count)
        if max_dimension is not None:
            config_manager.set("extraction.max_dimension", max_dimension)

        export_formats = config_manager.get("export.default_formats", ["json"])
        if export_format:
            export_formats = [fmt.strip() for fmt in export_format.split(",") if fmt.strip()]
        invalid_formats = [fmt for fmt in export_formats if fmt not in SUPPORTED_FORMATS]
        if invalid_formats:
            raise click.ClickException(
                f"Invalid export format(s): {', '.join(invalid_formats)}. "
                f"Valid formats: {', '.join(SUPPORTED_FORMATS)}"
            )

        project_name = project_name or config_manager.get("export.project_name", "palette")
        preview = preview or config_manager.get("export.generate_preview", False)

        logger.info(f"Extracting palette from {input_image}")
        image = load_image(input_image)

        extractor = PaletteExtractor(config_manager.get_extraction_config())
        palette = extractor.extract(image)

        exporter = PaletteExporter()
        if as_json:
            click.echo(json.dumps(exporter.to_json_dict(palette), indent=2))
        elif not ctx.obj["quiet"]:
            _print_palette(palette)

        if output:
            output_path = Path(output)
            generated = exporter.export(palette, output_path, export_formats, project_name)

            if preview:
                from .utils.visualization import Visualizer

                preview_path = output_path / f"{project_name}_preview.png"
                Visualizer().plot_palette(palette, image=image, save_path=str(preview_path))
                generated["preview"] = str(preview_path)

            for file_type, file_path in generated.items():
                logger.info(f"  {file_type}: {Path(file_path).name}")

    except click.ClickException:
        raise
    except DecodeError as e:
        logger.error(f"Could not read image: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.error(f"An error occurred: {e}", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="./palettegen_config.yaml",
    help="Output configuration file path (.yaml or .json)",
)
@click.option(
    "--profile",
    type=click.Choice(["fast", "balanced", "detailed", "vibrant"]),
    help="Base the file on a predefined profile",
)
def init_config(output, profile):
    """Initialize a default configuration file."""
    logger = logging.getLogger(__name__)
    try:
        config_manager = ConfigManager()
        if profile:
            config_manager.apply_profile(profile)
        config_manager.save_config(output)

        click.echo(f"Configuration created at: {output}")
        logger.info(f"Initialized config file at {output} (profile={profile})")

    except Exception as e:
        logger.error(f"Error initializing config: {e}", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
def version():
    """Display PaletteGen version."""
    click.echo(f"PaletteGen Version: {__version__}")


def main():
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
