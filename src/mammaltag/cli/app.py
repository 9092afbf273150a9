"""CLI application entry point for mammaltag.

This module provides the main CLI interface using Typer.
"""

import time
from pathlib import Path
from typing import Annotated

import typer

from mammaltag import __version__
from mammaltag.cli.output import (
    console,
    create_status,
    print_error,
    print_font_info,
    print_header,
    print_mesh_info,
    print_params,
    print_step,
    print_success,
    print_warning,
)
from mammaltag.config import FontConfig, LoggingConfig, MammaltagSettings
from mammaltag.core import BuildService
from mammaltag.domain import ExportFormat, TagParams
from mammaltag.exceptions import (
    FontError,
    InvalidParametersError,
    KernelUnavailableError,
    MammaltagError,
)
from mammaltag.io import ExportWriter, FontLocator, FontReader
from mammaltag.utils import BuildLogger, configure_logging

# Create the Typer app
app = typer.Typer(
    name="mammaltag",
    help="Build engraved name tags as STL or GLB solids.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Mammaltag[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Build engraved name tags as STL or GLB solids."""


@app.command()
def build(
    width: Annotated[
        float,
        typer.Option("--width", "-w", help="Tag width along the prism axis (mm)"),
    ] = 40.0,
    depth: Annotated[
        float,
        typer.Option("--depth", "-d", help="Base width of the triangular profile (mm)"),
    ] = 40.0,
    height: Annotated[
        float,
        typer.Option("--height", "-H", help="Apex height of the triangular profile (mm)"),
    ] = 15.0,
    text: Annotated[
        str,
        typer.Option("--text", "-t", help="Text to engrave (empty for a plain tag)"),
    ] = "",
    text_height: Annotated[
        float,
        typer.Option("--text-height", help="Engraving depth scale"),
    ] = 1.0,
    fmt: Annotated[
        ExportFormat,
        typer.Option("--format", "-f", help="Export format", case_sensitive=False),
    ] = ExportFormat.STL,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {text}-tag.{ext})",
        ),
    ] = None,
    font: Annotated[
        Path | None,
        typer.Option("--font", help="Font file to use instead of a system font"),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Build a tag, engrave TEXT into its bottom face and export it.

    Example:
        mammaltag build --text Rex --width 40 --depth 40 --height 15

    This will create Rex-tag.stl in the current directory.
    """
    start_time = time.perf_counter()

    try:
        params = TagParams(
            width=width,
            depth=depth,
            height=height,
            text=text,
            text_height=text_height,
        )
    except InvalidParametersError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    settings = MammaltagSettings(
        font=FontConfig(font_path=font),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )
    logger = configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    output_path = output or ExportWriter.get_export_path(params.text, fmt)

    if not quiet:
        print_header(__version__)
        print_step("Building tag")
        print_params(params)

    try:
        with BuildService(settings, build_logger=BuildLogger(logger)) as service:
            with create_status("Modeling solid", quiet):
                result = service.build_result(params)

            if not quiet:
                print_mesh_info(
                    vertices=result.mesh.vertex_count,
                    triangles=result.mesh.triangle_count,
                    engraved=result.engraved,
                    duration_ms=result.duration_ms,
                )
                if params.has_text and not result.engraved:
                    print_warning("Text could not be engraved; exporting the plain body")
                print_step(f"Exporting {fmt.value.upper()}")

            with create_status("Encoding", quiet):
                data = service.export(fmt, solid=result.solid)

        ExportWriter(output_path).save(data)

        if not quiet:
            print_success(
                output_path=str(output_path),
                file_size=_format_file_size(output_path),
                total_time_s=time.perf_counter() - start_time,
            )

    except KernelUnavailableError as e:
        print_error("Modeling kernel is not available", details=e.reason)
        raise typer.Exit(code=1)
    except FontError as e:
        print_error(f"Could not load font: {e}")
        raise typer.Exit(code=1)
    except MammaltagError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command("font-info")
def font_info(
    font: Annotated[
        Path | None,
        typer.Option("--font", help="Font file to inspect instead of the system font"),
    ] = None,
) -> None:
    """Show which font engraving would use and its metrics."""
    try:
        font_path = FontLocator(FontConfig(font_path=font)).find()
        with FontReader(font_path) as reader:
            ascender, descender = reader.vertical_metrics()
            print_font_info(
                font_path=str(font_path),
                font_type=reader.format,
                glyph_count=reader.glyph_count,
                upm=reader.units_per_em,
                family=reader.family_name,
                ascender=ascender,
                descender=descender,
            )
    except FontError as e:
        print_error(f"Could not load font: {e}")
        raise typer.Exit(code=1)


def _format_file_size(path: Path) -> str:
    """Size of the written export, e.g. "84 B" or "312 KB"."""
    try:
        size = float(path.stat().st_size)
    except OSError:
        return "unknown"

    for unit in ("B", "KB"):
        if size < 1024:
            return f"{size:.0f} {unit}"
        size /= 1024
    return f"{size:.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
