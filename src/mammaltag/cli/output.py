"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with a build spinner, tables, and formatted messages.
"""

from contextlib import AbstractContextManager, nullcontext

from rich.console import Console
from rich.table import Table
from rich.text import Text

from mammaltag.domain import TagParams

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_status(message: str, quiet: bool = False) -> AbstractContextManager[object]:
    """Create a spinner shown while the kernel is busy.

    Args:
        message: Text displayed next to the spinner
        quiet: Return a no-op context instead

    Returns:
        Rich Status usable as a context manager
    """
    if quiet:
        return nullcontext()
    return console.status(f"  {message}", spinner="dots")


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Mammaltag[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_params(params: TagParams) -> None:
    """Print the requested tag dimensions and text."""
    console.print(
        f"  {params.width:g} {SYM_DOT} {params.depth:g} {SYM_DOT} {params.height:g} mm "
        f"(width {SYM_DOT} depth {SYM_DOT} height)"
    )
    line = Text("  text ")
    line.append(repr(params.text) if params.text else "(none)", style="bold")
    line.append(f" {SYM_DOT} depth scale {params.text_height:g}")
    console.print(line)


def print_font_info(
    font_path: str,
    font_type: str,
    glyph_count: int,
    upm: int,
    family: str | None = None,
    ascender: float | None = None,
    descender: float | None = None,
) -> None:
    """Print font information.

    Args:
        font_path: Path to the font file
        font_type: Font format type (e.g., "TrueType", "OpenType")
        glyph_count: Total number of glyphs in font
        upm: Units per em value
        family: Family name, if the font has a name table
        ascender: Ascender in design units
        descender: Descender in design units
    """
    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(font_path)
    line1.append(f" ({font_type})")
    console.print(line1)
    if family:
        console.print(f"  {family}")
    console.print(f"  {glyph_count:,} glyphs {SYM_DOT} {upm:,} UPM")
    if ascender is not None and descender is not None:
        console.print(f"  ascender {ascender:g} {SYM_DOT} descender {descender:g}")


def print_mesh_info(vertices: int, triangles: int, engraved: bool, duration_ms: float) -> None:
    """Print render mesh statistics for a finished build.

    Args:
        vertices: Vertex count
        triangles: Triangle count
        engraved: Whether the engraving cut was applied
        duration_ms: Build time in milliseconds
    """
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="dim")
    table.add_column()
    table.add_row("vertices", f"{vertices:,}")
    table.add_row("triangles", f"{triangles:,}")
    table.add_row(
        "engraved",
        "[green]yes[/green]" if engraved else "[yellow]no[/yellow]",
    )
    table.add_row("build time", _format_time(duration_ms / 1000))
    console.print(table)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(output_path: str, file_size: str, total_time_s: float) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total time in seconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)


def print_warning(message: str) -> None:
    """Print a non-fatal warning."""
    console.print(f"  [yellow]{SYM_DOT} {message}[/yellow]")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
