"""Command-line interface for mammaltag.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- `build`: model, engrave and export a tag
- `font-info`: show which font engraving resolves to
- Quiet mode and optional file logging
"""

from mammaltag.cli.app import cli

__all__ = ["cli"]
