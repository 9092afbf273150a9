"""Font and export I/O layer for mammaltag.

This module handles reading fonts with fonttools and writing encoded
solids to disk. It provides a clean abstraction layer between fonttools
and the domain models.

Key responsibilities:
- Locate a usable system font (or honor an explicit path)
- Load TTF/OTF/TTC fonts and lay strings out into text outlines
- Normalize contour winding (outer boundaries counter-clockwise)
- Write export buffers with the tag naming convention

Key classes:
- FontLocator: Resolve the font file to use
- FontReader: Load a font and extract text outlines
- ExportWriter: Save export buffers
"""

from mammaltag.io.fonts import FontLocator, FontReader, open_font
from mammaltag.io.writer import ExportWriter

__all__ = [
    "ExportWriter",
    "FontLocator",
    "FontReader",
    "open_font",
]
