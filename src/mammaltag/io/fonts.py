"""Font resolution and text outline extraction.

This module provides:
- FontLocator: Finds a usable font file on the host
- FontReader: Loads a TTF/OTF/TTC font and lays a string out into a
  `TextOutline` in design units
"""

from pathlib import Path

import structlog
from fontTools.ttLib import TTFont, TTLibError

from mammaltag.config import FontConfig
from mammaltag.domain import PathCommand, TextOutline
from mammaltag.exceptions import FontLoadError, FontNotFoundError
from mammaltag.io.converter import needs_reversal, record_glyph, recording_to_commands

logger = structlog.get_logger(__name__)


class FontLocator:
    """Resolves which font file to load.

    An explicit `font_path` in the configuration wins; otherwise the
    candidate locations are tried in order.
    """

    def __init__(self, config: FontConfig | None = None) -> None:
        self.config = config or FontConfig()

    def find(self) -> Path:
        """Return the first usable font path.

        Raises:
            FontNotFoundError: If no candidate exists
        """
        if self.config.font_path is not None:
            if self.config.font_path.is_file():
                return self.config.font_path
            raise FontNotFoundError([str(self.config.font_path)])

        for candidate in self.config.candidates:
            path = Path(candidate)
            if path.is_file():
                logger.debug("Resolved system font", path=str(path))
                return path

        raise FontNotFoundError(list(self.config.candidates))


class FontReader:
    """Loads a font and produces text outlines from it.

    Example:
        with FontReader(Path("DejaVuSans.ttf")) as reader:
            outline = reader.text_outline("Rex")
    """

    def __init__(self, font_path: Path, font_number: int = 0) -> None:
        """Initialize the font reader.

        Args:
            font_path: Path to a TTF, OTF or TTC font file
            font_number: Face index inside a collection (ignored otherwise)
        """
        self._font_path = font_path
        self._font_number = font_number
        self._font: TTFont | None = None

    @property
    def path(self) -> Path:
        return self._font_path

    @property
    def is_loaded(self) -> bool:
        return self._font is not None

    def load(self) -> None:
        """Load the font file.

        Raises:
            FontLoadError: If the file is missing or is not a usable font
        """
        if not self._font_path.exists():
            raise FontLoadError(str(self._font_path), "file not found")

        try:
            font = TTFont(str(self._font_path), fontNumber=self._font_number)
            # Parse the tables layout needs now rather than on first build
            font["head"]
            font["hmtx"]
            font.getBestCmap()
        except (OSError, TTLibError, KeyError, AssertionError) as e:
            raise FontLoadError(str(self._font_path), str(e)) from e

        self._font = font

    def _require(self) -> TTFont:
        if self._font is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._font

    @property
    def format(self) -> str:
        """Return font format.

        Returns:
            'TrueType' for glyf outlines, 'OpenType' for CFF outlines
        """
        font = self._require()
        if "CFF " in font or "CFF2" in font:
            return "OpenType"
        return "TrueType"

    @property
    def units_per_em(self) -> int:
        """Return font's units per em."""
        return self._require()["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def glyph_count(self) -> int:
        return self._require()["maxp"].numGlyphs  # type: ignore[attr-defined]

    @property
    def family_name(self) -> str | None:
        name_table = self._require().get("name")
        if name_table is None:
            return None
        return name_table.getBestFamilyName()

    def vertical_metrics(self) -> tuple[float, float]:
        """Return (ascender, descender) in design units.

        Prefers the hhea table, falling back to OS/2 typographic metrics.
        """
        font = self._require()
        hhea = font.get("hhea")
        if hhea is not None and (hhea.ascent or hhea.descent):
            return float(hhea.ascent), float(hhea.descent)

        os2 = font.get("OS/2")
        if os2 is not None:
            return float(os2.sTypoAscender), float(os2.sTypoDescender)

        return float(self.units_per_em), 0.0

    def glyph_name_for(self, char: str) -> str:
        """Map a character to a glyph name, falling back to .notdef."""
        font = self._require()
        cmap = font.getBestCmap() or {}
        name = cmap.get(ord(char))
        if name is None:
            logger.debug("Character not in font", char=char, codepoint=ord(char))
            return font.getGlyphOrder()[0]
        return name

    def text_outline(self, text: str) -> TextOutline:
        """Lay a string out on a single line and record its outline.

        Glyphs are placed left to right by their advance widths, starting at
        x = 0 on the baseline. Contour winding is normalized so outer
        boundaries run counter-clockwise.

        Args:
            text: String to lay out

        Returns:
            TextOutline in font design units
        """
        font = self._require()
        glyph_set = font.getGlyphSet()
        reverse = needs_reversal(font)
        ascender, descender = self.vertical_metrics()

        commands: list[PathCommand] = []
        pen_x = 0.0

        for char in text:
            glyph = glyph_set[self.glyph_name_for(char)]
            recording = record_glyph(glyph, glyph_set, x_offset=pen_x, reverse=reverse)
            commands.extend(recording_to_commands(recording.value))
            pen_x += glyph.width

        return TextOutline(
            commands=commands,
            advance_width=pen_x,
            ascender=ascender,
            descender=descender,
            units_per_em=self.units_per_em,
        )

    def close(self) -> None:
        """Close the font file and free resources."""
        if self._font is not None:
            self._font.close()
            self._font = None

    def __enter__(self) -> "FontReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()


def open_font(config: FontConfig | None = None) -> FontReader:
    """Locate and load the configured font.

    Raises:
        FontNotFoundError: If no font could be located
        FontLoadError: If the located font cannot be parsed
    """
    config = config or FontConfig()
    reader = FontReader(FontLocator(config).find(), font_number=config.font_number)
    reader.load()
    return reader
