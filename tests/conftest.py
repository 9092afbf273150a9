"""Shared fixtures: generated TrueType and CFF fonts and a fake kernel."""

from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.t2CharStringPen import T2CharStringPen
from fontTools.pens.ttGlyphPen import TTGlyphPen

from fakes import FakeKernel

ASCENT = 800
DESCENT = -200
UPM = 1000


def _draw_o(pen: TTGlyphPen) -> None:
    # Outer square, clockwise (TrueType convention)
    pen.moveTo((100, 0))
    pen.lineTo((100, 700))
    pen.lineTo((500, 700))
    pen.lineTo((500, 0))
    pen.closePath()
    # Counter, counter-clockwise
    pen.moveTo((200, 100))
    pen.lineTo((400, 100))
    pen.lineTo((400, 600))
    pen.lineTo((200, 600))
    pen.closePath()


def _draw_i(pen: TTGlyphPen) -> None:
    pen.moveTo((100, 0))
    pen.lineTo((100, 700))
    pen.lineTo((200, 700))
    pen.lineTo((200, 0))
    pen.closePath()


def _draw_a(pen: TTGlyphPen) -> None:
    # Triangular outer with a triangular counter
    pen.moveTo((50, 0))
    pen.lineTo((300, 700))
    pen.lineTo((550, 0))
    pen.closePath()
    pen.moveTo((200, 150))
    pen.lineTo((400, 150))
    pen.lineTo((300, 450))
    pen.closePath()


def _draw_d(pen: TTGlyphPen) -> None:
    # Straight stem, then a two-segment quadratic bowl back to the baseline
    pen.moveTo((100, 0))
    pen.lineTo((100, 700))
    pen.qCurveTo((400, 700), (500, 350), (400, 0))
    pen.closePath()


def _draw_period(pen: TTGlyphPen) -> None:
    pen.moveTo((250, 0))
    pen.lineTo((250, 100))
    pen.lineTo((350, 100))
    pen.lineTo((350, 0))
    pen.closePath()


# Dots of the diaeresis sit above the apex of A at y = 700
DIAERESIS_OFFSETS = ((-100, 720), (100, 720))


def build_test_font(path: Path) -> Path:
    """Write a small TrueType font with glyphs A, O, I, D, '.', space and
    the composite Adieresis (A plus two period components)."""
    drawers = {"A": _draw_a, "O": _draw_o, "I": _draw_i, "D": _draw_d, "period": _draw_period}
    glyph_order = [".notdef", "space", "A", "O", "I", "D", "period", "Adieresis"]

    glyphs = {}
    for name in glyph_order[:-1]:
        pen = TTGlyphPen(None)
        if name in drawers:
            drawers[name](pen)
        glyphs[name] = pen.glyph()

    # Components are looked up among the simple glyphs drawn above
    pen = TTGlyphPen(glyphs)
    pen.addComponent("A", (1, 0, 0, 1, 0, 0))
    for dx, dy in DIAERESIS_OFFSETS:
        pen.addComponent("period", (1, 0, 0, 1, dx, dy))
    glyphs["Adieresis"] = pen.glyph()

    fb = FontBuilder(UPM, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap(
        {
            ord(" "): "space",
            ord("A"): "A",
            ord("O"): "O",
            ord("I"): "I",
            ord("D"): "D",
            ord("."): "period",
            ord("Ä"): "Adieresis",
        }
    )
    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics(
        {
            ".notdef": (500, 0),
            "space": (250, 0),
            "A": (600, 50),
            "O": (600, 100),
            "I": (300, 100),
            "D": (600, 100),
            "period": (300, 250),
            "Adieresis": (600, 50),
        }
    )
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupNameTable({"familyName": "Tagtest", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=ASCENT, sTypoDescender=DESCENT, usWinAscent=ASCENT, usWinDescent=-DESCENT)
    fb.setupPost()
    fb.save(str(path))
    return path


def _draw_cubic_ring(pen: T2CharStringPen) -> None:
    # Outer circle r=250 counter-clockwise (CFF convention), counter r=150 clockwise
    pen.moveTo((550, 350))
    pen.curveTo((550, 488), (438, 600), (300, 600))
    pen.curveTo((162, 600), (50, 488), (50, 350))
    pen.curveTo((50, 212), (162, 100), (300, 100))
    pen.curveTo((438, 100), (550, 212), (550, 350))
    pen.closePath()
    pen.moveTo((450, 350))
    pen.curveTo((450, 267), (383, 200), (300, 200))
    pen.curveTo((217, 200), (150, 267), (150, 350))
    pen.curveTo((150, 433), (217, 500), (300, 500))
    pen.curveTo((383, 500), (450, 433), (450, 350))
    pen.closePath()


def build_cff_font(path: Path) -> Path:
    """Write a CFF-flavoured OpenType font whose 'O' is a cubic ring."""
    glyph_order = [".notdef", "space", "O"]
    advances = {".notdef": 500, "space": 250, "O": 600}

    charstrings = {}
    for name in glyph_order:
        pen = T2CharStringPen(advances[name], None)
        if name == "O":
            _draw_cubic_ring(pen)
        charstrings[name] = pen.getCharString()

    fb = FontBuilder(UPM, isTTF=False)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({ord(" "): "space", ord("O"): "O"})
    fb.setupCFF("Tagcubic-Regular", {"FullName": "Tagcubic Regular"}, charstrings, {})
    fb.setupHorizontalMetrics({".notdef": (500, 0), "space": (250, 0), "O": (600, 50)})
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupNameTable({"familyName": "Tagcubic", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=ASCENT, sTypoDescender=DESCENT, usWinAscent=ASCENT, usWinDescent=-DESCENT)
    fb.setupPost()
    fb.save(str(path))
    return path


@pytest.fixture(scope="session")
def tag_font_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Path to the generated test font."""
    return build_test_font(tmp_path_factory.mktemp("fonts") / "Tagtest-Regular.ttf")


@pytest.fixture(scope="session")
def cff_font_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Path to the generated CFF test font."""
    return build_cff_font(tmp_path_factory.mktemp("fonts") / "Tagcubic-Regular.otf")


@pytest.fixture
def fake_kernel() -> FakeKernel:
    return FakeKernel()
