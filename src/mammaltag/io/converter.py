"""Converters between fontTools pen recordings and domain path commands.

Glyphs are first drawn into a DecomposingRecordingPen, which inlines the
contours of composite glyphs (accented letters and the like). That recording
is replayed into a RecordingPen, optionally through a TransformPen (pen
position) and a ReverseContourPen (winding normalization), and the result
is converted into `PathCommand` objects.

Winding: downstream classification treats counter-clockwise contours
(positive signed area) as outer boundaries. That is the CFF convention;
TrueType `glyf` outlines run clockwise, so they are reversed on read.
"""

from collections.abc import Mapping
from typing import Any

from fontTools.pens.basePen import AbstractPen
from fontTools.pens.recordingPen import DecomposingRecordingPen, RecordingPen
from fontTools.pens.reverseContourPen import ReverseContourPen
from fontTools.pens.transformPen import TransformPen
from fontTools.ttLib import TTFont

from mammaltag.domain import CommandKind, PathCommand, Point


def needs_reversal(font: TTFont) -> bool:
    """True when the font's outlines run clockwise around outer boundaries."""
    return "glyf" in font


def record_glyph(
    glyph: Any,
    glyph_set: Mapping[str, Any],
    x_offset: float = 0.0,
    reverse: bool = False,
) -> RecordingPen:
    """Draw a glyph-set glyph into a RecordingPen with components decomposed.

    Args:
        glyph: Glyph object from `TTFont.getGlyphSet()`
        glyph_set: Glyph set used to resolve component references
        x_offset: Horizontal pen position in design units
        reverse: Reverse every contour's direction

    Returns:
        The recording pen holding the glyph's drawing commands
    """
    # Mirrored components flip their winding; reverseFlipped restores it
    decomposed = DecomposingRecordingPen(glyph_set, skipMissingComponents=True, reverseFlipped=True)
    glyph.draw(decomposed)

    recording = RecordingPen()
    pen: AbstractPen = recording
    if x_offset:
        pen = TransformPen(pen, (1, 0, 0, 1, x_offset, 0))
    if reverse:
        pen = ReverseContourPen(pen)
    decomposed.replay(pen)
    return recording


def recording_to_commands(recording: list[tuple[str, tuple[Any, ...]]]) -> list[PathCommand]:
    """Convert RecordingPen output into path commands.

    The RecordingPen records drawing commands like:
    - ('moveTo', ((x, y),))
    - ('lineTo', ((x, y),))
    - ('qCurveTo', ((x1, y1), ..., (xn, yn)))  # Quadratic spline
    - ('curveTo', ((x1, y1), (x2, y2), (x3, y3)))  # Cubic
    - ('closePath', ()) or ('endPath', ())

    A TrueType contour made only of off-curve points arrives as a single
    qCurveTo whose last point is None. It gets an explicit MOVE to the
    implied on-curve point between its last and first off-curve points,
    and the spline is closed back onto that point.

    Args:
        recording: `RecordingPen.value`

    Returns:
        List of PathCommand objects
    """
    commands: list[PathCommand] = []

    for command, args in recording:
        if command == "moveTo":
            x, y = args[0]
            commands.append(PathCommand.move(x, y))

        elif command == "lineTo":
            x, y = args[0]
            commands.append(PathCommand.line(x, y))

        elif command == "qCurveTo":
            if args[-1] is None:
                off_curve = [Point(x, y) for x, y in args[:-1]]
                if not off_curve:
                    continue
                first, last = off_curve[0], off_curve[-1]
                start = Point((first.x + last.x) / 2.0, (first.y + last.y) / 2.0)
                commands.append(PathCommand(CommandKind.MOVE, (start,)))
                commands.append(PathCommand(CommandKind.QUAD, (*off_curve, start)))
            else:
                commands.append(
                    PathCommand(CommandKind.QUAD, tuple(Point(x, y) for x, y in args))
                )

        elif command == "curveTo":
            (x1, y1), (x2, y2), (x3, y3) = args
            commands.append(
                PathCommand(CommandKind.CUBIC, (Point(x1, y1), Point(x2, y2), Point(x3, y3)))
            )

        elif command == "closePath" or command == "endPath":
            commands.append(PathCommand.close())

    return commands
