"""Unit tests for contour assembly from path commands."""

import pytest

from mammaltag.core.contours import ContourBuilder, OutlineTransform, build_contours
from mammaltag.domain import CommandKind, PathCommand, Point, TextOutline


def square_commands(x0: float, y0: float, size: float, close: bool = True) -> list[PathCommand]:
    """Counter-clockwise square as drawing commands."""
    commands = [
        PathCommand.move(x0, y0),
        PathCommand.line(x0 + size, y0),
        PathCommand.line(x0 + size, y0 + size),
        PathCommand.line(x0, y0 + size),
    ]
    if close:
        commands.append(PathCommand.close())
    return commands


class TestContourBuilder:
    """Tests for ContourBuilder."""

    def test_close_finalizes(self):
        contours = ContourBuilder().build(square_commands(0, 0, 10))
        assert len(contours) == 1
        assert contours[0].points == [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]

    def test_move_finalizes_previous(self):
        """A move starts a new contour; the unclosed one is kept if > 2 points."""
        commands = square_commands(0, 0, 10, close=False) + square_commands(20, 0, 10)
        contours = ContourBuilder().build(commands)
        assert len(contours) == 2

    def test_end_of_stream_flushes(self):
        contours = ContourBuilder().build(square_commands(0, 0, 10, close=False))
        assert len(contours) == 1

    def test_degenerate_contours_dropped(self):
        """Buffers with 2 points or fewer are silently dropped."""
        commands = [
            PathCommand.move(0, 0),
            PathCommand.line(5, 5),
            PathCommand.close(),
            PathCommand.move(1, 1),
            PathCommand.close(),
        ]
        assert ContourBuilder().build(commands) == []

    def test_collapsed_after_dedup_dropped(self):
        commands = [
            PathCommand.move(0, 0),
            PathCommand.line(0, 0),
            PathCommand.line(5, 5),
            PathCommand.line(5, 5),
            PathCommand.close(),
        ]
        assert ContourBuilder().build(commands) == []

    def test_quadratic_uses_cursor_as_start(self):
        commands = [
            PathCommand.move(0, 0),
            PathCommand.line(10, 0),
            PathCommand(CommandKind.QUAD, (Point(10, 10), Point(0, 10))),
            PathCommand.close(),
        ]
        contour = ContourBuilder(samples=4).build(commands)[0]
        # move + line + 4 curve samples
        assert len(contour) == 6
        assert contour.points[-1] == Point(0, 10)

    def test_quadratic_spline_with_implied_points(self):
        commands = [
            PathCommand.move(0, 0),
            PathCommand(CommandKind.QUAD, (Point(10, 0), Point(10, 10), Point(0, 10))),
            PathCommand.close(),
        ]
        contour = ContourBuilder(samples=3).build(commands)[0]
        # Two quadratic segments, 3 samples each
        assert len(contour) == 1 + 6
        assert Point(10, 5) in contour.points

    def test_quadratic_without_controls_is_a_line(self):
        commands = [
            PathCommand.move(0, 0),
            PathCommand(CommandKind.QUAD, (Point(10, 0),)),
            PathCommand.line(10, 10),
            PathCommand.close(),
        ]
        contour = ContourBuilder().build(commands)[0]
        assert contour.points == [Point(0, 0), Point(10, 0), Point(10, 10)]

    def test_cubic_samples(self):
        commands = [
            PathCommand.move(0, 0),
            PathCommand(CommandKind.CUBIC, (Point(0, 10), Point(10, 10), Point(10, 0))),
            PathCommand.close(),
        ]
        contour = ContourBuilder(samples=8).build(commands)[0]
        assert len(contour) == 9
        assert contour.points[-1] == Point(10, 0)

    def test_transform_applied(self):
        transform = OutlineTransform(scale=0.5, dx=1.0, dy=-1.0)
        contour = ContourBuilder(transform=transform).build(square_commands(0, 0, 10))[0]
        assert contour.points[0] == Point(1.0, -1.0)
        assert contour.points[2] == Point(6.0, 4.0)

    def test_invalid_samples(self):
        with pytest.raises(ValueError):
            ContourBuilder(samples=0)


class TestOutlineTransform:
    """Tests for layout centering."""

    def test_centered(self):
        outline = TextOutline(advance_width=2000, ascender=800, descender=-200, units_per_em=1000)
        transform = OutlineTransform.centered(outline, font_size=10.0)
        assert transform.scale == pytest.approx(0.01)
        assert transform.dx == pytest.approx(-10.0)
        assert transform.dy == pytest.approx(-3.0)

    def test_build_contours_centers_text(self):
        outline = TextOutline(
            commands=square_commands(0, 0, 1000),
            advance_width=1000,
            ascender=1000,
            descender=0,
            units_per_em=1000,
        )
        contour = build_contours(outline, font_size=4.0)[0]
        xs = [p.x for p in contour.points]
        ys = [p.y for p in contour.points]
        assert (min(xs), min(ys), max(xs), max(ys)) == pytest.approx((-2.0, -2.0, 2.0, 2.0))
