"""Contour assembly from a path command stream.

This module turns the drawing commands of a text outline into closed
polylines. Curves are flattened at a fixed sampling density and the layout
transform (font units to millimeters, centering) is applied to every point
before flattening, so contour coordinates are in millimeters.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from mammaltag.core.geometry import (
    DEFAULT_CURVE_SAMPLES,
    bezier_flatten,
    dedupe_points,
    split_quadratic_spline,
)
from mammaltag.domain import CommandKind, Contour, PathCommand, Point, TextOutline

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OutlineTransform:
    """Uniform scale followed by a translation: p' = p * scale + (dx, dy)."""

    scale: float = 1.0
    dx: float = 0.0
    dy: float = 0.0

    def apply(self, point: Point) -> Point:
        return Point(point.x * self.scale + self.dx, point.y * self.scale + self.dy)

    @classmethod
    def centered(cls, outline: TextOutline, font_size: float) -> "OutlineTransform":
        """Scale design units to `font_size` and center the string on the origin.

        Horizontal centering uses the total advance width, vertical centering
        the midpoint between ascender and descender.
        """
        scale = font_size / outline.units_per_em
        return cls(
            scale=scale,
            dx=-outline.advance_width * scale / 2.0,
            dy=-(outline.ascender + outline.descender) * scale / 2.0,
        )


class ContourBuilder:
    """Assembles a path command stream into closed contours.

    A contour is finalized on CLOSE, on a MOVE that starts a new contour,
    and at the end of the stream. Buffers with 2 points or fewer are dropped.

    Example:
        builder = ContourBuilder(samples=8)
        contours = builder.build(outline.commands)
    """

    def __init__(
        self,
        samples: int = DEFAULT_CURVE_SAMPLES,
        dedup_tolerance: float = 1e-6,
        transform: OutlineTransform | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            samples: Points emitted per curve segment
            dedup_tolerance: Consecutive points closer than this are merged
            transform: Layout transform applied to every command point
        """
        if samples < 1:
            raise ValueError(f"samples must be >= 1, got {samples}")
        self.samples = samples
        self.dedup_tolerance = dedup_tolerance
        self.transform = transform or OutlineTransform()

    def build(self, commands: Iterable[PathCommand]) -> list[Contour]:
        """Consume commands in order and return the finalized contours.

        Args:
            commands: Drawing commands in font design units

        Returns:
            Closed contours in layout units, each with at least 3 points
        """
        contours: list[Contour] = []
        buffer: list[Point] = []
        cursor = Point(0.0, 0.0)

        for command in commands:
            if command.kind is CommandKind.MOVE:
                self._finalize(buffer, contours)
                cursor = self.transform.apply(command.points[0])
                buffer = [cursor]

            elif command.kind is CommandKind.LINE:
                cursor = self.transform.apply(command.points[0])
                buffer.append(cursor)

            elif command.kind is CommandKind.QUAD:
                pts = tuple(self.transform.apply(p) for p in command.points)
                if len(pts) == 1:
                    buffer.append(pts[0])
                else:
                    for control, end in split_quadratic_spline(pts):
                        buffer.extend(bezier_flatten(cursor, [control], end, self.samples))
                        cursor = end
                cursor = pts[-1]

            elif command.kind is CommandKind.CUBIC:
                c1, c2, end = (self.transform.apply(p) for p in command.points)
                buffer.extend(bezier_flatten(cursor, [c1, c2], end, self.samples))
                cursor = end

            elif command.kind is CommandKind.CLOSE:
                self._finalize(buffer, contours)
                buffer = []

        self._finalize(buffer, contours)
        return contours

    def _finalize(self, buffer: list[Point], contours: list[Contour]) -> None:
        """Append the buffer as a contour if it survives cleanup."""
        if len(buffer) <= 2:
            if buffer:
                logger.debug("Dropped degenerate contour", points=len(buffer))
            return

        points = dedupe_points(buffer, self.dedup_tolerance)
        if len(points) < 3:
            logger.debug("Dropped degenerate contour", points=len(points))
            return

        contours.append(Contour(points=points))


def build_contours(
    outline: TextOutline,
    font_size: float,
    samples: int = DEFAULT_CURVE_SAMPLES,
    dedup_tolerance: float = 1e-6,
) -> list[Contour]:
    """Flatten a text outline into centered contours in millimeters.

    Args:
        outline: Outline in font design units
        font_size: Target em size in millimeters
        samples: Points per curve segment
        dedup_tolerance: Point merge tolerance in millimeters

    Returns:
        List of closed contours
    """
    builder = ContourBuilder(
        samples=samples,
        dedup_tolerance=dedup_tolerance,
        transform=OutlineTransform.centered(outline, font_size),
    )
    return builder.build(outline.commands)
