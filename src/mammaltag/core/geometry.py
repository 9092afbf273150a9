"""Geometric operations for the outline pipeline.

Pure helpers shared by the contour stages: fixed-density Bezier
flattening, TrueType spline splitting and cleanup of near-duplicate points.
Polygon area and containment live on `Contour` itself.
"""

from fontTools.pens.basePen import decomposeQuadraticSegment

from mammaltag.core._bezier import flatten_cubic as _flatten_cubic
from mammaltag.core._bezier import flatten_quadratic as _flatten_quadratic
from mammaltag.domain import Point

DEFAULT_CURVE_SAMPLES = 8


def bezier_flatten(
    start: Point,
    controls: list[Point],
    end: Point,
    samples: int = DEFAULT_CURVE_SAMPLES,
) -> list[Point]:
    """Convert one Bezier segment to polyline vertices.

    One control point means a quadratic curve, two mean a cubic curve.
    The curve is evaluated at `samples` evenly spaced parameters in (0, 1];
    the start point is excluded because it is already in the sequence.

    Args:
        start: Curve start (the current pen position)
        controls: One or two control points
        end: Curve end point
        samples: Number of points to emit

    Returns:
        Exactly `samples` points ending at `end`

    Raises:
        ValueError: If samples < 1 or the control count is not 1 or 2
    """
    if samples < 1:
        raise ValueError(f"samples must be >= 1, got {samples}")

    if len(controls) == 1:
        return _flatten_quadratic([start, controls[0], end], samples)
    if len(controls) == 2:
        return _flatten_cubic([start, controls[0], controls[1], end], samples)

    raise ValueError(f"Expected 1 or 2 control points, got {len(controls)}")


def split_quadratic_spline(points: tuple[Point, ...]) -> list[tuple[Point, Point]]:
    """Split a TrueType quadratic spline into single quadratic segments.

    A TrueType ``qCurveTo`` may carry several off-curve points with implied
    on-curve points halfway between them.

    Args:
        points: Off-curve points followed by the final on-curve point

    Returns:
        List of (control, end) pairs, one per quadratic segment

    Raises:
        ValueError: If fewer than 2 points are given
    """
    if len(points) < 2:
        raise ValueError(f"Quadratic spline needs at least 2 points, got {len(points)}")

    segments = decomposeQuadraticSegment([p.to_tuple() for p in points])
    return [(Point(*control), Point(*end)) for control, end in segments]


def dedupe_points(points: list[Point], tolerance: float) -> list[Point]:
    """Drop consecutive points closer than `tolerance`, including the wrap-around.

    Args:
        points: Polygon vertices
        tolerance: Minimum distance between kept neighbours

    Returns:
        Filtered list of points
    """
    if not points:
        return []

    kept: list[Point] = [points[0]]
    for point in points[1:]:
        if point.distance_to(kept[-1]) > tolerance:
            kept.append(point)

    # The contour is implicitly closed; drop an explicit closing point
    while len(kept) > 1 and kept[-1].distance_to(kept[0]) <= tolerance:
        kept.pop()

    return kept
