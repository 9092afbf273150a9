"""Internal Bezier curve sampling.

This is an internal module containing helper functions for bezier_flatten.
Not intended for public use.
"""

from mammaltag.domain import Point


def flatten_quadratic(points: list[Point], samples: int) -> list[Point]:
    """Sample a quadratic Bezier curve at evenly spaced parameters.

    Evaluates B(t) = (1-t)^2 p0 + 2(1-t)t p1 + t^2 p2 at t = i/samples for
    i = 1..samples. The start point is not emitted.

    Args:
        points: List of 3 control points [p0, p1, p2]
        samples: Number of points to emit (>= 1)

    Returns:
        List of `samples` points, the last one equal to p2
    """
    p0, p1, p2 = points
    result: list[Point] = []

    for i in range(1, samples + 1):
        if i == samples:
            result.append(p2)
            break
        t = i / samples
        mt = 1.0 - t
        a = mt * mt
        b = 2.0 * mt * t
        c = t * t
        result.append(
            Point(
                a * p0.x + b * p1.x + c * p2.x,
                a * p0.y + b * p1.y + c * p2.y,
            )
        )

    return result


def flatten_cubic(points: list[Point], samples: int) -> list[Point]:
    """Sample a cubic Bezier curve at evenly spaced parameters.

    Evaluates the Bernstein form at t = i/samples for i = 1..samples.
    The start point is not emitted.

    Args:
        points: List of 4 control points [p0, p1, p2, p3]
        samples: Number of points to emit (>= 1)

    Returns:
        List of `samples` points, the last one equal to p3
    """
    p0, p1, p2, p3 = points
    result: list[Point] = []

    for i in range(1, samples + 1):
        if i == samples:
            result.append(p3)
            break
        t = i / samples
        mt = 1.0 - t
        a = mt * mt * mt
        b = 3.0 * mt * mt * t
        c = 3.0 * mt * t * t
        d = t * t * t
        result.append(
            Point(
                a * p0.x + b * p1.x + c * p2.x + d * p3.x,
                a * p0.y + b * p1.y + c * p2.y + d * p3.y,
            )
        )

    return result
