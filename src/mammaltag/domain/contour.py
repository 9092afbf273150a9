"""Core geometric types for contour representation.

This module defines the fundamental 2D types used by the outline pipeline:
- Point: An immutable 2D point
- Contour: A closed polyline approximating one loop of a glyph outline
- ContourRole: Enum distinguishing outer boundaries from holes
- ClassifiedContour: A contour together with its role and owner
- ContourGroup: An outer contour with the holes assigned to it
"""

from dataclasses import dataclass, field
from enum import Enum


class ContourRole(str, Enum):
    """Role of a contour after classification.

    Outer contours have strictly positive signed area (counter-clockwise).
    Everything else, including zero-area contours, is treated as a hole.
    """

    OUTER = "outer"
    HOLE = "hole"


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D outline space.

    Coordinates are in font design units before layout and in millimeters
    after scaling. Immutable and hashable.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Plain (x, y) tuple."""
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        return (dx * dx + dy * dy) ** 0.5


@dataclass
class Contour:
    """A closed polygon; the last point connects implicitly to the first.

    Attributes:
        points: Ordered list of points forming the contour
    """

    points: list[Point]
    _cached_area: float | None = field(default=None, repr=False, init=False)

    def __len__(self) -> int:
        return len(self.points)

    def signed_area(self) -> float:
        """Shoelace area, positive for counter-clockwise (outer) contours.

        Cached after the first call; contours are not mutated once built.
        """
        if self._cached_area is None:
            pts = self.points
            if len(pts) < 3:
                self._cached_area = 0.0
            else:
                twice = sum(a.x * b.y - b.x * a.y for a, b in zip(pts, pts[1:] + pts[:1]))
                self._cached_area = twice / 2.0
        return self._cached_area

    def contains_point(self, point: Point) -> bool:
        """Even-odd test: count crossings of a ray cast from `point` towards +x.

        Winding does not matter. Points exactly on the boundary may land on
        either side.

        Returns:
            True when the ray crosses the boundary an odd number of times
        """
        x, y = point.x, point.y
        pts = self.points
        if len(pts) < 3:
            return False

        crossings = 0
        for a, b in zip(pts[-1:] + pts[:-1], pts):
            if (a.y > y) == (b.y > y):
                continue
            x_at_y = a.x + (y - a.y) * (b.x - a.x) / (b.y - a.y)
            if x < x_at_y:
                crossings += 1
        return crossings % 2 == 1


@dataclass
class ClassifiedContour:
    """A contour with its role and, for holes, its owning outer contour.

    Attributes:
        contour: The classified contour
        role: OUTER or HOLE
        owner: Index (into the classified list) of the owning outer contour.
            Always None for outer contours.
    """

    contour: Contour
    role: ContourRole
    owner: int | None = None

    @property
    def is_outer(self) -> bool:
        return self.role is ContourRole.OUTER


@dataclass
class ContourGroup:
    """One outer contour plus every hole assigned to it.

    Attributes:
        outer: The outer boundary
        holes: Hole contours contained in the outer boundary
    """

    outer: Contour
    holes: list[Contour] = field(default_factory=list)
