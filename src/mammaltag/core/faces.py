"""Planar face construction from classified contours.

Each outer contour becomes a planar face bounded by a closed wire, with
the wires of its holes added as inner boundaries. The faces of a whole
string are gathered into one compound that the engraver extrudes.
"""

from dataclasses import dataclass

import structlog

from mammaltag.config import TextPlaneConfig
from mammaltag.domain import Contour, ContourGroup, Point
from mammaltag.kernel.base import Kernel, Shape, Vec3

logger = structlog.get_logger(__name__)


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


@dataclass(frozen=True)
class TextPlane:
    """A plane in model space onto which 2D outline points are mapped.

    A point (x, y) maps to origin + x * x_direction + y * y_direction, where
    y_direction = normal x x_direction.

    Attributes:
        origin: Model-space position of the outline origin
        normal: Unit normal pointing away from the body being engraved
        x_direction: Unit reading direction, perpendicular to the normal
    """

    origin: Vec3
    normal: Vec3
    x_direction: Vec3

    @property
    def y_direction(self) -> Vec3:
        return _cross(self.normal, self.x_direction)

    def to_3d(self, point: Point) -> Vec3:
        ox, oy, oz = self.origin
        xx, xy, xz = self.x_direction
        yx, yy, yz = self.y_direction
        return (
            ox + point.x * xx + point.y * yx,
            oy + point.x * xy + point.y * yy,
            oz + point.x * xz + point.y * yz,
        )

    @classmethod
    def from_config(cls, config: TextPlaneConfig) -> "TextPlane":
        return cls(origin=config.origin, normal=config.normal, x_direction=config.x_direction)


class PlanarFaceBuilder:
    """Builds kernel faces for groups of one outer contour and its holes.

    Example:
        builder = PlanarFaceBuilder(kernel, TextPlane.from_config(cfg.plane))
        compound = builder.build(classification.groups)
    """

    def __init__(self, kernel: Kernel, plane: TextPlane, edge_epsilon: float = 1e-6) -> None:
        """Initialize the face builder.

        Args:
            kernel: Modeling kernel used for edges, wires and faces
            plane: Text plane the outline is placed on
            edge_epsilon: Edges shorter than this (in plane units) are skipped
        """
        self.kernel = kernel
        self.plane = plane
        self.edge_epsilon = edge_epsilon

    def build(self, groups: list[ContourGroup]) -> Shape | None:
        """Build one compound holding a face per group.

        Args:
            groups: Outer contours with their assigned holes

        Returns:
            Compound of faces, or None when no group yields a usable wire
        """
        faces: list[Shape] = []

        for group in groups:
            face = self.build_face(group)
            if face is not None:
                faces.append(face)

        if not faces:
            return None

        return self.kernel.make_compound(faces)

    def build_face(self, group: ContourGroup) -> Shape | None:
        """Build a face for one outer contour with its holes cut out.

        Returns:
            The face, or None when the outer wire collapses
        """
        outer = self.build_wire(group.outer)
        if outer is None:
            logger.debug("Dropped collapsed outer contour", points=len(group.outer))
            return None

        holes: list[Shape] = []
        for hole in group.holes:
            wire = self.build_wire(hole)
            if wire is None:
                logger.debug("Dropped collapsed hole contour", points=len(hole))
                continue
            holes.append(wire)

        return self.kernel.make_face(outer, holes)

    def build_wire(self, contour: Contour) -> Shape | None:
        """Build a closed wire through the contour's vertices.

        The closing edge from the last vertex back to the first is included.
        Edges whose endpoints lie within `edge_epsilon` of each other are
        skipped; a wire left with fewer than 3 edges is dropped.

        Args:
            contour: Closed 2D contour

        Returns:
            Wire handle, or None when too few edges remain
        """
        points = contour.points
        n = len(points)
        if n < 3:
            return None

        segments: list[tuple[Point, Point]] = []
        start = points[0]
        for i in range(1, n):
            end = points[i]
            if start.distance_to(end) <= self.edge_epsilon:
                # Keep the edge chain connected across the skipped segment
                continue
            segments.append((start, end))
            start = end

        if segments and start.distance_to(points[0]) > self.edge_epsilon:
            segments.append((start, points[0]))
        elif segments:
            # Closing segment too short: stretch the last edge back to the start
            segments[-1] = (segments[-1][0], points[0])

        if len(segments) < 3:
            return None

        edges = [
            self.kernel.make_edge(self.plane.to_3d(a), self.plane.to_3d(b)) for a, b in segments
        ]

        return self.kernel.make_wire(edges)
