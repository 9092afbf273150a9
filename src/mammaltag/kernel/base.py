"""Capability interface required from the BRep modeling kernel.

The core never touches a native kernel binding directly. It talks to an
object implementing `Kernel`, and every piece of kernel-owned geometry it
receives is an opaque `Shape` handle that it only ever passes back to the
same kernel within a single build call.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from mammaltag.domain import ExportFormat

Vec3 = tuple[float, float, float]


class ShapeKind(str, Enum):
    """Topological kind of a kernel shape handle."""

    EDGE = "edge"
    WIRE = "wire"
    FACE = "face"
    COMPOUND = "compound"
    SOLID = "solid"


@dataclass(frozen=True, eq=False)
class Shape:
    """Opaque handle to kernel-owned geometry.

    Attributes:
        kind: Topological kind, for sanity checks and logging
        native: The kernel's own object; only the kernel reads it
    """

    kind: ShapeKind
    native: object


@runtime_checkable
class FaceTriangulation(Protocol):
    """Per-face triangulation view. All node and triangle indices are 1-based."""

    @property
    def node_count(self) -> int: ...

    @property
    def triangle_count(self) -> int: ...

    @property
    def is_reversed(self) -> bool:
        """True when the face's orientation is reversed relative to its surface."""
        ...

    def has_normals(self) -> bool: ...

    def compute_normals(self) -> None: ...

    def node(self, index: int) -> Vec3:
        """Node position in model space (face placement already applied)."""
        ...

    def normal(self, index: int) -> Vec3:
        """Node normal of the underlying surface, in model space."""
        ...

    def triangle(self, index: int) -> tuple[int, int, int]: ...


@runtime_checkable
class Kernel(Protocol):
    """Operations the core needs from a BRep modeling kernel."""

    # Primitives and booleans
    def make_box(self, dx: float, dy: float, dz: float, origin: Vec3 = (0.0, 0.0, 0.0)) -> Shape: ...

    def make_sphere(self, center: Vec3, radius: float) -> Shape: ...

    def fuse(self, a: Shape, b: Shape) -> Shape:
        """Boolean union. Raises BooleanOperationError on failure."""
        ...

    def cut(self, body: Shape, tool: Shape) -> Shape:
        """Boolean subtraction. Raises BooleanOperationError on failure."""
        ...

    # Planar topology
    def make_edge(self, start: Vec3, end: Vec3) -> Shape: ...

    def make_wire(self, edges: Sequence[Shape]) -> Shape: ...

    def make_face(self, outer: Shape, holes: Sequence[Shape] = ()) -> Shape: ...

    def make_compound(self, shapes: Sequence[Shape]) -> Shape: ...

    # Solids
    def extrude(self, shape: Shape, vector: Vec3) -> Shape: ...

    def fillet_edges(self, solid: Shape, radius: float) -> Shape:
        """Fillet every edge of the solid. Raises BooleanOperationError on failure."""
        ...

    def volume(self, solid: Shape) -> float: ...

    # Triangulation
    def triangulate(self, solid: Shape, linear_deflection: float, angular_deflection: float) -> None: ...

    def faces(self, solid: Shape) -> Iterator[Shape]: ...

    def face_triangulation(self, face: Shape) -> FaceTriangulation | None: ...

    # Export
    def write(self, solid: Shape, fmt: ExportFormat) -> bytes: ...
