"""Render mesh produced from a triangulated solid."""

from dataclasses import dataclass

import numpy as np

from mammaltag.exceptions import MeshError


@dataclass(eq=False)
class MeshData:
    """A flattened, indexed triangle mesh.

    Attributes:
        vertices: float32 array of length 3n (x, y, z per vertex)
        normals: float32 array of length 3n, one unit normal per vertex
        indices: uint32 array of length 3m, three vertex indices per triangle
    """

    vertices: np.ndarray
    normals: np.ndarray
    indices: np.ndarray

    @classmethod
    def empty(cls) -> "MeshData":
        """Mesh with zero vertices and zero triangles."""
        return cls(
            vertices=np.zeros(0, dtype=np.float32),
            normals=np.zeros(0, dtype=np.float32),
            indices=np.zeros(0, dtype=np.uint32),
        )

    @classmethod
    def from_lists(
        cls,
        vertices: list[float],
        normals: list[float],
        indices: list[int],
    ) -> "MeshData":
        """Pack flat Python lists into the typed numpy buffers."""
        return cls(
            vertices=np.asarray(vertices, dtype=np.float32),
            normals=np.asarray(normals, dtype=np.float32),
            indices=np.asarray(indices, dtype=np.uint32),
        )

    @property
    def vertex_count(self) -> int:
        return len(self.vertices) // 3

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    def is_empty(self) -> bool:
        return self.vertex_count == 0

    def validate(self) -> None:
        """Check the structural invariants of the mesh.

        Raises:
            MeshError: If array lengths disagree, an index is out of range,
                or a triangle repeats a vertex index
        """
        if len(self.vertices) != len(self.normals):
            raise MeshError(
                f"vertices ({len(self.vertices)}) and normals ({len(self.normals)}) differ in length"
            )
        if len(self.vertices) % 3 != 0:
            raise MeshError(f"vertex buffer length {len(self.vertices)} is not a multiple of 3")
        if len(self.indices) % 3 != 0:
            raise MeshError(f"index buffer length {len(self.indices)} is not a multiple of 3")
        if len(self.indices) == 0:
            return
        if int(self.indices.max()) >= self.vertex_count:
            raise MeshError(
                f"index {int(self.indices.max())} out of range for {self.vertex_count} vertices"
            )
        tris = self.indices.reshape(-1, 3)
        repeated = (tris[:, 0] == tris[:, 1]) | (tris[:, 1] == tris[:, 2]) | (tris[:, 0] == tris[:, 2])
        if bool(repeated.any()):
            raise MeshError(f"{int(repeated.sum())} triangles repeat a vertex index")

    def bounds(self) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
        """Axis-aligned bounds as ((min_x, min_y, min_z), (max_x, max_y, max_z))."""
        if self.is_empty():
            return ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
        pts = self.vertices.reshape(-1, 3)
        lo = pts.min(axis=0)
        hi = pts.max(axis=0)
        return (
            (float(lo[0]), float(lo[1]), float(lo[2])),
            (float(hi[0]), float(hi[1]), float(hi[2])),
        )

    def same_as(self, other: "MeshData") -> bool:
        """Byte-for-byte comparison of all three buffers."""
        return (
            self.vertices.tobytes() == other.vertices.tobytes()
            and self.normals.tobytes() == other.normals.tobytes()
            and self.indices.tobytes() == other.indices.tobytes()
        )
