"""Render mesh extraction from a triangulated kernel solid.

Every face of a BRep solid carries its own triangulation, in its own node
numbering, with normals taken from the underlying surface. A face whose
topological orientation is reversed relative to that surface would render
inside out, so its normals are negated and its triangle winding flipped
while the per-face buffers are concatenated into one indexed mesh.
"""

import structlog

from mammaltag.config import TessellationConfig
from mammaltag.domain import MeshData
from mammaltag.kernel.base import Kernel, Shape

logger = structlog.get_logger(__name__)


class MeshExtractor:
    """Converts a kernel solid into a single `MeshData` buffer.

    Example:
        extractor = MeshExtractor(kernel)
        mesh = extractor.extract(solid)
    """

    def __init__(self, kernel: Kernel, config: TessellationConfig | None = None) -> None:
        self.kernel = kernel
        self.config = config or TessellationConfig()

    def extract(self, solid: Shape, triangulate: bool = True) -> MeshData:
        """Triangulate the solid and collect all face triangulations.

        Process:
        1. Triangulate at the configured deflection (unless told not to)
        2. For each face, in enumeration order, skip it if untriangulated
        3. Append model-space nodes and orientation-corrected normals
        4. Append triangles, 0-based and offset, with winding flipped on
           reversed faces; triangles that repeat a node are dropped

        Args:
            solid: Kernel solid
            triangulate: Run the kernel mesher first

        Returns:
            The combined mesh, or `MeshData.empty()` when no face is triangulated
        """
        if triangulate:
            self.kernel.triangulate(
                solid,
                self.config.linear_deflection,
                self.config.angular_deflection,
            )

        vertices: list[float] = []
        normals: list[float] = []
        indices: list[int] = []
        offset = 0
        face_count = 0
        skipped_faces = 0
        degenerate = 0

        for face in self.kernel.faces(solid):
            tri = self.kernel.face_triangulation(face)
            if tri is None:
                skipped_faces += 1
                continue

            face_count += 1
            reversed_ = tri.is_reversed
            sign = -1.0 if reversed_ else 1.0

            if not tri.has_normals():
                tri.compute_normals()

            node_count = tri.node_count
            for i in range(1, node_count + 1):
                vertices.extend(tri.node(i))
                nx, ny, nz = tri.normal(i)
                normals.extend((nx * sign, ny * sign, nz * sign))

            for i in range(1, tri.triangle_count + 1):
                n1, n2, n3 = tri.triangle(i)
                if n1 == n2 or n2 == n3 or n1 == n3:
                    degenerate += 1
                    continue
                if reversed_:
                    n2, n3 = n3, n2
                indices.extend((n1 - 1 + offset, n2 - 1 + offset, n3 - 1 + offset))

            offset += node_count

        if not vertices:
            logger.debug("No triangulated faces", skipped_faces=skipped_faces)
            return MeshData.empty()

        mesh = MeshData.from_lists(vertices, normals, indices)

        logger.debug(
            "Mesh extracted",
            faces=face_count,
            skipped_faces=skipped_faces,
            degenerate_triangles=degenerate,
            vertices=mesh.vertex_count,
            triangles=mesh.triangle_count,
        )
        return mesh
