"""Modeling kernel layer for mammaltag.

The core depends only on the `Kernel` protocol defined in
`mammaltag.kernel.base`. `OccKernel` implements it over the OCP
OpenCascade bindings; it is imported lazily by the build service so the
rest of the package works without OCP installed.
"""

from mammaltag.kernel.base import FaceTriangulation, Kernel, Shape, ShapeKind, Vec3

__all__ = [
    "FaceTriangulation",
    "Kernel",
    "Shape",
    "ShapeKind",
    "Vec3",
]
