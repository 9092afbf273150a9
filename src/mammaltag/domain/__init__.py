"""Domain models for mammaltag.

This module contains the core domain models representing outlines, contours,
tag parameters and render meshes. All models are:

- Immutable where possible (using frozen dataclasses)
- Plain data (numbers, strings, numpy buffers) a front-end shell can copy
- Independent of fontTools and kernel implementation details

Key classes:
- Point: An immutable 2D point
- Contour: A closed polyline approximating one loop of a glyph outline
- ClassifiedContour / ContourGroup: Contours after outer/hole pairing
- PathCommand / TextOutline: Drawing commands produced by a font
- TagParams: Dimensions and text of a build request
- MeshData: Indexed render mesh
"""

from mammaltag.domain.contour import (
    ClassifiedContour,
    Contour,
    ContourGroup,
    ContourRole,
    Point,
)
from mammaltag.domain.export import ExportFormat
from mammaltag.domain.mesh import MeshData
from mammaltag.domain.outline import CommandKind, PathCommand, TextOutline
from mammaltag.domain.params import TagParams

__all__: list[str] = [
    # Enums
    "CommandKind",
    "ContourRole",
    "ExportFormat",
    # Core types
    "Point",
    "Contour",
    "ClassifiedContour",
    "ContourGroup",
    "PathCommand",
    "TextOutline",
    "TagParams",
    "MeshData",
]
