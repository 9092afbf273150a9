"""Core geometry pipeline for mammaltag.

This module contains the algorithms that turn text and tag dimensions
into an engraved solid and a render mesh:

- Curve flattening and contour assembly from outline commands
- Contour classification (outer vs hole) and hole-to-outer pairing
- Planar face construction on a configurable text plane
- Extrude-and-subtract engraving
- Render mesh extraction from kernel triangulations

Everything except `BuildService` is synchronous and single-threaded; the
service serializes builds against one shared kernel.

Key functions:
- bezier_flatten: Convert Bezier curves to line segments
- build_contours: Flatten a text outline into centered contours
- fit_font_size: Font size that fits a string on the tag

Key classes:
- ContourAnalyzer: Classifies contours and pairs holes with outers
- PlanarFaceBuilder: Builds kernel faces from contour groups
- SolidEngraver: Cuts extruded text out of a body
- MeshExtractor: Collects face triangulations into one mesh
- TagBuilder: Runs the full pipeline for one request
- BuildService: Serialized, coalescing build queue
"""

from mammaltag.core.analyzer import ContourAnalyzer, ContourClassification
from mammaltag.core.builder import BuildResult, TagBuilder, fit_font_size
from mammaltag.core.contours import ContourBuilder, OutlineTransform, build_contours
from mammaltag.core.engraver import EngraveResult, SolidEngraver
from mammaltag.core.faces import PlanarFaceBuilder, TextPlane
from mammaltag.core.geometry import bezier_flatten
from mammaltag.core.mesher import MeshExtractor
from mammaltag.core.service import BuildService

__all__ = [
    # Service
    "BuildService",
    # Builder
    "BuildResult",
    "TagBuilder",
    "fit_font_size",
    # Analyzer classes
    "ContourAnalyzer",
    "ContourClassification",
    # Contour assembly
    "ContourBuilder",
    "OutlineTransform",
    "build_contours",
    # Engraving
    "EngraveResult",
    "PlanarFaceBuilder",
    "SolidEngraver",
    "TextPlane",
    # Mesh
    "MeshExtractor",
    # Geometry functions
    "bezier_flatten",
]
