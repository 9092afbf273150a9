"""Tag build orchestration.

This module coordinates the full build workflow for one request:
1. Build the filleted triangular base body
2. Lay the text out, flatten and classify its contours
3. Engrave the text faces into the body (best-effort)
4. Extract the render mesh from the final solid

Key components:
- fit_font_size: Font size that fits the text on the tag face
- TagBuilder: Runs the pipeline against a kernel and an outline source
- BuildResult: Mesh plus the solid it came from
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import structlog

from mammaltag.config import LayoutConfig, MammaltagSettings
from mammaltag.core.analyzer import ContourAnalyzer
from mammaltag.core.contours import build_contours
from mammaltag.core.engraver import SolidEngraver
from mammaltag.core.mesher import MeshExtractor
from mammaltag.domain import ExportFormat, MeshData, TagParams, TextOutline
from mammaltag.exceptions import BuildError, ExportError, KernelError
from mammaltag.kernel.base import Kernel, Shape
from mammaltag.utils import BuildLogger


class OutlineSource(Protocol):
    """Anything that can turn a string into a design-unit outline."""

    def text_outline(self, text: str) -> TextOutline: ...


@dataclass
class BuildResult:
    """Outcome of a successful build.

    Attributes:
        mesh: Render mesh of the final solid
        solid: Final solid handle, kept for export
        engraved: True when the engraving cut was applied
        duration_ms: Wall time of the build
    """

    mesh: MeshData
    solid: Shape
    engraved: bool = False
    duration_ms: float = 0.0


def fit_font_size(params: TagParams, layout: LayoutConfig | None = None) -> float:
    """Font size (em height in mm) that fits the text on the tag face.

    The text may span `width_fill` of the tag width, assuming an average
    glyph is `char_aspect` em wide, and the size never exceeds
    `depth_fill` of the tag depth.
    """
    layout = layout or LayoutConfig()
    by_width = params.width * layout.width_fill / (max(len(params.text), 1) * layout.char_aspect)
    return min(by_width, params.depth * layout.depth_fill)


class TagBuilder:
    """Builds engraved tag solids and their render meshes.

    The builder is synchronous and not thread-safe; callers that share a
    kernel between requests go through `BuildService`.

    Example:
        builder = TagBuilder(OccKernel(), font_loader=lambda: open_font())
        result = builder.build(TagParams(width=40, depth=40, height=15, text="A"))
        data = builder.export(result.solid, ExportFormat.STL)
    """

    def __init__(
        self,
        kernel: Kernel,
        settings: MammaltagSettings | None = None,
        font_loader: Callable[[], OutlineSource] | None = None,
        build_logger: BuildLogger | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            kernel: Modeling kernel
            settings: Application settings (defaults if None)
            font_loader: Returns the outline source; only called for
                non-empty text so a missing font does not block plain tags
            build_logger: Event logger (a default one is created if None)
        """
        self.kernel = kernel
        self.settings = settings or MammaltagSettings()
        self.font_loader = font_loader
        self.build_logger = build_logger or BuildLogger(structlog.get_logger("mammaltag"))
        self.analyzer = ContourAnalyzer()
        self.engraver = SolidEngraver(
            kernel,
            config=self.settings.engrave,
            outline_config=self.settings.outline,
            build_logger=self.build_logger,
        )
        self.extractor = MeshExtractor(kernel, self.settings.tessellation)

    def build(self, params: TagParams) -> BuildResult:
        """Build the tag described by `params`.

        Args:
            params: Tag dimensions and text

        Returns:
            BuildResult with the render mesh and final solid

        Raises:
            BuildError: If the base body cannot be built
            FontError: If text is non-empty and no font can be loaded
        """
        start_time = time.perf_counter()
        self.build_logger.log_build_start(params.to_dict())

        try:
            body = self.make_body(params)
            solid, engraved = self.engrave_text(body, params)
            mesh = self.extractor.extract(solid)
        except Exception as e:
            self.build_logger.log_build_error(e)
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.build_logger.log_build_complete(
            engraved=engraved,
            vertices=mesh.vertex_count,
            triangles=mesh.triangle_count,
            duration_ms=duration_ms,
        )
        return BuildResult(mesh=mesh, solid=solid, engraved=engraved, duration_ms=duration_ms)

    def make_body(self, params: TagParams) -> Shape:
        """Build the filleted triangular prism the text is engraved into.

        The profile lies in the plane x = -width/2 with its base on y = 0,
        spanning z in [-depth/2, depth/2], and its apex at y = height. It is
        extruded along +x by the width and every edge is filleted.

        Raises:
            BuildError: If any kernel step fails
        """
        hw = params.width / 2.0
        hd = params.depth / 2.0
        p1 = (-hw, 0.0, -hd)
        p2 = (-hw, params.height, 0.0)
        p3 = (-hw, 0.0, hd)

        try:
            wire = self.kernel.make_wire(
                [
                    self.kernel.make_edge(p1, p2),
                    self.kernel.make_edge(p2, p3),
                    self.kernel.make_edge(p3, p1),
                ]
            )
            profile = self.kernel.make_face(wire)
            prism = self.kernel.extrude(profile, (params.width, 0.0, 0.0))
            return self.kernel.fillet_edges(prism, self.settings.body.fillet_radius)
        except KernelError as e:
            raise BuildError(f"base body: {e}") from e

    def engrave_text(self, body: Shape, params: TagParams) -> tuple[Shape, bool]:
        """Engrave `params.text` into `body`.

        Returns:
            (solid, engraved); the solid is `body` itself when engraving was
            skipped or the cut failed
        """
        if not params.has_text:
            self.build_logger.log_engrave_skipped("empty text")
            return body, False

        if self.font_loader is None:
            raise BuildError("text requested but no font loader configured")

        outline = self.font_loader().text_outline(params.text)
        font_size = fit_font_size(params, self.settings.layout)
        contours = build_contours(
            outline,
            font_size,
            samples=self.settings.outline.curve_samples,
            dedup_tolerance=self.settings.outline.point_dedup_tolerance,
        )

        classification = self.analyzer.classify(contours)
        self.build_logger.log_contour_analysis(
            text=params.text,
            total_contours=len(contours),
            outer_count=classification.outer_count,
            hole_count=classification.hole_count,
            dropped_holes=classification.dropped_holes,
        )

        result = self.engraver.engrave(
            body,
            classification.groups,
            height=params.height,
            text_height=params.text_height,
        )
        return result.solid, result.engraved

    def export(self, solid: Shape, fmt: ExportFormat = ExportFormat.STL) -> bytes:
        """Encode a solid with the kernel's interchange writer.

        Independent of mesh extraction; the solid is (re)triangulated at the
        configured deflection first, which the writers require.

        Raises:
            ExportError: If the kernel cannot encode the solid
        """
        try:
            self.kernel.triangulate(
                solid,
                self.settings.tessellation.linear_deflection,
                self.settings.tessellation.angular_deflection,
            )
            return self.kernel.write(solid, fmt)
        except KernelError as e:
            raise ExportError(fmt.value, str(e)) from e
