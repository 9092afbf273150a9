"""Extrude-and-subtract engraving of text faces into a body.

Engraving is best-effort. Any kernel failure while building the tool or
cutting it from the body is logged and the untouched body is returned,
so a troublesome glyph never costs the caller the whole tag.
"""

from dataclasses import dataclass

from mammaltag.config import EngraveConfig, OutlineConfig
from mammaltag.core.faces import PlanarFaceBuilder, TextPlane
from mammaltag.domain import ContourGroup
from mammaltag.exceptions import KernelError
from mammaltag.kernel.base import Kernel, Shape
from mammaltag.utils import BuildLogger


@dataclass
class EngraveResult:
    """Outcome of an engraving attempt.

    Attributes:
        solid: The engraved body, or the original body when skipped or failed
        engraved: True only when the cut was applied
        depth: Extrusion distance used for the tool (0.0 when skipped)
    """

    solid: Shape
    engraved: bool = False
    depth: float = 0.0


class SolidEngraver:
    """Cuts an extruded text tool out of a body.

    Example:
        engraver = SolidEngraver(kernel, settings.engrave, build_logger=logger)
        result = engraver.engrave(body, classification.groups, height=15.0)
    """

    def __init__(
        self,
        kernel: Kernel,
        config: EngraveConfig | None = None,
        outline_config: OutlineConfig | None = None,
        build_logger: BuildLogger | None = None,
    ) -> None:
        self.kernel = kernel
        self.config = config or EngraveConfig()
        self.outline_config = outline_config or OutlineConfig()
        self.build_logger = build_logger
        self.plane = TextPlane.from_config(self.config.plane)
        self.face_builder = PlanarFaceBuilder(
            kernel,
            self.plane,
            edge_epsilon=self.outline_config.edge_epsilon,
        )

    def extrusion_depth(self, height: float, text_height: float = 1.0) -> float:
        """Distance the text faces are extruded by.

        The engraving depth is a fraction of the tag height, scaled by
        `text_height` and never below the configured floor. The overshoot
        keeps the tool from ending coplanar with a body face.
        """
        depth = max(height * self.config.depth_fraction * text_height, self.config.depth_floor)
        return depth + self.config.overshoot

    def engrave(
        self,
        body: Shape,
        groups: list[ContourGroup],
        height: float,
        text_height: float = 1.0,
    ) -> EngraveResult:
        """Subtract the extruded faces of `groups` from `body`.

        Args:
            body: Target solid
            groups: Outer contours with their holes, in plane coordinates
            height: Tag height, drives the engraving depth
            text_height: Depth multiplier

        Returns:
            EngraveResult; `engraved` is False when skipped or when the
            kernel failed, and `solid` is then the original body
        """
        if not groups:
            self._skipped("no outer contours")
            return EngraveResult(solid=body)

        depth = self.extrusion_depth(height, text_height)

        try:
            faces = self.face_builder.build(groups)
            if faces is None:
                self._skipped("all contours collapsed")
                return EngraveResult(solid=body)

            # -normal points into the body
            nx, ny, nz = self.plane.normal
            tool = self.kernel.extrude(faces, (-nx * depth, -ny * depth, -nz * depth))
            engraved = self.kernel.cut(body, tool)
        except KernelError as e:
            if self.build_logger is not None:
                self.build_logger.log_engrave_failed(e)
            return EngraveResult(solid=body)

        return EngraveResult(solid=engraved, engraved=True, depth=depth)

    def _skipped(self, reason: str) -> None:
        if self.build_logger is not None:
            self.build_logger.log_engrave_skipped(reason)
