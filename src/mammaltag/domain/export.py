"""Interchange formats a finished solid can be exported to."""

from enum import Enum


class ExportFormat(str, Enum):
    """Binary interchange format.

    STL is the download/save format, GLB the preview-loading format.
    """

    STL = "stl"
    GLB = "glb"

    @property
    def extension(self) -> str:
        return f".{self.value}"
