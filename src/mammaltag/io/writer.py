"""Export writer for saving encoded solids.

This module provides the ExportWriter class for writing export byte
buffers to disk with the tag naming convention.
"""

import re
from pathlib import Path

import structlog

from mammaltag.domain import ExportFormat
from mammaltag.exceptions import ExportError

logger = structlog.get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^\w\-]+")


class ExportWriter:
    """Writes export bytes to a file.

    Example:
        writer = ExportWriter(Path("rex-tag.stl"))
        writer.save(data)
    """

    def __init__(self, output_path: Path) -> None:
        """Initialize the export writer.

        Args:
            output_path: Path where the export will be saved
        """
        self._output_path = output_path

    @property
    def output_path(self) -> Path:
        return self._output_path

    def save(self, data: bytes) -> int:
        """Write the buffer, creating parent directories as needed.

        Args:
            data: Encoded solid

        Returns:
            Number of bytes written

        Raises:
            ExportError: If the buffer is empty or cannot be written
        """
        fmt = self._output_path.suffix.lstrip(".") or "bin"
        if not data:
            raise ExportError(fmt, "nothing to write")

        try:
            self._output_path.parent.mkdir(parents=True, exist_ok=True)
            self._output_path.write_bytes(data)
        except OSError as e:
            raise ExportError(fmt, str(e)) from e

        logger.info("Export written", path=str(self._output_path), size=len(data))
        return len(data)

    @staticmethod
    def get_export_path(text: str, fmt: ExportFormat, directory: Path | None = None) -> Path:
        """Generate output path with the tag naming convention.

        Converts: "Rex", STL -> Rex-tag.stl
                  "", GLB -> tag.glb
                  "Mr. Whiskers", STL -> Mr_Whiskers-tag.stl

        Args:
            text: Engraved text (may be empty)
            fmt: Export format, selects the extension
            directory: Parent directory (current directory if None)

        Returns:
            Path of the export file
        """
        stem = _UNSAFE_CHARS.sub("_", text.strip()).strip("_")
        name = f"{stem}-tag{fmt.extension}" if stem else f"tag{fmt.extension}"
        return (directory or Path(".")) / name
