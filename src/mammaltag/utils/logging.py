"""Logging utilities for Mammaltag."""

import logging
from pathlib import Path

import structlog

_HANDLER_MARK = "_mammaltag_handler"


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Calling this again replaces the handlers installed by a previous call.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        setattr(file_handler, _HANDLER_MARK, True)
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(console_handler, _HANDLER_MARK, True)
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("mammaltag")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class BuildLogger:
    """Structured events for the stages of a build.

    Holds no state of its own beyond the wrapped logger, so one instance is
    shared by the submitting threads and the build worker.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger

    def log_build_start(self, params: dict[str, object]) -> None:
        """Log start of a build request."""
        self._logger.debug("Build started", **params)

    def log_build_complete(
        self,
        engraved: bool,
        vertices: int,
        triangles: int,
        duration_ms: float,
    ) -> None:
        """Log a successful build."""
        self._logger.info(
            "Build complete",
            engraved=engraved,
            vertices=vertices,
            triangles=triangles,
            duration_ms=round(duration_ms, 2),
        )

    def log_build_error(self, error: Exception) -> None:
        """Log a terminal build failure."""
        self._logger.error(
            "Build failed",
            error=str(error),
            error_type=type(error).__name__,
        )

    def log_engrave_skipped(self, reason: str) -> None:
        """Log that the engraving step was skipped."""
        self._logger.debug("Engraving skipped", reason=reason)

    def log_engrave_failed(self, error: Exception) -> None:
        """Log a recovered engraving failure."""
        self._logger.warning(
            "Engraving failed, keeping un-engraved body",
            error=str(error),
            error_type=type(error).__name__,
        )

    def log_contour_analysis(
        self,
        text: str,
        total_contours: int,
        outer_count: int,
        hole_count: int,
        dropped_holes: int,
    ) -> None:
        """Log contour classification results."""
        self._logger.debug(
            "Contour analysis",
            text=text,
            total=total_contours,
            outer=outer_count,
            holes=hole_count,
            dropped_holes=dropped_holes,
        )

    def log_coalesced(self, params: dict[str, object]) -> None:
        """Log a request that reused an in-flight build."""
        self._logger.debug("Build request coalesced", **params)
