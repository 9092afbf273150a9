"""Serialized build service over a single shared kernel.

The modeling kernel is expensive to start and must never see calls from
two builds interleaved. This service owns the one kernel instance and the
one loaded font of the process, creates both lazily on first use, and runs
builds on a single worker thread. A request whose parameters equal those
of a build that is still queued or running shares that build's future.

Example:
    service = BuildService()
    mesh = service.build(TagParams(width=40, depth=40, height=15, text="Rex"))
    data = service.export(ExportFormat.STL)
"""

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor

import structlog

from mammaltag.config import MammaltagSettings
from mammaltag.core.builder import BuildResult, OutlineSource, TagBuilder
from mammaltag.domain import ExportFormat, MeshData, TagParams
from mammaltag.exceptions import BuildError
from mammaltag.io import open_font
from mammaltag.kernel.base import Kernel, Shape
from mammaltag.utils import BuildLogger


def default_kernel_factory() -> Kernel:
    """Create the OpenCascade kernel, importing OCP on first use."""
    from mammaltag.kernel.occ import OccKernel

    return OccKernel()


class BuildService:
    """Single-slot build queue with lazily initialized shared resources.

    Attributes:
        last_result: Most recent successful build, used by `export`
    """

    def __init__(
        self,
        settings: MammaltagSettings | None = None,
        kernel_factory: Callable[[], Kernel] | None = None,
        font_factory: Callable[[], OutlineSource] | None = None,
        build_logger: BuildLogger | None = None,
    ) -> None:
        """Initialize the service. Nothing expensive happens here.

        Args:
            settings: Application settings (defaults if None)
            kernel_factory: Creates the kernel on first use
            font_factory: Loads the font on first use (first non-empty text)
            build_logger: Event logger shared by all builds
        """
        self.settings = settings or MammaltagSettings()
        self.build_logger = build_logger or BuildLogger(structlog.get_logger("mammaltag"))
        self._kernel_factory = kernel_factory or default_kernel_factory
        self._font_factory = font_factory or (lambda: open_font(self.settings.font))

        self._init_lock = threading.Lock()
        self._kernel: Kernel | None = None
        self._font: OutlineSource | None = None
        self._builder: TagBuilder | None = None

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mammaltag-build")
        # Reentrant: a done-callback may run in the submitting thread
        self._pending_lock = threading.RLock()
        self._pending: dict[TagParams, Future[BuildResult]] = {}

        self.last_result: BuildResult | None = None

    # -- shared resources --------------------------------------------------

    def kernel(self) -> Kernel:
        """Return the shared kernel, creating it on first call.

        Concurrent first callers block on the same initialization.
        """
        if self._kernel is None:
            with self._init_lock:
                if self._kernel is None:
                    self._kernel = self._kernel_factory()
        return self._kernel

    def font(self) -> OutlineSource:
        """Return the shared font, loading it on first call.

        A failed load is not cached; the next caller tries again.
        """
        if self._font is None:
            with self._init_lock:
                if self._font is None:
                    self._font = self._font_factory()
        return self._font

    def _get_builder(self) -> TagBuilder:
        if self._builder is None:
            self._builder = TagBuilder(
                self.kernel(),
                settings=self.settings,
                font_loader=self.font,
                build_logger=self.build_logger,
            )
        return self._builder

    # -- requests ----------------------------------------------------------

    def submit(self, params: TagParams) -> "Future[BuildResult]":
        """Queue a build, or join an identical build already in flight.

        Args:
            params: Tag parameters

        Returns:
            Future resolving to the BuildResult
        """
        with self._pending_lock:
            in_flight = self._pending.get(params)
            if in_flight is not None:
                self.build_logger.log_coalesced(params.to_dict())
                return in_flight

            future = self._executor.submit(self._run, params)
            self._pending[params] = future
            future.add_done_callback(lambda f: self._forget(params, f))
            return future

    def build_result(self, params: TagParams, timeout: float | None = None) -> BuildResult:
        """Build and wait for the full result."""
        return self.submit(params).result(timeout=timeout)

    def build(self, params: TagParams, timeout: float | None = None) -> MeshData:
        """Build and wait for the render mesh.

        Raises:
            BuildError: If the base body cannot be built
            FontError: If text is non-empty and no font can be loaded
        """
        return self.build_result(params, timeout=timeout).mesh

    def export(
        self,
        fmt: ExportFormat = ExportFormat.STL,
        solid: Shape | None = None,
        timeout: float | None = None,
    ) -> bytes:
        """Encode a solid (the last built one by default).

        Runs on the build thread so it never overlaps a build.

        Raises:
            BuildError: If nothing has been built yet
            ExportError: If the kernel cannot encode the solid
        """
        if solid is None:
            if self.last_result is None:
                raise BuildError("nothing has been built yet")
            solid = self.last_result.solid

        future = self._executor.submit(lambda: self._get_builder().export(solid, fmt))
        return future.result(timeout=timeout)

    def _run(self, params: TagParams) -> BuildResult:
        result = self._get_builder().build(params)
        self.last_result = result
        return result

    def _forget(self, params: TagParams, future: "Future[BuildResult]") -> None:
        with self._pending_lock:
            if self._pending.get(params) is future:
                del self._pending[params]

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and let queued builds finish."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "BuildService":
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        self.shutdown()
