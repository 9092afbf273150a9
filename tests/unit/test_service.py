"""Unit tests for the serialized build service."""

import threading
import time
from unittest.mock import MagicMock

import pytest

from fakes import FakeKernel, FakeOutlineSource
from mammaltag.core.service import BuildService
from mammaltag.domain import ExportFormat, PathCommand, TagParams, TextOutline
from mammaltag.exceptions import BuildError, FontNotFoundError

PLAIN = TagParams(width=40, depth=40, height=15)
TEXT = TagParams(width=40, depth=40, height=15, text="A")


def _triangle_outline() -> TextOutline:
    return TextOutline(
        commands=[
            PathCommand.move(0.0, 0.0),
            PathCommand.line(600.0, 0.0),
            PathCommand.line(300.0, 700.0),
            PathCommand.close(),
        ],
        advance_width=600.0,
        ascender=800.0,
        descender=-200.0,
    )


@pytest.fixture
def kernel() -> FakeKernel:
    return FakeKernel()


@pytest.fixture
def service(kernel):
    svc = BuildService(
        kernel_factory=lambda: kernel,
        font_factory=lambda: FakeOutlineSource(_triangle_outline()),
    )
    yield svc
    svc.shutdown()


class TestLazyResources:
    """Tests for lazy kernel and font initialization."""

    def test_nothing_created_on_construction(self):
        kernel_factory = MagicMock()
        font_factory = MagicMock()
        svc = BuildService(kernel_factory=kernel_factory, font_factory=font_factory)
        svc.shutdown()

        kernel_factory.assert_not_called()
        font_factory.assert_not_called()

    def test_kernel_created_once_under_contention(self):
        created = []

        def slow_factory():
            time.sleep(0.05)
            created.append(1)
            return FakeKernel()

        svc = BuildService(kernel_factory=slow_factory)
        results = []
        threads = [threading.Thread(target=lambda: results.append(svc.kernel())) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        svc.shutdown()

        assert len(created) == 1
        assert all(k is results[0] for k in results)

    def test_font_not_loaded_for_plain_tag(self, kernel):
        font_factory = MagicMock()
        with BuildService(kernel_factory=lambda: kernel, font_factory=font_factory) as svc:
            svc.build(PLAIN)
        font_factory.assert_not_called()

    def test_font_loaded_once(self, kernel):
        font_factory = MagicMock(return_value=FakeOutlineSource(_triangle_outline()))
        with BuildService(kernel_factory=lambda: kernel, font_factory=font_factory) as svc:
            svc.build(TEXT)
            svc.build(TagParams(width=50, depth=40, height=15, text="B"))
        assert font_factory.call_count == 1

    def test_font_failure_not_cached(self):
        source = FakeOutlineSource(_triangle_outline())
        font_factory = MagicMock(side_effect=[FontNotFoundError(["/nope.ttf"]), source])
        svc = BuildService(kernel_factory=FakeKernel, font_factory=font_factory)

        with pytest.raises(FontNotFoundError):
            svc.font()
        assert svc.font() is source
        svc.shutdown()

    def test_font_failure_fails_text_build(self, kernel):
        svc = BuildService(
            kernel_factory=lambda: kernel,
            font_factory=MagicMock(side_effect=FontNotFoundError(["/nope.ttf"])),
        )
        with pytest.raises(FontNotFoundError):
            svc.build(TEXT)
        # A plain tag still builds without a font
        assert not svc.build(PLAIN).is_empty()
        svc.shutdown()


class TestCoalescing:
    """Tests for joining identical in-flight builds."""

    def test_identical_requests_share_future(self):
        release = threading.Event()
        kernel = FakeKernel()

        def blocked_factory():
            release.wait(timeout=5)
            return kernel

        build_logger = MagicMock()
        svc = BuildService(kernel_factory=blocked_factory, build_logger=build_logger)
        first = svc.submit(PLAIN)
        second = svc.submit(PLAIN)
        other = svc.submit(TagParams(width=41, depth=40, height=15))
        release.set()

        assert first is second
        assert other is not first
        assert first.result(timeout=5) is second.result(timeout=5)
        other.result(timeout=5)
        build_logger.log_coalesced.assert_called_once_with(PLAIN.to_dict())
        svc.shutdown()

    def test_finished_builds_forgotten(self, service):
        service.build(PLAIN)
        service.shutdown(wait=True)
        assert service._pending == {}

    def test_builds_never_overlap(self):
        active = []
        overlaps = []
        kernel = FakeKernel()
        original_fillet = kernel.fillet_edges

        def tracked_fillet(solid, radius):
            active.append(1)
            if len(active) > 1:
                overlaps.append(1)
            time.sleep(0.01)
            active.pop()
            return original_fillet(solid, radius)

        kernel.fillet_edges = tracked_fillet  # type: ignore[method-assign]
        with BuildService(kernel_factory=lambda: kernel) as svc:
            futures = [svc.submit(TagParams(width=40 + i, depth=40, height=15)) for i in range(5)]
            for f in futures:
                f.result(timeout=5)

        assert overlaps == []


class TestBuildAndExport:
    """Tests for build results and export."""

    def test_build_returns_mesh(self, service):
        mesh = service.build(PLAIN)
        assert mesh.triangle_count == 4
        mesh.validate()

    def test_last_result_tracks_latest_build(self, service):
        service.build(PLAIN)
        result = service.build_result(TEXT)
        assert service.last_result is result
        assert result.engraved is True

    def test_export_defaults_to_last_solid(self, service, kernel):
        result = service.build_result(PLAIN)
        data = service.export(ExportFormat.STL)

        assert data == f"stl:{kernel.volume(result.solid):.6f}".encode()

    def test_export_explicit_solid(self, service, kernel):
        plain = service.build_result(PLAIN)
        service.build(TEXT)
        data = service.export(ExportFormat.GLB, solid=plain.solid)

        assert data.startswith(b"glb:12000.")

    def test_export_before_build(self, service):
        with pytest.raises(BuildError, match="nothing has been built"):
            service.export()

    def test_build_error_surfaces(self):
        with BuildService(kernel_factory=lambda: FakeKernel(fail_fillet=True)) as svc:
            with pytest.raises(BuildError):
                svc.build(PLAIN)
            assert svc.last_result is None
