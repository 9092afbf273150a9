"""Tests for the command line interface."""

import logging

import pytest
from typer.testing import CliRunner

from fakes import FakeKernel
from mammaltag import __version__
import mammaltag.cli.app as app_module
from mammaltag.cli import cli
from mammaltag.cli.app import app
from mammaltag.core.service import BuildService
from mammaltag.exceptions import KernelUnavailableError
from mammaltag.utils.logging import _HANDLER_MARK

runner = CliRunner()


@pytest.fixture(autouse=True)
def _drop_log_handlers():
    """Remove handlers bound to the runner's captured streams."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)


@pytest.fixture
def fake_service(monkeypatch):
    """Route the CLI's BuildService onto a fake kernel."""

    def make_service(settings, build_logger=None):
        return BuildService(settings, kernel_factory=FakeKernel, build_logger=build_logger)

    monkeypatch.setattr(app_module, "BuildService", make_service)


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_console_script_entry(self, monkeypatch, capsys):
        """The installed `mammaltag` script runs the Typer app."""
        monkeypatch.setattr("sys.argv", ["mammaltag", "--version"])
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestBuildCommand:
    """Tests for `mammaltag build`."""

    def test_plain_tag(self, tmp_path, fake_service):
        output = tmp_path / "plain.stl"
        result = runner.invoke(app, ["build", "--output", str(output), "--quiet"])

        assert result.exit_code == 0, result.output
        assert output.read_bytes() == b"stl:12000.000000"

    def test_glb_format(self, tmp_path, fake_service):
        output = tmp_path / "plain.glb"
        result = runner.invoke(app, ["build", "-f", "glb", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert output.read_bytes().startswith(b"glb:")
        assert "Complete" in result.output

    def test_engraved_tag(self, tmp_path, tag_font_path, fake_service):
        output = tmp_path / "o.stl"
        result = runner.invoke(
            app,
            ["build", "--text", "O", "--font", str(tag_font_path), "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        volume = float(output.read_bytes().split(b":")[1])
        assert volume < 12000.0

    @pytest.mark.parametrize(
        "args",
        [
            ["--width", "0"],
            ["--depth", "-5"],
            ["--height", "nan"],
            ["--text-height", "0"],
        ],
    )
    def test_invalid_params(self, args, fake_service):
        result = runner.invoke(app, ["build", *args])
        assert result.exit_code == 1
        assert "Invalid tag parameter" in result.output

    def test_missing_font(self, tmp_path, fake_service):
        result = runner.invoke(
            app,
            ["build", "--text", "Rex", "--font", str(tmp_path / "nope.ttf"), "-o", str(tmp_path / "x.stl")],
        )
        assert result.exit_code == 1
        assert "Could not load font" in result.output
        assert not (tmp_path / "x.stl").exists()

    def test_kernel_unavailable(self, tmp_path, monkeypatch):
        def no_kernel():
            raise KernelUnavailableError("No module named 'OCP'")

        def make_service(settings, build_logger=None):
            return BuildService(settings, kernel_factory=no_kernel, build_logger=build_logger)

        monkeypatch.setattr(app_module, "BuildService", make_service)
        result = runner.invoke(app, ["build", "-o", str(tmp_path / "x.stl")])

        assert result.exit_code == 1
        assert "Modeling kernel is not available" in result.output


class TestFontInfoCommand:
    """Tests for `mammaltag font-info`."""

    def test_font_info(self, tag_font_path):
        result = runner.invoke(app, ["font-info", "--font", str(tag_font_path)])

        assert result.exit_code == 0, result.output
        assert "Tagtest" in result.output
        assert "TrueType" in result.output
        assert "1,000 UPM" in result.output

    def test_font_info_missing(self, tmp_path):
        result = runner.invoke(app, ["font-info", "--font", str(tmp_path / "nope.ttf")])
        assert result.exit_code == 1
