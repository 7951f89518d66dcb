"""Unit tests for building and running tool commands."""

from __future__ import annotations

import subprocess
import tempfile
from pathlib import Path

import pytest
from fakes import GDAL_USAGE, OGR_USAGE, ScriptedRunner

from geotool_converter.application.options import (
    GDAL_TRANSLATE_PROFILE,
    OGR2OGR_PROFILE,
    ToolProfile,
)
from geotool_converter.application.requests import CommandContext
from geotool_converter.catalog import DEFAULT_GDAL_CONFIGURATION, find_format
from geotool_converter.crs import crs_to_wkt
from geotool_converter.errors import ConversionError, CrsError
from geotool_converter.infrastructure.wrapper import ToolWrapper
from geotool_converter.schemas import FormatDescriptor


def _format(name: str) -> FormatDescriptor:
    descriptor = find_format(DEFAULT_GDAL_CONFIGURATION.formats, name)
    assert descriptor is not None
    return descriptor


def _input(tmp_path: Path) -> Path:
    source = tmp_path / "data" / "sfdem.tiff"
    source.parent.mkdir()
    source.write_bytes(b"II*\x00")
    return source


class _RecordingHooks:
    def __init__(self) -> None:
        self.events: list[object] = []

    def before_run(self, context: CommandContext) -> None:
        self.events.append(("before", list(context.command)))
        context.command.append("-q")

    def after_run(self, exit_code: int) -> None:
        self.events.append(("after", exit_code))


def test_gdal_command_layout(tmp_path: Path) -> None:
    """Input precedes output and the format code follows -of."""
    source = _input(tmp_path)
    runner = ScriptedRunner(GDAL_USAGE)
    wrapper = ToolWrapper(
        "gdal_translate",
        {"GDAL_DATA": "/share"},
        profile=GDAL_TRANSLATE_PROFILE,
        runner=runner,
    )

    out = wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-JPEG2000"))

    expected_out = (tmp_path / "sfdem.jp2").absolute()
    assert out == expected_out
    assert runner.conversions == [
        ["gdal_translate", "-of", "JPEG2000", str(source.absolute()), str(expected_out)]
    ]
    assert runner.calls[0][1] == {"GDAL_DATA": "/share"}


def test_output_first_profile(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner(OGR_USAGE)
    wrapper = ToolWrapper("ogr2ogr", profile=OGR2OGR_PROFILE, runner=runner)
    descriptor = FormatDescriptor(
        tool_format="CSV", public_name="OGR-CSV", file_extension=".csv", single_file=True
    )

    wrapper.convert(source, tmp_path, "roads", descriptor)

    command = runner.conversions[0]
    assert command[:3] == ["ogr2ogr", "-f", "CSV"]
    assert command[-2:] == [
        str((tmp_path / "roads.csv").absolute()),
        str(source.absolute()),
    ]


def test_options_inserted_in_declared_order(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner()
    wrapper = ToolWrapper("gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner)
    descriptor = FormatDescriptor(
        tool_format="GTiff",
        public_name="GDAL-GTiff",
        file_extension=".tif",
        options=("-co", "TILED=YES", "-co", "COMPRESS=LZW"),
    )

    wrapper.convert(source, tmp_path, "sfdem", descriptor)

    assert runner.conversions[0][1:7] == [
        "-of",
        "GTiff",
        "-co",
        "TILED=YES",
        "-co",
        "COMPRESS=LZW",
    ]


def test_format_without_extension_uses_type_name(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner()
    wrapper = ToolWrapper("gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner)

    out = wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-ArcInfoGrid"))

    assert out == (tmp_path / "sfdem").absolute()
    assert runner.conversions[0][-1] == str(out)


def test_directory_output_resolves_inner_file(tmp_path: Path) -> None:
    """Drivers that write a directory produce a like-named file inside it."""
    source = _input(tmp_path)

    def make_directory(argv: list[str]) -> None:
        target = Path(argv[-1])
        target.mkdir()
        (target / "sfdem").write_text("ncols 10\n")

    runner = ScriptedRunner(on_convert=make_directory)
    wrapper = ToolWrapper("gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner)

    out = wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-ArcInfoGrid"))

    assert out == (tmp_path / "sfdem" / "sfdem").absolute()
    assert out.is_file()


def test_crs_file_exists_during_run_and_is_removed(tmp_path: Path) -> None:
    source = _input(tmp_path)
    seen: dict[str, object] = {}

    def inspect(argv: list[str]) -> None:
        crs_path = Path(argv[argv.index("-a_srs") + 1])
        seen["path"] = crs_path
        seen["text"] = crs_path.read_text(encoding="utf-8")

    runner = ScriptedRunner(on_convert=inspect)
    wrapper = ToolWrapper("gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner)

    wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-JPEG2000"), "EPSG:4326")

    crs_path = seen["path"]
    assert isinstance(crs_path, Path)
    assert crs_path.parent == source.parent.absolute()
    assert crs_path.name.startswith("srs") and crs_path.suffix == ".wkt"
    assert seen["text"] == crs_to_wkt("EPSG:4326")
    assert not crs_path.exists()
    command = runner.conversions[0]
    assert command.index("-a_srs") < command.index(str(source.absolute()))


def test_crs_file_removed_on_failure(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner(exit_code=1, output="error: bad arg")
    wrapper = ToolWrapper("gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner)

    with pytest.raises(ConversionError):
        wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-JPEG2000"), 4326)

    assert list(source.parent.glob("srs*.wkt")) == []


def test_non_zero_exit_preserves_output_and_command(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner(exit_code=1, output="error: bad arg")
    wrapper = ToolWrapper("gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner)

    with pytest.raises(ConversionError) as excinfo:
        wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-PDF"))

    exc = excinfo.value
    assert exc.exit_code == 1
    assert exc.output == "error: bad arg"
    assert exc.command == tuple(runner.conversions[0])
    assert "did not terminate successfully, exit code 1" in str(exc)
    assert "error: bad arg" in str(exc)


def test_invalid_crs_does_not_run_tool(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner()
    hooks = _RecordingHooks()
    wrapper = ToolWrapper(
        "gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner, hooks=hooks
    )

    with pytest.raises(CrsError):
        wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-PDF"), "EPSG:nope")

    assert runner.conversions == []
    assert hooks.events == [("after", -1)]


def test_hooks_see_command_before_paths(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner()
    hooks = _RecordingHooks()
    wrapper = ToolWrapper(
        "gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner, hooks=hooks
    )

    wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-PDF"))

    assert hooks.events == [
        ("before", ["gdal_translate", "-of", "PDF"]),
        ("after", 0),
    ]
    assert runner.conversions[0][3] == "-q"


def test_missing_executable_raises_conversion_error(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner(error=FileNotFoundError("gdal_translate"))
    wrapper = ToolWrapper("gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner)

    with pytest.raises(ConversionError, match="Could not run gdal_translate") as excinfo:
        wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-PDF"))
    assert excinfo.value.exit_code is None


def test_timeout_raises_conversion_error(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner(error=subprocess.TimeoutExpired("gdal_translate", 2))
    wrapper = ToolWrapper(
        "gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner, timeout=2
    )

    with pytest.raises(ConversionError, match="did not complete within 2 seconds"):
        wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-PDF"))
    assert runner.calls[-1][2] == 2


def test_profile_without_crs_flag_ignores_crs(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner()
    profile = ToolProfile(name="plaintool", format_flag=None, crs_flag=None)
    wrapper = ToolWrapper("plaintool", profile=profile, runner=runner)

    wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-PDF"), "EPSG:4326")

    assert runner.conversions == [
        ["plaintool", str(source.absolute()), str((tmp_path / "sfdem.pdf").absolute())]
    ]
    assert list(source.parent.glob("srs*.wkt")) == []


def test_supported_formats_and_availability_use_environment() -> None:
    runner = ScriptedRunner(GDAL_USAGE)
    wrapper = ToolWrapper(
        "gdal_translate",
        {"GDAL_DATA": "/share"},
        profile=GDAL_TRANSLATE_PROFILE,
        runner=runner,
    )

    assert wrapper.supported_formats() == frozenset({"JPEG2000", "AAIGrid", "GTiff"})
    assert wrapper.is_available() is True
    assert all(env == {"GDAL_DATA": "/share"} for _, env, _ in runner.calls)
    assert wrapper.environment == {"GDAL_DATA": "/share"}
    assert wrapper.executable == "gdal_translate"


def test_timeout_keeps_partial_output(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner(
        error=subprocess.TimeoutExpired("gdal_translate", 2, output=b"0...10...20")
    )
    wrapper = ToolWrapper(
        "gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner, timeout=2
    )

    with pytest.raises(ConversionError) as excinfo:
        wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-PDF"))

    assert excinfo.value.exit_code is None
    assert excinfo.value.output == "0...10...20"
    assert "0...10...20" in str(excinfo.value)


def test_unwritable_crs_file_raises_conversion_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner()
    hooks = _RecordingHooks()
    wrapper = ToolWrapper(
        "gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner, hooks=hooks
    )

    def disk_full(*args: object, **kwargs: object) -> tuple[int, str]:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(tempfile, "mkstemp", disk_full)

    with pytest.raises(
        ConversionError, match="Could not write the CRS definition"
    ) as excinfo:
        wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-PDF"), "EPSG:4326")

    assert isinstance(excinfo.value.__cause__, OSError)
    assert excinfo.value.exit_code is None
    assert excinfo.value.command == ("gdal_translate", "-of", "PDF")
    assert runner.conversions == []
    assert hooks.events == [("after", -1)]


def test_crs_file_removed_when_tool_cannot_start(tmp_path: Path) -> None:
    source = _input(tmp_path)
    runner = ScriptedRunner(error=FileNotFoundError("gdal_translate"))
    hooks = _RecordingHooks()
    wrapper = ToolWrapper(
        "gdal_translate", profile=GDAL_TRANSLATE_PROFILE, runner=runner, hooks=hooks
    )

    with pytest.raises(ConversionError, match="Could not run gdal_translate"):
        wrapper.convert(source, tmp_path, "sfdem", _format("GDAL-PDF"), "EPSG:4326")

    assert "-a_srs" in runner.conversions[0]
    assert list(source.parent.glob("srs*.wkt")) == []
    assert hooks.events[-1] == ("after", -1)
