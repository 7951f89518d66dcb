"""Public one-shot API (delegates to application use-cases)."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from geotool_converter.application.use_cases import create_tool_runtime
from geotool_converter.application.use_cases import default_configuration_xml
from geotool_converter.application.use_cases import probe_tool
from geotool_converter.schemas import FormatDescriptor
from geotool_converter.types import CrsLike


def convert_dataset(
    input_path: Path,
    output_dir: Path,
    type_name: str,
    format_name: str,
    crs: Optional[CrsLike] = None,
    family: str = "gdal",
    config_dir: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> Path:
    """Load the family configuration once and run a single conversion."""
    with create_tool_runtime(
        family, config_dir, watch=False, timeout=timeout
    ) as runtime:
        return runtime.service.convert(
            input_path, output_dir, type_name, format_name, crs
        )


def list_active_formats(
    family: str = "gdal",
    config_dir: Optional[Path] = None,
) -> list[FormatDescriptor]:
    """Return the formats the installed tool can produce right now."""
    with create_tool_runtime(family, config_dir, watch=False) as runtime:
        return runtime.service.list_formats()


def probe_executable(executable: str, family: str = "gdal") -> tuple[bool, frozenset[str]]:
    """Return availability and supported format codes of ``executable``."""
    return probe_tool(executable, family)


def render_default_configuration(family: str = "gdal") -> str:
    """Return the compiled-in configuration of ``family`` as XML."""
    return default_configuration_xml(family)
