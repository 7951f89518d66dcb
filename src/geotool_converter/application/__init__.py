"""Application-layer use-cases, ports and state."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from geotool_converter.application.options import (
    GDAL_TRANSLATE_PROFILE,
    OGR2OGR_PROFILE,
    ToolProfile,
)
from geotool_converter.application.registry import FormatRegistry, RegistrySnapshot
from geotool_converter.application.requests import CommandContext, ConversionRequest
from geotool_converter.application.results import CommandOutcome, ConversionResult


def create_tool_runtime(
    family: str = "gdal",
    config_dir: Path | None = None,
    *,
    watch: bool = True,
    timeout: float | None = None,
    family_modules: Iterable[str] | None = None,
):
    """Build a started tool runtime via lazy use-case import."""
    from geotool_converter.application.use_cases import create_tool_runtime as _impl

    return _impl(
        family,
        config_dir,
        watch=watch,
        timeout=timeout,
        family_modules=family_modules,
    )


__all__ = [
    "CommandContext",
    "CommandOutcome",
    "ConversionRequest",
    "ConversionResult",
    "FormatRegistry",
    "GDAL_TRANSLATE_PROFILE",
    "OGR2OGR_PROFILE",
    "RegistrySnapshot",
    "ToolProfile",
    "create_tool_runtime",
]
