"""Top-level API for converting datasets with external GIS tools."""

from __future__ import annotations

from pathlib import Path

from geotool_converter.schemas import FormatDescriptor, ToolConfiguration
from geotool_converter.types import CrsLike, OutputType

__version__ = "0.1.0"


def convert_dataset(
    input_path: Path,
    output_dir: Path,
    type_name: str,
    format_name: str,
    *,
    crs: CrsLike | None = None,
    family: str = "gdal",
    config_dir: Path | None = None,
    timeout: float | None = None,
) -> Path:
    """Convert a dataset file with the tool of ``family``.

    Parameters
    ----------
    input_path : Path
        Dataset to convert.
    output_dir : Path
        Directory receiving the output.
    type_name : str
        Logical type name, used as output file stem.
    format_name : str
        Public output format name, e.g. ``"GDAL-JPEG2000"``.
    crs : CrsLike, optional
        Coordinate reference system to assign to the output.
    family : str, default="gdal"
        Tool family (``"gdal"`` or ``"ogr"``).
    config_dir : Path, optional
        Directory holding the family configuration file.
    timeout : float, optional
        Seconds after which the tool is killed.

    Returns
    -------
    Path
        The produced file.
    """
    from .api import convert_dataset as _impl

    return _impl(
        input_path=input_path,
        output_dir=output_dir,
        type_name=type_name,
        format_name=format_name,
        crs=crs,
        family=family,
        config_dir=config_dir,
        timeout=timeout,
    )


def list_active_formats(
    family: str = "gdal",
    config_dir: Path | None = None,
) -> list[FormatDescriptor]:
    """Return the configured formats the installed tool supports."""
    from .api import list_active_formats as _impl

    return _impl(family=family, config_dir=config_dir)


__all__ = [
    "FormatDescriptor",
    "OutputType",
    "ToolConfiguration",
    "convert_dataset",
    "list_active_formats",
]
