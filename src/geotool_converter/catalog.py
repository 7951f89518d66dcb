"""Compiled-in default format catalogs."""

from __future__ import annotations

from collections.abc import Iterable

from geotool_converter.schemas import FormatDescriptor, ToolConfiguration
from geotool_converter.types import OutputType

# Assumes the executables are on PATH and GDAL_DATA is set in the environment.
DEFAULT_GDAL_CONFIGURATION = ToolConfiguration(
    executable="gdal_translate",
    formats=(
        FormatDescriptor(
            tool_format="JPEG2000",
            public_name="GDAL-JPEG2000",
            file_extension=".jp2",
            single_file=True,
            mime_type="image/jp2",
        ),
        FormatDescriptor(
            tool_format="PDF",
            public_name="GDAL-PDF",
            file_extension=".pdf",
            single_file=True,
            mime_type="application/pdf",
        ),
        FormatDescriptor(
            tool_format="AAIGrid",
            public_name="GDAL-ArcInfoGrid",
            single_file=False,
        ),
        FormatDescriptor(
            tool_format="XYZ",
            public_name="GDAL-XYZ",
            file_extension=".txt",
            single_file=True,
            mime_type="text/plain",
            type=OutputType.TEXT,
        ),
    ),
)

DEFAULT_OGR_CONFIGURATION = ToolConfiguration(
    executable="ogr2ogr",
    formats=(
        FormatDescriptor(
            tool_format="MapInfo File",
            public_name="OGR-TAB",
            file_extension=".tab",
        ),
        FormatDescriptor(
            tool_format="MapInfo File",
            public_name="OGR-MIF",
            file_extension=".mif",
            options=("-dsco", "FORMAT=MIF"),
        ),
        FormatDescriptor(
            tool_format="CSV",
            public_name="OGR-CSV",
            file_extension=".csv",
            single_file=True,
            mime_type="text/csv",
            type=OutputType.TEXT,
            options=("-lco", "GEOMETRY=AS_WKT"),
        ),
        FormatDescriptor(
            tool_format="KML",
            public_name="OGR-KML",
            file_extension=".kml",
            single_file=True,
            mime_type="application/vnd.google-earth.kml",
            type=OutputType.XML,
        ),
    ),
)


def find_format(
    formats: Iterable[FormatDescriptor], public_name: str
) -> FormatDescriptor | None:
    """Return the descriptor registered under ``public_name``, if any."""
    for descriptor in formats:
        if descriptor.public_name == public_name:
            return descriptor
    return None
