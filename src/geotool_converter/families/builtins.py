"""Built-in GDAL and OGR tool families."""

from __future__ import annotations

from geotool_converter.application.options import (
    GDAL_TRANSLATE_PROFILE,
    OGR2OGR_PROFILE,
)
from geotool_converter.application.requests import CommandContext
from geotool_converter.catalog import (
    DEFAULT_GDAL_CONFIGURATION,
    DEFAULT_OGR_CONFIGURATION,
)
from geotool_converter.families.base import ToolFamily


class OgrLayerNameHooks:
    """Name the output layer after the logical type unless options do."""

    def before_run(self, context: CommandContext) -> None:
        if "-nln" in context.request.format.options:
            return
        context.command.extend(["-nln", context.request.type_name])

    def after_run(self, exit_code: int) -> None:
        del exit_code


GDAL_FAMILY = ToolFamily(
    name="gdal",
    profile=GDAL_TRANSLATE_PROFILE,
    config_filename="gdal_translate.xml",
    default_configuration=DEFAULT_GDAL_CONFIGURATION,
)

OGR_FAMILY = ToolFamily(
    name="ogr",
    profile=OGR2OGR_PROFILE,
    config_filename="ogr2ogr.xml",
    default_configuration=DEFAULT_OGR_CONFIGURATION,
    hooks_factory=OgrLayerNameHooks,
)

BUILTIN_FAMILIES = (GDAL_FAMILY, OGR_FAMILY)
