"""Tool families (GDAL, OGR, third-party) and their registry."""

from .base import ToolFamily
from .builtins import GDAL_FAMILY, OGR_FAMILY
from .registry import FamilyRegistry, create_default_registry

__all__ = [
    "FamilyRegistry",
    "GDAL_FAMILY",
    "OGR_FAMILY",
    "ToolFamily",
    "create_default_registry",
]
