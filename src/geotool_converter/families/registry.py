"""Tool family registry and discovery helpers."""

from __future__ import annotations

import importlib
import importlib.util
from collections.abc import Iterable
from pathlib import Path
from types import ModuleType

from geotool_converter.errors import FamilyError
from geotool_converter.families.base import ToolFamily
from geotool_converter.families.builtins import BUILTIN_FAMILIES


class FamilyRegistry:
    """Registry for tool families."""

    def __init__(self) -> None:
        self._families: dict[str, ToolFamily] = {}

    def register(self, family: ToolFamily) -> None:
        """Register family by unique name.

        Parameters
        ----------
        family : ToolFamily
            Family to register; a later registration under the same name
            replaces the earlier one.

        Raises
        ------
        FamilyError
            If family does not provide a valid name.
        """
        name = getattr(family, "name", "").strip()
        if not name:
            raise FamilyError("Tool family must define a non-empty 'name'.")
        self._families[name] = family

    def names(self) -> list[str]:
        """Return registered family names, sorted."""
        return sorted(self._families.keys())

    def get(self, name: str) -> ToolFamily:
        """Get family by name.

        Raises
        ------
        FamilyError
            If family name is not registered.
        """
        try:
            return self._families[name]
        except KeyError as exc:
            raise FamilyError(
                f"Unknown tool family '{name}'. Available families: {', '.join(self.names())}"
            ) from exc

    def load_module(self, module_or_path: str) -> None:
        """Load family definitions from module name or file path.

        .. warning::
            This method executes code from the specified module. Only load
            families from trusted sources.
        """
        module = _import_module_or_path(module_or_path)
        _register_from_module(module, self)


def _import_module_or_path(module_or_path: str) -> ModuleType:
    """Import module by import path or filesystem path.

    .. warning::
        This function executes arbitrary Python code from the specified module
        or file. Only use it with explicit user intent.

    Raises
    ------
    FamilyError
        If import cannot be completed.
    """
    candidate = Path(module_or_path)
    if candidate.exists():
        spec = importlib.util.spec_from_file_location(candidate.stem, candidate)
        if spec is None or spec.loader is None:
            raise FamilyError(f"Unable to load family module from {candidate}.")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    try:
        return importlib.import_module(module_or_path)
    except Exception as exc:
        raise FamilyError(
            f"Unable to import family module '{module_or_path}': {exc}"
        ) from exc


def _register_from_module(module: ModuleType, registry: FamilyRegistry) -> None:
    """Register family definitions found in module."""
    if hasattr(module, "register_families"):
        module.register_families(registry)
        return

    families_obj = getattr(module, "FAMILIES", None)
    if families_obj is not None:
        for family in families_obj:
            registry.register(family)
        return

    family_obj = getattr(module, "FAMILY", None)
    if family_obj is not None:
        registry.register(family_obj)
        return

    raise FamilyError(
        "Family module must expose register_families(registry), FAMILIES, or FAMILY."
    )


def create_default_registry(
    extra_modules: Iterable[str] | None = None,
) -> FamilyRegistry:
    """Create a registry holding the built-in families plus ``extra_modules``."""
    registry = FamilyRegistry()
    for family in BUILTIN_FAMILIES:
        registry.register(family)
    for module in extra_modules or []:
        registry.load_module(module)
    return registry
