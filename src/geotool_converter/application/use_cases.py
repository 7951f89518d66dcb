"""Application use-cases wiring families, loader, registry and service."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

from geotool_converter.application.loader import ConfigurationLoader
from geotool_converter.application.ports import CommandRunner, ConversionTool
from geotool_converter.application.registry import FormatRegistry
from geotool_converter.application.service import ToolFormatService
from geotool_converter.families import FamilyRegistry, ToolFamily, create_default_registry
from geotool_converter.infrastructure.config_source import (
    FileConfigurationSource,
    ObserverLike,
)
from geotool_converter.infrastructure.xml_config import (
    dump_configuration,
    parse_configuration,
)

CONFIG_DIR_ENV = "GEOTOOL_CONFIG_DIR"


def resolve_config_dir(config_dir: Path | None = None) -> Path:
    """Explicit directory, else ``$GEOTOOL_CONFIG_DIR``, else the cwd."""
    if config_dir is not None:
        return Path(config_dir)
    from_env = os.getenv(CONFIG_DIR_ENV, "").strip()
    return Path(from_env) if from_env else Path.cwd()


def resolve_family(
    family: ToolFamily | str,
    family_modules: Iterable[str] | None = None,
    families: FamilyRegistry | None = None,
) -> ToolFamily:
    """Turn a family name into its definition."""
    if isinstance(family, ToolFamily):
        return family
    registry = families or create_default_registry(extra_modules=family_modules)
    return registry.get(family)


@dataclass
class ToolRuntime:
    """Registry, loader and service for one tool family."""

    family: ToolFamily
    registry: FormatRegistry
    loader: ConfigurationLoader
    service: ToolFormatService

    def close(self) -> None:
        """Stop watching the configuration file."""
        self.loader.close()

    def __enter__(self) -> ToolRuntime:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def create_tool_runtime(
    family: ToolFamily | str = "gdal",
    config_dir: Path | None = None,
    *,
    watch: bool = True,
    registry: FormatRegistry | None = None,
    runner: CommandRunner | None = None,
    timeout: float | None = None,
    family_modules: Iterable[str] | None = None,
    observer_factory: Callable[[], ObserverLike] | None = None,
) -> ToolRuntime:
    """Use-case: build and start everything needed to serve one tool family.

    The returned runtime has already loaded its configuration once; with
    ``watch`` it also reloads whenever the configuration file changes until
    :meth:`ToolRuntime.close` is called.
    """
    resolved = resolve_family(family, family_modules)
    registry = registry or FormatRegistry.from_configuration(
        resolved.default_configuration, resolved.profile.data_variable
    )
    source = FileConfigurationSource(
        resolve_config_dir(config_dir) / resolved.config_filename,
        observer_factory=observer_factory,
    )
    loader = ConfigurationLoader(
        source,
        resolved.default_configuration,
        registry,
        resolved.create_probe(runner),
        parse_configuration,
        data_variable=resolved.profile.data_variable,
    )

    def wrapper_factory(executable: str, environment: Mapping[str, str]) -> ConversionTool:
        return resolved.create_wrapper(
            executable, environment, runner=runner, timeout=timeout
        )

    service = ToolFormatService(registry, wrapper_factory)
    if watch:
        loader.start()
    else:
        loader.reload()
    return ToolRuntime(resolved, registry, loader, service)


def probe_tool(
    executable: str,
    family: ToolFamily | str = "gdal",
    *,
    runner: CommandRunner | None = None,
) -> tuple[bool, frozenset[str]]:
    """Use-case: availability and supported codes of ``executable``."""
    probe = resolve_family(family).create_probe(runner)
    return probe.is_available(executable), probe.supported_formats(executable)


def default_configuration_xml(family: ToolFamily | str = "gdal") -> str:
    """Use-case: the family's DEFAULT configuration as an XML document."""
    return dump_configuration(resolve_family(family).default_configuration)
