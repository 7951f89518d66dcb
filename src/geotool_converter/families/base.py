"""Tool family definition bundling policy, hooks and defaults."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from geotool_converter.application.options import ToolProfile
from geotool_converter.application.ports import CommandRunner, ToolHooks
from geotool_converter.infrastructure.probe import ToolCapabilityProbe
from geotool_converter.infrastructure.wrapper import NullHooks, ToolWrapper
from geotool_converter.schemas import ToolConfiguration


@dataclass(frozen=True)
class ToolFamily:
    """Everything needed to drive one kind of conversion tool.

    Parameters
    ----------
    name : str
        Registry key (``gdal``, ``ogr``, ...).
    profile : ToolProfile
        Invocation policy of the tool.
    config_filename : str
        Name of the user-editable configuration file.
    default_configuration : ToolConfiguration
        Compiled-in fallback configuration.
    hooks_factory : Callable[[], ToolHooks]
        Builds fresh hooks for each conversion; hooks may keep per-run state.
    """

    name: str
    profile: ToolProfile
    config_filename: str
    default_configuration: ToolConfiguration
    hooks_factory: Callable[[], ToolHooks] = NullHooks

    def create_probe(
        self,
        runner: CommandRunner | None = None,
        *,
        timeout: float | None = None,
    ) -> ToolCapabilityProbe:
        return ToolCapabilityProbe(self.profile, runner, timeout=timeout)

    def create_wrapper(
        self,
        executable: str,
        environment: Mapping[str, str] | None = None,
        *,
        runner: CommandRunner | None = None,
        timeout: float | None = None,
    ) -> ToolWrapper:
        """Bind the family's policy and hooks to an executable."""
        return ToolWrapper(
            executable,
            environment,
            profile=self.profile,
            hooks=self.hooks_factory(),
            runner=runner,
            timeout=timeout,
        )
