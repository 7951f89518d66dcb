"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Protocol

from geotool_converter.application.requests import CommandContext, ConversionRequest
from geotool_converter.application.results import CommandOutcome, ConversionResult


class CommandRunner(Protocol):
    """Run a command to completion and capture its combined output."""

    def __call__(
        self,
        command: Sequence[str],
        environment: Mapping[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> CommandOutcome:
        """Raise ``OSError`` when the process cannot be started."""


class CapabilityProbe(Protocol):
    """Discover which tool format codes an executable supports."""

    def supported_formats(
        self,
        executable: str,
        environment: Mapping[str, str] | None = None,
    ) -> frozenset[str]:
        """Return supported codes, empty when the tool cannot be run."""

    def is_available(
        self,
        executable: str,
        environment: Mapping[str, str] | None = None,
    ) -> bool:
        """Return ``True`` when the version query exits with status 0."""


class Subscription(Protocol):
    """Handle returned by a change subscription."""

    def close(self) -> None:
        """Stop delivering notifications."""


class ConfigurationSource(Protocol):
    """Readable, watchable configuration resource."""

    @property
    def name(self) -> str:
        """Label used in diagnostics."""

    def read(self) -> bytes:
        """Return raw content.

        Raises ``FileNotFoundError`` when absent and ``ConfigSourceError``
        when the resource is not a regular file.
        """

    def subscribe(self, on_change: Callable[[], None]) -> Subscription:
        """Invoke ``on_change`` whenever the resource changes."""


class ToolHooks(Protocol):
    """Tool-family specific extension points around a tool run."""

    def before_run(self, context: CommandContext) -> None:
        """Adjust ``context.command`` before input/output paths are appended."""

    def after_run(self, exit_code: int) -> None:
        """Clean up after the process finished, ``-1`` when it never ran."""


class ConversionTool(Protocol):
    """Tool bound to an executable and environment, able to run requests."""

    def run(self, request: ConversionRequest) -> ConversionResult:
        """Execute the request, raising ``ConversionError`` on failure."""


type WrapperFactory = Callable[[str, Mapping[str, str]], ConversionTool]
