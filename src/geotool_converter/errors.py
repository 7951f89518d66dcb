"""Exception hierarchy for tool configuration and conversion failures."""

from __future__ import annotations

from collections.abc import Sequence


class GeotoolError(Exception):
    """Base class for every error raised by this package.

    Parameters
    ----------
    message : str
        Human readable description.
    exit_code : int | None, default=None
        Optional process exit code the CLI should propagate.
    """

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class ConfigLoadError(GeotoolError):
    """Configuration resource could not be read or parsed."""


class ConfigSourceError(ConfigLoadError):
    """Configuration resource exists but is not a regular file."""


class CapabilityProbeError(GeotoolError):
    """External tool could not be run to list its capabilities."""


class FamilyError(GeotoolError):
    """Unknown tool family or invalid family module."""


class UnsupportedFormatError(GeotoolError):
    """Requested public format name is not currently active."""

    def __init__(self, format_name: str, available: Sequence[str] = ()) -> None:
        listed = ", ".join(available) if available else "<none>"
        super().__init__(
            f"Output format '{format_name}' is not supported. "
            f"Available formats: {listed}"
        )
        self.format_name = format_name
        self.available = tuple(available)


class ConversionError(GeotoolError):
    """External conversion tool failed.

    Parameters
    ----------
    message : str
        Summary of the failure.
    exit_code : int | None, default=None
        Exit status of the child process, ``None`` when it never ran to
        completion.
    command : Sequence[str], default=()
        Full argument vector that was executed.
    output : str, default=""
        Combined stdout/stderr captured from the child.
    """

    def __init__(
        self,
        message: str,
        *,
        exit_code: int | None = None,
        command: Sequence[str] = (),
        output: str = "",
    ) -> None:
        super().__init__(message, exit_code=exit_code)
        self.command = tuple(command)
        self.output = output


ConversionExecutionError = ConversionError


class CrsError(ConversionError):
    """Coordinate reference system could not be serialized to WKT."""
