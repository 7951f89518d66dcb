"""Capability probing of the external conversion tool."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping

from geotool_converter.application.options import ToolProfile
from geotool_converter.application.ports import CommandRunner
from geotool_converter.errors import CapabilityProbeError
from geotool_converter.infrastructure.process import run_command

logger = logging.getLogger(__name__)


def parse_supported_formats(output: str, profile: ToolProfile) -> frozenset[str]:
    """Extract format codes from the tool's usage text."""
    formats: set[str] = set()
    for line in output.splitlines():
        code = profile.match_format(line)
        if code:
            formats.add(code)
    return frozenset(formats)


class ToolCapabilityProbe:
    """Ask an executable which output formats it supports.

    Parameters
    ----------
    profile : ToolProfile
        Arguments and output patterns of the probed tool.
    runner : CommandRunner | None, default=None
        Process runner, defaults to :func:`run_command`.
    timeout : float | None, default=None
        Optional limit for each probe run.
    """

    def __init__(
        self,
        profile: ToolProfile,
        runner: CommandRunner | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self.profile = profile
        self._runner = runner or run_command
        self._timeout = timeout

    def list_formats(
        self,
        executable: str,
        environment: Mapping[str, str] | None = None,
    ) -> frozenset[str]:
        """Run the probe and parse its output.

        Raises
        ------
        CapabilityProbeError
            If the executable cannot be run.
        """
        command = [executable, *self.profile.probe_args]
        try:
            outcome = self._runner(command, environment, timeout=self._timeout)
        except (OSError, subprocess.SubprocessError) as exc:
            raise CapabilityProbeError(
                f"Could not run {executable} to list its formats: {exc}"
            ) from exc
        # Usage output often comes with a non-zero exit code, only the text
        # is meaningful.
        return parse_supported_formats(outcome.output, self.profile)

    def supported_formats(
        self,
        executable: str,
        environment: Mapping[str, str] | None = None,
    ) -> frozenset[str]:
        """Return supported format codes, empty if the tool cannot be run."""
        try:
            formats = self.list_formats(executable, environment)
        except CapabilityProbeError:
            logger.exception(
                "Could not get the list of output formats supported by %s",
                executable,
            )
            return frozenset()
        logger.debug("%s supports %d formats", executable, len(formats))
        return formats

    def is_available(
        self,
        executable: str,
        environment: Mapping[str, str] | None = None,
    ) -> bool:
        """Return ``True`` if the version query exits with status 0."""
        command = [executable, *self.profile.version_args]
        try:
            outcome = self._runner(command, environment, timeout=self._timeout)
        except (OSError, subprocess.SubprocessError) as exc:
            logger.warning("%s is not available: %s", executable, exc)
            return False
        return outcome.exit_code == 0
