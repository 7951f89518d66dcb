"""Generic wrapper around a command-line conversion tool."""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Mapping
from pathlib import Path

from geotool_converter.application.options import ToolProfile
from geotool_converter.application.ports import (
    CapabilityProbe,
    CommandRunner,
    ToolHooks,
)
from geotool_converter.application.requests import CommandContext, ConversionRequest
from geotool_converter.application.results import ConversionResult
from geotool_converter.crs import dump_crs
from geotool_converter.errors import ConversionError
from geotool_converter.infrastructure.probe import ToolCapabilityProbe
from geotool_converter.infrastructure.process import run_command
from geotool_converter.schemas import FormatDescriptor
from geotool_converter.types import CrsLike

logger = logging.getLogger(__name__)

_NOT_RUN = -1


class NullHooks:
    """Hooks that leave the command untouched."""

    def before_run(self, context: CommandContext) -> None:
        del context

    def after_run(self, exit_code: int) -> None:
        del exit_code


class ToolWrapper:
    """Build, run and interpret one external tool invocation.

    Parameters
    ----------
    executable : str
        Path or name of the tool binary.
    environment : Mapping[str, str] | None
        Variables merged over the ambient environment of the child.
    profile : ToolProfile
        Invocation policy of the tool (format flag, argument order, ...).
    hooks : ToolHooks | None, default=None
        Family-specific callbacks around the run.
    runner : CommandRunner | None, default=None
        Process runner, defaults to :func:`run_command`.
    probe : CapabilityProbe | None, default=None
        Capability probe, defaults to a :class:`ToolCapabilityProbe` sharing
        ``runner``.
    timeout : float | None, default=None
        Seconds after which a conversion is killed; ``None`` waits forever.
    """

    def __init__(
        self,
        executable: str,
        environment: Mapping[str, str] | None = None,
        *,
        profile: ToolProfile,
        hooks: ToolHooks | None = None,
        runner: CommandRunner | None = None,
        probe: CapabilityProbe | None = None,
        timeout: float | None = None,
    ) -> None:
        self._executable = executable
        self._environment = dict(environment or {})
        self.profile = profile
        self._hooks = hooks or NullHooks()
        self._runner = runner or run_command
        self._probe = probe or ToolCapabilityProbe(profile, self._runner)
        self._timeout = timeout

    @property
    def executable(self) -> str:
        return self._executable

    @property
    def environment(self) -> dict[str, str]:
        """Copy of the environment overrides passed to the child."""
        return dict(self._environment)

    def supported_formats(self) -> frozenset[str]:
        """Return the tool format codes the executable reports."""
        return self._probe.supported_formats(self._executable, self._environment)

    def is_available(self) -> bool:
        """Return ``True`` if the executable answers its version query."""
        return self._probe.is_available(self._executable, self._environment)

    def base_command(self, request: ConversionRequest) -> list[str]:
        """Executable, format selector and the format's own options."""
        command = [self._executable]
        if self.profile.format_flag is not None:
            command.extend([self.profile.format_flag, request.format.tool_format])
        command.extend(request.format.options)
        return command

    def path_arguments(self, request: ConversionRequest) -> list[str]:
        """Input and output paths in the order the tool expects them."""
        input_path = str(request.input_path.absolute())
        output_path = str(request.output_path)
        if self.profile.input_first:
            return [input_path, output_path]
        return [output_path, input_path]

    def convert(
        self,
        input_path: Path,
        output_dir: Path,
        type_name: str,
        format: FormatDescriptor,
        crs: CrsLike | None = None,
    ) -> Path:
        """Convert ``input_path`` and return the (main) produced file.

        Raises
        ------
        ConversionError
            If the tool cannot be started or exits with a non-zero status.
        """
        request = ConversionRequest(
            input_path=Path(input_path),
            output_dir=Path(output_dir),
            type_name=type_name,
            format=format,
            crs=crs,
        )
        return self.run(request).output_path

    def run(self, request: ConversionRequest) -> ConversionResult:
        """Execute ``request`` and return the structured outcome."""
        command = self.base_command(request)
        crs_file: Path | None = None
        exit_code = _NOT_RUN
        output = ""
        try:
            crs_file = self._stage_crs(request)
            if crs_file is not None and self.profile.crs_flag is not None:
                command.extend([self.profile.crs_flag, str(crs_file)])
            context = CommandContext(command=command, request=request, crs_file=crs_file)
            self._hooks.before_run(context)
            command = context.command
            command.extend(self.path_arguments(request))
            exit_code, output = self._execute(command)
        finally:
            try:
                self._hooks.after_run(exit_code)
            finally:
                if crs_file is not None:
                    crs_file.unlink(missing_ok=True)

        if exit_code != 0:
            raise ConversionError(
                f"{self._executable} did not terminate successfully, exit code "
                f"{exit_code}. Was trying to run: {shlex.join(command)}\n"
                f"Resulted in:\n{output}",
                exit_code=exit_code,
                command=command,
                output=output,
            )

        produced = request.output_path
        # Some drivers write a directory holding a like-named file.
        if produced.is_dir():
            produced = produced / request.output_filename
        return ConversionResult(
            output_path=produced,
            format_name=request.format.public_name,
            command=tuple(command),
            output=output,
        )

    def _stage_crs(self, request: ConversionRequest) -> Path | None:
        if request.crs is None:
            return None
        if self.profile.crs_flag is None:
            logger.warning(
                "%s takes no CRS argument, ignoring the requested CRS",
                self.profile.name,
            )
            return None
        parent_dir = request.input_path.absolute().parent
        try:
            return dump_crs(parent_dir, request.crs)
        except OSError as exc:
            raise ConversionError(
                f"Could not write the CRS definition for {self._executable} "
                f"into {parent_dir}: {exc}",
                command=self.base_command(request),
            ) from exc

    def _execute(self, command: list[str]) -> tuple[int, str]:
        try:
            outcome = self._runner(
                command, self._environment, timeout=self._timeout
            )
        except subprocess.TimeoutExpired as exc:
            partial = exc.output or ""
            if isinstance(partial, bytes):
                partial = partial.decode("utf-8", errors="replace")
            raise ConversionError(
                f"{self._executable} did not complete within {self._timeout} "
                f"seconds and was killed. Was trying to run: {shlex.join(command)}\n"
                f"Resulted in:\n{partial}",
                command=command,
                output=partial,
            ) from exc
        except OSError as exc:
            raise ConversionError(
                f"Could not run {self._executable}: {exc}. "
                f"Was trying to run: {shlex.join(command)}",
                command=command,
            ) from exc
        return outcome.exit_code, outcome.output
