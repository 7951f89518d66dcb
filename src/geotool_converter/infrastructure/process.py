"""Child process execution with merged output capture."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Mapping, Sequence

from geotool_converter.application.results import CommandOutcome

logger = logging.getLogger(__name__)


def merged_environment(overrides: Mapping[str, str] | None) -> dict[str, str]:
    """Return the ambient environment with ``overrides`` applied on top."""
    env = dict(os.environ)
    if overrides:
        env.update(overrides)
    return env


def run_command(
    command: Sequence[str],
    environment: Mapping[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> CommandOutcome:
    """Run ``command`` and return its exit code and combined output.

    Stderr is redirected into stdout, and the stream is drained before the
    exit status is collected so a chatty child cannot block on a full pipe.

    Parameters
    ----------
    command : Sequence[str]
        Executable followed by its arguments.
    environment : Mapping[str, str] | None, default=None
        Variables merged over the ambient environment.
    timeout : float | None, default=None
        Seconds to wait before killing the child; ``None`` waits forever.

    Returns
    -------
    CommandOutcome
        Exit status and decoded output.

    Raises
    ------
    OSError
        If the executable cannot be started.
    subprocess.TimeoutExpired
        If ``timeout`` elapses; the child has been killed by then and its
        output so far is on ``output``.
    """
    argv = list(command)
    logger.debug("running: %s", shlex.join(argv))
    with subprocess.Popen(
        argv,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        env=merged_environment(environment),
        text=True,
        encoding="utf-8",
        errors="replace",
    ) as process:
        try:
            output, _ = process.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            process.kill()
            output, _ = process.communicate()
            raise subprocess.TimeoutExpired(
                argv, exc.timeout, output=output or ""
            ) from exc
    return CommandOutcome(exit_code=process.returncode, output=output or "")
