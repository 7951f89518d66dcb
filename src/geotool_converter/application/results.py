"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CommandOutcome:
    """Exit status and combined output of one child process."""

    exit_code: int
    output: str


@dataclass(frozen=True)
class ConversionResult:
    """Structured conversion outcome."""

    output_path: Path
    format_name: str
    command: tuple[str, ...]
    output: str = ""
