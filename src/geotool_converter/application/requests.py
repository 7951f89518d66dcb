"""Per-call conversion request objects."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from geotool_converter.schemas import FormatDescriptor
from geotool_converter.types import CrsLike


@dataclass(frozen=True)
class ConversionRequest:
    """Inputs for a single tool invocation."""

    input_path: Path
    output_dir: Path
    type_name: str
    format: FormatDescriptor
    crs: CrsLike | None = None

    @property
    def output_filename(self) -> str:
        """``type_name`` plus the format's extension, when it has one."""
        return self.type_name + (self.format.file_extension or "")

    @property
    def output_path(self) -> Path:
        """Absolute path the tool is asked to write."""
        return (self.output_dir / self.output_filename).absolute()


@dataclass
class CommandContext:
    """Mutable view of a command being built, handed to before-run hooks."""

    command: list[str]
    request: ConversionRequest
    crs_file: Path | None = None
