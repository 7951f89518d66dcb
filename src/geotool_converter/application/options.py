"""Per-tool invocation policies."""

from __future__ import annotations

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ToolProfile:
    """How a particular command-line tool expects to be called.

    Parameters
    ----------
    name : str
        Tool label used in diagnostics.
    format_flag : str | None
        Flag preceding the tool format code (``-of``, ``-f``), ``None`` when
        the tool infers the format on its own.
    input_first : bool
        Whether the input path precedes the output path.
    crs_flag : str | None
        Flag preceding the staged CRS file path.
    probe_args : tuple[str, ...]
        Arguments that make the tool list its supported formats.
    version_args : tuple[str, ...]
        Arguments for the lightweight availability check.
    format_patterns : tuple[str, ...]
        Regular expressions whose first group captures a supported format
        code from one line of probe output.
    data_variable : str | None
        Environment variable receiving the configured data directory.
    """

    name: str
    format_flag: str | None = None
    input_first: bool = True
    crs_flag: str | None = "-a_srs"
    probe_args: tuple[str, ...] = ("--long-usage",)
    version_args: tuple[str, ...] = ("--version",)
    format_patterns: tuple[str, ...] = (r"^\s{2}(\w+):\s",)
    data_variable: str | None = "GDAL_DATA"
    _compiled: tuple[re.Pattern[str], ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "_compiled",
            tuple(re.compile(pattern) for pattern in self.format_patterns),
        )

    def match_format(self, line: str) -> str | None:
        """Return the format code announced on ``line``, if any."""
        for pattern in self._compiled:
            match = pattern.search(line)
            if match:
                return match.group(1)
        return None


GDAL_TRANSLATE_PROFILE = ToolProfile(
    name="gdal_translate",
    format_flag="-of",
    input_first=True,
)

OGR2OGR_PROFILE = ToolProfile(
    name="ogr2ogr",
    format_flag="-f",
    input_first=False,
    format_patterns=(r'^\s*->\s*"([^"]+)"', r"^\s{2}(\w+):\s"),
)
