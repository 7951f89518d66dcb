"""Fake gdal_translate / ogr2ogr executables for integration tests."""

from __future__ import annotations

import os
import stat
from collections.abc import Callable
from pathlib import Path

import pytest

GDAL_SCRIPT = r"""#!/bin/sh
case "$1" in
  --long-usage)
    echo "Usage: gdal_translate [-of <output_format>] <src> <dst>"
    echo "Available output formats:"
    echo "  JPEG2000: JPEG-2000 part 1"
    echo "  AAIGrid: Arc/Info ASCII Grid"
    exit 1
    ;;
  --version)
    echo "GDAL 3.8.4, released 2024/02/08"
    exit 0
    ;;
esac
LOG="{log}"
: > "$LOG"
prev=""
for arg in "$@"; do
  printf '%s\n' "$arg" >> "$LOG"
  if [ "$prev" = "-a_srs" ]; then
    cat "$arg" > "$LOG.crs"
  fi
  prev="$arg"
done
echo "$GDAL_DATA" > "$LOG.env"
if [ -n "$FAKE_TOOL_FAIL" ]; then
  echo "error: bad arg" >&2
  exit 1
fi
out=""
for arg in "$@"; do out="$arg"; done
echo "converted" > "$out"
exit 0
"""

OGR_SCRIPT = r"""#!/bin/sh
case "$1" in
  --long-usage)
    echo "Usage: ogr2ogr [-f format_name] dst_datasource_name src_datasource_name"
    echo " -f format_name: output file format name, possible values are:"
    echo '     -> "MapInfo File" (read/write)'
    echo '     -> "CSV" (read/write)'
    exit 1
    ;;
  --version)
    echo "GDAL 3.8.4, released 2024/02/08"
    exit 0
    ;;
esac
LOG="{log}"
: > "$LOG"
for arg in "$@"; do
  printf '%s\n' "$arg" >> "$LOG"
done
out=""
last=""
for arg in "$@"; do out="$last"; last="$arg"; done
echo "converted" > "$out"
exit 0
"""


def _write_tool(directory: Path, name: str, template: str) -> tuple[Path, Path]:
    log = directory / f"{name}.log"
    script = directory / name
    script.write_text(template.replace("{log}", str(log)), encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script, log


@pytest.fixture
def fake_gdal(tmp_path: Path) -> tuple[Path, Path]:
    """Return the fake gdal_translate script and its argument log."""
    tools = tmp_path / "bin"
    tools.mkdir(exist_ok=True)
    return _write_tool(tools, "gdal_translate", GDAL_SCRIPT)


@pytest.fixture
def fake_ogr(tmp_path: Path) -> tuple[Path, Path]:
    """Return the fake ogr2ogr script and its argument log."""
    tools = tmp_path / "bin"
    tools.mkdir(exist_ok=True)
    return _write_tool(tools, "ogr2ogr", OGR_SCRIPT)


@pytest.fixture
def write_config() -> Callable[[Path, str, Path, str], Path]:
    """Write a one-executable configuration file for a family."""

    def _write(config_dir: Path, filename: str, executable: Path, formats: str) -> Path:
        config_dir.mkdir(parents=True, exist_ok=True)
        path = config_dir / filename
        tmp = path.with_suffix(".tmp")
        tmp.write_text(
            "<ToolConfiguration>\n"
            f"  <executable>{executable}</executable>\n"
            "  <dataPath>/opt/gdal/share</dataPath>\n"
            f"  <formats>{formats}</formats>\n"
            "</ToolConfiguration>\n",
            encoding="utf-8",
        )
        os.replace(tmp, path)
        return path

    return _write
