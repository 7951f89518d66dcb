"""Coordinate reference system serialization for tool side files."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path

from pyproj import CRS
from pyproj.enums import WktVersion
from pyproj.exceptions import CRSError as PyprojCRSError

from geotool_converter.errors import CrsError
from geotool_converter.types import CrsLike

logger = logging.getLogger(__name__)

_LINE_BREAKS = re.compile(r"\n\r|\r\n|\n|\r")
_DOUBLE_SPACES = re.compile(r" {2,}")


def crs_to_wkt(crs: CrsLike) -> str:
    """Serialize ``crs`` to single-line WKT.

    Parameters
    ----------
    crs : CrsLike
        A ``pyproj.CRS``, any object exposing ``to_wkt()``, or user input
        accepted by ``pyproj.CRS.from_user_input`` (``"EPSG:4326"``, an
        integer EPSG code, a WKT or PROJ string).

    Returns
    -------
    str
        Normalized WKT text.

    Raises
    ------
    CrsError
        If pyproj cannot interpret the input or produce WKT for it.
    """
    if isinstance(crs, CRS):
        wkt = _pyproj_wkt(crs)
    elif isinstance(crs, (str, int)):
        try:
            wkt = _pyproj_wkt(CRS.from_user_input(crs))
        except PyprojCRSError as exc:
            raise CrsError(f"Invalid CRS {crs!r}: {exc}") from exc
    else:
        wkt = crs.to_wkt()
    if not wkt:
        raise CrsError(f"CRS {crs!r} has no WKT representation.")
    return normalize_wkt(wkt)


def _pyproj_wkt(crs: CRS) -> str | None:
    # WKT1_GDAL keeps TOWGS84 parameters and is what older tool builds parse;
    # fall back to WKT2 for definitions WKT1 cannot express.
    return crs.to_wkt(WktVersion.WKT1_GDAL) or crs.to_wkt()


def normalize_wkt(wkt: str) -> str:
    """Drop line breaks and collapse runs of spaces."""
    return _DOUBLE_SPACES.sub(" ", _LINE_BREAKS.sub("", wkt)).strip()


def dump_crs(parent_dir: Path, crs: CrsLike | None) -> Path | None:
    """Write ``crs`` as WKT into a fresh temporary file under ``parent_dir``.

    Returns ``None`` when ``crs`` is ``None``. The caller owns the file and
    must delete it.
    """
    if crs is None:
        return None
    wkt = crs_to_wkt(crs)
    fd, name = tempfile.mkstemp(prefix="srs", suffix=".wkt", dir=parent_dir)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(wkt)
    except OSError:
        Path(name).unlink(missing_ok=True)
        raise
    logger.debug("staged CRS definition in %s", name)
    return Path(name)
