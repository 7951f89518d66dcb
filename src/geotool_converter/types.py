"""Shared enums and type aliases."""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class OutputType(str, Enum):
    """Content kind of a produced file, drives downstream encoding."""

    BINARY = "BINARY"
    TEXT = "TEXT"
    XML = "XML"

    @classmethod
    def _missing_(cls, value: object) -> OutputType | None:
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None


class WktConvertible(Protocol):
    """Anything exposing ``to_wkt()``, e.g. ``pyproj.CRS``."""

    def to_wkt(self) -> str: ...


type CrsLike = WktConvertible | str | int
