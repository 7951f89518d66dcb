"""Tagged output kinds handed to downstream encoders."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from geotool_converter.schemas import FormatDescriptor
from geotool_converter.types import OutputType

XML_MIME_TYPE = "text/xml"


@dataclass(frozen=True)
class BinaryOutput:
    """Opaque bytes, streamed as-is."""

    kind: ClassVar[OutputType] = OutputType.BINARY

    format_name: str
    mime_type: str
    path: Path | None = None


@dataclass(frozen=True)
class TextOutput:
    """Character data, embeddable in text payloads."""

    kind: ClassVar[OutputType] = OutputType.TEXT

    format_name: str
    mime_type: str
    path: Path | None = None
    encoding: str = "utf-8"


@dataclass(frozen=True)
class XmlOutput:
    """XML document, embeddable as a parsed node."""

    kind: ClassVar[OutputType] = OutputType.XML

    format_name: str
    mime_type: str = XML_MIME_TYPE
    path: Path | None = None


type ProducedOutput = BinaryOutput | TextOutput | XmlOutput


def subtype_mime(mime_type: str, format_name: str) -> str:
    """Qualify ``mime_type`` with the public format name."""
    if not format_name:
        return mime_type
    return f"{mime_type}; subtype={format_name}"


def output_for(
    descriptor: FormatDescriptor,
    mime_type: str,
    path: Path | None = None,
) -> ProducedOutput:
    """Wrap ``descriptor``'s kind, mime type and optional produced path."""
    match descriptor.type:
        case OutputType.TEXT:
            return TextOutput(descriptor.public_name, mime_type, path)
        case OutputType.XML:
            return XmlOutput(descriptor.public_name, mime_type, path)
        case _:
            return BinaryOutput(descriptor.public_name, mime_type, path)
