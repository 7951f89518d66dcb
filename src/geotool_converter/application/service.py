"""Format lookup and conversion entry points for request handlers."""

from __future__ import annotations

import logging
from pathlib import Path

from geotool_converter.application.outputs import (
    XML_MIME_TYPE,
    ProducedOutput,
    output_for,
    subtype_mime,
)
from geotool_converter.application.ports import WrapperFactory
from geotool_converter.application.registry import FormatRegistry
from geotool_converter.application.requests import ConversionRequest
from geotool_converter.application.results import ConversionResult
from geotool_converter.errors import UnsupportedFormatError
from geotool_converter.schemas import FormatDescriptor
from geotool_converter.types import CrsLike, OutputType

logger = logging.getLogger(__name__)

OCTET_STREAM = "application/octet-stream"
ZIP_MIME_TYPE = "application/zip"
ZIP_EXTENSION = "zip"


def response_mime_type(descriptor: FormatDescriptor) -> str | None:
    """Mime type of the response; multi-file outputs are zipped."""
    if descriptor.single_file:
        return descriptor.mime_type
    return ZIP_MIME_TYPE


def response_file_extension(descriptor: FormatDescriptor) -> str | None:
    """Response file extension without the leading dot."""
    if not descriptor.single_file:
        return ZIP_EXTENSION
    if descriptor.file_extension is None:
        return None
    return descriptor.file_extension.lstrip(".")


class ToolFormatService:
    """Answer format questions and run conversions against the registry.

    Parameters
    ----------
    registry : FormatRegistry
        Shared registry kept current by the configuration loader.
    wrapper_factory : WrapperFactory
        Builds a tool bound to the snapshot's executable and environment.
    """

    def __init__(self, registry: FormatRegistry, wrapper_factory: WrapperFactory) -> None:
        self._registry = registry
        self._wrapper_factory = wrapper_factory

    @property
    def registry(self) -> FormatRegistry:
        return self._registry

    def list_formats(self) -> list[FormatDescriptor]:
        return self._registry.formats()

    def can_produce(self, public_name: str) -> bool:
        return self._registry.get(public_name) is not None

    def mime_type_of(self, public_name: str) -> str | None:
        descriptor = self._registry.get(public_name)
        return None if descriptor is None else response_mime_type(descriptor)

    def file_extension_of(self, public_name: str) -> str | None:
        descriptor = self._registry.get(public_name)
        return None if descriptor is None else response_file_extension(descriptor)

    def _execute(
        self,
        input_path: Path,
        output_dir: Path,
        type_name: str,
        public_name: str,
        crs: CrsLike | None,
    ) -> tuple[FormatDescriptor, ConversionResult]:
        snapshot = self._registry.snapshot()
        descriptor = snapshot.formats.get(public_name)
        if descriptor is None:
            raise UnsupportedFormatError(public_name, snapshot.names())
        tool = self._wrapper_factory(snapshot.executable, snapshot.environment)
        request = ConversionRequest(
            input_path=Path(input_path),
            output_dir=Path(output_dir),
            type_name=type_name,
            format=descriptor,
            crs=crs,
        )
        logger.debug("converting %s to %s", request.input_path, public_name)
        return descriptor, tool.run(request)

    def run(
        self,
        input_path: Path,
        output_dir: Path,
        type_name: str,
        public_name: str,
        crs: CrsLike | None = None,
    ) -> ConversionResult:
        """Convert with the format currently registered as ``public_name``.

        Raises
        ------
        UnsupportedFormatError
            If ``public_name`` is not active.
        ConversionError
            If the external tool fails.
        """
        return self._execute(input_path, output_dir, type_name, public_name, crs)[1]

    def convert(
        self,
        input_path: Path,
        output_dir: Path,
        type_name: str,
        public_name: str,
        crs: CrsLike | None = None,
    ) -> Path:
        """Convert and return the produced file."""
        return self.run(input_path, output_dir, type_name, public_name, crs).output_path

    def convert_output(
        self,
        input_path: Path,
        output_dir: Path,
        type_name: str,
        public_name: str,
        crs: CrsLike | None = None,
    ) -> ProducedOutput:
        """Convert and tag the produced file with its content kind."""
        descriptor, result = self._execute(
            input_path, output_dir, type_name, public_name, crs
        )
        mime_type = response_mime_type(descriptor) or OCTET_STREAM
        return output_for(descriptor, mime_type, result.output_path)

    def describe_outputs(self) -> list[ProducedOutput]:
        """One output descriptor per active format, mime qualified by name."""
        outputs: list[ProducedOutput] = []
        for descriptor in self._registry.formats():
            if descriptor.type is OutputType.XML:
                base = XML_MIME_TYPE
            else:
                base = response_mime_type(descriptor) or OCTET_STREAM
            outputs.append(
                output_for(descriptor, subtype_mime(base, descriptor.public_name))
            )
        return outputs
