"""XML codec for tool configuration files.

Layout::

    <ToolConfiguration>
      <executable>gdal_translate</executable>
      <dataPath>/usr/share/gdal</dataPath>
      <environment>
        <variable name="GDAL_CACHEMAX" value="512"/>
      </environment>
      <formats>
        <Format>
          <toolFormat>GTiff</toolFormat>
          <geoserverFormat>GDAL-GTiff</geoserverFormat>
          <fileExtension>.tif</fileExtension>
          <singleFile>true</singleFile>
          <mimeType>image/tiff</mimeType>
          <type>BINARY</type>
          <option>-co</option>
          <option>TILED=YES</option>
        </Format>
      </formats>
    </ToolConfiguration>
"""

from __future__ import annotations

import xml.etree.ElementTree as StdET
from xml.etree.ElementTree import Element

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET
from pydantic import ValidationError

from geotool_converter.errors import ConfigLoadError
from geotool_converter.schemas import FormatDescriptor, ToolConfiguration

ROOT_TAGS = frozenset({"ToolConfiguration", "GdalConfiguration", "OgrConfiguration"})
FORMAT_TAGS = frozenset({"Format", "GdalFormat", "OgrFormat"})


def _text(element: Element) -> str | None:
    return element.text.strip() if element.text is not None else None


def _parse_environment(element: Element) -> dict[str, str]:
    env: dict[str, str] = {}
    for variable in element:
        name = variable.get("name")
        value = variable.get("value")
        if name is None:
            name_el = variable.find("name")
            name = _text(name_el) if name_el is not None else None
        if value is None:
            value_el = variable.find("value")
            value = _text(value_el) if value_el is not None else None
        if not name:
            raise ConfigLoadError(f"environment <{variable.tag}> entry without a name")
        env[name] = value or ""
    return env


def _parse_format(element: Element) -> dict[str, object]:
    payload: dict[str, object] = {}
    options: list[str] = []
    for child in element:
        if child.tag == "option":
            options.append((child.text or "").strip())
        elif child.tag == "options":
            options.extend(
                (item.text or "").strip() for item in child if item.tag == "option"
            )
        else:
            payload[child.tag] = _text(child)
    payload["options"] = tuple(options)
    return payload


def parse_configuration(data: bytes | str) -> ToolConfiguration:
    """Deserialize XML into a validated :class:`ToolConfiguration`.

    Raises
    ------
    ConfigLoadError
        If the document is malformed, unsafe, or fails validation.
    """
    try:
        root = ET.fromstring(data)
    except (StdET.ParseError, DefusedXmlException) as exc:
        raise ConfigLoadError(f"Malformed configuration XML: {exc}") from exc

    if root.tag not in ROOT_TAGS:
        raise ConfigLoadError(
            f"Unexpected root element <{root.tag}>, expected one of "
            f"{', '.join(sorted(ROOT_TAGS))}"
        )

    payload: dict[str, object] = {}
    formats: list[dict[str, object]] = []
    for child in root:
        if child.tag == "environment":
            payload["environment"] = _parse_environment(child)
        elif child.tag == "formats":
            for item in child:
                if item.tag not in FORMAT_TAGS:
                    raise ConfigLoadError(f"Unexpected <{item.tag}> inside <formats>")
                formats.append(_parse_format(item))
        else:
            payload[child.tag] = _text(child)
    payload["formats"] = formats

    try:
        return ToolConfiguration.model_validate(payload)
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid tool configuration: {exc}") from exc


def _append_text(parent: Element, tag: str, value: str | None) -> None:
    if value is not None:
        StdET.SubElement(parent, tag).text = value


def _format_element(descriptor: FormatDescriptor) -> Element:
    element = StdET.Element("Format")
    _append_text(element, "toolFormat", descriptor.tool_format)
    _append_text(element, "geoserverFormat", descriptor.public_name)
    _append_text(element, "fileExtension", descriptor.file_extension)
    _append_text(element, "singleFile", str(descriptor.single_file).lower())
    _append_text(element, "mimeType", descriptor.mime_type)
    _append_text(element, "type", descriptor.type.value)
    for option in descriptor.options:
        _append_text(element, "option", option)
    return element


def dump_configuration(configuration: ToolConfiguration) -> str:
    """Serialize ``configuration`` to an indented XML document."""
    root = StdET.Element("ToolConfiguration")
    _append_text(root, "executable", configuration.executable)
    _append_text(root, "dataPath", configuration.data_path)
    if configuration.environment:
        env = StdET.SubElement(root, "environment")
        for name, value in configuration.environment.items():
            StdET.SubElement(env, "variable", {"name": name, "value": value})
    formats = StdET.SubElement(root, "formats")
    for descriptor in configuration.formats:
        formats.append(_format_element(descriptor))
    StdET.indent(root)
    return StdET.tostring(root, encoding="unicode") + "\n"
