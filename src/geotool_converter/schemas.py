"""Pydantic schemas for format descriptors and tool configurations."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from geotool_converter.types import OutputType


class FormatDescriptor(BaseModel):
    """One output format the external tool can produce.

    ``public_name`` is the lookup key used by callers; ``tool_format`` is the
    code passed to the tool and must be reported by its capability probe.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    tool_format: str = Field(
        validation_alias=AliasChoices(
            "tool_format", "toolFormat", "gdalFormat", "ogrFormat"
        )
    )
    public_name: str = Field(
        validation_alias=AliasChoices(
            "public_name", "geoserverFormat", "formatName"
        )
    )
    file_extension: str | None = Field(
        default=None,
        validation_alias=AliasChoices("file_extension", "fileExtension"),
    )
    single_file: bool = Field(
        default=False,
        validation_alias=AliasChoices("single_file", "singleFile"),
    )
    mime_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("mime_type", "mimeType"),
    )
    type: OutputType = OutputType.BINARY
    options: tuple[str, ...] = ()

    @field_validator("tool_format", "public_name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("format names cannot be blank.")
        return cleaned

    @field_validator("file_extension", "mime_type", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return OutputType.BINARY
        if isinstance(value, str):
            return value.strip().upper()
        return value


class ToolConfiguration(BaseModel):
    """Executable, environment and declared formats for one tool."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    executable: str = Field(
        validation_alias=AliasChoices(
            "executable", "gdalTranslateLocation", "ogr2ogrLocation"
        )
    )
    data_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices("data_path", "dataPath", "gdalData"),
    )
    environment: Mapping[str, str] = Field(default_factory=dict)
    formats: tuple[FormatDescriptor, ...] = ()

    @field_validator("executable")
    @classmethod
    def _validate_executable(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("executable cannot be blank.")
        return cleaned

    @field_validator("data_path", mode="before")
    @classmethod
    def _blank_data_path(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, value: object) -> dict[str, str]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError("environment must be a mapping.")
        return {str(key): str(item) for key, item in value.items()}

    @model_validator(mode="after")
    def _validate_unique_names(self) -> ToolConfiguration:
        seen: set[str] = set()
        for descriptor in self.formats:
            if descriptor.public_name in seen:
                raise ValueError(
                    f"duplicate public format name '{descriptor.public_name}'."
                )
            seen.add(descriptor.public_name)
        return self

    def effective_environment(self, data_variable: str | None) -> dict[str, str]:
        """Return environment with ``data_path`` injected under ``data_variable``."""
        env = dict(self.environment)
        if self.data_path and data_variable:
            env[data_variable] = self.data_path
        return env
