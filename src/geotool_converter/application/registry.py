"""Process-wide store of the currently active formats."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from geotool_converter.schemas import FormatDescriptor, ToolConfiguration


@dataclass(frozen=True)
class RegistrySnapshot:
    """Immutable view of executable, environment and active formats."""

    executable: str
    environment: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    formats: Mapping[str, FormatDescriptor] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def build(
        cls,
        executable: str,
        environment: Mapping[str, str] | None,
        formats: Iterable[FormatDescriptor],
    ) -> RegistrySnapshot:
        """Copy inputs into read-only mappings keyed by public name."""
        return cls(
            executable=executable,
            environment=MappingProxyType(dict(environment or {})),
            formats=MappingProxyType(
                {descriptor.public_name: descriptor for descriptor in formats}
            ),
        )

    def names(self) -> list[str]:
        """Return active public format names in configuration order."""
        return list(self.formats)


class FormatRegistry:
    """Holder of the current :class:`RegistrySnapshot`.

    Readers call :meth:`snapshot` and keep working with that object for the
    whole request; writers swap in a complete new snapshot with
    :meth:`publish`. A reader therefore sees either the old or the new state,
    never a mix of both.
    """

    def __init__(self, initial: RegistrySnapshot | None = None) -> None:
        self._lock = threading.Lock()
        self._snapshot = initial or RegistrySnapshot.build("", None, ())
        self._generation = 0

    @classmethod
    def from_configuration(
        cls,
        configuration: ToolConfiguration,
        data_variable: str | None = None,
    ) -> FormatRegistry:
        """Seed a registry with every format ``configuration`` declares."""
        return cls(
            RegistrySnapshot.build(
                configuration.executable,
                configuration.effective_environment(data_variable),
                configuration.formats,
            )
        )

    def snapshot(self) -> RegistrySnapshot:
        """Return the current snapshot."""
        return self._snapshot

    @property
    def generation(self) -> int:
        """Number of snapshots published since construction."""
        return self._generation

    def publish(self, snapshot: RegistrySnapshot) -> None:
        """Replace the current snapshot wholesale."""
        with self._lock:
            self._snapshot = snapshot
            self._generation += 1

    def get(self, public_name: str) -> FormatDescriptor | None:
        """Look up an active format by public name."""
        return self._snapshot.formats.get(public_name)

    def formats(self) -> list[FormatDescriptor]:
        """Return active formats in configuration order."""
        return list(self._snapshot.formats.values())
