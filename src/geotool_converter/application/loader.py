"""Configuration loading, capability filtering and hot reload."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from types import TracebackType

from geotool_converter.application.ports import (
    CapabilityProbe,
    ConfigurationSource,
    Subscription,
)
from geotool_converter.application.registry import FormatRegistry, RegistrySnapshot
from geotool_converter.errors import ConfigLoadError, ConfigSourceError
from geotool_converter.schemas import FormatDescriptor, ToolConfiguration

logger = logging.getLogger(__name__)

ConfigurationParser = Callable[[bytes], ToolConfiguration]


def filter_supported(
    configuration: ToolConfiguration,
    supported: frozenset[str],
) -> list[FormatDescriptor]:
    """Keep the declared formats whose tool code is in ``supported``."""
    accepted: list[FormatDescriptor] = []
    for descriptor in configuration.formats:
        if descriptor.tool_format in supported:
            accepted.append(descriptor)
        else:
            logger.error(
                "Skipping '%s' as its tool format '%s' is not among the ones "
                "supported by %s",
                descriptor.public_name,
                descriptor.tool_format,
                configuration.executable,
            )
    return accepted


class ConfigurationLoader:
    """Keep a :class:`FormatRegistry` in sync with a configuration resource.

    Every (re)load reads the resource, falls back to ``default`` when it is
    missing or broken, probes the configured executable, drops the formats it
    does not support and publishes the result as one snapshot.

    Parameters
    ----------
    source : ConfigurationSource
        Resource holding the user-editable configuration.
    default : ToolConfiguration
        Compiled-in configuration used when the resource is unusable.
    registry : FormatRegistry
        Registry receiving the accepted formats.
    probe : CapabilityProbe
        Capability probe of the configured tool.
    parser : ConfigurationParser
        Turns raw resource bytes into a configuration, raising
        ``ConfigLoadError`` on malformed content.
    data_variable : str | None, default=None
        Environment variable receiving the configured data path.
    """

    def __init__(
        self,
        source: ConfigurationSource,
        default: ToolConfiguration,
        registry: FormatRegistry,
        probe: CapabilityProbe,
        parser: ConfigurationParser,
        *,
        data_variable: str | None = None,
    ) -> None:
        self._source = source
        self._default = default
        self._registry = registry
        self._probe = probe
        self._parser = parser
        self._data_variable = data_variable
        self._reload_lock = threading.Lock()
        self._subscription: Subscription | None = None
        self._closed = False

    @property
    def registry(self) -> FormatRegistry:
        return self._registry

    @property
    def watching(self) -> bool:
        return self._subscription is not None

    def start(self) -> RegistrySnapshot:
        """Load once and subscribe to change notifications."""
        snapshot = self.reload()
        if self._subscription is None and not self._closed:
            self._subscription = self._source.subscribe(self._on_change)
        return snapshot

    def close(self) -> None:
        """Deregister from the change source."""
        self._closed = True
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.close()

    def __enter__(self) -> ConfigurationLoader:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _on_change(self) -> None:
        if self._closed:
            return
        try:
            self.reload()
        except Exception:
            # Runs on the watcher thread; keep it alive for the next change.
            logger.exception("Reloading %s failed", self._source.name)

    def read_configuration(self) -> ToolConfiguration:
        """Read the resource, falling back to the default configuration."""
        try:
            data = self._source.read()
        except FileNotFoundError:
            logger.info(
                "Could not find the %s configuration file, using internal defaults",
                self._source.name,
            )
            return self._default
        except ConfigSourceError as exc:
            logger.warning("%s, using internal defaults", exc)
            return self._default
        except OSError:
            logger.exception(
                "Error reading the %s configuration file, using internal defaults",
                self._source.name,
            )
            return self._default

        try:
            return self._parser(data)
        except ConfigLoadError:
            logger.exception(
                "Error parsing the %s configuration file, using internal defaults",
                self._source.name,
            )
            return self._default

    def reload(self) -> RegistrySnapshot:
        """Run load, probe, filter and publish; reloads never overlap."""
        with self._reload_lock:
            configuration = self.read_configuration()
            environment = configuration.effective_environment(self._data_variable)
            supported = self._probe.supported_formats(
                configuration.executable, environment
            )
            accepted = filter_supported(configuration, supported)
            snapshot = RegistrySnapshot.build(
                configuration.executable, environment, accepted
            )
            self._registry.publish(snapshot)
            logger.info(
                "Loaded %d of %d formats for %s",
                len(accepted),
                len(configuration.formats),
                configuration.executable,
            )
            return snapshot
