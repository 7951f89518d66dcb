"""File-backed configuration source with change notifications."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from geotool_converter.errors import ConfigSourceError

logger = logging.getLogger(__name__)


class ObserverLike(Protocol):
    """Subset of the watchdog observer API used here."""

    def schedule(
        self, event_handler: FileSystemEventHandler, path: str, recursive: bool = False
    ) -> object: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def join(self, timeout: float | None = None) -> None: ...


class ConfigFileEventHandler(FileSystemEventHandler):
    """Forward events that touch one particular file."""

    def __init__(self, path: Path, on_change: Callable[[], None]) -> None:
        super().__init__()
        self._path = os.path.normcase(str(path.absolute()))
        self._on_change = on_change

    def _touches_config(self, event: FileSystemEvent) -> bool:
        candidates = [event.src_path, getattr(event, "dest_path", "")]
        for candidate in candidates:
            if isinstance(candidate, bytes):
                candidate = os.fsdecode(candidate)
            if candidate and os.path.normcase(os.path.abspath(candidate)) == self._path:
                return True
        return False

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in {"opened", "closed_no_write"}:
            return
        if self._touches_config(event):
            logger.debug("configuration change detected: %s", event.src_path)
            self._on_change()


class ObserverSubscription:
    """Subscription backed by a running watchdog observer."""

    def __init__(self, observer: ObserverLike) -> None:
        self._observer: ObserverLike | None = observer

    @property
    def active(self) -> bool:
        return self._observer is not None

    def close(self) -> None:
        """Stop the observer thread; calling twice is harmless."""
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=5)


class InactiveSubscription:
    """Subscription returned when nothing could be watched."""

    active = False

    def close(self) -> None:
        return None


class FileConfigurationSource:
    """Configuration resource stored in a file on disk.

    Parameters
    ----------
    path : Path
        Location of the configuration file.
    observer_factory : Callable[[], ObserverLike] | None, default=None
        Builds the watch observer, defaults to ``watchdog.observers.Observer``.
    """

    def __init__(
        self,
        path: Path,
        observer_factory: Callable[[], ObserverLike] | None = None,
    ) -> None:
        self.path = Path(path)
        self._observer_factory = observer_factory or Observer

    @property
    def name(self) -> str:
        return str(self.path)

    def read(self) -> bytes:
        """Return the file content.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        ConfigSourceError
            If the path exists but is not a regular file.
        """
        if not self.path.exists():
            raise FileNotFoundError(str(self.path))
        if not self.path.is_file():
            raise ConfigSourceError(f"{self.path} is not a regular file")
        return self.path.read_bytes()

    def subscribe(
        self, on_change: Callable[[], None]
    ) -> ObserverSubscription | InactiveSubscription:
        """Watch the file's directory and call ``on_change`` on every change."""
        directory = self.path.absolute().parent
        if not directory.is_dir():
            logger.warning(
                "Not watching %s: directory %s does not exist", self.path, directory
            )
            return InactiveSubscription()
        observer = self._observer_factory()
        observer.schedule(
            ConfigFileEventHandler(self.path, on_change),
            str(directory),
            recursive=False,
        )
        observer.start()
        return ObserverSubscription(observer)
