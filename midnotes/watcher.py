"""Watching a directory tree for file changes."""

from __future__ import annotations

import enum
import os
import queue
from dataclasses import dataclass
from os import PathLike
from typing import Union

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer


class WatcherError(Exception):
    """The watcher could not start, timed out, or has been closed."""


class FileEventKind(enum.Enum):
    """What happened to a path."""

    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"


@dataclass(frozen=True)
class FileEvent:
    """A change to one path."""

    kind: FileEventKind
    path: str


class _Closed:
    """Marker placed on the queue once the watcher stops."""


_CLOSED = _Closed()

_Item = Union[FileEvent, _Closed]


def _decode(path: str | bytes) -> str:
    return os.fsdecode(path)


class _Handler(FileSystemEventHandler):
    def __init__(self, events: queue.Queue[_Item]) -> None:
        super().__init__()
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        kind = event.event_type
        if kind == EVENT_TYPE_CREATED:
            paths = [event.src_path]
            event_kind = FileEventKind.CREATED
        elif kind == EVENT_TYPE_MODIFIED:
            paths = [event.src_path]
            event_kind = FileEventKind.MODIFIED
        elif kind == EVENT_TYPE_DELETED:
            paths = [event.src_path]
            event_kind = FileEventKind.DELETED
        elif kind == EVENT_TYPE_MOVED:
            paths = [event.src_path, getattr(event, "dest_path", "")]
            event_kind = FileEventKind.MODIFIED
        else:
            return
        for path in paths:
            if path:
                self._events.put(FileEvent(event_kind, _decode(path)))


class FileWatcher:
    """Reports created, modified and deleted paths under a directory, recursively."""

    def __init__(self, observer: Observer, events: queue.Queue[_Item]) -> None:
        self._observer = observer
        self._events = events
        self._closed = False

    @classmethod
    def watch(cls, path: str | PathLike[str]) -> FileWatcher:
        """Start watching a path and everything below it."""
        target = os.fspath(path)
        if not os.path.exists(target):
            raise WatcherError(f"io error: no such file or directory: {target}")
        events: queue.Queue[_Item] = queue.Queue()
        observer = Observer()
        try:
            observer.schedule(_Handler(events), target, recursive=True)
            observer.start()
        except OSError as exc:
            raise WatcherError(f"notify error: {exc}") from exc
        return cls(observer, events)

    def _closed_error(self) -> WatcherError:
        self._events.put(_CLOSED)
        return WatcherError("receive error: watcher is closed")

    def next_event(self, timeout: float | None = None) -> FileEvent:
        """Wait for the next event; raise WatcherError on timeout or once closed and drained."""
        try:
            item = self._events.get(timeout=timeout)
        except queue.Empty as exc:
            raise WatcherError("timed out waiting for a file event") from exc
        if isinstance(item, _Closed):
            raise self._closed_error()
        return item

    def try_next_event(self) -> FileEvent | None:
        """Return a pending event, or None if there is none yet."""
        try:
            item = self._events.get_nowait()
        except queue.Empty:
            return None
        if isinstance(item, _Closed):
            raise self._closed_error()
        return item

    def close(self) -> None:
        """Stop watching; events already received can still be read."""
        if self._closed:
            return
        self._closed = True
        self._observer.stop()
        self._observer.join()
        self._events.put(_CLOSED)

    def __enter__(self) -> FileWatcher:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()