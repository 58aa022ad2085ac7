"""Data structures shared by the ingestion pipeline."""

from __future__ import annotations

import asyncio
import os
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol, Sequence, Union, runtime_checkable

from mindstash.collection.models import Asset

from .detectors import TypeDetector


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@runtime_checkable
class FileHandle(Protocol):
    """A file ready to be turned into an asset."""

    @property
    def name(self) -> str: ...

    @property
    def mime_type(self) -> str: ...

    @property
    def size(self) -> int: ...

    async def read_text(self) -> str: ...

    def reference(self) -> str: ...


@runtime_checkable
class DropEntry(Protocol):
    """A dropped filesystem entry that may be a file or a directory."""

    @property
    def name(self) -> str: ...

    @property
    def is_file(self) -> bool: ...

    @property
    def is_directory(self) -> bool: ...

    @property
    def is_symlink(self) -> bool: ...

    def identity(self) -> str: ...

    async def get_file(self) -> FileHandle: ...

    async def read_entries(self) -> Sequence["DropEntry"]: ...


@dataclass(slots=True)
class LocalFile:
    """File handle backed by a path on the local filesystem."""

    path: Path
    mime_type: str
    size: int

    @classmethod
    def from_path(cls, path: Path, detector: TypeDetector | None = None) -> "LocalFile":
        """Stat ``path`` and detect its MIME type.

        Raises:
            OSError: If the file cannot be stat'ed.
        """
        stat = path.stat()
        mime_type = (detector or TypeDetector()).detect(path)
        return cls(path=path, mime_type=mime_type, size=stat.st_size)

    @property
    def name(self) -> str:
        return self.path.name

    async def read_text(self) -> str:
        """Decode the file as UTF-8 text off the event loop."""
        return await asyncio.to_thread(self.path.read_text, encoding="utf-8", errors="replace")

    def reference(self) -> str:
        """Return a URI that refers to the file's bytes."""
        return self.path.resolve().as_uri()


@dataclass(slots=True)
class LocalEntry:
    """Drop entry wrapping a local path."""

    path: Path
    detector: TypeDetector = field(default_factory=TypeDetector)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_file(self) -> bool:
        return self.path.is_file()

    @property
    def is_directory(self) -> bool:
        return self.path.is_dir()

    @property
    def is_symlink(self) -> bool:
        return self.path.is_symlink()

    def identity(self) -> str:
        return str(self.path.resolve())

    async def get_file(self) -> LocalFile:
        return await asyncio.to_thread(LocalFile.from_path, self.path, self.detector)

    async def read_entries(self) -> list["LocalEntry"]:
        """List the directory's children sorted by name.

        Raises:
            OSError: If the directory cannot be read.
        """
        names = await asyncio.to_thread(os.listdir, self.path)
        return [LocalEntry(self.path / name, self.detector) for name in sorted(names)]


@dataclass(slots=True)
class DropItem:
    """One item of a drop payload.

    ``entry`` is present when the environment supports entry introspection;
    otherwise only a bare ``file`` may be available.
    """

    entry: Optional[DropEntry] = None
    file: Optional[FileHandle] = None


@dataclass(slots=True)
class DropPayload:
    """Everything delivered by a single drop gesture.

    Attributes:
        url: Dropped URL string, if any.
        text: Dropped plain text, if any.
        items: Drop items, possibly carrying filesystem entries.
        files: Flat file list used when items are unavailable.
    """

    url: Optional[str] = None
    text: Optional[str] = None
    items: list[DropItem] = field(default_factory=list)
    files: list[FileHandle] = field(default_factory=list)

    @classmethod
    def from_paths(
        cls, paths: Sequence[Path], detector: TypeDetector | None = None
    ) -> "DropPayload":
        """Build a payload of introspectable entries for local paths."""
        shared = detector or TypeDetector()
        return cls(items=[DropItem(entry=LocalEntry(Path(path), shared)) for path in paths])

    @property
    def has_files(self) -> bool:
        return bool(self.items or self.files)


class IngestionStatus(str, Enum):
    """Lifecycle phases of an ingestion session."""

    IDLE = "idle"
    SCANNING = "scanning"
    PROCESSING = "processing"


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """Immutable snapshot of an ingestion session's progress.

    Attributes:
        status: Current lifecycle phase.
        processed: Files completed so far.
        total: Files discovered; zero while scanning.
        current_label: Human-readable name of the item in flight.
    """

    status: IngestionStatus
    processed: int = 0
    total: int = 0
    current_label: str = ""

    @property
    def percentage(self) -> int:
        """Completion percentage, clamped to 100."""
        if self.total == 0:
            return 0
        return min(100, round(self.processed / self.total * 100))


IDLE = ProgressEvent(status=IngestionStatus.IDLE)


@dataclass(frozen=True, slots=True)
class IngestionComplete:
    """Final stream item carrying the batch of newly created assets.

    Attributes:
        assets: New assets in chunk order, as prepended to the collection.
        cancelled: Whether the session stopped early at a chunk boundary.
    """

    assets: tuple[Asset, ...]
    cancelled: bool = False


IngestionEvent = Union[ProgressEvent, IngestionComplete]


class CancellationToken:
    """Cooperative cancellation flag checked between chunks."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


__all__ = [
    "CancellationToken",
    "DropEntry",
    "DropItem",
    "DropPayload",
    "FileHandle",
    "IDLE",
    "IngestionComplete",
    "IngestionEvent",
    "IngestionStatus",
    "LocalEntry",
    "LocalFile",
    "ProgressEvent",
    "now_ms",
]
