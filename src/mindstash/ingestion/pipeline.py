"""Chunked, progress-reporting bulk ingestion."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Awaitable, Callable, Iterable, Optional, Sequence

from mindstash.collection import AssetCollection
from mindstash.collection.models import Asset
from mindstash.config.models import IngestionOptions, MindstashConfig, TraversalOptions

from .discovery import EntryTraverser
from .errors import IngestionBusyError
from .extractors import FileAssetBuilder
from .models import (
    IDLE,
    CancellationToken,
    DropEntry,
    DropPayload,
    FileHandle,
    IngestionComplete,
    IngestionEvent,
    IngestionStatus,
    ProgressEvent,
)
from .text import TextSource, asset_from_text, new_note

LOGGER = logging.getLogger(__name__)

SCANNING_LABEL = "Scanning Directory..."
INITIALIZING_LABEL = "Initializing..."


class IngestionSession:
    """Coordinate traversal and file conversion into a single collection.

    One bulk operation may run at a time; starting another while the first is
    in flight raises :class:`IngestionBusyError`. Files are converted in
    fixed-size chunks: items of a chunk run concurrently and the next chunk
    starts only once the current one has finished. New assets reach the
    collection in one batch when the operation ends.

    Event streams should be consumed to the end (or closed with ``aclose``) so
    the session releases its lock promptly.
    """

    def __init__(
        self,
        collection: AssetCollection,
        options: IngestionOptions | None = None,
        *,
        traverser: EntryTraverser | None = None,
        builder: FileAssetBuilder | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.collection = collection
        self.options = options or IngestionOptions()
        if traverser is None:
            defaults = TraversalOptions()
            traverser = EntryTraverser(
                include_hidden=defaults.include_hidden,
                follow_symlinks=defaults.follow_symlinks,
                max_concurrency=defaults.max_concurrency,
            )
        self.traverser = traverser
        self.builder = builder or FileAssetBuilder(
            item_timeout_seconds=self.options.item_timeout_seconds
        )
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._state: ProgressEvent = IDLE

    @classmethod
    def from_config(
        cls, collection: AssetCollection, config: MindstashConfig
    ) -> "IngestionSession":
        """Build a session wired with the ingestion and traversal settings of ``config``."""
        traversal = config.traversal
        return cls(
            collection,
            config.ingestion,
            traverser=EntryTraverser(
                include_hidden=traversal.include_hidden,
                follow_symlinks=traversal.follow_symlinks,
                max_concurrency=traversal.max_concurrency,
            ),
        )

    @property
    def state(self) -> ProgressEvent:
        """Return the latest progress snapshot."""
        return self._state

    @property
    def busy(self) -> bool:
        """Whether a bulk operation is currently running."""
        return self._lock.locked()

    def ingest_text(self, text: str, source: TextSource = "paste") -> Optional[Asset]:
        """Classify pasted or dropped text and add the resulting asset."""
        asset = asset_from_text(text, source)
        if asset is not None:
            self.collection.add(asset)
        return asset

    def create_note(self, content: str) -> Optional[Asset]:
        """Add a styled note; blank content is ignored."""
        asset = new_note(content)
        if asset is not None:
            self.collection.add(asset)
        return asset

    async def process(
        self,
        files: Sequence[FileHandle],
        *,
        cancel: CancellationToken | None = None,
    ) -> AsyncGenerator[IngestionEvent, None]:
        """Convert ``files`` chunk by chunk, yielding progress after each chunk.

        Yields one :class:`ProgressEvent` per committed chunk and a final
        :class:`IngestionComplete`. An empty file list yields nothing.

        The session stays busy until the stream is exhausted or closed, so a
        caller that stops early should iterate inside ``contextlib.aclosing``.

        Raises:
            IngestionBusyError: If another operation is running.
        """
        async with self._exclusive():
            async for event in self._run_chunks(list(files), cancel):
                yield event

    async def begin_ingestion(
        self,
        entries: Iterable[DropEntry],
        *,
        cancel: CancellationToken | None = None,
    ) -> AsyncGenerator[IngestionEvent, None]:
        """Scan dropped entries, then process every file found beneath them.

        Raises:
            IngestionBusyError: If another operation is running.
        """
        async with self._exclusive():
            yield self._scanning()
            files = await self.traverser.traverse(entries)
            async for event in self._run_chunks(files, cancel):
                yield event

    async def ingest_drop(
        self,
        payload: DropPayload,
        *,
        cancel: CancellationToken | None = None,
    ) -> AsyncGenerator[IngestionEvent, None]:
        """Handle a complete drop gesture.

        A dropped URL or text without files becomes a single asset. Otherwise
        entries are scanned recursively; payloads without entry introspection
        are processed as a flat file list.

        Raises:
            IngestionBusyError: If another operation is running.
        """
        async with self._exclusive():
            dropped_text = payload.url or payload.text
            if dropped_text and not payload.has_files:
                asset = self.ingest_text(dropped_text, "drop")
                if asset is not None:
                    yield IngestionComplete(assets=(asset,))
                return

            if any(item.entry is not None for item in payload.items):
                yield self._scanning()
            files = await self.traverser.flatten(payload)
            async for event in self._run_chunks(files, cancel):
                yield event

    # ------------------------------------------------------------------ #
    # Internal helpers                                                   #
    # ------------------------------------------------------------------ #

    @asynccontextmanager
    async def _exclusive(self) -> AsyncIterator[None]:
        if self._lock.locked():
            raise IngestionBusyError("An ingestion session is already running for this collection.")
        async with self._lock:
            try:
                yield
            finally:
                self._state = IDLE

    def _scanning(self) -> ProgressEvent:
        self._state = ProgressEvent(status=IngestionStatus.SCANNING, current_label=SCANNING_LABEL)
        return self._state

    async def _run_chunks(
        self,
        files: list[FileHandle],
        cancel: CancellationToken | None,
    ) -> AsyncGenerator[IngestionEvent, None]:
        if not files:
            LOGGER.debug("Nothing to ingest.")
            self._state = IDLE
            return

        total = len(files)
        chunk_size = self.options.chunk_size
        self._state = ProgressEvent(
            status=IngestionStatus.PROCESSING, total=total, current_label=INITIALIZING_LABEL
        )
        LOGGER.info("Ingesting %d file(s) in chunks of %d.", total, chunk_size)

        created: list[Asset] = []
        cancelled = False
        for start in range(0, total, chunk_size):
            if cancel is not None and cancel.cancelled:
                cancelled = True
                LOGGER.info("Ingestion cancelled after %d of %d file(s).", start, total)
                break
            chunk = files[start : start + chunk_size]
            results = await asyncio.gather(
                *(self.builder.build(handle, start + offset) for offset, handle in enumerate(chunk))
            )
            created.extend(results)
            self._state = ProgressEvent(
                status=IngestionStatus.PROCESSING,
                processed=start + len(chunk),
                total=total,
                current_label=chunk[-1].name,
            )
            LOGGER.debug(
                "Committed chunk ending at %s (%d/%d).", chunk[-1].name, start + len(chunk), total
            )
            yield self._state
            await self._sleep(self.options.yield_delay_seconds)

        self.collection.extend_front(created)
        LOGGER.info("Added %d asset(s) to the collection.", len(created))
        yield IngestionComplete(assets=tuple(created), cancelled=cancelled)

        await self._sleep(self.options.cooldown_seconds)
        self._state = IDLE


__all__ = ["INITIALIZING_LABEL", "IngestionSession", "SCANNING_LABEL"]
