"""Expansion of dropped entries into flat file lists."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Sequence

from .models import DropEntry, DropPayload, FileHandle

LOGGER = logging.getLogger(__name__)


def _is_hidden(name: str) -> bool:
    return name.startswith(".") and name not in (".", "..")


class EntryTraverser:
    """Expand files and directory trees into an ordered list of file handles.

    Each root entry is expanded depth-first with an explicit stack, so a
    directory's subtree is complete before its next sibling. Roots are expanded
    concurrently and their results concatenated in root order. Directory reads
    and file materialization share a semaphore bounding concurrent I/O.
    """

    def __init__(
        self,
        *,
        include_hidden: bool,
        follow_symlinks: bool,
        max_concurrency: int,
    ) -> None:
        self.include_hidden = include_hidden
        self.follow_symlinks = follow_symlinks
        self.max_concurrency = max(1, max_concurrency)

    async def traverse(self, entries: Iterable[DropEntry]) -> list[FileHandle]:
        """Return every file reachable from ``entries``.

        Unreadable directories and files are logged and skipped; the rest of
        the traversal continues.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        visited: set[str] = set()
        expansions = await asyncio.gather(
            *(self._expand(entry, semaphore, visited) for entry in entries)
        )
        return [handle for files in expansions for handle in files]

    async def flatten(self, payload: DropPayload) -> list[FileHandle]:
        """Resolve a drop payload into files, recursing where entries allow it.

        Items without entry introspection contribute their bare file, and a
        payload without items falls back to its flat ``files`` list.
        """
        if not payload.items:
            return list(payload.files)

        roots: list[DropEntry] = []
        bare: list[FileHandle] = []
        for item in payload.items:
            if item.entry is not None:
                roots.append(item.entry)
            elif item.file is not None:
                bare.append(item.file)
        # Bare files are collected while entries are still being walked.
        return bare + await self.traverse(roots)

    async def _expand(
        self,
        root: DropEntry,
        semaphore: asyncio.Semaphore,
        visited: set[str],
    ) -> list[FileHandle]:
        files: list[FileHandle] = []
        stack: list[DropEntry] = [root]
        while stack:
            entry = stack.pop()
            # Roots were dropped explicitly and are never filtered.
            if entry is not root and not self._accepts(entry):
                continue
            if entry.is_file:
                handle = await self._materialize(entry, semaphore)
                if handle is not None:
                    files.append(handle)
            elif entry.is_directory:
                if self.follow_symlinks:
                    identity = entry.identity()
                    if identity in visited:
                        continue
                    visited.add(identity)
                children = await self._children(entry, semaphore)
                stack.extend(reversed(children))
        return files

    def _accepts(self, entry: DropEntry) -> bool:
        if not self.include_hidden and _is_hidden(entry.name):
            return False
        if entry.is_symlink and not self.follow_symlinks:
            return False
        return True

    async def _materialize(
        self, entry: DropEntry, semaphore: asyncio.Semaphore
    ) -> FileHandle | None:
        try:
            async with semaphore:
                return await entry.get_file()
        except Exception as exc:
            LOGGER.warning("Skipping unreadable file %s: %s", entry.name, exc)
            return None

    async def _children(
        self, entry: DropEntry, semaphore: asyncio.Semaphore
    ) -> Sequence[DropEntry]:
        try:
            async with semaphore:
                return await entry.read_entries()
        except Exception as exc:
            LOGGER.warning("Skipping unreadable directory %s: %s", entry.name, exc)
            return ()


__all__ = ["EntryTraverser"]
