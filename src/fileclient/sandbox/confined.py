"""ConfinedBackend: shared navigation and read logic for rooted backends.

Holds the backend's virtual working directory and implements the parts of
the StorageBackend contract that only depend on three primitives a concrete
backend supplies:

    get_file_info(path)               metadata for one virtual path
    _list_names(path)                 child names of a virtual directory
    _read_range(path, offset, length) raw bytes, already bounds-checked
"""

from __future__ import annotations

import os

from fileclient.exceptions import (
    BackendIOError,
    FileClientError,
    InvalidArgument,
    IsADirectory,
    NotFoundError,
    OffsetOutOfRangeError,
)
from fileclient.logging.diagnostic import log_backend_event
from fileclient.sandbox import paths
from fileclient.sandbox.backend import ByteWindow, FileKind, FileRecord


class ConfinedBackend:
    kind = "confined"

    def __init__(self, root: str):
        self._root = root
        self._cwd = paths.ROOT
        self._closed = False

    @property
    def root(self) -> str:
        return self._root

    # ── Confinement and navigation ──────────────────────────────────

    def display_root_label(self) -> str:
        label = paths.to_backend_path(self._cwd, self._root)
        return label.rstrip("/") or "/"

    def is_escape_attempt(self, raw: str) -> bool:
        return paths.is_escape_attempt(raw, self._cwd)

    def resolve_path(self, raw: str) -> str:
        return paths.resolve(raw, self._cwd)

    def current_directory(self) -> str:
        return self._cwd

    async def change_directory(self, path: str) -> bool:
        if self.is_escape_attempt(path):
            return False
        target = self.resolve_path(path)
        if not await self.is_directory(target):
            return False
        self._cwd = target
        return True

    # ── Directory operations ────────────────────────────────────────

    async def exists(self, path: str) -> bool:
        try:
            await self.get_file_info(path)
        except NotFoundError:
            return False
        return True

    async def is_directory(self, path: str) -> bool:
        """Follows symlinks; a link that leaves the root is not a directory."""
        try:
            info = await self._content_info(path)
        except (NotFoundError, BackendIOError):
            return False
        return info.is_directory

    async def list_directory(self, path: str) -> list[FileRecord]:
        target = self.resolve_path(path)
        if not await self.is_directory(target):
            return []

        records: list[FileRecord] = []
        for name in await self._list_names(target):
            try:
                records.append(await self.get_file_info(paths.join(target, name)))
            except (FileClientError, OSError):
                # Entry vanished or cannot be inspected; leave it out.
                continue
        # Byte order of the on-disk name, also for undecodable names.
        return sorted(records, key=lambda r: os.fsencode(r.name))

    # ── Metadata ────────────────────────────────────────────────────

    async def get_file_size(self, path: str) -> int:
        return (await self.get_file_info(path)).size

    async def get_directory_size(self, path: str, recursive: bool = True) -> int:
        target = self.resolve_path(path)
        info = await self.get_file_info(target)
        if not info.is_directory:
            return info.size

        total = 0
        for record in await self.list_directory(target):
            if record.is_directory:
                if recursive:
                    total += await self.get_directory_size(paths.join(target, record.name), True)
            else:
                total += record.size
        return total

    # ── File content ────────────────────────────────────────────────

    async def read_content(self, path: str, max_size: int = 0) -> bytes:
        return (await self.read_content_at(path, 0, max_size)).data

    async def read_content_at(self, path: str, offset: int, length: int = 0) -> ByteWindow:
        if offset < 0 or length < 0:
            raise InvalidArgument("Offset and length must be non-negative")

        target = self.resolve_path(path)
        info = await self._content_info(target)
        if info.is_directory:
            raise IsADirectory(f"Is a directory: {target}")
        if info.kind is not FileKind.REGULAR:
            raise BackendIOError(f"Not a regular file: {target}")
        if offset > info.size:
            raise OffsetOutOfRangeError(f"Offset exceeds file size: {offset} > {info.size}")

        available = info.size - offset
        count = available if length == 0 else min(length, available)
        if count == 0:
            return ByteWindow(offset=offset, data=b"")
        data = await self._read_range(target, offset, count)
        return ByteWindow(offset=offset, data=data[:count])

    # ── Lifecycle ───────────────────────────────────────────────────

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._teardown()
        log_backend_event(self.kind, self._root, "closed")

    # ── Primitives supplied by concrete backends ────────────────────

    async def get_file_info(self, path: str) -> FileRecord:
        raise NotImplementedError

    async def _content_info(self, path: str) -> FileRecord:
        """Metadata of whatever a read of ``path`` would actually return."""
        return await self.get_file_info(path)

    async def _list_names(self, path: str) -> list[str]:
        raise NotImplementedError

    async def _read_range(self, path: str, offset: int, length: int) -> bytes:
        raise NotImplementedError

    def _teardown(self) -> None:
        pass
