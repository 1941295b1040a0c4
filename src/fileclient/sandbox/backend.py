"""StorageBackend: capability contract every storage backend implements.

Implementations:
    LocalBackend      POSIX directory tree under a root    (production)
    InMemoryBackend   pure in-process tree                 (testing)

The session only ever talks to this protocol; all paths passed in and out
are virtual paths (see ``fileclient.sandbox.paths``).
"""

from __future__ import annotations

import stat
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class FileKind(str, Enum):
    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    BLOCK = "block"
    CHAR = "char"
    FIFO = "fifo"
    SOCKET = "socket"
    UNKNOWN = "unknown"


def kind_from_mode(mode: int) -> FileKind:
    if stat.S_ISREG(mode):
        return FileKind.REGULAR
    if stat.S_ISDIR(mode):
        return FileKind.DIRECTORY
    if stat.S_ISLNK(mode):
        return FileKind.SYMLINK
    if stat.S_ISBLK(mode):
        return FileKind.BLOCK
    if stat.S_ISCHR(mode):
        return FileKind.CHAR
    if stat.S_ISFIFO(mode):
        return FileKind.FIFO
    if stat.S_ISSOCK(mode):
        return FileKind.SOCKET
    return FileKind.UNKNOWN


@dataclass(frozen=True)
class FileRecord:
    name: str
    size: int
    mode: int
    mtime: float
    atime: float
    ctime: float

    @property
    def kind(self) -> FileKind:
        return kind_from_mode(self.mode)

    @property
    def is_directory(self) -> bool:
        return self.kind is FileKind.DIRECTORY


@dataclass(frozen=True)
class ByteWindow:
    offset: int
    data: bytes


@runtime_checkable
class StorageBackend(Protocol):
    """Minimal contract that all storage backends must implement."""

    @property
    def kind(self) -> str: ...

    @property
    def root(self) -> str: ...

    # ── Confinement and navigation (pure, no I/O) ───────────────────

    def display_root_label(self) -> str: ...
    def is_escape_attempt(self, raw: str) -> bool: ...
    def resolve_path(self, raw: str) -> str: ...
    def current_directory(self) -> str: ...

    # ── Directory operations ────────────────────────────────────────

    async def change_directory(self, path: str) -> bool: ...
    async def list_directory(self, path: str) -> list[FileRecord]: ...
    async def is_directory(self, path: str) -> bool: ...
    async def exists(self, path: str) -> bool: ...

    # ── Metadata ────────────────────────────────────────────────────

    async def get_file_info(self, path: str) -> FileRecord: ...
    async def get_file_size(self, path: str) -> int: ...
    async def get_directory_size(self, path: str, recursive: bool = True) -> int: ...

    # ── File content ────────────────────────────────────────────────

    async def read_content(self, path: str, max_size: int = 0) -> bytes: ...
    async def read_content_at(self, path: str, offset: int, length: int = 0) -> ByteWindow: ...

    # ── Lifecycle ───────────────────────────────────────────────────

    def close(self) -> None: ...
