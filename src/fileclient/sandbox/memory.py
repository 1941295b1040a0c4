"""InMemoryBackend: pure in-process storage tree.

Designed for fast, deterministic testing of the session and command
handlers without touching the real filesystem. No temp directories, no
cleanup.

Usage:
    mem = InMemoryBackend("/mysql/data")
    mem.seed({"notes/readme.txt": "hello", "blob.bin": b"\\x00\\x01"})
    session = Session(mem)
"""

from __future__ import annotations

import stat
import time

from fileclient.exceptions import BackendIOError, NotFoundError
from fileclient.logging.diagnostic import log_backend_event
from fileclient.sandbox import paths
from fileclient.sandbox.backend import FileRecord
from fileclient.sandbox.confined import ConfinedBackend

DEFAULT_DIR_MODE = stat.S_IFDIR | 0o755
SYMLINK_MODE = stat.S_IFLNK | 0o777

_MAX_LINK_HOPS = 16


class _Node:
    __slots__ = ("mode", "data", "target", "mtime", "atime", "ctime")

    def __init__(
        self,
        mode: int,
        data: bytes = b"",
        target: str | None = None,
        mtime: float | None = None,
    ):
        now = time.time()
        self.mode = mode
        self.data = data
        self.target = target
        self.mtime = mtime if mtime is not None else now
        self.atime = self.mtime
        self.ctime = self.mtime

    @property
    def size(self) -> int:
        if self.target is not None:
            return len(self.target.encode("utf-8"))
        if stat.S_ISDIR(self.mode):
            return 4096
        return len(self.data)


class InMemoryBackend(ConfinedBackend):
    kind = "memory"

    def __init__(self, root: str = "/project"):
        super().__init__(root)
        self._nodes: dict[str, _Node] = {paths.ROOT: _Node(DEFAULT_DIR_MODE)}
        log_backend_event(self.kind, self._root, "opened")

    def seed(self, files: dict[str, str | bytes], mode: int = 0o644) -> None:
        """Pre-populate the tree. Keys are paths relative to the root."""
        for rel_path, content in files.items():
            data = content.encode("utf-8") if isinstance(content, str) else content
            target = paths.normalize(rel_path)
            self._ensure_parent_dirs(target)
            self._nodes[target] = _Node(stat.S_IFREG | (mode & 0o7777), data=data)

    def mkdir(self, path: str, mode: int = 0o755) -> None:
        target = paths.normalize(path)
        self._ensure_parent_dirs(target)
        self._nodes.setdefault(target, _Node(stat.S_IFDIR | (mode & 0o7777)))

    def add_symlink(self, path: str, target: str) -> None:
        """Create ``path`` pointing at ``target``, a virtual path resolved from the link's directory."""
        link = paths.normalize(path)
        self._ensure_parent_dirs(link)
        self._nodes[link] = _Node(SYMLINK_MODE, target=target)

    def add_special(self, path: str, file_type: int, mode: int = 0o644) -> None:
        """Create a device, FIFO or socket node; ``file_type`` is an ``S_IF*`` constant."""
        node_path = paths.normalize(path)
        self._ensure_parent_dirs(node_path)
        self._nodes[node_path] = _Node(file_type | (mode & 0o7777))

    def set_times(self, path: str, mtime: float, atime: float | None = None, ctime: float | None = None) -> None:
        node = self._node(paths.normalize(path))
        node.mtime = mtime
        node.atime = atime if atime is not None else mtime
        node.ctime = ctime if ctime is not None else mtime

    # ── Primitives ──────────────────────────────────────────────────

    async def get_file_info(self, path: str) -> FileRecord:
        target = self.resolve_path(path)
        return self._record(target, self._node(self._real_path(target, follow_last=False)))

    async def _content_info(self, path: str) -> FileRecord:
        target = self.resolve_path(path)
        return self._record(target, self._node(self._real_path(target)))

    async def _list_names(self, path: str) -> list[str]:
        real = self._real_path(path)
        prefix = "/" if real == paths.ROOT else real + "/"
        names: set[str] = set()
        for key in self._nodes:
            if key != paths.ROOT and key.startswith(prefix):
                names.add(key[len(prefix):].split("/")[0])
        return sorted(names)

    async def _read_range(self, path: str, offset: int, length: int) -> bytes:
        return self._node(self._real_path(path)).data[offset:offset + length]

    def _teardown(self) -> None:
        self._nodes.clear()

    # ── Internal ────────────────────────────────────────────────────

    def _node(self, target: str) -> _Node:
        node = self._nodes.get(target)
        if node is None:
            raise NotFoundError(f"No such file or directory: {target}")
        return node

    def _real_path(self, target: str, follow_last: bool = True, depth: int = 0) -> str:
        """Resolve symlinks along ``target``; the last component only if ``follow_last``."""
        if depth > _MAX_LINK_HOPS:
            raise BackendIOError(f"Too many levels of symbolic links: {target}")

        parts = [part for part in target.split("/") if part]
        current = paths.ROOT
        for i, part in enumerate(parts):
            current = paths.join(current, part)
            node = self._node(current)
            if node.target is not None and (follow_last or i < len(parts) - 1):
                parent = current.rsplit("/", 1)[0] or paths.ROOT
                current = self._real_path(paths.resolve(node.target, parent), True, depth + 1)
        return current

    @staticmethod
    def _record(target: str, node: _Node) -> FileRecord:
        return FileRecord(
            name=paths.basename(target),
            size=node.size,
            mode=node.mode,
            mtime=node.mtime,
            atime=node.atime,
            ctime=node.ctime,
        )

    def _ensure_parent_dirs(self, target: str) -> None:
        current = ""
        for part in target.split("/")[1:-1]:
            current += "/" + part
            if current not in self._nodes:
                self._nodes[current] = _Node(DEFAULT_DIR_MODE)
