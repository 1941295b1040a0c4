"""LocalBackend: StorageBackend backed by a directory on the real filesystem."""

from __future__ import annotations

import os
from pathlib import Path

from fileclient.exceptions import BackendIOError, NotFoundError, StartupError
from fileclient.logging.diagnostic import log_backend_event
from fileclient.sandbox import paths
from fileclient.sandbox.backend import FileRecord
from fileclient.sandbox.confined import ConfinedBackend


class LocalBackend(ConfinedBackend):
    kind = "local"

    def __init__(self, root: str, create_missing: bool = False):
        root_path = Path(root)
        if not root_path.exists() and create_missing:
            try:
                root_path.mkdir(mode=0o755, parents=True)
            except OSError as e:
                raise StartupError(f"Cannot create root directory {root}: {e}") from e
        if not root_path.is_dir():
            raise StartupError(f"Root directory does not exist or is not a directory: {root}")
        if not os.access(root_path, os.R_OK | os.X_OK):
            raise StartupError(f"Root directory is not readable: {root}")

        super().__init__(str(root_path.resolve()))
        log_backend_event(self.kind, self._root, "opened")

    # ── Path helpers ────────────────────────────────────────────────

    def _within_root(self, host_path: str) -> bool:
        return host_path == self._root or host_path.startswith(self._root.rstrip(os.sep) + os.sep)

    def _host_path(self, path: str, follow: bool = False) -> str:
        """Map a virtual path to a host path, refusing symlink routes out of the root."""
        host = paths.to_backend_path(self.resolve_path(path), self._root)
        check = os.path.realpath(host) if follow else os.path.realpath(os.path.dirname(host) or host)
        if host != self._root and not self._within_root(check):
            raise BackendIOError(f"Path resolves outside the root directory: {path}")
        return host

    # ── Primitives ──────────────────────────────────────────────────

    async def get_file_info(self, path: str) -> FileRecord:
        return self._stat(path, follow=False)

    async def _content_info(self, path: str) -> FileRecord:
        return self._stat(path, follow=True)

    def _stat(self, path: str, follow: bool) -> FileRecord:
        target = self.resolve_path(path)
        try:
            host = self._host_path(target, follow=follow)
            st = os.stat(host) if follow else os.lstat(host)
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError(f"No such file or directory: {target}") from e
        except OSError as e:
            raise BackendIOError(f"Cannot get file info: {target}: {e.strerror}") from e

        return FileRecord(
            name=paths.basename(target),
            size=st.st_size,
            mode=st.st_mode,
            mtime=st.st_mtime,
            atime=st.st_atime,
            ctime=st.st_ctime,
        )

    async def _list_names(self, path: str) -> list[str]:
        try:
            with os.scandir(self._host_path(path, follow=True)) as it:
                return [entry.name for entry in it]
        except FileNotFoundError:
            return []
        except OSError as e:
            raise BackendIOError(f"Cannot list directory: {path}: {e.strerror}") from e

    async def _read_range(self, path: str, offset: int, length: int) -> bytes:
        host = self._host_path(path, follow=True)
        chunks: list[bytes] = []
        remaining = length
        try:
            with open(host, "rb") as f:
                f.seek(offset)
                while remaining > 0:
                    chunk = f.read(remaining)
                    if not chunk:
                        break
                    chunks.append(chunk)
                    remaining -= len(chunk)
        except OSError as e:
            raise BackendIOError(f"Cannot read file: {path}: {e.strerror}") from e
        return b"".join(chunks)
