"""Backend construction from a kind name and a root."""

from __future__ import annotations

from fileclient.exceptions import StartupError
from fileclient.sandbox.backend import StorageBackend
from fileclient.sandbox.local import LocalBackend
from fileclient.sandbox.memory import InMemoryBackend

BACKEND_KINDS = ("local", "memory")


def create_backend(kind: str, root: str, create_missing: bool = False) -> StorageBackend:
    if not root:
        raise StartupError("Root directory cannot be empty")
    if kind == "local":
        return LocalBackend(root, create_missing=create_missing)
    if kind == "memory":
        return InMemoryBackend(root)
    raise StartupError(f"Unknown backend type: {kind} (expected one of {', '.join(BACKEND_KINDS)})")
