from fileclient.sandbox.backend import StorageBackend, FileKind, FileRecord, ByteWindow, kind_from_mode
from fileclient.sandbox.confined import ConfinedBackend
from fileclient.sandbox.local import LocalBackend
from fileclient.sandbox.memory import InMemoryBackend
from fileclient.sandbox.factory import create_backend

__all__ = [
    "StorageBackend", "FileKind", "FileRecord", "ByteWindow", "kind_from_mode",
    "ConfinedBackend", "LocalBackend", "InMemoryBackend", "create_backend",
]
