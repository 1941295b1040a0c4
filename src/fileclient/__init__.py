# Package Root
from fileclient.session import Session
from fileclient.shell import run_interactive
from fileclient.tools.registry import CommandResult
from fileclient.sandbox import (
    StorageBackend, FileKind, FileRecord, ByteWindow,
    LocalBackend, InMemoryBackend, create_backend,
)

__version__ = "1.0.0"
