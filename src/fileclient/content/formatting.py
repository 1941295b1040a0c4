"""Display helpers for sizes, permission bits, timestamps and file kinds."""

from __future__ import annotations

import stat
import time

from fileclient.sandbox.backend import FileKind

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")

_KIND_LABELS = {
    FileKind.REGULAR: "regular file",
    FileKind.DIRECTORY: "directory",
    FileKind.SYMLINK: "symbolic link",
    FileKind.BLOCK: "block device",
    FileKind.CHAR: "character device",
    FileKind.FIFO: "FIFO",
    FileKind.SOCKET: "socket",
    FileKind.UNKNOWN: "unknown",
}

_TYPE_GLYPHS = (
    (stat.S_ISDIR, "d"),
    (stat.S_ISLNK, "l"),
    (stat.S_ISBLK, "b"),
    (stat.S_ISCHR, "c"),
    (stat.S_ISFIFO, "p"),
    (stat.S_ISSOCK, "s"),
)

_PERMISSION_BITS = (
    (stat.S_IRUSR, "r"), (stat.S_IWUSR, "w"), (stat.S_IXUSR, "x"),
    (stat.S_IRGRP, "r"), (stat.S_IWGRP, "w"), (stat.S_IXGRP, "x"),
    (stat.S_IROTH, "r"), (stat.S_IWOTH, "w"), (stat.S_IXOTH, "x"),
)


def format_size(size: int, human_readable: bool = False) -> str:
    if not human_readable:
        return str(size)

    value = float(size)
    unit_idx = 0
    while value >= 1024 and unit_idx < len(SIZE_UNITS) - 1:
        value /= 1024
        unit_idx += 1

    if unit_idx == 0:
        return f"{int(value)}{SIZE_UNITS[0]}"
    return f"{value:.1f}{SIZE_UNITS[unit_idx]}"


def format_permissions(mode: int) -> str:
    """Render ``mode`` the way ``ls -l`` does, e.g. ``drwxr-xr-x``."""
    glyph = "-"
    for test, char in _TYPE_GLYPHS:
        if test(mode):
            glyph = char
            break
    bits = "".join(char if mode & bit else "-" for bit, char in _PERMISSION_BITS)
    return glyph + bits


def display_text(text: str) -> str:
    """Make filesystem text printable: undecodable name bytes become U+FFFD."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def format_time(timestamp: float) -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(timestamp))


def kind_label(kind: FileKind) -> str:
    return _KIND_LABELS.get(kind, "unknown")
