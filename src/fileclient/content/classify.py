"""Text/binary heuristic and extension-based MIME guessing."""

from __future__ import annotations

INSPECT_WINDOW = 512
BINARY_THRESHOLD_PERCENT = 30

_ALLOWED_CONTROLS = {0x09, 0x0A, 0x0D}

_MIME_TYPES = {
    "txt": "text/plain",
    "cpp": "text/x-c++src",
    "cc": "text/x-c++src",
    "c": "text/x-c++src",
    "h": "text/x-c++hdr",
    "hpp": "text/x-c++hdr",
    "py": "text/x-python",
    "js": "text/javascript",
    "html": "text/html",
    "css": "text/css",
    "json": "application/json",
    "xml": "application/xml",
    "pdf": "application/pdf",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "zip": "application/zip",
    "tar": "application/x-tar",
    "gz": "application/gzip",
}


def _utf8_sequence_length(lead: int) -> int:
    """Expected length of a UTF-8 sequence from its lead byte, 0 if invalid."""
    if lead & 0xE0 == 0xC0:
        return 2
    if lead & 0xF0 == 0xE0:
        return 3
    if lead & 0xF8 == 0xF0:
        return 4
    return 0


def is_text(content: bytes) -> bool:
    """Guess whether ``content`` is text by looking at its first 512 bytes.

    Any NUL byte makes it binary. Otherwise control characters (except tab,
    newline and carriage return) and broken UTF-8 sequences each count as
    one non-printable unit; 30% or more non-printable units means binary.
    """
    if not content:
        return True

    window = content[:INSPECT_WINDOW]
    if 0 in window:
        return False

    total = len(window)
    non_printable = 0
    i = 0
    while i < total:
        byte = window[i]

        if byte < 0x20:
            if byte not in _ALLOWED_CONTROLS:
                non_printable += 1
            i += 1
            continue

        if byte < 0x80:
            i += 1
            continue

        length = _utf8_sequence_length(byte)
        if length == 0:
            non_printable += 1
            i += 1
            continue

        tail = window[i + 1:i + length]
        if len(tail) < length - 1 or any(b & 0xC0 != 0x80 for b in tail):
            non_printable += 1
        i += length

    return non_printable * 100 // total < BINARY_THRESHOLD_PERCENT


def mime_guess(filename: str) -> str:
    """MIME type for ``filename``'s extension, or ``""`` when unknown."""
    name = filename.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    ext = name.rsplit(".", 1)[-1].lower()
    return _MIME_TYPES.get(ext, "")
