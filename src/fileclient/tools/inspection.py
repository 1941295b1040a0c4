"""Inspection commands: file, stat, cat, hexdump.

Content is always read through the backend with an explicit size cap taken
from the session config.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from fileclient.content.classify import is_text, mime_guess
from fileclient.content.formatting import format_permissions, format_time, kind_label
from fileclient.content.hexdump import hexdump_render
from fileclient.exceptions import FileClientError, InvalidArgument
from fileclient.sandbox.backend import FileKind
from fileclient.tools.registry import CommandResult, split_args

if TYPE_CHECKING:
    from fileclient.session import Session


def parse_unsigned(value: str, what: str) -> int:
    """Strict unsigned decimal; no sign, whitespace or underscores."""
    if not (value.isascii() and value.isdigit()):
        raise InvalidArgument(f"Invalid {what} value: {value}")
    return int(value)


class _PathCommand:
    """Base for commands that need exactly one existing target path."""

    name = ""
    aliases = ()
    usage = ""

    def __init__(self, session: "Session"):
        self._session = session

    def _first_path(self, positionals: List[str]) -> Optional[str]:
        return positionals[0] if positionals else None

    def _usage(self) -> CommandResult:
        return CommandResult.fail(f"Usage: {self.usage}")


class FileCommand(_PathCommand):
    name = "file"
    usage = "file <path>"

    async def execute(self, args: List[str]) -> CommandResult:
        _, _, positionals = split_args(args)
        raw = self._first_path(positionals)
        if raw is None:
            return self._usage()

        backend = self._session.backend
        target = self._session.target(raw)
        if not await backend.exists(target):
            return CommandResult.fail(f"File does not exist: {raw}")

        info = await backend.get_file_info(target)
        description = f"{raw}: {kind_label(info.kind)}"

        if info.kind is FileKind.REGULAR:
            try:
                head = await backend.read_content(target, self._session.config.probe_bytes)
            except (FileClientError, OSError):
                description += ", cannot read content"
            else:
                description += ", text file" if is_text(head) else ", binary file"
                mime = mime_guess(raw)
                if mime:
                    description += f" ({mime})"

        return CommandResult.ok(description)


class StatCommand(_PathCommand):
    name = "stat"
    usage = "stat <path>"

    async def execute(self, args: List[str]) -> CommandResult:
        _, _, positionals = split_args(args)
        raw = self._first_path(positionals)
        if raw is None:
            return self._usage()

        backend = self._session.backend
        target = self._session.target(raw)
        if not await backend.exists(target):
            return CommandResult.fail(f"File does not exist: {raw}")

        info = await backend.get_file_info(target)
        lines = [
            f"File: {raw}",
            f"Type: {kind_label(info.kind)}",
            f"Size: {info.size} bytes",
            f"Permissions: {format_permissions(info.mode)} (0{info.mode & 0o777:o})",
            f"Modified: {format_time(info.mtime)}",
            f"Accessed: {format_time(info.atime)}",
            f"Created: {format_time(info.ctime)}",
        ]
        return CommandResult.ok("\n".join(lines))


class CatCommand(_PathCommand):
    name = "cat"
    usage = "cat <path>"

    async def execute(self, args: List[str]) -> CommandResult:
        _, _, positionals = split_args(args)
        raw = self._first_path(positionals)
        if raw is None:
            return self._usage()

        backend = self._session.backend
        target = self._session.target(raw)
        if not await backend.exists(target):
            return CommandResult.fail(f"File does not exist: {raw}")
        if await backend.is_directory(target):
            return CommandResult.fail(f"{raw} is a directory, cannot display content")

        content = await backend.read_content(target, self._session.config.cat_max_bytes)
        if not content:
            return CommandResult.ok("File is empty")
        if not is_text(content):
            return CommandResult.fail(f"{raw} is a binary file, cannot display")

        return CommandResult.ok(content.decode("utf-8", errors="replace"))


class HexdumpCommand(_PathCommand):
    name = "hexdump"
    usage = "hexdump [-offset N] [-len N] <path>"

    async def execute(self, args: List[str]) -> CommandResult:
        _, options, positionals = split_args(args, value_flags=("-offset", "-len"))
        offset = parse_unsigned(options["-offset"], "offset") if "-offset" in options else 0
        length = parse_unsigned(options["-len"], "length") if "-len" in options else 0

        raw = self._first_path(positionals)
        if raw is None:
            return self._usage()

        backend = self._session.backend
        target = self._session.target(raw)
        if not await backend.exists(target):
            return CommandResult.fail(f"File does not exist: {raw}")
        if await backend.is_directory(target):
            return CommandResult.fail(f"{raw} is a directory, cannot hexdump")

        cap = self._session.config.hexdump_max_bytes
        length = cap if length == 0 else min(length, cap)

        window = await backend.read_content_at(target, offset, length)
        if not window.data:
            return CommandResult.ok("No data to display (file empty or offset beyond file size)")
        return CommandResult.ok(hexdump_render(window))
