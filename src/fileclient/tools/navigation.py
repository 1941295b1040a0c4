"""Navigation commands: ls, cd, pwd, du.

All of them act on the session's current directory and reach storage only
through the session's backend.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from fileclient.content.formatting import display_text, format_permissions, format_size, format_time
from fileclient.sandbox.backend import FileRecord
from fileclient.tools.registry import CommandResult, split_args

if TYPE_CHECKING:
    from fileclient.session import Session


def format_long_entry(record: FileRecord) -> str:
    return f"{format_permissions(record.mode)} {record.size:>10} {format_time(record.mtime)} {display_text(record.name)}"


class LsCommand:
    name = "ls"
    aliases = ()
    usage = "ls [-l] [path]"

    def __init__(self, session: "Session"):
        self._session = session

    async def execute(self, args: List[str]) -> CommandResult:
        flags, _, positionals = split_args(args)
        long_format = "-l" in flags
        raw = positionals[0] if positionals else "."

        backend = self._session.backend
        target = self._session.target(raw)

        if not await backend.exists(target):
            return CommandResult.fail(f"Path does not exist: {raw}")

        if not await backend.is_directory(target):
            info = await backend.get_file_info(target)
            return CommandResult.ok(format_long_entry(info) if long_format else display_text(info.name))

        records = await backend.list_directory(target)
        if not records:
            return CommandResult.ok("Directory is empty")

        if long_format:
            return CommandResult.ok("\n".join(format_long_entry(r) for r in records))
        return CommandResult.ok(" ".join(display_text(r.name) for r in records))


class CdCommand:
    name = "cd"
    aliases = ()
    usage = "cd [path]"

    def __init__(self, session: "Session"):
        self._session = session

    async def execute(self, args: List[str]) -> CommandResult:
        _, _, positionals = split_args(args)
        raw = positionals[0] if positionals else "/"

        # Raises EscapeAttempt before the backend is touched.
        target = self._session.target(raw)

        if await self._session.change_directory(target):
            return CommandResult.ok("")
        return CommandResult.fail(f"Cannot change to directory: {raw}")


class PwdCommand:
    name = "pwd"
    aliases = ()
    usage = "pwd"

    def __init__(self, session: "Session"):
        self._session = session

    async def execute(self, args: List[str]) -> CommandResult:
        return CommandResult.ok(self._session.current_directory)


class DuCommand:
    name = "du"
    aliases = ()
    usage = "du [-h] [path]"

    def __init__(self, session: "Session"):
        self._session = session

    async def execute(self, args: List[str]) -> CommandResult:
        flags, _, positionals = split_args(args)
        human_readable = "-h" in flags
        raw = positionals[0] if positionals else "."

        backend = self._session.backend
        target = self._session.target(raw)

        if not await backend.exists(target):
            return CommandResult.fail(f"Path does not exist: {raw}")

        size = await backend.get_directory_size(target, True)
        return CommandResult.ok(f"{format_size(size, human_readable)}\t{raw}")
