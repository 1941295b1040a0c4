"""Session: the current virtual directory plus the command dispatcher.

A session is single-threaded: one command runs to completion before the
next line is read, and only a successful ``cd`` changes the directory.
"""

from __future__ import annotations

from typing import List, Optional

from fileclient.config.config import ClientConfig, load_config
from fileclient.exceptions import EscapeAttempt
from fileclient.logging.diagnostic import log_command
from fileclient.sandbox import paths
from fileclient.sandbox.backend import StorageBackend
from fileclient.tools.help import ExitCommand, HelpCommand
from fileclient.tools.inspection import CatCommand, FileCommand, HexdumpCommand, StatCommand
from fileclient.tools.navigation import CdCommand, DuCommand, LsCommand, PwdCommand
from fileclient.tools.registry import CommandRegistry, CommandResult


class Session:
    def __init__(self, backend: StorageBackend, config: Optional[ClientConfig] = None):
        self.backend = backend
        self.config = config or load_config()
        self.current_directory = paths.ROOT
        self.commands = CommandRegistry()
        for command in (
            LsCommand(self),
            FileCommand(self),
            StatCommand(self),
            DuCommand(self),
            CatCommand(self),
            CdCommand(self),
            PwdCommand(self),
            HexdumpCommand(self),
            HelpCommand(),
            ExitCommand(),
        ):
            self.commands.register(command)

    @staticmethod
    def parse(line: str) -> List[str]:
        """Whitespace tokenization; quotes have no special meaning."""
        return line.split()

    async def execute(self, line: str) -> CommandResult:
        if not line:
            return CommandResult.ok("")

        tokens = self.parse(line)
        if not tokens:
            return CommandResult.ok("")

        name, args = tokens[0], tokens[1:]
        log_command(name, args, self.current_directory)
        return await self.commands.execute(name, args)

    def target(self, raw: str) -> str:
        """Resolve a user-supplied path to a confined virtual path.

        Raises EscapeAttempt for any request that climbs above the root,
        before the backend sees it.
        """
        if self.backend.is_escape_attempt(raw):
            raise EscapeAttempt(raw)
        return self.backend.resolve_path(paths.resolve(raw, self.current_directory))

    async def change_directory(self, path: str) -> bool:
        if not await self.backend.change_directory(path):
            return False
        self.current_directory = self.backend.current_directory()
        return True

    def prompt(self) -> str:
        return f"[{self.backend.display_root_label()}] {self.current_directory} $ "
