"""File Client Command System

Each command is a small object with a name, usage line and an async
``execute(args)``; the registry routes a command name to it and converts
every failure into a CommandResult so nothing escapes the dispatcher.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from fileclient.exceptions import FileClientError, InvalidArgument
from fileclient.logging.diagnostic import diagnostic_logger, log_command_failure

EXIT_MESSAGE = "exit"


class CommandResult:
    __slots__ = ("success", "message", "terminate")

    def __init__(self, success: bool = True, message: str = "", terminate: bool = False):
        self.success = success
        self.message = message
        self.terminate = terminate

    @classmethod
    def ok(cls, message: str = "") -> "CommandResult":
        return cls(True, message)

    @classmethod
    def fail(cls, message: str) -> "CommandResult":
        return cls(False, message)

    @classmethod
    def exit(cls) -> "CommandResult":
        """Terminate the session. Carries ``(False, "exit")`` for display compatibility."""
        return cls(False, EXIT_MESSAGE, terminate=True)

    def as_tuple(self) -> Tuple[bool, str]:
        return self.success, self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommandResult):
            return NotImplemented
        return (self.success, self.message, self.terminate) == (other.success, other.message, other.terminate)

    def __hash__(self) -> int:
        return hash((self.success, self.message, self.terminate))

    def __repr__(self) -> str:
        tag = ", terminate=True" if self.terminate else ""
        return f"CommandResult(success={self.success!r}, message={self.message!r}{tag})"


class Command(Protocol):
    name: str
    aliases: Tuple[str, ...]
    usage: str

    async def execute(self, args: List[str]) -> CommandResult:
        ...


def split_args(
    args: Iterable[str],
    value_flags: Iterable[str] = (),
) -> Tuple[set, Dict[str, str], List[str]]:
    """Separate ``-flags``, ``-option value`` pairs and positional arguments.

    Anything starting with ``-`` is a flag, including a bare ``-``; flags
    listed in ``value_flags`` consume the following token as their value.
    """
    value_flags = set(value_flags)
    tokens = list(args)
    flags: set = set()
    options: Dict[str, str] = {}
    positionals: List[str] = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.startswith("-"):
            if token in value_flags:
                if i + 1 >= len(tokens):
                    raise InvalidArgument(f"Option {token} requires a value")
                options[token] = tokens[i + 1]
                i += 2
                continue
            flags.add(token)
        else:
            positionals.append(token)
        i += 1

    return flags, options, positionals


class CommandRegistry:
    def __init__(self) -> None:
        self.commands: Dict[str, Command] = {}

    def register(self, command: Command) -> None:
        self.commands[command.name] = command
        for alias in command.aliases:
            self.commands[alias] = command

    def get(self, name: str) -> Optional[Command]:
        return self.commands.get(name)

    async def execute(self, name: str, args: List[str]) -> CommandResult:
        command = self.get(name)
        if not command:
            return CommandResult.fail(f"Unknown command: {name}, use 'help' for available commands")
        try:
            return await command.execute(args)
        except FileClientError as err:
            log_command_failure(name, err)
            return CommandResult.fail(str(err))
        except OSError as err:
            log_command_failure(name, err)
            return CommandResult.fail(f"{name}: {err.strerror or err}")
        except Exception as err:
            diagnostic_logger.error(f"Command {name} raised unexpectedly: {type(err).__name__}: {err}")
            return CommandResult.fail(f"{name} failed: {err}")
