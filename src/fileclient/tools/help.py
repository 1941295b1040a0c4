"""Session control commands: help and exit."""

from __future__ import annotations

from typing import List

from fileclient.tools.registry import CommandResult

HELP_TEXT = """File Client Tool - Available Commands:

Directory Operations:
  ls [path]          List directory contents
  ls -l [path]       List detailed directory contents (permissions, size, time)
  cd [path]          Change directory
  pwd                Show current directory

File Information:
  file <filename>    Show file type
  stat <filename>    Show detailed file information
  du [path]          Show file/directory size (bytes)
  du -h [path]       Show human-readable size (KB/MB/GB)

File Content:
  cat <filename>     Display file content
  hexdump [-offset N] [-len N] <filename>
                     Display a binary dump of file bytes (8 per line)

Other:
  help, ?            Show this help message
  exit, quit         Exit the program

Note: Access is restricted to the specified root directory"""


class HelpCommand:
    name = "help"
    aliases = ("?",)
    usage = "help"

    async def execute(self, args: List[str]) -> CommandResult:
        return CommandResult.ok(HELP_TEXT)


class ExitCommand:
    name = "exit"
    aliases = ("quit",)
    usage = "exit"

    async def execute(self, args: List[str]) -> CommandResult:
        return CommandResult.exit()
