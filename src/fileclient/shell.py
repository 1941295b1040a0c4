"""Interactive loop: prompt, read a line, run it, print the result."""

from __future__ import annotations

from typing import Callable

from fileclient.content.formatting import display_text
from fileclient.session import Session

BANNER_HINT = "Type 'help' for available commands, 'exit' to quit"


async def run_interactive(
    session: Session,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """Run until ``exit``/``quit`` or end of input.

    Input is read on the calling thread so Ctrl-C at the prompt raises
    KeyboardInterrupt straight out of the loop.
    """
    write(f"File Client Tool started (Root directory: {display_text(session.backend.display_root_label())})")
    write(BANNER_HINT)
    write("")

    while True:
        try:
            line = read_line(display_text(session.prompt()))
        except EOFError:
            write("")
            break

        result = await session.execute(line)
        if result.terminate:
            break

        if result.message:
            write(display_text(result.message))
        write("")

    write("Goodbye!")
