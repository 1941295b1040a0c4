"""Binary dump rendering for byte windows.

Despite the command name, each byte is shown as eight binary digits:

    00000000: 01101000 01100101 01101100 01101100 01101111 00001010                    hello.
"""

from __future__ import annotations

from fileclient.sandbox.backend import ByteWindow

BYTES_PER_LINE = 8
_EMPTY_SLOT = " " * 9


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte <= 0x7E else "."


def render_line(offset: int, chunk: bytes) -> str:
    fields = "".join(f"{byte:08b} " for byte in chunk)
    fields += _EMPTY_SLOT * (BYTES_PER_LINE - len(chunk))
    ascii_panel = "".join(_printable(byte) for byte in chunk)
    ascii_panel += " " * (BYTES_PER_LINE - len(chunk))
    return f"{offset:08x}: {fields} {ascii_panel}"


def hexdump_render(window: ByteWindow) -> str:
    data = window.data
    return "\n".join(
        render_line(window.offset + start, data[start:start + BYTES_PER_LINE])
        for start in range(0, len(data), BYTES_PER_LINE)
    )
