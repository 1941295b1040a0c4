from fileclient.content.classify import is_text, mime_guess
from fileclient.content.formatting import display_text, format_permissions, format_size, format_time, kind_label
from fileclient.content.hexdump import hexdump_render

__all__ = [
    "is_text", "mime_guess",
    "display_text", "format_permissions", "format_size", "format_time", "kind_label",
    "hexdump_render",
]
