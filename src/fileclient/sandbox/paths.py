"""Virtual path model: normalization, resolution and root confinement.

A virtual path always starts with ``/`` and is relative to the confined
root. Nothing in here touches the disk.
"""

from __future__ import annotations

import os

ROOT = "/"


def _segments(raw: str) -> list[str]:
    return [part for part in raw.split("/") if part and part != "."]


def normalize(raw: str) -> str:
    """Collapse ``.``, ``..`` and repeated slashes. ``..`` at the top is dropped."""
    stack: list[str] = []
    for part in _segments(raw):
        if part == "..":
            if stack:
                stack.pop()
        else:
            stack.append(part)
    return ROOT + "/".join(stack)


def resolve(raw: str, current: str) -> str:
    if not raw:
        return current
    if raw.startswith("/"):
        return normalize(raw)
    base = current if current == ROOT else current + "/"
    return normalize(base + raw)


def is_confined(path: str) -> bool:
    return normalize(path).startswith(ROOT)


def is_escape_attempt(raw: str, current: str = ROOT) -> bool:
    """True if walking ``raw`` from ``current`` climbs above the root.

    Runs on the request before normalization, since ``normalize`` would
    silently clamp the ``..`` that tries to escape.
    """
    depth = 0 if raw.startswith("/") else len(_segments(normalize(current)))
    for part in _segments(raw):
        if part == "..":
            if depth == 0:
                return True
            depth -= 1
        else:
            depth += 1
    return False


def to_backend_path(virtual_path: str, root: str) -> str:
    """Map a virtual path onto ``root``. The result is always under ``root``."""
    relative = normalize(virtual_path)[1:]
    if not relative:
        return root
    return os.path.join(root, relative)


def basename(path: str) -> str:
    n = normalize(path)
    return n[n.rfind("/") + 1:] or ROOT


def join(directory: str, name: str) -> str:
    return normalize(directory + "/" + name)
