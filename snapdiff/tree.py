"""Directory trees annotated with accumulated sizes."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from snapdiff.sizes import format_bytes


@dataclass
class DirData:
    """A file or directory with its size and, for directories, children."""

    path: str
    path_readable: str
    size: int = 0
    size_readable: str = ""
    is_dir: bool = False
    children: list[DirData] = field(default_factory=list)


def _base_name(path: str) -> str:
    stripped = path.rstrip(os.sep)
    if not stripped:
        return os.sep if path else "."
    return os.path.basename(stripped)


def _walk(current: str) -> DirData | None:
    try:
        with os.scandir(current) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError:
        return None

    node = DirData(path=current, path_readable="/" + _base_name(current), is_dir=True)
    for entry in entries:
        entry_path = os.path.join(current, entry.name)
        if entry.is_dir(follow_symlinks=False):
            child = _walk(entry_path)
            if child is None:
                continue
        else:
            try:
                size = entry.stat(follow_symlinks=False).st_size
            except OSError:
                continue
            child = DirData(
                path=entry_path,
                path_readable=entry.name,
                size=size,
                size_readable=format_bytes(size),
            )
        node.children.append(child)
        node.size += child.size

    node.size_readable = format_bytes(node.size)
    return node


def get_dir_entries(root: str) -> DirData | None:
    """Read ``root`` recursively; return None if it cannot be read.

    A directory's size is the sum of its readable children; unreadable
    subdirectories and files are left out.
    """
    return _walk(root)