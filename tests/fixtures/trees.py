"""Build and inspect small directory trees."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping


def write_tree(root: Path, files: Mapping[str, str | bytes]) -> Path:
    """Create ``files`` (relative path -> contents) below ``root``."""

    root.mkdir(parents=True, exist_ok=True)
    for relative, contents in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(contents, bytes):
            path.write_bytes(contents)
        else:
            path.write_text(contents, encoding="utf-8")
    return root


def read_tree(root: Path) -> dict[str, bytes]:
    """Return every file below ``root`` keyed by its POSIX relative path."""

    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }
