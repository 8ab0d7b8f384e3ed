"""Derive file system and Python identifiers from project names."""

from __future__ import annotations

import re
import unicodedata

__all__ = ["clean_project_name", "distribution_name", "module_name"]


_WHITESPACE = re.compile(r"\s+")
_NOT_WORD = re.compile(r"[^a-z0-9]+")


def clean_project_name(name: str) -> str:
    """Collapse inner whitespace in ``name`` and reject names that cannot be directories."""

    cleaned = _WHITESPACE.sub(" ", name).strip()
    if not cleaned:
        raise ValueError("project name must not be empty")
    if cleaned in {".", ".."} or "/" in cleaned or "\\" in cleaned:
        raise ValueError(f"'{name}' cannot be used as a directory name")
    return cleaned


def _ascii_words(name: str) -> list[str]:
    text = unicodedata.normalize("NFKD", name)
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    return [word for word in _NOT_WORD.split(text) if word]


def distribution_name(name: str) -> str:
    """Return the dash separated, lower-case name used on package indexes.

    >>> distribution_name("My Cool App")
    'my-cool-app'
    """

    return "-".join(_ascii_words(name)) or "project"


def module_name(name: str) -> str:
    """Return a valid Python module identifier for ``name``."""

    candidate = "_".join(_ascii_words(name)) or "project"
    if candidate[0].isdigit():
        candidate = f"_{candidate}"
    return candidate
