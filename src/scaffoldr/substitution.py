"""Case preserving literal token substitution."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

from .errors import ReplacementTypeError

__all__ = [
    "Replacements",
    "Substitution",
    "fixcase",
    "substitute_all",
]

Replacements = Sequence[tuple[str, str]]


def _cased_letters(text: str) -> list[str]:
    return [char for char in text if char.lower() != char.upper()]


def _capitalize_first(value: str) -> str:
    for index, char in enumerate(value):
        if char.lower() != char.upper():
            return value[:index] + char.upper() + value[index + 1 :]
    return value


def fixcase(value: str, matched: str, token: str) -> str:
    """Adjust ``value`` to mirror the case pattern of ``matched``.

    ``matched`` is the occurrence of ``token`` found in the text. An
    occurrence spelled exactly like the declared token inserts ``value``
    verbatim. Otherwise an all upper-case occurrence upper-cases ``value``
    and a capitalised occurrence (first letter upper-case, remaining letters
    lower-case) upper-cases the first letter of ``value``. Any other
    pattern inserts ``value`` unchanged.
    """

    if matched == token:
        return value

    letters = _cased_letters(matched)
    if not letters:
        return value
    if all(char.isupper() for char in letters):
        return value.upper()
    head, *rest = letters
    if head.isupper() and all(char.islower() for char in rest):
        return _capitalize_first(value)
    return value


@dataclass(slots=True)
class Substitution:
    """A compiled, ordered set of token replacements.

    All tokens are matched by a single case-insensitive pattern in one
    left-to-right scan. Longer tokens take priority over shorter ones that
    share a prefix; tokens of equal length keep their declaration order.
    Tokens that only differ by case collapse onto the first declaration.
    """

    replacements: Replacements
    _tokens: list[str] = field(init=False, repr=False)
    _values: list[str] = field(init=False, repr=False)
    _pattern: re.Pattern[str] | None = field(init=False, repr=False)

    def __post_init__(self) -> None:
        seen: set[str] = set()
        ordered: list[tuple[str, str]] = []
        for token, value in self.replacements:
            if not isinstance(token, str) or not token:
                raise ReplacementTypeError(f"replacement tokens must be non-empty strings, got {token!r}")
            if not isinstance(value, str):
                raise ReplacementTypeError(f"replacement for '{token}' must be a string, got {type(value).__name__}")
            key = token.casefold()
            if key in seen:
                continue
            seen.add(key)
            ordered.append((token, value))

        # sorted() is stable, so equal lengths keep declaration order.
        ordered = sorted(ordered, key=lambda pair: len(pair[0]), reverse=True)
        self._tokens = [token for token, _ in ordered]
        self._values = [value for _, value in ordered]
        if ordered:
            alternatives = "|".join(f"({re.escape(token)})" for token in self._tokens)
            self._pattern = re.compile(alternatives, re.IGNORECASE)
        else:
            self._pattern = None

    def __bool__(self) -> bool:
        return self._pattern is not None

    def _replace(self, match: re.Match[str]) -> str:
        index = (match.lastindex or 1) - 1
        return fixcase(self._values[index], match.group(0), self._tokens[index])

    def apply(self, text: str) -> str:
        """Return ``text`` with every token occurrence replaced."""

        if self._pattern is None:
            return text
        return self._pattern.sub(self._replace, text)


def substitute_all(text: str, replacements: Replacements) -> str:
    """Replace every token of ``replacements`` found in ``text``."""

    return Substitution(replacements).apply(text)
