"""Interactive question interfaces used while creating projects."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from simple_term_menu import TerminalMenu

from .errors import ConfigurationError

__all__ = ["ConsolePrompter", "DefaultsPrompter", "Prompter"]


class Prompter(ABC):
    """Source of answers to interactive questions."""

    @abstractmethod
    def ask(self, question: str, default: str | None = None) -> str:
        """Return a free-form answer to ``question``."""

    @abstractmethod
    def choose(self, question: str, options: Sequence[str], default: str | None = None) -> str:
        """Return one of ``options``; ``default`` is used for an empty answer."""

    @abstractmethod
    def confirm(self, question: str, default: bool = True) -> bool:
        """Return a yes/no answer to ``question``."""


class ConsolePrompter(Prompter):
    """Ask questions on the terminal.

    Text answers are read through a :class:`rich.console.Console`; choices
    are picked from a :class:`simple_term_menu.TerminalMenu`.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def ask(self, question: str, default: str | None = None) -> str:
        suffix = f" [dim]({escape(default)})[/]" if default else ""
        answer = self._console.input(f"[bold cyan]?[/] {escape(question)}{suffix}: ").strip()
        if not answer and default is not None:
            return default
        return answer

    def choose(self, question: str, options: Sequence[str], default: str | None = None) -> str:
        if not options:
            raise ValueError("options must not be empty")
        entries = list(options)
        self._console.print(f"[bold cyan]?[/] {escape(question)}")
        menu = TerminalMenu(
            entries,
            cursor_index=entries.index(default) if default in entries else 0,
            menu_cursor="> ",
            menu_cursor_style=("fg_cyan", "bold"),
            menu_highlight_style=("fg_cyan",),
        )
        index = menu.show()
        if index is None:
            raise ConfigurationError(f"no answer given to '{question}'")
        choice = entries[int(index)]
        self._console.print(f"[bold green]✓[/] {escape(question)}: {escape(choice)}")
        return choice

    def confirm(self, question: str, default: bool = True) -> bool:
        suffix = escape(" [Y/n] " if default else " [y/N] ")
        answer = self._console.input(f"[bold cyan]?[/] {escape(question)}{suffix}").strip().lower()
        if answer == "":
            return default
        return answer in ("y", "yes")


class DefaultsPrompter(Prompter):
    """Answer every question with its default, for unattended runs."""

    def ask(self, question: str, default: str | None = None) -> str:
        return default or ""

    def choose(self, question: str, options: Sequence[str], default: str | None = None) -> str:
        if default is not None:
            return default
        raise ConfigurationError(f"'{question}' needs an answer and input is disabled")

    def confirm(self, question: str, default: bool = True) -> bool:
        return default
