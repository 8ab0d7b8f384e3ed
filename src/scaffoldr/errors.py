"""Custom exception types used by the scaffoldr core utilities."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "ConfigurationError",
    "DestinationExistsError",
    "ExternalCommandError",
    "InstantiationIOError",
    "LicenseNotFoundError",
    "ReplacementTypeError",
    "ScaffoldError",
    "TemplateNotFoundError",
    "UnknownProjectTypeError",
]


class ScaffoldError(RuntimeError):
    """Base class for every failure raised while creating a project."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigurationError(ScaffoldError):
    """Raised when settings or project declarations are unusable."""


class TemplateNotFoundError(ScaffoldError, LookupError):
    """Raised when a template name does not resolve in any search root."""

    def __init__(self, name: str, roots: tuple[Path, ...] = ()) -> None:
        searched = ", ".join(str(root) for root in roots) or "no search roots"
        super().__init__(f"template '{name}' not found (searched {searched})")
        self.name = name
        self.roots = roots


class LicenseNotFoundError(ScaffoldError, LookupError):
    """Raised when a license template cannot be located."""


class UnknownProjectTypeError(ScaffoldError, LookupError):
    """Raised when a project type name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown project type '{name}'")
        self.name = name


class DestinationExistsError(ScaffoldError):
    """Raised instead of writing into an existing destination."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"{path} already exists")
        self.path = path


class ReplacementTypeError(ScaffoldError, TypeError):
    """Raised when a token or a resolved replacement value is not a string."""


class InstantiationIOError(ScaffoldError):
    """Raised when copying, renaming, reading or writing template files fails."""


class ExternalCommandError(ScaffoldError):
    """Raised when an external command cannot be run, exits non-zero or times out."""

    def __init__(
        self,
        args: tuple[str, ...],
        returncode: int | None,
        output: str = "",
        *,
        message: str | None = None,
    ) -> None:
        command = " ".join(args)
        if message is None and returncode is None:
            message = f"could not run '{command}'"
        elif message is None:
            message = f"'{command}' exited with status {returncode}"
        if output.strip():
            message = f"{message}: {output.strip()}"
        super().__init__(message)
        self.command = args
        self.returncode = returncode
        self.output = output
