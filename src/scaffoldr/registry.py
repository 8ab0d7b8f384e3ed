"""Project type declarations and the process wide registry holding them."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError, ReplacementTypeError, UnknownProjectTypeError
from .replacements import ReplacementSpec, validate_specs

__all__ = [
    "PostCommands",
    "ProjectRegistry",
    "ProjectType",
    "define_project_type",
    "registry",
]


LOGGER = logging.getLogger(__name__)

PostCommands = Callable[[Path, Mapping[str, str]], Sequence[Sequence[str]]]


class ProjectType(BaseModel):
    """Declaration of a kind of project that can be created.

    ``replacements`` are resolved before the default replacements, so a
    token declared here wins over a default of the same name.
    ``after_creation`` receives the absolute project path once the license
    is written. ``post_commands`` receives the project path and the
    resolved replacements and returns tooling commands that run in the
    project directory after git initialisation.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    name: str
    template: str
    title: str = ""
    replacements: list[tuple[str, Any]] = Field(default_factory=list)
    default_license: str | None = None
    init_git: bool = True
    after_creation: Callable[[Path], Any] | None = None
    post_commands: PostCommands | None = None

    @field_validator("name", "template")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("replacements")
    @classmethod
    def _check_replacements(cls, value: list[tuple[str, Any]]) -> list[ReplacementSpec]:
        try:
            return validate_specs(value)
        except ReplacementTypeError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("default_license")
    @classmethod
    def _check_license_pattern(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid license pattern: {exc}") from exc
        return value

    @property
    def label(self) -> str:
        return self.title or self.name


class ProjectRegistry:
    """Mapping of project type names to their declarations."""

    def __init__(self) -> None:
        self._types: dict[str, ProjectType] = {}

    def register(self, project_type: ProjectType) -> ProjectType:
        """Add ``project_type``, replacing any earlier one with the same name."""

        if project_type.name in self._types:
            LOGGER.debug("replacing project type %s", project_type.name)
        self._types[project_type.name] = project_type
        return project_type

    def lookup(self, name: str) -> ProjectType:
        try:
            return self._types[name]
        except KeyError:
            raise UnknownProjectTypeError(name) from None

    def names(self) -> list[str]:
        """Return the registered names in registration order."""

        return list(self._types)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[ProjectType]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)


registry = ProjectRegistry()


def define_project_type(
    name: str,
    *,
    template: str,
    target: ProjectRegistry | None = None,
    **options: Any,
) -> ProjectType:
    """Validate a project type declaration and register it.

    ``options`` are the remaining :class:`ProjectType` fields. The
    declaration goes into the module level :data:`registry` unless
    ``target`` is given.
    """

    try:
        project_type = ProjectType(name=name, template=template, **options)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid project type '{name}': {exc}") from exc
    return (target if target is not None else registry).register(project_type)
