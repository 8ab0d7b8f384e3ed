"""User settings consumed by the scaffolder and the CLI."""

from __future__ import annotations

import getpass
import os
import tomllib
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigurationError, ReplacementTypeError
from .replacements import ReplacementSpec, SettingRef, default_replacements, validate_specs

__all__ = ["CONFIG_ENV_VAR", "DEFAULT_CONFIG_PATH", "Settings"]

CONFIG_ENV_VAR = "SCAFFOLDR_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/scaffoldr/config.toml")


def _default_user_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "user"


class Settings(BaseModel):
    """Everything the scaffolder reads from the user's environment.

    Attributes
    ----------
    template_root:
        Directory searched for skeletons before the built-in ones.
    license_root:
        Directory searched for license templates before the built-in ones.
    project_root:
        Parent directory for new projects when no directory is given.
    user_name, user_email, organisation:
        Identity used by the default replacements. ``organisation`` falls
        back to ``user_name``.
    init_git:
        Whether new projects get a git repository with an initial commit.
    python_search_paths:
        Extra directories searched for Python interpreters.
    variables:
        Free-form values reachable through :class:`~scaffoldr.replacements.SettingRef`.
    default_replacements:
        Replacements appended after every project type's own.
    """

    model_config = ConfigDict(
        extra="forbid", frozen=True, arbitrary_types_allowed=True, validate_default=True
    )

    template_root: Path | None = Field(default=Path("~/.config/scaffoldr/skeletons"))
    license_root: Path | None = Field(default=Path("~/.config/scaffoldr/licenses"))
    project_root: Path = Field(default=Path("~/Projects"))
    user_name: str = Field(default_factory=_default_user_name)
    user_email: str = ""
    organisation: str = ""
    init_git: bool = True
    git_commit_message: str = "Initial commit"
    license_file_name: str = "COPYING"
    python_search_paths: list[Path] = Field(default_factory=list)
    variables: dict[str, str] = Field(default_factory=dict)
    default_replacements: list[tuple[str, Any]] = Field(default_factory=default_replacements)

    @model_validator(mode="before")
    @classmethod
    def _fill_organisation(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and not data.get("organisation"):
            data = dict(data)
            data["organisation"] = data.get("user_name") or _default_user_name()
        return data

    @field_validator("template_root", "license_root", "project_root")
    @classmethod
    def _expand_path(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        return value.expanduser()

    @field_validator("python_search_paths")
    @classmethod
    def _expand_search_paths(cls, value: list[Path]) -> list[Path]:
        return [path.expanduser() for path in value]

    @field_validator("license_file_name")
    @classmethod
    def _check_license_file_name(cls, value: str) -> str:
        if not value or Path(value).name != value:
            raise ValueError("license_file_name must be a plain file name")
        return value

    @field_validator("default_replacements")
    @classmethod
    def _check_replacements(cls, value: list[tuple[str, Any]]) -> list[ReplacementSpec]:
        try:
            return validate_specs(value)
        except ReplacementTypeError as exc:
            raise ValueError(str(exc)) from exc

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from a parsed configuration file.

        A ``replacements`` table adds default replacements after the
        built-in ones. String values are literals and ``{ setting = "key" }``
        tables refer to another setting.
        """

        values = dict(data)
        table = values.pop("replacements", {})
        if not isinstance(table, Mapping):
            raise ConfigurationError("'replacements' must be a table")

        extra: list[ReplacementSpec] = []
        for token, raw in table.items():
            if isinstance(raw, str):
                extra.append((token, raw))
            elif isinstance(raw, Mapping) and set(raw) == {"setting"} and isinstance(raw["setting"], str):
                extra.append((token, SettingRef(raw["setting"])))
            else:
                raise ConfigurationError(
                    f"replacement '{token}' must be a string or a {{ setting = \"...\" }} table"
                )
        if extra:
            values["default_replacements"] = default_replacements() + extra

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigurationError(f"invalid settings: {exc}") from exc

    @classmethod
    def load(cls, path: str | Path | None = None) -> "Settings":
        """Read settings from a TOML file.

        ``path`` defaults to ``$SCAFFOLDR_CONFIG`` and then to
        ``~/.config/scaffoldr/config.toml``. Only an explicitly requested file
        has to exist; a missing default file yields the default settings.
        """

        explicit = path is not None or bool(os.environ.get(CONFIG_ENV_VAR))
        candidate = Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH).expanduser()
        if not candidate.is_file():
            if explicit:
                raise ConfigurationError(f"configuration file {candidate} does not exist")
            return cls()

        try:
            with candidate.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"cannot parse {candidate}: {exc}") from exc
        return cls.from_mapping(data)
