"""Create new projects from skeleton directories.

A skeleton is copied into a scratch workspace, every placeholder token in
its file names and contents is replaced (preserving the case the token was
written in), and the finished tree is moved to its destination in one step.
Project types bundle a skeleton with its replacements, default license,
post-creation hook and tooling commands.
"""

from __future__ import annotations

from .commands import CommandRunner, SubprocessRunner, initialize_git
from .config import Settings
from .errors import (
    ConfigurationError,
    DestinationExistsError,
    ExternalCommandError,
    InstantiationIOError,
    LicenseNotFoundError,
    ReplacementTypeError,
    ScaffoldError,
    TemplateNotFoundError,
    UnknownProjectTypeError,
)
from .license import LicenseLibrary, instantiate_license
from .prompts import ConsolePrompter, DefaultsPrompter, Prompter
from .registry import ProjectRegistry, ProjectType, define_project_type, registry
from .replacements import Computed, LiteralValue, Prompted, ReplacementContext, SettingRef, resolve
from .scaffold import CreationReport, ProjectScaffolder
from .substitution import Substitution, fixcase, substitute_all
from .template import TemplateInstantiator, TemplateLocator, instantiate_template

__all__ = [
    "CommandRunner",
    "Computed",
    "ConfigurationError",
    "ConsolePrompter",
    "CreationReport",
    "DefaultsPrompter",
    "DestinationExistsError",
    "ExternalCommandError",
    "InstantiationIOError",
    "LicenseLibrary",
    "LicenseNotFoundError",
    "LiteralValue",
    "ProjectRegistry",
    "ProjectScaffolder",
    "ProjectType",
    "Prompted",
    "Prompter",
    "ReplacementContext",
    "ReplacementTypeError",
    "ScaffoldError",
    "SettingRef",
    "Settings",
    "SubprocessRunner",
    "Substitution",
    "TemplateInstantiator",
    "TemplateLocator",
    "TemplateNotFoundError",
    "UnknownProjectTypeError",
    "define_project_type",
    "fixcase",
    "initialize_git",
    "instantiate_license",
    "instantiate_template",
    "registry",
    "resolve",
    "substitute_all",
]

__version__ = "0.1.0"
