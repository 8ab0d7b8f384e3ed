"""Project types shipped with scaffoldr.

Importing this module registers them in :data:`scaffoldr.registry.registry`.
"""

from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path
from typing import Iterable, Mapping

from .errors import ConfigurationError
from .naming import distribution_name, module_name
from .prompts import Prompter
from .registry import define_project_type
from .replacements import Computed, Prompted, ReplacementContext

__all__ = ["PYTHON_NAMES", "find_python"]


PYTHON_NAMES = ("python3", "python")


def find_python(search_paths: Iterable[str | Path] = (), names: Iterable[str] = PYTHON_NAMES) -> Path | None:
    """Return the first Python interpreter found in ``search_paths``.

    ``$PATH`` is searched after ``search_paths``.
    """

    directories = [str(Path(path).expanduser()) for path in search_paths]
    if os.environ.get("PATH"):
        directories.append(os.environ["PATH"])
    lookup = os.pathsep.join(directories)
    for name in names:
        found = shutil.which(name, path=lookup)
        if found:
            return Path(found)
    return None


def _python_interpreter(context: ReplacementContext) -> str:
    found = find_python(context.settings.python_search_paths)
    if found is not None:
        return str(found)
    if sys.executable:
        return sys.executable
    raise ConfigurationError("no Python interpreter found; set python_search_paths")


def _python_version(context: ReplacementContext) -> str:
    return f"{sys.version_info.major}.{sys.version_info.minor}"


def _ask_description(prompter: Prompter, context: ReplacementContext) -> str:
    answer = prompter.ask(f"Short description of {context.project_name}", default="")
    # Lands inside TOML strings and a docstring.
    return " ".join(answer.split()).replace("\\", "").replace('"', "'")


def _create_virtualenv(path: Path, replacements: Mapping[str, str]) -> list[list[str]]:
    return [[replacements["__PYTHON-BIN__"], "-m", "venv", ".venv"]]


define_project_type(
    "generic",
    template="generic",
    title="Generic project",
    default_license=r"^mit$",
)

define_project_type(
    "python-package",
    template="python-package",
    title="Python package",
    default_license=r"^mit$",
    replacements=[
        ("__DESCRIPTION__", Prompted(_ask_description)),
        ("__PACKAGE-NAME__", Computed(lambda context: module_name(context.project_name))),
        ("__DISTRIBUTION-NAME__", Computed(lambda context: distribution_name(context.project_name))),
        ("__PYTHON-VERSION__", Computed(_python_version)),
        ("__PYTHON-BIN__", Computed(_python_interpreter)),
    ],
    post_commands=_create_virtualenv,
)
