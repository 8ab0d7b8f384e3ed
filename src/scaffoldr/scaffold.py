"""Create projects from registered project types."""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from .commands import CommandHandle, CommandRunner, SubprocessRunner, initialize_git
from .config import Settings
from .errors import ConfigurationError, ExternalCommandError, LicenseNotFoundError
from .license import LicenseLibrary, instantiate_license
from .naming import clean_project_name
from .prompts import Prompter
from .registry import ProjectRegistry, ProjectType
from .registry import registry as default_registry
from .replacements import ReplacementContext, ReplacementSpec, resolve
from .template import TemplateInstantiator, TemplateLocator

__all__ = ["CreationReport", "NO_LICENSE", "PROJECT_NAME_TOKEN", "ProjectScaffolder"]


LOGGER = logging.getLogger(__name__)

PROJECT_NAME_TOKEN = "__PROJECT-NAME__"
NO_LICENSE = "(no license)"


@dataclass(slots=True)
class CreationReport:
    """What :meth:`ProjectScaffolder.create` did."""

    path: Path
    project_type: str
    replacements: list[tuple[str, str]]
    license_path: Path | None = None
    git_initialized: bool = False
    handles: list[CommandHandle] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for the post-creation commands and return whether all succeeded.

        ``timeout`` applies to each command. A command still running when it
        expires is reported as a warning.
        """

        ok = True
        for handle in self.handles:
            try:
                result = handle.wait(timeout)
            except ExternalCommandError as exc:
                LOGGER.warning("post-creation command did not finish: %s", exc)
                self.warnings.append(str(exc))
                ok = False
                continue
            if not result.ok:
                ok = False
                self.warnings.append(str(ExternalCommandError(result.args, result.returncode, result.output)))
        return ok


class ProjectScaffolder:
    """Create new projects described by registered :class:`ProjectType` s.

    Collaborators are injected so that tests and embedding applications can
    replace the prompter and the command runner.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        registry: ProjectRegistry | None = None,
        prompter: Prompter | None = None,
        runner: CommandRunner | None = None,
        locator: TemplateLocator | None = None,
        licenses: LicenseLibrary | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.registry = registry if registry is not None else default_registry
        self.prompter = prompter
        self.runner = runner or SubprocessRunner()
        self.instantiator = TemplateInstantiator(
            locator or TemplateLocator.with_user_root(self.settings.template_root)
        )
        self.licenses = licenses or LicenseLibrary.with_user_root(self.settings.license_root)

    def replacement_specs(
        self,
        project_type: ProjectType,
        project_name: str,
        extra: Sequence[ReplacementSpec] = (),
    ) -> list[ReplacementSpec]:
        """Return the full, ordered replacement declaration for a project."""

        return [
            *extra,
            *project_type.replacements,
            (PROJECT_NAME_TOKEN, project_name),
            *self.settings.default_replacements,
        ]

    def _select_license(self, project_type: ProjectType, pattern: str | None) -> Path | None:
        if pattern is not None:
            return self.licenses.find(pattern)
        if self.prompter is None:
            if project_type.default_license is None:
                return None
            return self.licenses.find(project_type.default_license)

        default = NO_LICENSE
        if project_type.default_license is not None:
            try:
                default = self.licenses.find(project_type.default_license).name
            except LicenseNotFoundError:
                LOGGER.debug(
                    "default license %r of %s matches nothing", project_type.default_license, project_type.name
                )
        options = [path.name for path in self.licenses.available()]
        if not options:
            return None
        choice = self.prompter.choose("License", [*options, NO_LICENSE], default)
        if choice == NO_LICENSE:
            return None
        return self.licenses.find(f"^{re.escape(choice)}$")

    def create(
        self,
        type_name: str,
        project_name: str,
        *,
        directory: str | Path | None = None,
        license_pattern: str | None = None,
        with_license: bool = True,
        init_git: bool | None = None,
        extra_replacements: Sequence[ReplacementSpec] = (),
    ) -> CreationReport:
        """Create project ``project_name`` of type ``type_name``.

        Parameters
        ----------
        directory:
            Parent directory of the new project. Defaults to
            ``settings.project_root``.
        license_pattern:
            Regular expression selecting the license. Without it the user is
            asked when a prompter is available, otherwise the project type's
            default license is used.
        with_license:
            ``False`` skips the license file entirely.
        init_git:
            Overrides ``settings.init_git`` and the project type's preference.
        extra_replacements:
            Replacements taking precedence over everything else.
        """

        project_type = self.registry.lookup(type_name)
        try:
            name = clean_project_name(project_name)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        parent = Path(directory if directory is not None else self.settings.project_root).expanduser()
        destination = (parent / name).absolute()
        context = ReplacementContext(project_name=name, destination=destination, settings=self.settings)

        license_file = self._select_license(project_type, license_pattern) if with_license else None
        specs = self.replacement_specs(project_type, name, extra_replacements)
        replacements = resolve(specs, context, self.prompter)

        LOGGER.info("creating %s project %s at %s", project_type.name, name, destination)
        path = self.instantiator.instantiate(project_type.template, destination, replacements)
        report = CreationReport(path=path, project_type=project_type.name, replacements=replacements)

        try:
            if license_file is not None:
                report.license_path = instantiate_license(
                    license_file, path / self.settings.license_file_name, replacements
                )
            if project_type.after_creation is not None:
                project_type.after_creation(path)
        except Exception:
            LOGGER.debug("removing %s after a failed creation", path)
            shutil.rmtree(path, ignore_errors=True)
            raise

        if init_git is None:
            init_git = self.settings.init_git and project_type.init_git
        if init_git:
            try:
                initialize_git(self.runner, path, self.settings.git_commit_message)
                report.git_initialized = True
            except ExternalCommandError as exc:
                LOGGER.warning("git initialisation failed: %s", exc)
                report.warnings.append(str(exc))

        if project_type.post_commands is not None:
            for args in project_type.post_commands(path, dict(reversed(replacements))):
                try:
                    report.handles.append(self.runner.spawn(args, path))
                except ExternalCommandError as exc:
                    LOGGER.warning("post-creation command failed: %s", exc)
                    report.warnings.append(str(exc))

        LOGGER.info("created project %s", path)
        return report
