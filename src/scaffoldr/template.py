"""Locate skeleton directories and instantiate them into new projects."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .errors import DestinationExistsError, InstantiationIOError, TemplateNotFoundError
from .substitution import Replacements, Substitution

__all__ = [
    "BUILTIN_TEMPLATE_ROOT",
    "TemplateInstantiator",
    "TemplateLocator",
    "instantiate_template",
    "rewrite_file",
]


LOGGER = logging.getLogger(__name__)

BUILTIN_TEMPLATE_ROOT = Path(__file__).resolve().parent / "skeletons"

SCRATCH_PREFIX = ".scaffoldr-"


@dataclass(slots=True)
class TemplateLocator:
    """Resolve template names against an ordered list of root directories.

    The first root holding a sub-directory with the requested name wins, so
    user roots listed before :data:`BUILTIN_TEMPLATE_ROOT` shadow built-in
    templates of the same name. Roots that do not exist are skipped.
    """

    roots: tuple[Path, ...] = (BUILTIN_TEMPLATE_ROOT,)

    @classmethod
    def with_user_root(cls, user_root: str | Path | None) -> "TemplateLocator":
        if user_root is None:
            return cls()
        return cls((Path(user_root).expanduser(), BUILTIN_TEMPLATE_ROOT))

    def resolve(self, name: str) -> Path:
        """Return the directory of template ``name``."""

        if not name or Path(name).name != name or name in {".", ".."}:
            raise TemplateNotFoundError(name, self.roots)
        for root in self.roots:
            candidate = root / name
            if candidate.is_dir():
                LOGGER.debug("template %s resolved to %s", name, candidate)
                return candidate
        raise TemplateNotFoundError(name, self.roots)

    def names(self) -> list[str]:
        """Return the sorted names of every template reachable from the roots."""

        found: set[str] = set()
        for root in self.roots:
            if root.is_dir():
                found.update(entry.name for entry in root.iterdir() if entry.is_dir())
        return sorted(found)


def _depth_first(paths: Iterable[Path]) -> list[Path]:
    return sorted(paths, key=lambda path: len(path.parts), reverse=True)


def rename_paths(root: Path, substitution: Substitution) -> None:
    """Rename every entry below ``root`` whose name contains a token.

    Entries are processed deepest first so that renaming a directory never
    invalidates a path that has not been visited yet.
    """

    for path in _depth_first(root.rglob("*")):
        new_name = substitution.apply(path.name)
        if new_name == path.name:
            continue
        if new_name in {"", ".", ".."} or "/" in new_name or os.sep in new_name:
            raise InstantiationIOError(f"{path.name} renames to an invalid file name {new_name!r}")
        target = path.with_name(new_name)
        if target.exists() or target.is_symlink():
            raise InstantiationIOError(f"renaming {path.name} would overwrite {target.name}")
        LOGGER.debug("rename %s -> %s", path.relative_to(root), new_name)
        path.rename(target)


def rewrite_file(path: Path, substitution: Substitution) -> bool:
    """Apply ``substitution`` to the contents of ``path`` in place.

    Bytes that are not valid UTF-8 survive unchanged. Returns whether the
    file was modified.
    """

    original = path.read_bytes()
    text = original.decode("utf-8", errors="surrogateescape")
    rendered = substitution.apply(text)
    if rendered == text:
        return False
    path.write_bytes(rendered.encode("utf-8", errors="surrogateescape"))
    return True


def rewrite_files(root: Path, substitution: Substitution) -> int:
    rewritten = 0
    for path in sorted(root.rglob("*")):
        if path.is_symlink() or not path.is_file():
            continue
        if rewrite_file(path, substitution):
            LOGGER.debug("rewrote %s", path.relative_to(root))
            rewritten += 1
    return rewritten


@dataclass(slots=True)
class TemplateInstantiator:
    """Copy a template into a scratch workspace, substitute it and publish it.

    The scratch workspace is created next to the destination so publishing
    the finished tree is a single :func:`os.rename`. The destination is
    therefore either complete or absent, and the workspace is removed on
    every exit path.
    """

    locator: TemplateLocator = field(default_factory=TemplateLocator)

    def instantiate(
        self,
        template_name: str,
        destination: str | Path,
        replacements: Replacements,
    ) -> Path:
        """Create ``destination`` from template ``template_name``.

        Raises
        ------
        TemplateNotFoundError
            No search root holds the template.
        DestinationExistsError
            ``destination`` already exists. Existing directories are never
            merged into.
        InstantiationIOError
            Copying, renaming, rewriting or publishing failed.
        """

        source = self.locator.resolve(template_name)
        substitution = Substitution(replacements)
        target = Path(destination).expanduser().absolute()
        if target.exists() or target.is_symlink():
            raise DestinationExistsError(target)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.TemporaryDirectory(prefix=SCRATCH_PREFIX, dir=target.parent) as scratch:
                staged = Path(scratch) / "tree"
                shutil.copytree(source, staged, symlinks=True)
                if substitution:
                    rename_paths(staged, substitution)
                    rewritten = rewrite_files(staged, substitution)
                    LOGGER.debug("rewrote %d file(s) from template %s", rewritten, template_name)
                if target.exists() or target.is_symlink():
                    raise DestinationExistsError(target)
                os.rename(staged, target)
        except OSError as exc:
            raise InstantiationIOError(f"cannot instantiate template '{template_name}' at {target}: {exc}") from exc

        LOGGER.info("instantiated template %s at %s", template_name, target)
        return target


def instantiate_template(
    template_name: str,
    destination: str | Path,
    replacements: Replacements,
    *,
    locator: TemplateLocator | None = None,
) -> Path:
    """Instantiate ``template_name`` at ``destination`` with ``replacements``."""

    return TemplateInstantiator(locator or TemplateLocator()).instantiate(
        template_name, destination, replacements
    )
