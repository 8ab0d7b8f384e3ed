"""License templates and their instantiation into new projects."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from .errors import InstantiationIOError, LicenseNotFoundError
from .substitution import Replacements, substitute_all

__all__ = ["BUILTIN_LICENSE_ROOT", "LicenseLibrary", "instantiate_license"]


LOGGER = logging.getLogger(__name__)

BUILTIN_LICENSE_ROOT = Path(__file__).resolve().parent / "licenses"


@dataclass(slots=True)
class LicenseLibrary:
    """License template files gathered from an ordered list of directories.

    A file in an earlier directory shadows a file with the same name in a
    later one.
    """

    roots: tuple[Path, ...] = (BUILTIN_LICENSE_ROOT,)

    @classmethod
    def with_user_root(cls, user_root: str | Path | None) -> "LicenseLibrary":
        if user_root is None:
            return cls()
        return cls((Path(user_root).expanduser(), BUILTIN_LICENSE_ROOT))

    def available(self) -> list[Path]:
        """Return every license template, sorted by file name."""

        found: dict[str, Path] = {}
        for root in self.roots:
            if not root.is_dir():
                continue
            for entry in root.iterdir():
                if entry.is_file() and not entry.name.startswith("."):
                    found.setdefault(entry.name, entry)
        return [found[name] for name in sorted(found)]

    def find(self, pattern: str) -> Path:
        """Return the first license whose file name matches ``pattern``.

        ``pattern`` is a regular expression searched case-insensitively.
        """

        try:
            matcher = re.compile(pattern, re.IGNORECASE)
        except re.error as exc:
            raise LicenseNotFoundError(f"invalid license pattern {pattern!r}: {exc}") from exc
        for candidate in self.available():
            if matcher.search(candidate.name):
                return candidate
        raise LicenseNotFoundError(f"no license matches {pattern!r}")


def instantiate_license(
    license_file: str | Path,
    destination: str | Path,
    replacements: Replacements,
) -> Path:
    """Write ``license_file`` to ``destination`` with ``replacements`` applied.

    Bytes that are not valid UTF-8 are copied unchanged.
    """

    source = Path(license_file)
    if not source.is_file():
        raise LicenseNotFoundError(f"license template {source} does not exist")

    target = Path(destination)
    try:
        text = source.read_bytes().decode("utf-8", errors="surrogateescape")
        rendered = substitute_all(text, replacements)
        target.write_bytes(rendered.encode("utf-8", errors="surrogateescape"))
    except (OSError, UnicodeError) as exc:
        raise InstantiationIOError(f"cannot write license {target}: {exc}") from exc

    LOGGER.info("wrote %s license to %s", source.name, target)
    return target
