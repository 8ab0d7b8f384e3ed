"""Running external tools: git initialisation and post-creation commands."""

from __future__ import annotations

import logging
import subprocess
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Sequence

from .errors import ExternalCommandError

__all__ = [
    "CommandHandle",
    "CommandResult",
    "CommandRunner",
    "SubprocessRunner",
    "initialize_git",
]


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a finished command."""

    args: tuple[str, ...]
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def check(self) -> "CommandResult":
        """Raise :class:`ExternalCommandError` unless the command succeeded."""

        if not self.ok:
            raise ExternalCommandError(self.args, self.returncode, self.output)
        return self


class CommandHandle(ABC):
    """A command started in the background."""

    args: tuple[str, ...]

    @abstractmethod
    def poll(self) -> CommandResult | None:
        """Return the result if the command has finished, ``None`` otherwise."""

    @abstractmethod
    def wait(self, timeout: float | None = None) -> CommandResult:
        """Block until the command finishes and return its result.

        Raises :class:`ExternalCommandError` when ``timeout`` expires first.
        """


class CommandRunner(ABC):
    """Capability to run external programs."""

    @abstractmethod
    def run(self, args: Sequence[str], cwd: Path, *, check: bool = False) -> CommandResult:
        """Run ``args`` in ``cwd`` and wait for it to finish."""

    @abstractmethod
    def spawn(self, args: Sequence[str], cwd: Path) -> CommandHandle:
        """Start ``args`` in ``cwd`` without waiting for it."""


class _PopenHandle(CommandHandle):
    """A background process whose output is collected in a temporary file.

    The child never writes to a pipe, so it cannot block on a full buffer or
    die of ``SIGPIPE`` when nobody waits for it.
    """

    def __init__(self, args: tuple[str, ...], process: subprocess.Popen[bytes], log: IO[bytes]) -> None:
        self.args = args
        self._process = process
        self._log = log
        self._result: CommandResult | None = None

    def _finish(self) -> CommandResult:
        if self._result is None:
            self._log.seek(0)
            output = self._log.read().decode("utf-8", errors="replace")
            self._log.close()
            self._result = CommandResult(self.args, self._process.returncode, output)
            if not self._result.ok:
                LOGGER.warning("'%s' exited with status %d", " ".join(self.args), self._result.returncode)
        return self._result

    def poll(self) -> CommandResult | None:
        if self._result is not None:
            return self._result
        if self._process.poll() is None:
            return None
        return self._finish()

    def wait(self, timeout: float | None = None) -> CommandResult:
        if self._result is not None:
            return self._result
        try:
            self._process.wait(timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            raise ExternalCommandError(
                self.args, None, message=f"'{' '.join(self.args)}' still running after {timeout} seconds"
            ) from exc
        return self._finish()


class SubprocessRunner(CommandRunner):
    """Run commands with :mod:`subprocess`, merging stderr into the output."""

    def run(self, args: Sequence[str], cwd: Path, *, check: bool = False) -> CommandResult:
        command = tuple(str(arg) for arg in args)
        LOGGER.debug("running %s in %s", " ".join(command), cwd)
        try:
            completed = subprocess.run(
                command,
                cwd=str(cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise ExternalCommandError(command, None, str(exc)) from exc

        result = CommandResult(command, completed.returncode, completed.stdout or "")
        if check:
            result.check()
        return result

    def spawn(self, args: Sequence[str], cwd: Path) -> CommandHandle:
        command = tuple(str(arg) for arg in args)
        LOGGER.debug("starting %s in %s", " ".join(command), cwd)
        log = tempfile.TemporaryFile(prefix="scaffoldr-")
        try:
            process = subprocess.Popen(
                command,
                cwd=str(cwd),
                stdin=subprocess.DEVNULL,
                stdout=log,
                stderr=subprocess.STDOUT,
            )
        except OSError as exc:
            log.close()
            raise ExternalCommandError(command, None, str(exc)) from exc
        return _PopenHandle(command, process, log)


def initialize_git(runner: CommandRunner, path: Path, message: str = "Initial commit") -> None:
    """Create a repository in ``path`` holding every file in one commit.

    Raises :class:`ExternalCommandError` on the first git command that fails.
    """

    for args in (
        ["git", "init"],
        ["git", "add", "-A"],
        ["git", "commit", "-m", message],
    ):
        runner.run(args, path, check=True)
    LOGGER.info("initialised git repository in %s", path)
