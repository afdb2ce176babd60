"""Management-command drivers for the virtualization host."""

from __future__ import annotations

import abc
import subprocess

from vmbuild.constants import MANAGEMENT_SHELL
from vmbuild.exceptions import DriverError
from vmbuild.utils import run


class Driver(abc.ABC):
    """Issues management commands to the virtualization host.

    Each call is synchronous and maps to exactly one external invocation.
    Drivers never retry; callers decide whether a ``DriverError`` is fatal.
    """

    @abc.abstractmethod
    def execute(self, command: str) -> str:
        """Run ``command`` and return its trimmed text output."""

    @abc.abstractmethod
    def manage(self, command: str) -> None:
        """Run ``command`` and discard its output."""


class ShellDriver(Driver):
    """Run command text through a management shell (``sh -c`` by default)."""

    def __init__(self, shell: str = MANAGEMENT_SHELL) -> None:
        self.shell = shell

    def _invoke(self, command: str) -> subprocess.CompletedProcess:
        try:
            result = run([self.shell, "-c", command], check=False, capture_output=True)
        except OSError as exc:
            raise DriverError(f"Failed to launch {self.shell}: {exc}", command=command) from exc
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            detail = stderr or f"exit status {result.returncode}"
            raise DriverError(detail, command=command, returncode=result.returncode, stderr=stderr)
        return result

    def execute(self, command: str) -> str:
        result = self._invoke(command)
        return (result.stdout or "").strip()

    def manage(self, command: str) -> None:
        self._invoke(command)
