"""Custom exceptions for vmbuild."""

from __future__ import annotations

from typing import Optional


class BuildError(RuntimeError):
    """Raised on unrecoverable configuration or build errors."""


class DriverError(BuildError):
    """Raised when a management command fails."""

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class WaitTimeoutError(BuildError):
    """Raised when an external condition does not hold before its deadline."""
