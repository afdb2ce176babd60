"""Shared build state passed through the step pipeline."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, List, Optional

from vmbuild.driver import Driver
from vmbuild.exceptions import BuildError
from vmbuild.models import BuildConfig, Disposition
from vmbuild.ui import Ui


@dataclass
class BuildState:
    """Typed context for one build invocation.

    Each well-known key is a field. A key is published once by the step that
    produces it and read by later steps; ``put`` refuses to change the type of
    a published value. A cancel request is an event so it may come from a
    signal handler or another thread while a step is blocked; ``cancelled``
    records that the runner observed it while steps were still running.
    """

    config: BuildConfig
    driver: Driver
    ui: Ui
    hook: Optional[Any] = None
    temp_dir: Optional[Path] = None
    iso_path: Optional[Path] = None
    floppy_path: Optional[Path] = None
    vm_name: Optional[str] = None
    switch_name: Optional[str] = None
    error: Optional[Exception] = None
    halted: bool = False
    cancelled: bool = False
    cleanup_errors: List[str] = field(default_factory=list)
    _cancel_event: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def keys(cls) -> List[str]:
        return [f.name for f in fields(cls) if not f.name.startswith("_")]

    def _check_key(self, key: str) -> None:
        if key.startswith("_") or key not in self.keys():
            raise BuildError(f"Unknown build state key '{key}'")

    def get(self, key: str) -> Any:
        """Return a published value, failing if the producing step has not run."""
        value = self.get_ok(key)
        if value is None:
            raise BuildError(f"Build state key '{key}' has not been published")
        return value

    def get_ok(self, key: str) -> Any:
        self._check_key(key)
        return getattr(self, key)

    def put(self, key: str, value: Any) -> None:
        self._check_key(key)
        current = getattr(self, key)
        if current is not None and value is not None and not isinstance(value, type(current)):
            raise BuildError(
                f"Build state key '{key}' holds {type(current).__name__}, refusing {type(value).__name__}"
            )
        setattr(self, key, value)

    def record_error(self, exc: Exception) -> None:
        """Keep the first fatal error; later ones never overwrite it."""
        if self.error is None:
            self.error = exc

    def cancel(self) -> None:
        """Request cancellation; the runner records it once its step loop sees it."""
        self._cancel_event.set()

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    def sleep(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; return True if cancellation was requested meanwhile."""
        if seconds <= 0:
            return self.cancel_requested
        return self._cancel_event.wait(seconds)

    def disposition(self) -> Disposition:
        if self.error is not None:
            return Disposition.FAILED
        if self.cancelled:
            return Disposition.CANCELLED
        if self.halted:
            return Disposition.HALTED
        return Disposition.SUCCEEDED
