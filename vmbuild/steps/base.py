"""Step contract for the build pipeline."""

from __future__ import annotations

import abc

from vmbuild.exceptions import BuildError
from vmbuild.models import StepAction
from vmbuild.state import BuildState


class Step(abc.ABC):
    """A unit of provisioning work.

    ``run`` may publish values into the state and returns CONTINUE or HALT;
    a step that halts records its error in the state first. ``cleanup`` is
    best-effort: it reports failures through the UI and never raises. It is
    called for every step whose ``run`` was invoked, so it must be a no-op
    when the step's own resource was never created.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    @abc.abstractmethod
    def run(self, state: BuildState) -> StepAction: ...

    def cleanup(self, state: BuildState) -> None:
        return None


def halt(state: BuildState, message: str, exc: Exception) -> StepAction:
    """Record ``message: exc`` as the build error, report it and halt."""
    err = BuildError(f"{message}: {exc}")
    state.record_error(err)
    state.ui.error(str(err))
    return StepAction.HALT
