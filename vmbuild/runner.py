"""Sequential step runners."""

from __future__ import annotations

import enum
from typing import Callable, List, Optional, Sequence

from vmbuild.exceptions import BuildError
from vmbuild.models import StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step
from vmbuild.ui import Ui
from vmbuild.utils import log


class DebugLocation(enum.Enum):
    AFTER_RUN = "after run"
    BEFORE_CLEANUP = "before cleanup"


PauseFn = Callable[[DebugLocation, str, BuildState], None]


class BasicRunner:
    """Run steps in order against one state, then clean up what ran in reverse.

    Cancellation is cooperative: it is checked between steps, so a step that
    is running when ``cancel`` is called finishes first. A request that only
    arrives during cleanup does not change the outcome. Every step whose
    ``run`` was invoked gets its ``cleanup``, whatever the outcome.
    """

    def __init__(self, steps: Sequence[Step]) -> None:
        self.steps: List[Step] = list(steps)
        self._state: Optional[BuildState] = None

    def run(self, state: BuildState) -> None:
        self._state = state
        started: List[Step] = []
        try:
            for step in self.steps:
                if state.cancel_requested:
                    log("INFO", f"Build cancelled; not running {step.name}")
                    state.put("cancelled", True)
                    break
                started.append(step)
                action = self._run_step(step, state)
                self._after_run(step, state)
                if state.cancel_requested:
                    state.put("cancelled", True)
                    break
                if action is StepAction.HALT:
                    state.put("halted", True)
                    break
        finally:
            for step in reversed(started):
                self._before_cleanup(step, state)
                self._cleanup_step(step, state)
            self._state = None

    def cancel(self) -> None:
        if self._state is not None:
            log("INFO", "Cancelling the step runner...")
            self._state.cancel()

    def _run_step(self, step: Step, state: BuildState) -> StepAction:
        log("DEBUG", f"Running step {step.name}")
        try:
            return step.run(state)
        except Exception as exc:
            err = exc if isinstance(exc, BuildError) else BuildError(f"Unexpected error in {step.name}: {exc}")
            state.record_error(err)
            state.ui.error(str(err))
            return StepAction.HALT

    def _cleanup_step(self, step: Step, state: BuildState) -> None:
        log("DEBUG", f"Cleaning up step {step.name}")
        try:
            step.cleanup(state)
        except Exception as exc:
            message = f"Cleanup of {step.name} failed: {exc}"
            state.cleanup_errors.append(message)
            state.ui.error(message)

    def _after_run(self, step: Step, state: BuildState) -> None:
        pass

    def _before_cleanup(self, step: Step, state: BuildState) -> None:
        pass


class DebugRunner(BasicRunner):
    """Pause after every step runs and before every cleanup."""

    def __init__(self, steps: Sequence[Step], pause_fn: PauseFn) -> None:
        super().__init__(steps)
        self.pause_fn = pause_fn

    def _after_run(self, step: Step, state: BuildState) -> None:
        self.pause_fn(DebugLocation.AFTER_RUN, step.name, state)

    def _before_cleanup(self, step: Step, state: BuildState) -> None:
        self.pause_fn(DebugLocation.BEFORE_CLEANUP, step.name, state)


def debug_pause(ui: Ui) -> PauseFn:
    """Return a pause function that waits for the user to press enter."""

    def _pause(location: DebugLocation, name: str, state: BuildState) -> None:
        if state.cancel_requested:
            return
        ui.ask(f"Pausing {location.value} of step '{name}'. Press enter to continue.")

    return _pause
