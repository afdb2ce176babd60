"""Bounded polling for asynchronous conditions on the virtualization host."""

from __future__ import annotations

import time
from typing import Callable, Optional

from vmbuild.constants import (
    CONDITION_TRUE,
    SHUTDOWN_POLL_INTERVAL,
    SHUTDOWN_POLL_RETRIES,
    SHUTDOWN_SETTLE_DELAY,
    SHUTDOWN_TIMEOUT,
)
from vmbuild.exceptions import BuildError, DriverError, WaitTimeoutError
from vmbuild.models import StepAction
from vmbuild.state import BuildState
from vmbuild.utils import log


def _halt(state: BuildState, exc: BuildError) -> StepAction:
    state.record_error(exc)
    state.ui.error(str(exc))
    return StepAction.HALT


def wait_for_condition(
    state: BuildState,
    command: str,
    expected: str = CONDITION_TRUE,
    description: str = "condition",
    settle_delay: float = SHUTDOWN_SETTLE_DELAY,
    poll_interval: float = SHUTDOWN_POLL_INTERVAL,
    timeout: Optional[float] = SHUTDOWN_TIMEOUT,
    retries: int = SHUTDOWN_POLL_RETRIES,
    sleep: Optional[Callable[[float], bool]] = None,
    clock: Callable[[], float] = time.time,
) -> StepAction:
    """Block until ``command`` prints ``expected``.

    Sleeps ``settle_delay`` once, then checks the condition every
    ``poll_interval`` seconds with a single check in flight at a time.
    ``sleep`` must return True when cancellation was requested while sleeping;
    it defaults to the state's cancellable sleep.

    A failing check halts the build after ``retries`` consecutive failures
    have been tolerated. Passing the deadline records a ``WaitTimeoutError``
    and halts; a ``timeout`` of None or 0 waits indefinitely. Cancellation
    returns HALT without recording an error.
    """
    if sleep is None:
        sleep = state.sleep
    deadline = clock() + timeout if timeout else None

    def _wait(seconds: float) -> bool:
        if deadline is not None:
            seconds = max(0.0, min(seconds, deadline - clock()))
        return sleep(seconds) or state.cancel_requested

    if _wait(settle_delay):
        log("INFO", f"Cancelled while waiting for {description}")
        return StepAction.HALT

    failures = 0
    while True:
        if state.cancel_requested:
            log("INFO", f"Cancelled while waiting for {description}")
            return StepAction.HALT
        if deadline is not None and clock() >= deadline:
            return _halt(state, WaitTimeoutError(f"Timed out after {timeout:g}s waiting for {description}"))

        try:
            output = state.driver.execute(command)
        except DriverError as exc:
            failures += 1
            if failures > retries:
                return _halt(state, DriverError(f"Error checking {description}: {exc}", command=command))
            log("WARN", f"Check for {description} failed ({failures}/{retries}): {exc}")
        else:
            failures = 0
            if output == expected:
                return StepAction.CONTINUE
            log("DEBUG", f"Still waiting for {description} (got '{output}')")

        if _wait(poll_interval):
            log("INFO", f"Cancelled while waiting for {description}")
            return StepAction.HALT
