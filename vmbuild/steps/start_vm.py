"""Boot the virtual machine into the installer."""

from __future__ import annotations

from typing import Optional

from vmbuild import commands
from vmbuild.constants import CONDITION_TRUE
from vmbuild.exceptions import DriverError
from vmbuild.models import StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step, halt


class StepStartVm(Step):
    def __init__(self) -> None:
        self.vm_name: Optional[str] = None

    def run(self, state: BuildState) -> StepAction:
        vm_name = state.get("vm_name")
        state.ui.say("Starting the virtual machine...")
        try:
            state.driver.manage(commands.start_vm(vm_name))
        except DriverError as exc:
            return halt(state, "Error starting vm", exc)
        self.vm_name = vm_name
        return StepAction.CONTINUE

    def cleanup(self, state: BuildState) -> None:
        if self.vm_name is None:
            return
        driver = state.driver
        try:
            running = driver.execute(commands.vm_is_running(self.vm_name)) == CONDITION_TRUE
            if running:
                state.ui.say("Stopping virtual machine...")
                driver.manage(commands.stop_vm(self.vm_name))
        except DriverError as exc:
            state.ui.error(f"Error stopping vm: {exc}")
