"""Wait for the guest installer to power the virtual machine off."""

from __future__ import annotations

from vmbuild import commands
from vmbuild.models import StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step
from vmbuild.wait import wait_for_condition


class StepWaitForPowerOff(Step):
    def run(self, state: BuildState) -> StepAction:
        cfg = state.config
        vm_name = state.get("vm_name")
        state.ui.say("Waiting for vm to be powered down...")
        return wait_for_condition(
            state,
            commands.vm_is_off(vm_name),
            description=f"{vm_name} to power off",
            settle_delay=cfg.shutdown_settle_delay,
            poll_interval=cfg.shutdown_poll_interval,
            timeout=cfg.shutdown_timeout,
            retries=cfg.shutdown_poll_retries,
        )
