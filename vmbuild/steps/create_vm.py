"""Define the virtual machine and its disk."""

from __future__ import annotations

from typing import Optional

from vmbuild import commands
from vmbuild.exceptions import DriverError
from vmbuild.models import StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step, halt


class StepCreateVM(Step):
    """Create the virtual machine.

    Produces:
        vm_name -- the name of the defined domain
    """

    def __init__(self) -> None:
        self.vm_name: Optional[str] = None

    def run(self, state: BuildState) -> StepAction:
        ui = state.ui
        ui.say("Creating virtual machine...")

        cfg = state.config
        command = commands.create_vm(
            cfg.vm_name,
            state.get("temp_dir"),
            cfg.ram_size_mb,
            cfg.disk_size,
            state.get("switch_name"),
            cfg.disk_type,
            disk_name=cfg.disk_name,
        )
        try:
            state.driver.manage(command)
        except DriverError as exc:
            return halt(state, "Error creating virtual machine", exc)

        self.vm_name = cfg.vm_name
        state.put("vm_name", self.vm_name)
        return StepAction.CONTINUE

    def cleanup(self, state: BuildState) -> None:
        if self.vm_name is None:
            return

        ui = state.ui
        ui.say("Unregistering and deleting virtual machine...")
        try:
            state.driver.manage(commands.remove_vm(self.vm_name))
        except DriverError as exc:
            ui.error(f"Error deleting virtual machine: {exc}")
