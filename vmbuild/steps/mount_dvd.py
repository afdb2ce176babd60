"""Attach and detach the installation media."""

from __future__ import annotations

from typing import Optional

from vmbuild import commands
from vmbuild.exceptions import DriverError
from vmbuild.models import Disposition, StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step, halt


class StepMountDvdDrive(Step):
    def __init__(self) -> None:
        self.vm_name: Optional[str] = None

    def run(self, state: BuildState) -> StepAction:
        vm_name = state.get("vm_name")
        iso_path = state.get("iso_path")
        state.ui.say("Mounting dvd drive...")
        try:
            state.driver.manage(commands.set_dvd(vm_name, iso_path))
        except DriverError as exc:
            return halt(state, "Error mounting dvd drive", exc)
        self.vm_name = vm_name
        return StepAction.CONTINUE

    def cleanup(self, state: BuildState) -> None:
        if self.vm_name is None or state.disposition() is Disposition.SUCCEEDED:
            return
        state.ui.say("Unmounting dvd drive (cleanup)...")
        try:
            state.driver.manage(commands.set_dvd(self.vm_name, None))
        except DriverError as exc:
            state.ui.error(f"Error unmounting dvd drive: {exc}")


class StepUnmountDvdDrive(Step):
    def run(self, state: BuildState) -> StepAction:
        state.ui.say("Unmounting dvd drive...")
        try:
            state.driver.manage(commands.set_dvd(state.get("vm_name"), None))
        except DriverError as exc:
            return halt(state, "Error unmounting dvd drive", exc)
        return StepAction.CONTINUE
