"""Export the finished machine into the output directory."""

from __future__ import annotations

from vmbuild import commands
from vmbuild.exceptions import DriverError
from vmbuild.models import StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step, halt


class StepExportVm(Step):
    def __init__(self, output_dir: str, skip_compaction: bool = False) -> None:
        self.output_dir = output_dir
        self.skip_compaction = skip_compaction

    def run(self, state: BuildState) -> StepAction:
        vm_name = state.get("vm_name")
        disk_name = state.config.disk_name
        source = commands.disk_path(state.get("temp_dir"), disk_name)
        state.ui.say("Exporting vm...")
        if self.skip_compaction:
            state.ui.message("Skipping disk compaction")
        try:
            state.driver.manage(
                commands.export_vm(
                    vm_name,
                    source,
                    self.output_dir,
                    compact=not self.skip_compaction,
                    disk_name=disk_name,
                )
            )
        except DriverError as exc:
            return halt(state, "Error exporting vm", exc)
        return StepAction.CONTINUE
