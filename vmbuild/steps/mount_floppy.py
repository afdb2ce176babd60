"""Attach a floppy image to the virtual machine."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Optional

from vmbuild import commands
from vmbuild.constants import FLOPPY_EXTENSION
from vmbuild.exceptions import DriverError
from vmbuild.models import StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step, halt
from vmbuild.utils import log


class StepMountFloppyDrive(Step):
    def __init__(self) -> None:
        self.floppy_path: Optional[Path] = None

    def run(self, state: BuildState) -> StepAction:
        source = state.get_ok("floppy_path")
        if source is None:
            log("DEBUG", "No floppy disk, not attaching.")
            return StepAction.CONTINUE

        # libvirt picks the floppy format from the file extension.
        try:
            staged = self._copy_floppy(Path(source))
        except OSError as exc:
            return halt(state, "Error preparing floppy", exc)

        ui = state.ui
        ui.say("Mounting floppy drive...")
        vm_name = state.get("vm_name")
        try:
            state.driver.manage(commands.set_floppy(vm_name, staged))
        except DriverError as exc:
            shutil.rmtree(staged.parent, ignore_errors=True)
            return halt(state, "Error mounting floppy drive", exc)

        self.floppy_path = staged
        return StepAction.CONTINUE

    def cleanup(self, state: BuildState) -> None:
        if self.floppy_path is None:
            return

        ui = state.ui
        ui.say("Unmounting floppy drive (cleanup)...")
        try:
            state.driver.manage(commands.set_floppy(state.get("vm_name"), None))
        except DriverError as exc:
            ui.error(f"Error unmounting floppy drive: {exc}")

        try:
            self.floppy_path.unlink()
            self.floppy_path.parent.rmdir()
        except OSError as exc:
            ui.error(f"Error removing floppy copy: {exc}")

    @staticmethod
    def _copy_floppy(source: Path) -> Path:
        tempdir = Path(tempfile.mkdtemp(prefix="vmbuild"))
        target = tempdir / f"floppy{FLOPPY_EXTENSION}"
        log("DEBUG", f"Copying floppy to temp location: {target}")
        try:
            shutil.copyfile(source, target)
        except OSError:
            shutil.rmtree(tempdir, ignore_errors=True)
            raise
        return target
