"""Prepare the directory that receives the exported image."""

from __future__ import annotations

import shutil
from pathlib import Path

from vmbuild.exceptions import BuildError
from vmbuild.models import Disposition, StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step, halt
from vmbuild.utils import ensure_directory


class StepOutputDir(Step):
    def __init__(self, path: str, force: bool = False) -> None:
        self.path = Path(path)
        self.force = force
        self._created = False

    def run(self, state: BuildState) -> StepAction:
        ui = state.ui
        if self.path.exists():
            if not self.force:
                err = BuildError(
                    f"Output directory exists: {self.path}\n"
                    "  Remove it or run with --force to overwrite."
                )
                state.record_error(err)
                ui.error(str(err))
                return StepAction.HALT
            ui.say("Deleting previous output directory...")
            try:
                shutil.rmtree(self.path)
            except OSError as exc:
                return halt(state, "Error deleting output directory", exc)

        try:
            ensure_directory(self.path)
        except OSError as exc:
            return halt(state, "Error creating output directory", exc)
        self._created = True
        return StepAction.CONTINUE

    def cleanup(self, state: BuildState) -> None:
        if not self._created:
            return
        if state.disposition() is Disposition.SUCCEEDED:
            return
        state.ui.say("Deleting output directory...")
        try:
            shutil.rmtree(self.path)
        except OSError as exc:
            state.ui.error(f"Error deleting output directory: {exc}")
