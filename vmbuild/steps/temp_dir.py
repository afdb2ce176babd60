"""Scratch directory holding the disk image during the build."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Optional

from vmbuild.models import StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step, halt


class StepCreateTempDir(Step):
    """Produces: temp_dir"""

    def __init__(self) -> None:
        self.temp_dir: Optional[Path] = None

    def run(self, state: BuildState) -> StepAction:
        state.ui.say("Creating temporary directory...")
        try:
            self.temp_dir = Path(tempfile.mkdtemp(prefix="vmbuild"))
        except OSError as exc:
            return halt(state, "Error creating temporary directory", exc)
        state.put("temp_dir", self.temp_dir)
        return StepAction.CONTINUE

    def cleanup(self, state: BuildState) -> None:
        if self.temp_dir is None:
            return
        state.ui.say("Deleting temporary directory...")
        try:
            shutil.rmtree(self.temp_dir)
        except OSError as exc:
            state.ui.error(f"Error deleting temporary directory: {exc}")
