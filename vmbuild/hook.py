"""Provisioning hooks run by the pipeline."""

from __future__ import annotations

from shlex import quote
from typing import List, Protocol, Sequence

from vmbuild.constants import HOOK_PROVISION
from vmbuild.exceptions import BuildError, DriverError
from vmbuild.state import BuildState
from vmbuild.ui import Ui


class Hook(Protocol):
    def run(self, name: str, ui: Ui, state: BuildState) -> None: ...


class ShellHook:
    """Run provisioner commands through the build's management driver."""

    def __init__(self, commands: Sequence[str]) -> None:
        self.commands: List[str] = list(commands)

    def run(self, name: str, ui: Ui, state: BuildState) -> None:
        if name != HOOK_PROVISION:
            return
        prefix = (
            f"export VM_NAME={quote(state.get('vm_name'))} "
            f"OUTPUT_DIR={quote(state.config.output_dir)}; "
        )
        for index, command in enumerate(self.commands, start=1):
            if state.cancel_requested:
                raise BuildError("Provisioning cancelled")
            ui.say(f"Provisioner {index}/{len(self.commands)}: {command}")
            try:
                state.driver.manage(prefix + command)
            except DriverError as exc:
                raise BuildError(f"Provisioner '{command}' failed: {exc}") from exc
