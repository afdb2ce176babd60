"""Ensure the virtual network the machine attaches to exists."""

from __future__ import annotations

from typing import Optional

from vmbuild import commands
from vmbuild.constants import CONDITION_TRUE
from vmbuild.exceptions import DriverError
from vmbuild.models import StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step, halt


class StepCreateSwitch(Step):
    """Produces: switch_name"""

    def __init__(self, switch_name: str) -> None:
        self.switch_name = switch_name
        self.created: Optional[str] = None

    def run(self, state: BuildState) -> StepAction:
        ui = state.ui
        driver = state.driver
        try:
            exists = driver.execute(commands.network_exists(self.switch_name)) == CONDITION_TRUE
        except DriverError as exc:
            return halt(state, "Error looking up virtual switch", exc)

        if not exists:
            ui.say(f"Creating virtual switch {self.switch_name}...")
            try:
                driver.manage(commands.create_network(self.switch_name))
            except DriverError as exc:
                return halt(state, "Error creating virtual switch", exc)
            self.created = self.switch_name

        state.put("switch_name", self.switch_name)
        return StepAction.CONTINUE

    def cleanup(self, state: BuildState) -> None:
        if self.created is None:
            return
        state.ui.say("Removing virtual switch...")
        try:
            state.driver.manage(commands.remove_network(self.created))
        except DriverError as exc:
            state.ui.error(f"Error removing virtual switch: {exc}")
