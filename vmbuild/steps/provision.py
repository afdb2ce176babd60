"""Run the provisioning hook against the installed machine."""

from __future__ import annotations

from vmbuild.constants import HOOK_PROVISION
from vmbuild.exceptions import BuildError
from vmbuild.models import StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step, halt


class StepProvision(Step):
    def run(self, state: BuildState) -> StepAction:
        hook = state.get_ok("hook")
        if hook is None:
            return StepAction.CONTINUE
        state.ui.say("Provisioning...")
        try:
            hook.run(HOOK_PROVISION, state.ui, state)
        except BuildError as exc:
            return halt(state, "Error provisioning", exc)
        return StepAction.CONTINUE
