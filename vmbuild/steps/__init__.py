"""Build pipeline steps."""

from vmbuild.steps.base import Step
from vmbuild.steps.create_switch import StepCreateSwitch
from vmbuild.steps.create_vm import StepCreateVM
from vmbuild.steps.download_iso import StepDownloadIso
from vmbuild.steps.export_vm import StepExportVm
from vmbuild.steps.mount_dvd import StepMountDvdDrive, StepUnmountDvdDrive
from vmbuild.steps.mount_floppy import StepMountFloppyDrive
from vmbuild.steps.output_dir import StepOutputDir
from vmbuild.steps.provision import StepProvision
from vmbuild.steps.start_vm import StepStartVm
from vmbuild.steps.temp_dir import StepCreateTempDir
from vmbuild.steps.wait_for_power_off import StepWaitForPowerOff

__all__ = [
    "Step",
    "StepCreateSwitch",
    "StepCreateTempDir",
    "StepCreateVM",
    "StepDownloadIso",
    "StepExportVm",
    "StepMountDvdDrive",
    "StepMountFloppyDrive",
    "StepOutputDir",
    "StepProvision",
    "StepStartVm",
    "StepUnmountDvdDrive",
    "StepWaitForPowerOff",
]
