"""ISO-to-image builder orchestrating the provisioning pipeline."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import List, Mapping, Optional

from vmbuild import commands
from vmbuild.artifact import Artifact, new_artifact
from vmbuild.config import decode_config
from vmbuild.constants import (
    DEFAULT_DISK_NAME,
    DEFAULT_DISK_SIZE,
    DEFAULT_RAM_SIZE,
    DISK_TYPE_DYNAMIC,
    DISK_TYPES,
    ISO_CACHE_DIR,
    LOW_RAM,
    MAX_DISK_SIZE,
    MAX_RAM_SIZE,
    MIN_DISK_SIZE,
    MIN_RAM_SIZE,
)
from vmbuild.driver import Driver, ShellDriver
from vmbuild.exceptions import BuildError, DriverError
from vmbuild.hook import Hook, ShellHook
from vmbuild.models import BuildConfig, Disposition
from vmbuild.runner import BasicRunner, DebugRunner, debug_pause
from vmbuild.state import BuildState
from vmbuild.steps import (
    Step,
    StepCreateSwitch,
    StepCreateTempDir,
    StepCreateVM,
    StepDownloadIso,
    StepExportVm,
    StepMountDvdDrive,
    StepMountFloppyDrive,
    StepOutputDir,
    StepProvision,
    StepStartVm,
    StepUnmountDvdDrive,
    StepWaitForPowerOff,
)
from vmbuild.ui import Ui
from vmbuild.utils import log

LOW_MEMORY_WARNING = "The hypervisor might fail to create a VM if there is not enough free memory in the system."


class Builder:
    def __init__(self, driver: Optional[Driver] = None, cache_dir: Path = ISO_CACHE_DIR) -> None:
        self.driver = driver or ShellDriver()
        self.cache_dir = cache_dir
        self.config = BuildConfig()
        self.runner: Optional[BasicRunner] = None

    def prepare(self, *raws: Mapping) -> List[str]:
        """Decode and validate the configuration; return warnings or raise BuildError."""
        self.config = decode_config(*raws)
        cfg = self.config
        errors: List[str] = []
        warnings: List[str] = []

        if not cfg.output_dir:
            cfg.output_dir = f"output-{cfg.build_name}"
        if not cfg.disk_name:
            cfg.disk_name = DEFAULT_DISK_NAME
        if not cfg.vm_name:
            cfg.vm_name = f"vmbuild-{cfg.build_name}"

        error = self._check_disk_size()
        if error:
            errors.append(error)

        if not cfg.disk_type:
            cfg.disk_type = DISK_TYPE_DYNAMIC
        if cfg.disk_type not in DISK_TYPES:
            errors.append(
                f"disk_type: {cfg.disk_type}, invalid disk type, must be {' or '.join(DISK_TYPES)}"
            )
        log("DEBUG", f"DiskType: {cfg.disk_type}")

        error = self._check_ram_size()
        if error:
            errors.append(error)

        if not cfg.iso_url and not cfg.iso_urls:
            errors.append("One of iso_url or iso_urls must be specified.")
        elif cfg.iso_url and cfg.iso_urls:
            errors.append("Only one of iso_url or iso_urls may be specified.")
        elif cfg.iso_url:
            cfg.iso_urls = [cfg.iso_url]

        if cfg.floppy_image and not Path(cfg.floppy_image).is_file():
            errors.append(f"floppy_image not found: {cfg.floppy_image}")

        if cfg.shutdown_poll_interval <= 0:
            errors.append("shutdown_poll_interval must be > 0")
        if cfg.shutdown_settle_delay < 0:
            errors.append("shutdown_settle_delay must be >= 0")
        if cfg.shutdown_timeout < 0:
            errors.append("shutdown_timeout must be >= 0 (0 disables the timeout)")
        if cfg.shutdown_poll_retries < 0:
            errors.append("shutdown_poll_retries must be >= 0")

        if not cfg.switch_name:
            cfg.switch_name = self._online_switch() or f"pis_{uuid.uuid4()}"

        if errors:
            raise BuildError("Invalid build configuration:\n  " + "\n  ".join(errors))

        warning = self._check_host_available_memory()
        if warning:
            warnings.append(warning)
        return warnings

    def steps(self) -> List[Step]:
        cfg = self.config
        return [
            StepCreateTempDir(),
            StepOutputDir(cfg.output_dir, force=cfg.force),
            StepDownloadIso(cfg.iso_urls, cache_dir=self.cache_dir),
            StepCreateSwitch(cfg.switch_name),
            StepCreateVM(),
            StepMountDvdDrive(),
            StepMountFloppyDrive(),
            StepStartVm(),
            StepWaitForPowerOff(),
            StepUnmountDvdDrive(),
            StepProvision(),
            StepExportVm(cfg.output_dir, skip_compaction=cfg.skip_compaction),
        ]

    def run(self, ui: Ui, hook: Optional[Hook] = None) -> Artifact:
        cfg = self.config
        if hook is None and cfg.provisioners:
            hook = ShellHook(cfg.provisioners)

        state = BuildState(config=cfg, driver=self.driver, ui=ui, hook=hook)
        if cfg.floppy_image:
            state.put("floppy_path", Path(cfg.floppy_image))

        steps = self.steps()
        if cfg.debug:
            self.runner = DebugRunner(steps, pause_fn=debug_pause(ui))
        else:
            self.runner = BasicRunner(steps)
        self.runner.run(state)

        disposition = state.disposition()
        if disposition is Disposition.FAILED:
            err = state.error
            if isinstance(err, BuildError):
                raise err
            raise BuildError(str(err)) from err
        if disposition is Disposition.CANCELLED:
            raise BuildError("Build was cancelled.")
        if disposition is Disposition.HALTED:
            raise BuildError("Build was halted.")
        return new_artifact(cfg.output_dir)

    def cancel(self) -> None:
        if self.runner is not None:
            log("INFO", "Cancelling the build runner...")
            self.runner.cancel()

    def _check_disk_size(self) -> Optional[str]:
        cfg = self.config
        if cfg.disk_size == 0:
            cfg.disk_size = DEFAULT_DISK_SIZE
        log("DEBUG", f"DiskSize: {cfg.disk_size}")
        if cfg.disk_size < MIN_DISK_SIZE:
            return (
                f"disk_size: disk space must be >= {MIN_DISK_SIZE // 1024} GB, "
                f"but defined: {cfg.disk_size // 1024} GB"
            )
        if cfg.disk_size > MAX_DISK_SIZE:
            return (
                f"disk_size: disk space must be <= {MAX_DISK_SIZE // 1024} GB, "
                f"but defined: {cfg.disk_size // 1024} GB"
            )
        return None

    def _check_ram_size(self) -> Optional[str]:
        cfg = self.config
        if cfg.ram_size_mb == 0:
            cfg.ram_size_mb = DEFAULT_RAM_SIZE
        log("DEBUG", f"RamSize: {cfg.ram_size_mb}")
        if cfg.ram_size_mb < MIN_RAM_SIZE:
            return f"ram_size_mb: memory size must be >= {MIN_RAM_SIZE} MB, but defined: {cfg.ram_size_mb}"
        if cfg.ram_size_mb > MAX_RAM_SIZE:
            return f"ram_size_mb: memory size must be <= {MAX_RAM_SIZE} MB, but defined: {cfg.ram_size_mb}"
        return None

    def _check_host_available_memory(self) -> Optional[str]:
        try:
            free_mb = float(self.driver.execute(commands.host_free_memory_mb()))
        except (DriverError, ValueError):
            return LOW_MEMORY_WARNING
        if free_mb - self.config.ram_size_mb < LOW_RAM:
            return LOW_MEMORY_WARNING
        return None

    def _online_switch(self) -> Optional[str]:
        try:
            name = self.driver.execute(commands.first_active_network())
        except DriverError as exc:
            log("DEBUG", f"Could not list active networks: {exc}")
            return None
        return name or None
