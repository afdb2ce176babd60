"""Global constants and defaults for vmbuild."""

from __future__ import annotations

import os
from pathlib import Path

BUILDER_ID = "vmbuild.libvirt-iso"

LIBVIRT_URI = os.environ.get("LIBVIRT_URI", "qemu:///system")
MANAGEMENT_SHELL = os.environ.get("VMBUILD_SHELL", "/bin/sh")
ISO_CACHE_DIR = Path(os.environ.get("VMBUILD_CACHE_DIR", str(Path.home() / ".cache" / "vmbuild" / "isos")))
TRUTHY = {"1", "true", "yes", "on"}

_LOG_VERBOSE = os.environ.get("LOG_VERBOSE", "").lower() in TRUTHY

DISK_TYPE_FIXED = "Fixed"
DISK_TYPE_DYNAMIC = "Dynamic"
DISK_TYPES = (DISK_TYPE_DYNAMIC, DISK_TYPE_FIXED)

# Sizes are in MiB.
DEFAULT_DISK_SIZE = 127 * 1024
MIN_DISK_SIZE = 10 * 1024
MAX_DISK_SIZE = 65536 * 1024

DEFAULT_RAM_SIZE = 1024
MIN_RAM_SIZE = 512
MAX_RAM_SIZE = 32768
LOW_RAM = 512

DEFAULT_BUILD_NAME = "vmbuild"
DEFAULT_DISK_NAME = "disk"
DISK_FORMAT = "qcow2"

# Seconds. The first power-state check comes after the installer's busy
# period; a timeout of 0 waits forever.
SHUTDOWN_SETTLE_DELAY = 300
SHUTDOWN_POLL_INTERVAL = 10
SHUTDOWN_TIMEOUT = 4 * 60 * 60
SHUTDOWN_POLL_RETRIES = 0

CONDITION_TRUE = "True"

FLOPPY_EXTENSION = ".vfd"
FLOPPY_TARGET = "fda"
CDROM_TARGET = "sdc"

HOOK_PROVISION = "provision"
