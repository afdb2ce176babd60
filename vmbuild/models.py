"""Data models for vmbuild."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional

from vmbuild.constants import (
    DEFAULT_BUILD_NAME,
    SHUTDOWN_POLL_INTERVAL,
    SHUTDOWN_POLL_RETRIES,
    SHUTDOWN_SETTLE_DELAY,
    SHUTDOWN_TIMEOUT,
)


class StepAction(enum.Enum):
    CONTINUE = "continue"
    HALT = "halt"


class Disposition(enum.Enum):
    """Terminal outcome of a build, derived from the state after the runner finishes."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    HALTED = "halted"


@dataclass
class BuildConfig:
    build_name: str = DEFAULT_BUILD_NAME
    vm_name: str = ""
    output_dir: str = ""
    disk_name: str = ""
    disk_size: int = 0  # MiB
    disk_type: str = ""
    ram_size_mb: int = 0
    iso_url: str = ""
    iso_urls: List[str] = field(default_factory=list)
    floppy_image: Optional[str] = None
    switch_name: str = ""
    skip_compaction: bool = False
    shutdown_settle_delay: float = SHUTDOWN_SETTLE_DELAY
    shutdown_poll_interval: float = SHUTDOWN_POLL_INTERVAL
    shutdown_timeout: float = SHUTDOWN_TIMEOUT
    shutdown_poll_retries: int = SHUTDOWN_POLL_RETRIES
    provisioners: List[str] = field(default_factory=list)
    force: bool = False
    debug: bool = False
