"""Shared test fixtures: a recording driver, a recording UI and a default state."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

import pytest

from vmbuild.driver import Driver
from vmbuild.exceptions import DriverError
from vmbuild.models import BuildConfig
from vmbuild.state import BuildState


class FakeDriver(Driver):
    """Record every command; answer ``execute`` from a queue or a responder."""

    def __init__(self) -> None:
        self.executed: List[str] = []
        self.managed: List[str] = []
        self.outputs: List[object] = []
        self.responder: Optional[Callable[[str], str]] = None
        self.manage_errors: Dict[str, str] = {}

    def execute(self, command: str) -> str:
        self.executed.append(command)
        if self.outputs:
            out = self.outputs.pop(0)
            if isinstance(out, Exception):
                raise out
            return str(out)
        if self.responder is not None:
            return self.responder(command)
        return ""

    def manage(self, command: str) -> None:
        self.managed.append(command)
        for needle, message in self.manage_errors.items():
            if needle in command:
                raise DriverError(message, command=command, returncode=1, stderr=message)

    @property
    def calls(self) -> List[str]:
        return self.executed + self.managed


class RecordingUi:
    def __init__(self) -> None:
        self.said: List[str] = []
        self.errors: List[str] = []
        self.messages: List[str] = []
        self.asked: List[str] = []

    def say(self, message: str) -> None:
        self.said.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def message(self, message: str) -> None:
        self.messages.append(message)

    def ask(self, prompt: str) -> str:
        self.asked.append(prompt)
        return ""


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def ui() -> RecordingUi:
    return RecordingUi()


@pytest.fixture
def default_build_config(tmp_path) -> BuildConfig:
    """Return a BuildConfig as prepare() would leave it."""
    return BuildConfig(
        build_name="test",
        vm_name="test-vm",
        output_dir=str(tmp_path / "output"),
        disk_name="disk",
        disk_size=128 * 1024,
        disk_type="Dynamic",
        ram_size_mb=1024,
        iso_urls=[str(tmp_path / "install.iso")],
        switch_name="sw0",
        shutdown_settle_delay=0,
        shutdown_poll_interval=0,
        shutdown_timeout=0,
    )


@pytest.fixture
def state(default_build_config, driver, ui, tmp_path) -> BuildState:
    st = BuildState(config=default_build_config, driver=driver, ui=ui)
    st.put("temp_dir", tmp_path / "tmp")
    st.put("switch_name", "sw0")
    return st

