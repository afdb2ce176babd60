"""Progress reporting sinks for vmbuild."""

from __future__ import annotations

from typing import Protocol

from vmbuild.utils import log


class Ui(Protocol):
    def say(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def message(self, message: str) -> None: ...

    def ask(self, prompt: str) -> str: ...


class ConsoleUi:
    """Render build progress through the colour log helper."""

    def say(self, message: str) -> None:
        log("INFO", message)

    def error(self, message: str) -> None:
        log("ERROR", message)

    def message(self, message: str) -> None:
        log("DEBUG", message)

    def ask(self, prompt: str) -> str:
        log("WARN", prompt)
        try:
            return input()
        except EOFError:
            return ""
