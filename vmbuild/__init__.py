"""vmbuild package."""

__all__ = [
    "artifact",
    "builder",
    "cli",
    "commands",
    "config",
    "constants",
    "driver",
    "exceptions",
    "hook",
    "models",
    "runner",
    "state",
    "steps",
    "ui",
    "utils",
    "wait",
]
