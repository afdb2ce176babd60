"""Build artifacts."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from vmbuild.constants import BUILDER_ID
from vmbuild.exceptions import BuildError


@dataclass(frozen=True)
class Artifact:
    builder_id: str
    directory: Path
    files: Tuple[Path, ...]

    def id(self) -> str:
        return "VM"

    def string(self) -> str:
        return f"VM files in directory: {self.directory}"

    def destroy(self) -> None:
        shutil.rmtree(self.directory)


def new_artifact(directory: str) -> Artifact:
    """Describe the files a finished build left in ``directory``."""
    root = Path(directory)
    if not root.is_dir():
        raise BuildError(f"Output directory missing: {root}")
    files = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in sorted(filenames):
            files.append(Path(dirpath) / filename)
    return Artifact(builder_id=BUILDER_ID, directory=root, files=tuple(sorted(files)))
