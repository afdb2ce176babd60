"""Resolve the installation ISO to a local file."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import List, Optional
from urllib.parse import unquote, urlparse

from vmbuild.constants import ISO_CACHE_DIR
from vmbuild.exceptions import BuildError
from vmbuild.models import StepAction
from vmbuild.state import BuildState
from vmbuild.steps.base import Step
from vmbuild.utils import download_file, ensure_directory, log


def local_path(url: str) -> Optional[Path]:
    """Return the local file behind ``url``, or None for remote URLs."""
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    if not parsed.scheme or len(parsed.scheme) == 1:  # bare path or drive letter
        return Path(url)
    return None


def cache_path(url: str, cache_dir: Path) -> Path:
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]
    name = Path(urlparse(url).path).name or "install"
    if not name.endswith(".iso"):
        name += ".iso"
    return cache_dir / f"{digest}-{name}"


class StepDownloadIso(Step):
    """Produces: iso_path"""

    def __init__(self, urls: List[str], cache_dir: Path = ISO_CACHE_DIR) -> None:
        self.urls = list(urls)
        self.cache_dir = Path(cache_dir)

    def run(self, state: BuildState) -> StepAction:
        ui = state.ui
        ui.say("Retrieving ISO...")
        failures: List[str] = []
        for url in self.urls:
            path = local_path(url)
            if path is not None:
                if path.is_file():
                    state.put("iso_path", path)
                    return StepAction.CONTINUE
                failures.append(f"{url}: file not found")
                continue

            target = cache_path(url, self.cache_dir)
            if target.is_file():
                log("INFO", f"Using cached ISO {target}")
                state.put("iso_path", target)
                return StepAction.CONTINUE
            if state.cancel_requested:
                return StepAction.HALT
            try:
                ensure_directory(self.cache_dir)
                download_file(url, target, label="Downloading ISO")
            except (BuildError, OSError) as exc:
                log("WARN", str(exc))
                failures.append(f"{url}: {exc}")
                continue
            state.put("iso_path", target)
            return StepAction.CONTINUE

        err = BuildError("Error retrieving ISO:\n  " + "\n  ".join(failures))
        state.record_error(err)
        ui.error(str(err))
        return StepAction.HALT
