"""Utility functions for vmbuild."""

from __future__ import annotations

import subprocess
import tempfile
import time
from pathlib import Path
from typing import List, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from vmbuild.constants import _LOG_VERBOSE
from vmbuild.exceptions import BuildError


def log(level: str, message: str) -> None:
    """Lightweight structured logging compatible with existing colour expectation."""
    if level == "DEBUG" and not _LOG_VERBOSE:
        return
    colours = {
        "INFO": "\033[0;34m",
        "WARN": "\033[1;33m",
        "ERROR": "\033[0;31m",
        "SUCCESS": "\033[0;32m",
        "DEBUG": "\033[0;90m",
    }
    colour = colours.get(level, "")
    reset = "\033[0m" if colour else ""
    print(f"{colour}[{level}]{reset} {message}", flush=True)


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _print_progress(downloaded: int, total_bytes: Optional[int], start_time: float) -> None:
    elapsed = time.time() - start_time
    speed = downloaded / elapsed if elapsed > 0 else 0
    downloaded_mb = downloaded / (1024 * 1024)

    if total_bytes:
        total_mb = total_bytes / (1024 * 1024)
        pct = downloaded * 100 / total_bytes
        bar_len = 30
        filled = int(bar_len * downloaded / total_bytes)
        bar = "#" * filled + "-" * (bar_len - filled)
        print(
            f"\r  [{bar}] {pct:5.1f}% {downloaded_mb:.1f}/{total_mb:.1f} MiB "
            f"({speed / (1024 * 1024):.1f} MiB/s)",
            end="", flush=True,
        )
    else:
        print(
            f"\r  {downloaded_mb:.1f} MiB downloaded "
            f"({speed / (1024 * 1024):.1f} MiB/s)",
            end="", flush=True,
        )


def download_file(url: str, destination: Path, label: str = "Downloading") -> None:
    """Download ``url`` to ``destination`` with a progress bar.

    The body is written to a temporary file beside ``destination`` and moved
    into place only once complete.
    """
    log("INFO", f"{label}: {url}")
    req = Request(url, headers={"User-Agent": "vmbuild/1.0"})
    try:
        response = urlopen(req, timeout=60)
    except HTTPError as exc:
        raise BuildError(f"HTTP error downloading {url}: {exc.code} {exc.reason}")
    except URLError as exc:
        raise BuildError(f"Failed to download {url}: {exc.reason}")

    with response:
        total = response.headers.get("Content-Length")
        total_bytes = int(total) if total else None
        downloaded = 0
        start_time = time.time()

        with tempfile.NamedTemporaryFile(delete=False, dir=destination.parent) as tmp:
            tmp_path = Path(tmp.name)
            try:
                chunk_size = 1024 * 256  # 256 KiB
                while True:
                    chunk = response.read(chunk_size)
                    if not chunk:
                        break
                    tmp.write(chunk)
                    downloaded += len(chunk)
                    _print_progress(downloaded, total_bytes, start_time)
                print(flush=True)  # newline after progress
                tmp.flush()
                tmp_path.replace(destination)
                elapsed = time.time() - start_time
                log("SUCCESS", f"Downloaded {downloaded / (1024 * 1024):.1f} MiB in {elapsed:.1f}s")
            except Exception:
                tmp_path.unlink(missing_ok=True)
                raise


def run(cmd: List[str], check: bool = True, **kwargs) -> subprocess.CompletedProcess:
    """Run command with logging."""
    log("DEBUG", f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, check=check, text=True, **kwargs)
    return result
