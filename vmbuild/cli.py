"""CLI entry points for vmbuild."""

from __future__ import annotations

import argparse
import dataclasses
import signal
from pathlib import Path
from typing import Any, Dict, List, Optional

from vmbuild.artifact import Artifact
from vmbuild.builder import Builder
from vmbuild.config import load_template
from vmbuild.exceptions import BuildError
from vmbuild.models import BuildConfig
from vmbuild.ui import ConsoleUi
from vmbuild.utils import log


def show_config(cfg: BuildConfig) -> None:
    """Print the resolved build configuration."""
    for field in dataclasses.fields(cfg):
        value = getattr(cfg, field.name)
        if isinstance(value, list):
            print(f"  {field.name}:")
            for item in value:
                print(f"    - {item}")
        else:
            print(f"  {field.name}: {value}")


def print_artifact(artifact: Artifact) -> None:
    log("SUCCESS", artifact.string())
    for path in artifact.files:
        print(f"  {path}", flush=True)


def run_build(builder: Builder) -> Artifact:
    """Run the build, turning SIGINT/SIGTERM into a cooperative cancel."""

    def _request_cancel(signum, frame):
        sig_name = signal.Signals(signum).name
        log("WARN", f"{sig_name} received, cancelling build (cleanup will still run)")
        builder.cancel()

    prev_sigterm = signal.signal(signal.SIGTERM, _request_cancel)
    prev_sigint = signal.signal(signal.SIGINT, _request_cancel)
    try:
        return builder.run(ConsoleUi())
    finally:
        signal.signal(signal.SIGTERM, prev_sigterm)
        signal.signal(signal.SIGINT, prev_sigint)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Build a VM image from an install ISO on a libvirt host")
    parser.add_argument("template", type=Path, help="YAML build template")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing output directory")
    parser.add_argument("--debug", action="store_true", help="Pause between steps for inspection")
    parser.add_argument("--show-config", action="store_true", help="Show resolved build configuration and exit")
    parser.add_argument("--dry-run", action="store_true", help="Validate the template, then exit")
    args = parser.parse_args(argv)

    overrides: Dict[str, Any] = {}
    if args.force:
        overrides["force"] = True
    if args.debug:
        overrides["debug"] = True

    builder = Builder()
    try:
        raw = load_template(args.template)
        warnings = builder.prepare(raw, overrides)
    except BuildError as exc:
        log("ERROR", str(exc))
        return 1
    for warning in warnings:
        log("WARN", warning)

    if args.show_config:
        show_config(builder.config)
        return 0
    if args.dry_run:
        log("INFO", "=== Dry-run complete (no VM created) ===")
        return 0

    log("INFO", f"VM: {builder.config.vm_name} | Memory: {builder.config.ram_size_mb} MiB | "
                f"Disk: {builder.config.disk_size} MiB ({builder.config.disk_type})")
    try:
        artifact = run_build(builder)
    except BuildError as exc:
        log("ERROR", f"Build failed: {exc}")
        return 1
    except Exception as exc:
        log("ERROR", f"Unexpected error: {exc}")
        log("ERROR", "This is likely a bug. Please report it with the output above.")
        import traceback

        traceback.print_exc()
        return 1

    print_artifact(artifact)
    return 0
