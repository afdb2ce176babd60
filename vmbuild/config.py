"""Build template loading and decoding for vmbuild."""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Any, Dict, List, Mapping

try:
    import yaml  # type: ignore
except ImportError as exc:  # pragma: no cover
    raise SystemExit("PyYAML is required but not installed") from exc

from vmbuild.constants import TRUTHY
from vmbuild.exceptions import BuildError
from vmbuild.models import BuildConfig

_INT_FIELDS = {"disk_size", "ram_size_mb", "shutdown_poll_retries"}
_FLOAT_FIELDS = {"shutdown_settle_delay", "shutdown_poll_interval", "shutdown_timeout"}
_BOOL_FIELDS = {"skip_compaction", "force", "debug"}
_LIST_FIELDS = {"iso_urls", "provisioners"}


def load_template(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise BuildError(f"Build template missing: {path}")
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as exc:
        raise BuildError(f"Cannot read build template {path}: {exc}")
    except yaml.YAMLError as exc:
        raise BuildError(f"Build template {path} contains invalid YAML: {exc}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BuildError(f"Build template {path} must be a YAML mapping, got {type(data).__name__}")
    return data


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in _BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        return str(value).lower() in TRUTHY
    if name in _INT_FIELDS:
        try:
            return int(value)
        except (TypeError, ValueError):
            raise BuildError(f"{name} must be an integer (got '{value}')")
    if name in _FLOAT_FIELDS:
        try:
            return float(value)
        except (TypeError, ValueError):
            raise BuildError(f"{name} must be a number (got '{value}')")
    if name in _LIST_FIELDS:
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            raise BuildError(f"{name} must be a list (got {type(value).__name__})")
        return [str(item) for item in value]
    return str(value)


def decode_config(*raws: Mapping[str, Any]) -> BuildConfig:
    """Merge raw mappings left to right into a BuildConfig, rejecting unknown keys."""
    known = {field.name for field in dataclasses.fields(BuildConfig)}
    merged: Dict[str, Any] = {}
    unknown: List[str] = []
    for raw in raws:
        for key, value in raw.items():
            if key not in known:
                unknown.append(str(key))
                continue
            merged[key] = value
    if unknown:
        raise BuildError(f"Unknown configuration key(s): {', '.join(sorted(set(unknown)))}")

    values = {}
    for key, value in merged.items():
        coerced = _coerce(key, value)
        if coerced is not None:
            values[key] = coerced
    return BuildConfig(**values)
