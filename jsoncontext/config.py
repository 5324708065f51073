"""Configuration loading for jsoncontext (.jsoncontext.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .emitter import DEFAULT_CONTAINER, DEFAULT_NAMESPACE
from .models import DEFAULT_MASK, DEFAULT_SAMPLE_COUNT, InputKind, InputSource

CONFIG_FILENAME = ".jsoncontext.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DriverConfig:
    """Represents the settings defined in .jsoncontext.yml."""

    root: Path
    namespace: str = DEFAULT_NAMESPACE
    container: str = DEFAULT_CONTAINER
    inputs: List[InputSource] = field(default_factory=list)
    max_workers: int = 1


def load_config(config_path: Path) -> DriverConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DriverConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    raw_inputs = data.get("inputs") or []
    if not isinstance(raw_inputs, list):
        raise ConfigError("'inputs' must be a list")
    inputs = [_parse_input(entry, root, position) for position, entry in enumerate(raw_inputs)]

    max_workers = _as_int(data.get("max_workers"))
    return DriverConfig(
        root=root,
        namespace=_as_str(data.get("namespace")) or DEFAULT_NAMESPACE,
        container=_as_str(data.get("container")) or DEFAULT_CONTAINER,
        inputs=inputs,
        max_workers=max(1, max_workers) if max_workers is not None else 1,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_input(entry: Any, root: Path, position: int) -> InputSource:
    if isinstance(entry, str):
        entry = {"path": entry}
    if not isinstance(entry, dict):
        raise ConfigError(f"inputs[{position}] must be a mapping or a path")

    raw_path = _as_str(entry.get("path"))
    if not raw_path:
        raise ConfigError(f"inputs[{position}] is missing 'path'")
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = root / path

    kind = _parse_kind(entry.get("kind"), path, position)
    samples = _as_int(entry.get("samples"))
    return InputSource(
        kind=kind,
        path=str(path),
        mask=_as_str(entry.get("mask")) or DEFAULT_MASK,
        recursive=_as_bool(entry.get("recursive")) or False,
        sample_count=samples if samples is not None else DEFAULT_SAMPLE_COUNT,
    )


def _parse_kind(value: Any, path: Path, position: int) -> InputKind:
    if value is None:
        return InputKind.DIRECTORY if path.is_dir() else InputKind.FILE
    try:
        return InputKind(str(value).strip().lower())
    except ValueError as exc:
        raise ConfigError(f"inputs[{position}] has unknown kind {value!r}") from exc


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = ["CONFIG_FILENAME", "ConfigError", "DriverConfig", "load_config"]
