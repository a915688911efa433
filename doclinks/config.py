"""Configuration loading for doclinks (.doclinks.yml)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import RULE_COLUMNS
from .validators.files import CONTENT_FOLDERS
from .validators.rot import ROTTEN_HOSTS

CONFIG_FILENAME = ".doclinks.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LinkCheckConfig:
    """Represents the settings defined in .doclinks.yml."""

    root: Path
    ignore: List[str] = field(default_factory=list)
    content_folders: List[str] = field(default_factory=list)
    known_rot: Dict[str, str] = field(default_factory=dict)
    exclude_paths: List[str] = field(default_factory=list)
    max_workers: Optional[int] = None

    @property
    def folders(self) -> tuple[str, ...]:
        """Content folders searched for cross-page links, built-ins first."""
        extra = [name for name in self.content_folders if name not in CONTENT_FOLDERS]
        return CONTENT_FOLDERS + tuple(extra)

    @property
    def rotten_hosts(self) -> Dict[str, str]:
        merged = dict(ROTTEN_HOSTS)
        merged.update(self.known_rot)
        return merged


def load_config(config_path: Path) -> LinkCheckConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return LinkCheckConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    ignore = _as_str_list(data.get("ignore"))
    unknown = [name for name in ignore if name not in RULE_COLUMNS]
    if unknown:
        raise ConfigError(f"Unknown rule(s) in ignore: {', '.join(unknown)}")

    known_rot: Dict[str, str] = {}
    for pattern, replacement in _as_dict(data.get("known_rot")).items():
        text = _as_str(replacement)
        if text is None:
            raise ConfigError(f"known_rot entry for {pattern!r} must be a string")
        try:
            re.compile(str(pattern))
        except re.error as exc:
            raise ConfigError(f"known_rot pattern {pattern!r} is not a valid regex: {exc}") from exc
        known_rot[str(pattern)] = text

    max_workers = _as_int(data.get("max_workers"))
    if max_workers is not None and max_workers < 1:
        raise ConfigError("max_workers must be a positive integer")

    return LinkCheckConfig(
        root=root,
        ignore=ignore,
        content_folders=_as_str_list(data.get("content_folders")),
        known_rot=known_rot,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        max_workers=max_workers,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[Any, Any]:
    return value if isinstance(value, dict) else {}


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


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "LinkCheckConfig", "load_config"]
