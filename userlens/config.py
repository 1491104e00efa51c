"""Configuration loading for userlens (.userlens.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .analyzers import available_frameworks

CONFIG_FILENAME = ".userlens.yml"

DEFAULT_FRAMEWORK = "react"
DEFAULT_ENTRY = "src"
DEFAULT_OUTPUT = "userlens-analysis"
DEFAULT_CACHE_DIR = ".userlens_cache"

_KNOWN_KEYS = {"framework", "entry", "output", "cache_dir", "exclude_patterns", "custom_mappings"}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or is invalid."""


@dataclass
class UserLensConfig:
    """Represents the settings defined in .userlens.yml."""

    root: Path
    framework: str = DEFAULT_FRAMEWORK
    entry: Path = Path(DEFAULT_ENTRY)
    output: Path = Path(DEFAULT_OUTPUT)
    cache_dir: Path = Path(DEFAULT_CACHE_DIR)
    exclude_patterns: List[str] = field(default_factory=list)
    custom_mappings: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.entry = self._under_root(self.entry)
        self.output = self._under_root(self.output)
        self.cache_dir = self._under_root(self.cache_dir)

    def _under_root(self, path: Path) -> Path:
        path = Path(path).expanduser()
        return path if path.is_absolute() else self.root / path


def load_config(config_path: Path, *, root: Path | None = None) -> UserLensConfig:
    """Load configuration from a project directory or a config file path.

    Relative paths in the file resolve against ``root``, which defaults to the
    directory holding the config file.
    """
    config_file = _resolve_config_path(config_path)
    root = root.resolve() if root is not None else config_file.parent.resolve()

    if not config_file.exists():
        return UserLensConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    errors = _validate(data)
    if errors:
        details = "; ".join(errors)
        raise ConfigError(f"Invalid configuration in {config_file}: {details}")

    return UserLensConfig(
        root=root,
        framework=str(data.get("framework") or DEFAULT_FRAMEWORK).lower(),
        entry=Path(data.get("entry") or DEFAULT_ENTRY),
        output=Path(data.get("output") or DEFAULT_OUTPUT),
        cache_dir=Path(data.get("cache_dir") or DEFAULT_CACHE_DIR),
        exclude_patterns=list(data.get("exclude_patterns") or []),
        custom_mappings=dict(data.get("custom_mappings") or {}),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _validate(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []

    unknown = sorted(str(key) for key in data if key not in _KNOWN_KEYS)
    if unknown:
        errors.append(f"unknown keys: {', '.join(unknown)}")

    framework = data.get("framework")
    if framework is not None:
        if not isinstance(framework, str):
            errors.append("'framework' must be a string")
        elif framework.lower() not in available_frameworks():
            supported = ", ".join(available_frameworks())
            errors.append(f"unsupported framework '{framework}' (supported: {supported})")

    for key in ("entry", "output", "cache_dir"):
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            errors.append(f"'{key}' must be a string path")

    patterns = data.get("exclude_patterns")
    if patterns is not None and not _is_str_list(patterns):
        errors.append("'exclude_patterns' must be a list of strings")

    mappings = data.get("custom_mappings")
    if mappings is not None:
        if not isinstance(mappings, dict):
            errors.append("'custom_mappings' must be a mapping of component name to description")
        else:
            bad = sorted(
                str(name)
                for name, value in mappings.items()
                if not isinstance(name, str) or not isinstance(value, str)
            )
            if bad:
                errors.append(f"'custom_mappings' values must be strings: {', '.join(bad)}")

    return errors


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


__all__ = ["CONFIG_FILENAME", "ConfigError", "UserLensConfig", "load_config"]
