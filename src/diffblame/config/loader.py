"""Load and merge configuration from .diffblame.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from diffblame.config.schema import (
    OUTPUT_FORMATS,
    DiffBlameConfig,
    DiffConfig,
    OutputConfig,
    RefsConfig,
)

CONFIG_FILENAME = ".diffblame.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _field_type(f: dataclasses.Field) -> type:
    default = f.default if f.default is not dataclasses.MISSING else f.default_factory()  # type: ignore[misc]
    return type(default)


def _check_type(section: str, key: str, value: Any, expected: type) -> None:
    # bool is an int subclass; keep the two apart
    ok = isinstance(value, expected) and isinstance(value, bool) == (expected is bool)
    if expected is list:
        if isinstance(value, str):
            return
        ok = ok and all(isinstance(item, str) for item in value)
    if not ok:
        raise ConfigError(
            f"[{section}] {key} must be of type {expected.__name__}, got {type(value).__name__} {value!r}"
        )


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    fields = {f.name: f for f in dataclasses.fields(cls)}
    filtered = {}
    for key, value in raw.items():
        if key not in fields:
            continue
        _check_type(section, key, value, _field_type(fields[key]))
        filtered[key] = value
    return cls(**filtered)


def _merge_env_overrides(cfg: DiffBlameConfig) -> None:
    """Apply DIFFBLAME_* environment variable overrides."""
    if val := os.environ.get("DIFFBLAME_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("DIFFBLAME_EXCLUDE"):
        cfg.diff.exclude = [p.strip() for p in val.split(",") if p.strip()]
    if val := os.environ.get("DIFFBLAME_RENAME_SCORE"):
        try:
            score = int(val)
        except ValueError:
            score = -1
        if 0 <= score <= 100:
            cfg.diff.rename_score = score
    if val := os.environ.get("DIFFBLAME_REMOTE"):
        cfg.refs.remote = val


def validate(cfg: DiffBlameConfig) -> None:
    """Reject values git or the reporters cannot work with."""
    if not 0 <= cfg.diff.rename_score <= 100:
        raise ConfigError(f"rename_score must be between 0 and 100, got {cfg.diff.rename_score}")
    if cfg.diff.rename_limit < 0:
        raise ConfigError(f"rename_limit must not be negative, got {cfg.diff.rename_limit}")
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"output format must be one of {', '.join(OUTPUT_FORMATS)}, got {cfg.output.format!r}"
        )
    if isinstance(cfg.diff.exclude, str):
        cfg.diff.exclude = [cfg.diff.exclude]


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> DiffBlameConfig:
    """Load, validate, and return a DiffBlameConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = DiffBlameConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = DiffBlameConfig(
            version=str(raw.get("version", "1.0")),
            diff=_build_section(raw, DiffConfig, "diff"),
            refs=_build_section(raw, RefsConfig, "refs"),
            output=_build_section(raw, OutputConfig, "output"),
        )

    validate(cfg)
    _merge_env_overrides(cfg)
    return cfg
