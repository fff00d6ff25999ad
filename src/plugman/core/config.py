"""Configuration: settings files, env, enabled plugin IDs."""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Both directory names are recognised as project config dirs.
PROJECT_DIR_NAMES = (".plugman", ".claude")

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class Config:
    cwd: Path = field(default_factory=Path.cwd)
    global_dir: Path = field(default_factory=lambda: Path.home() / ".plugman")
    project_dir: Path | None = None  # explicit override; None = auto-detect from cwd
    verbose: bool = False
    prune_unavailable: bool = False
    enabled_plugins: dict[str, bool] = field(default_factory=dict)

    @property
    def enabled_plugin_ids(self) -> list[str]:
        return [pid for pid, on in self.enabled_plugins.items() if on]

    @property
    def project_dirs(self) -> list[Path]:
        if self.project_dir is not None:
            return [self.project_dir] if self.project_dir.is_dir() else []
        return [self.cwd / name for name in PROJECT_DIR_NAMES if (self.cwd / name).is_dir()]

    @property
    def settings_paths(self) -> list[Path]:
        """Settings files in ascending priority."""
        paths = [self.global_dir / "settings.json"]
        paths.extend(pdir / "settings.json" for pdir in self.project_dirs)
        paths.extend(pdir / "settings.local.json" for pdir in self.project_dirs)
        return paths


def _parse_enabled_plugins(value) -> dict[str, bool]:
    if isinstance(value, dict):
        return {str(k): bool(v) for k, v in value.items()}
    if isinstance(value, list):
        return {str(v): True for v in value if v}
    return {}


def _apply_settings(config: Config, path: Path) -> None:
    """Apply a single settings.json file to config."""
    if not path.exists():
        return
    data = json.loads(path.read_text())
    if "enabledPlugins" in data:
        config.enabled_plugins.update(_parse_enabled_plugins(data["enabledPlugins"]))
    if "prunePlugins" in data:
        config.prune_unavailable = bool(data["prunePlugins"])
    if "verbose" in data:
        config.verbose = bool(data["verbose"])


def enabled_plugins_settings(ids: Iterable[str], disabled: Iterable[str] = ()) -> dict:
    """Settings fragment a caller writes back after the enabled set changes.

    *disabled* ids are written as false so they override a true value in a
    lower-priority settings file.
    """
    enabled = {pid: True for pid in ids}
    enabled.update((pid, False) for pid in disabled)
    return {"enabledPlugins": enabled}


def load_config(
    cwd: Path | None = None,
    global_dir: Path | None = None,
    enabled_plugins: list[str] | None = None,
    verbose: bool | None = None,
) -> Config:
    """Load config with priority: args > env > .env > settings.json > defaults."""
    load_dotenv()

    config = Config()
    if cwd is not None:
        config.cwd = cwd
    if global_dir is not None:
        config.global_dir = global_dir

    for path in config.settings_paths:
        _apply_settings(config, path)

    if env_ids := os.getenv("PLUGMAN_ENABLED_PLUGINS"):
        config.enabled_plugins = {p.strip(): True for p in env_ids.split(",") if p.strip()}
    if env_verbose := os.getenv("PLUGMAN_VERBOSE"):
        config.verbose = env_verbose.strip().lower() in _TRUTHY

    if enabled_plugins is not None:
        config.enabled_plugins = dict.fromkeys(enabled_plugins, True)
    if verbose is not None:
        config.verbose = verbose

    return config
