"""PluginManager: enabled-state bookkeeping and runtime configs for loaded plugins."""

from __future__ import annotations

import inspect
from collections.abc import Iterable
from dataclasses import replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Plugin
    from .source import PluginSource


class PluginManager:
    """Merge the plugins a source reports with the set of enabled plugin IDs.

    The enabled set is owned here and outlives every load; ``Plugin.enabled``
    is always re-derived from it. Access is single-writer: overlapping
    ``load_plugins`` calls are not serialized and the last one to resolve wins.
    """

    def __init__(self, source: PluginSource):
        self.source = source
        self._plugins: list[Plugin] = []
        self._enabled_ids: dict[str, None] = {}  # insertion-ordered set

    def _active_plugins(self) -> list[Plugin]:
        return [p for p in self._plugins if p.is_active]

    def _find(self, plugin_id: str) -> Plugin | None:
        for plugin in self._plugins:
            if plugin.id == plugin_id:
                return plugin
        return None

    def _apply_enabled(self) -> None:
        for plugin in self._plugins:
            plugin.enabled = plugin.id in self._enabled_ids

    # ── enabled set ─────────────────────────────────────────────────

    def set_enabled_plugin_ids(self, ids: Iterable[str]) -> None:
        """Replace the enabled set; applies to loaded plugins and future loads."""
        self._enabled_ids = dict.fromkeys(ids)
        self._apply_enabled()

    def get_enabled_plugin_ids(self) -> list[str]:
        return list(self._enabled_ids)

    async def load_plugins(self) -> None:
        """Replace the plugin list with a fresh snapshot from the source."""
        result = self.source.load_plugins()
        if inspect.isawaitable(result):
            result = await result
        self._plugins = [replace(p) for p in result]
        self._apply_enabled()

    # ── read views ──────────────────────────────────────────────────

    def get_plugins(self) -> list[Plugin]:
        """Copies of all loaded plugins, in source order."""
        return [replace(p) for p in self._plugins]

    def get_plugin(self, plugin_id: str) -> Plugin | None:
        plugin = self._find(plugin_id)
        return replace(plugin) if plugin else None

    def has_plugins(self) -> bool:
        return bool(self._plugins)

    def get_active_plugin_configs(self) -> list[dict[str, str]]:
        """Runtime activation configs for enabled, available plugins."""
        return [{"type": "local", "path": p.plugin_path} for p in self._active_plugins()]

    def get_unavailable_enabled_plugins(self) -> list[str]:
        """IDs of loaded plugins that are enabled but not available (startup cleanup)."""
        return [p.id for p in self._plugins if p.enabled and not p.is_active]

    def has_enabled_plugins(self) -> bool:
        return self.get_enabled_count() > 0

    def get_enabled_count(self) -> int:
        return len(self._active_plugins())

    def get_plugins_key(self) -> str:
        """Order-independent fingerprint of the active plugin configuration.

        Ids are compared case-insensitively (exact id breaks ties), independent
        of the process locale. A change in this key means a running session
        has to be restarted.
        """
        active = sorted(self._active_plugins(), key=lambda p: (p.id.casefold(), p.id))
        return "|".join(f"{p.id}:{p.plugin_path}" for p in active)

    def get_plugin_command_paths(self) -> list[dict[str, str]]:
        """Install paths of active plugins for command discovery.

        The command loader appends its own ``commands/`` subdirectory, so this
        is the install path and not the manifest path.
        """
        return [
            {"plugin_name": p.name, "commands_path": p.install_path}
            for p in self._active_plugins()
        ]

    # ── mutations (return the enabled set to persist) ───────────────

    def toggle_plugin(self, plugin_id: str) -> list[str]:
        plugin = self._find(plugin_id)
        if plugin is None:
            return self.get_enabled_plugin_ids()
        if plugin.enabled:
            self._enabled_ids.pop(plugin_id, None)
            plugin.enabled = False
        else:
            self._enabled_ids[plugin_id] = None
            plugin.enabled = True
        return self.get_enabled_plugin_ids()

    def enable_plugin(self, plugin_id: str) -> list[str]:
        plugin = self._find(plugin_id)
        if plugin and not plugin.enabled:
            self._enabled_ids[plugin_id] = None
            plugin.enabled = True
        return self.get_enabled_plugin_ids()

    def disable_plugin(self, plugin_id: str) -> list[str]:
        plugin = self._find(plugin_id)
        if plugin and plugin.enabled:
            self._enabled_ids.pop(plugin_id, None)
            plugin.enabled = False
        return self.get_enabled_plugin_ids()
