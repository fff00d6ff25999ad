"""Startup wiring: seed a PluginManager from config, load, report stale IDs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from plugman.core.config import enabled_plugins_settings

from .manager import PluginManager

if TYPE_CHECKING:
    from plugman.core.config import Config

    from .source import PluginSource

_console = Console()


@dataclass
class PluginStartup:
    manager: PluginManager
    pruned: list[str] = field(default_factory=list)
    settings: dict | None = None  # settings fragment to persist, None if unchanged


async def start_plugins(
    config: Config,
    source: PluginSource,
    console: Console | None = None,
) -> PluginStartup:
    """Build and load a PluginManager for *config*.

    Enabled plugins that did not load as available are reported, and dropped
    from the enabled set when ``config.prune_unavailable`` is set.
    """
    console = console or _console
    manager = PluginManager(source)
    manager.set_enabled_plugin_ids(config.enabled_plugin_ids)
    await manager.load_plugins()

    stale = manager.get_unavailable_enabled_plugins()
    for plugin_id in stale:
        plugin = manager.get_plugin(plugin_id)
        reason = (plugin.error or plugin.status) if plugin else "unavailable"
        console.print(f"  [yellow]warning: plugin {escape(plugin_id)}: {escape(reason)}[/yellow]")

    result = PluginStartup(manager=manager)
    if stale and config.prune_unavailable:
        remaining = [pid for pid in manager.get_enabled_plugin_ids() if pid not in stale]
        manager.set_enabled_plugin_ids(remaining)
        result.pruned = stale
        result.settings = enabled_plugins_settings(remaining, disabled=stale)

    if config.verbose:
        console.print(f"[dim]{manager.get_enabled_count()} plugin(s) active[/dim]")
    return result


def plugins_changed(previous_key: str, manager: PluginManager) -> bool:
    """True when the active plugin set differs from the one *previous_key* describes."""
    return manager.get_plugins_key() != previous_key
