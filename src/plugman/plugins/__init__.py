"""Plugins: plugin records, plugin sources, enabled-state coordination."""

from .manager import PluginManager
from .models import (
    PLUGIN_SCOPES,
    PLUGIN_STATUSES,
    STATUS_AVAILABLE,
    STATUS_INVALID_MANIFEST,
    STATUS_UNAVAILABLE,
    Plugin,
)
from .source import PluginSource, StaticPluginSource, sort_by_scope
from .startup import PluginStartup, plugins_changed, start_plugins

__all__ = [
    "PLUGIN_SCOPES",
    "PLUGIN_STATUSES",
    "STATUS_AVAILABLE",
    "STATUS_INVALID_MANIFEST",
    "STATUS_UNAVAILABLE",
    "Plugin",
    "PluginManager",
    "PluginSource",
    "PluginStartup",
    "StaticPluginSource",
    "plugins_changed",
    "sort_by_scope",
    "start_plugins",
]
