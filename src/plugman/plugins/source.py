"""Plugin sources: the contract PluginManager loads from, plus an in-memory source."""

from __future__ import annotations

from collections.abc import Awaitable, Iterable
from dataclasses import replace
from typing import Protocol, runtime_checkable

from .models import PLUGIN_SCOPES, Plugin


@runtime_checkable
class PluginSource(Protocol):
    """Anything that can enumerate the currently discoverable plugins.

    ``load_plugins`` may return the list directly or an awaitable resolving to
    it. The source owns status assignment and presentation order.
    """

    def load_plugins(self) -> list[Plugin] | Awaitable[list[Plugin]]: ...


def sort_by_scope(plugins: Iterable[Plugin]) -> list[Plugin]:
    """Order project/local scoped plugins before user scoped ones (stable)."""

    def _rank(plugin: Plugin) -> int:
        try:
            return PLUGIN_SCOPES.index(plugin.scope)
        except ValueError:
            return len(PLUGIN_SCOPES)

    return sorted(plugins, key=_rank)


class StaticPluginSource:
    """Serve a fixed plugin list; each load returns fresh copies."""

    def __init__(self, plugins: Iterable[Plugin] | None = None, sort_scopes: bool = False):
        self._plugins = list(plugins or [])
        self.sort_scopes = sort_scopes

    @classmethod
    def from_records(cls, records: Iterable[dict], sort_scopes: bool = False) -> StaticPluginSource:
        return cls([Plugin.from_dict(r) for r in records], sort_scopes=sort_scopes)

    def set_plugins(self, plugins: Iterable[Plugin]) -> None:
        self._plugins = list(plugins)

    def load_plugins(self) -> list[Plugin]:
        plugins = [replace(p) for p in self._plugins]
        if self.sort_scopes:
            plugins = sort_by_scope(plugins)
        return plugins
