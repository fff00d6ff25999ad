"""Tests for startup wiring: seeding from config, stale-ID warnings, pruning, restart checks."""

import asyncio
import io
import json
import os
from unittest.mock import patch

from rich.console import Console

from plugman.core.config import Config, load_config
from plugman.plugins import Plugin, StaticPluginSource, plugins_changed, start_plugins


def _console():
    buf = io.StringIO()
    return Console(file=buf, width=200), buf


def _source():
    return StaticPluginSource(
        [
            Plugin(id="ok@m", name="ok", install_path="/ok", plugin_path="/ok/.claude-plugin"),
            Plugin(id="gone@m", name="gone", status="unavailable"),
            Plugin(
                id="broken@m",
                name="broken",
                status="invalid-manifest",
                error="invalid JSON in plugin.json",
            ),
        ]
    )


class TestStartPlugins:
    def test_seeds_enabled_ids_from_config(self):
        out, _ = _console()
        config = Config(enabled_plugins={"ok@m": True, "gone@m": False})
        result = asyncio.run(start_plugins(config, _source(), out))
        assert result.manager.get_enabled_count() == 1
        assert result.manager.get_plugins_key() == "ok@m:/ok/.claude-plugin"

    def test_warns_about_stale_ids(self):
        out, buf = _console()
        config = Config(enabled_plugins={"ok@m": True, "gone@m": True, "broken@m": True})
        result = asyncio.run(start_plugins(config, _source(), out))
        text = buf.getvalue()
        assert "warning: plugin gone@m: unavailable" in text
        assert "warning: plugin broken@m: invalid JSON in plugin.json" in text
        assert result.pruned == []
        assert result.settings is None
        assert set(result.manager.get_enabled_plugin_ids()) == {"ok@m", "gone@m", "broken@m"}

    def test_prunes_when_configured(self):
        out, _ = _console()
        config = Config(
            enabled_plugins={"ok@m": True, "gone@m": True, "orphan@m": True},
            prune_unavailable=True,
        )
        result = asyncio.run(start_plugins(config, _source(), out))
        assert result.pruned == ["gone@m"]
        # Ids with no loaded plugin are not reported as unavailable, so they stay.
        assert result.manager.get_enabled_plugin_ids() == ["ok@m", "orphan@m"]
        assert result.settings == {
            "enabledPlugins": {"ok@m": True, "orphan@m": True, "gone@m": False}
        }

    def test_pruned_id_stays_off_after_reload(self, tmp_path):
        out, _ = _console()
        global_dir = tmp_path / "global"
        global_dir.mkdir()
        (global_dir / "settings.json").write_text(
            json.dumps({"enabledPlugins": {"gone@m": True, "ok@m": True}})
        )
        project = tmp_path / "work" / ".plugman"
        project.mkdir(parents=True)

        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("PLUGMAN_ENABLED_PLUGINS", None)
            config = load_config(cwd=tmp_path / "work", global_dir=global_dir)
            config.prune_unavailable = True
            result = asyncio.run(start_plugins(config, _source(), out))
            assert result.pruned == ["gone@m"]

            (project / "settings.local.json").write_text(json.dumps(result.settings))
            reloaded = load_config(cwd=tmp_path / "work", global_dir=global_dir)

        assert "gone@m" not in reloaded.enabled_plugin_ids
        assert reloaded.enabled_plugin_ids == ["ok@m"]

    def test_nothing_to_prune(self):
        out, buf = _console()
        config = Config(enabled_plugins={"ok@m": True}, prune_unavailable=True)
        result = asyncio.run(start_plugins(config, _source(), out))
        assert result.pruned == []
        assert result.settings is None
        assert "warning" not in buf.getvalue()

    def test_console_keyword(self):
        out, buf = _console()
        config = Config(enabled_plugins={"gone@m": True})
        asyncio.run(start_plugins(config, _source(), console=out))
        assert "warning: plugin gone@m" in buf.getvalue()

    def test_markup_in_id_and_error_is_printed_literally(self):
        out, buf = _console()
        source = StaticPluginSource(
            [
                Plugin(
                    id="odd[/x]@m",
                    status="invalid-manifest",
                    error="bad key [/red] in plugin.json",
                )
            ]
        )
        config = Config(enabled_plugins={"odd[/x]@m": True})
        asyncio.run(start_plugins(config, source, out))
        assert "warning: plugin odd[/x]@m: bad key [/red] in plugin.json" in buf.getvalue()

    def test_verbose_summary(self):
        out, buf = _console()
        config = Config(enabled_plugins={"ok@m": True}, verbose=True)
        asyncio.run(start_plugins(config, _source(), out))
        assert "1 plugin(s) active" in buf.getvalue()


class TestPluginsChanged:
    def test_unchanged_key(self):
        out, _ = _console()
        config = Config(enabled_plugins={"ok@m": True})
        manager = asyncio.run(start_plugins(config, _source(), out)).manager
        key = manager.get_plugins_key()
        assert plugins_changed(key, manager) is False

    def test_toggle_changes_key(self):
        out, _ = _console()
        config = Config(enabled_plugins={"ok@m": True})
        manager = asyncio.run(start_plugins(config, _source(), out)).manager
        key = manager.get_plugins_key()
        manager.toggle_plugin("ok@m")
        assert plugins_changed(key, manager) is True

    def test_enabling_unavailable_plugin_keeps_key(self):
        out, _ = _console()
        config = Config(enabled_plugins={"ok@m": True})
        manager = asyncio.run(start_plugins(config, _source(), out)).manager
        key = manager.get_plugins_key()
        manager.enable_plugin("gone@m")
        assert plugins_changed(key, manager) is False
