"""Plugin data model: Plugin record, status and scope constants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

STATUS_AVAILABLE = "available"
STATUS_UNAVAILABLE = "unavailable"
STATUS_INVALID_MANIFEST = "invalid-manifest"

PLUGIN_STATUSES = (STATUS_AVAILABLE, STATUS_UNAVAILABLE, STATUS_INVALID_MANIFEST)

# Project and local scopes are listed before user scope in presentation order.
PLUGIN_SCOPES = ("project", "local", "user")


@dataclass
class Plugin:
    """A discovered plugin as reported by a plugin source."""

    id: str  # "<name>@<marketplace>" or bare name
    name: str = ""
    description: str = ""
    version: str = ""
    install_path: str = ""
    plugin_path: str = ""  # manifest dir, usually <install_path>/.claude-plugin
    scope: str = "user"
    enabled: bool = False
    status: str = STATUS_AVAILABLE
    error: str = ""

    @property
    def is_active(self) -> bool:
        return self.enabled and self.status == STATUS_AVAILABLE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Plugin:
        """Build a Plugin from its camelCase JSON record."""
        plugin_id = data.get("id", "")
        if not plugin_id:
            raise ValueError("plugin record is missing 'id'")
        return cls(
            id=plugin_id,
            name=data.get("name", "") or plugin_id.split("@")[0],
            description=data.get("description", ""),
            version=data.get("version", ""),
            install_path=data.get("installPath", ""),
            plugin_path=data.get("pluginPath", ""),
            scope=data.get("scope", "user"),
            enabled=bool(data.get("enabled", False)),
            status=data.get("status", STATUS_AVAILABLE),
            error=data.get("error", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "installPath": self.install_path,
            "pluginPath": self.plugin_path,
            "scope": self.scope,
            "enabled": self.enabled,
            "status": self.status,
        }
        if self.error:
            data["error"] = self.error
        return data
