"""Plugin configuration service - reads plugins/config.json."""

import json
import logging
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


class PluginConfigService:
    """Read-only access to the per-plugin configuration file.

    Config format:
    {
        "plugins": {
            "test-plugin": {
                "greeting": "hello"
            }
        }
    }

    Entries are keyed by plugin name; the specifier's declared name is
    consulted when the plugin name has no entry.
    """

    def __init__(self, config_file: Path):
        self.config_file = config_file
        self._config: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        """Load config from file, using defaults if not found."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (json.JSONDecodeError, IOError) as e:
                logger.error(f"Error loading plugin config {self.config_file}: {e}")
            else:
                if isinstance(data, dict):
                    return data
                logger.error(f"Plugin config {self.config_file} is not a JSON object, ignoring")

        return {"plugins": {}}

    def get_plugin_config(self, name: str, alias: str = "") -> Dict[str, Any]:
        """Get configuration for a specific plugin."""
        plugins = self._config.get("plugins", {})
        if name in plugins:
            return dict(plugins[name])
        if alias and alias in plugins:
            return dict(plugins[alias])
        return {}
