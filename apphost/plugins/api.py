"""PluginAPI - the API object passed to each plugin's entry function."""

import logging
from pathlib import Path
from typing import Optional

from apphost.network import NetworkConfig, OutboundClient


class PluginAPI:
    """API object provided to plugins during loading.

    Plugins use this to read their config, log, and make outbound requests
    through the host's proxy settings.
    """

    def __init__(
        self,
        plugin_name: str,
        module_path: Path,
        config: dict,
        network: NetworkConfig,
    ):
        self.plugin_name = plugin_name
        self.module_path = module_path
        self.config = config
        self.network = network
        self._logger = logging.getLogger(f"plugin.{plugin_name}")

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Get a logger for this plugin.

        Args:
            name: Optional sub-logger name (appended to plugin.{plugin_name})

        Returns:
            Logger instance
        """
        if name:
            return logging.getLogger(f"plugin.{self.plugin_name}.{name}")
        return self._logger

    def outbound_client(self, timeout: float = 30.0) -> OutboundClient:
        """Create an HTTP client that honours the host's proxy settings."""
        return OutboundClient(self.network, timeout=timeout)
