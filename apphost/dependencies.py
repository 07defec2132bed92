"""Dependency injection for host services."""

import logging

from fastapi import Request

from apphost.network import NetworkConfig
from apphost.plugins.config import PluginConfigService
from apphost.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

# ============================================================================
# Global service instances (built once at startup, exposed via functions for easier testing)
# ============================================================================

_network_config_instance = None
_plugin_config_service_instance = None


def get_network_config() -> NetworkConfig:
    """Get outbound network config (singleton, read from the environment once)."""
    global _network_config_instance
    if _network_config_instance is None:
        _network_config_instance = NetworkConfig.from_env()
        logger.info("Created NetworkConfig instance")
    return _network_config_instance


def get_plugin_config_service() -> PluginConfigService:
    """Get plugin config service (singleton)."""
    global _plugin_config_service_instance
    if _plugin_config_service_instance is None:
        from apphost.constants import PLUGIN_CONFIG_FILE

        _plugin_config_service_instance = PluginConfigService(PLUGIN_CONFIG_FILE)
        logger.info(f"Created PluginConfigService instance ({PLUGIN_CONFIG_FILE})")
    return _plugin_config_service_instance


def get_plugin_manager(request: Request) -> PluginManager:
    """Get the plugin manager of the app serving ``request``."""
    return request.app.state.plugin_manager


# Test utility function (for unit testing - resets all singletons)
def reset_services():
    """Reset all service instances (only for testing)."""
    global _network_config_instance, _plugin_config_service_instance

    _network_config_instance = None
    _plugin_config_service_instance = None
    logger.info("Reset all service instances")
