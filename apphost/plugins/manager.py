"""Plugin manager - top-level orchestrator for the plugin system."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from fastapi import FastAPI

from apphost.constants import RESERVED_PATHS
from apphost.errors import PluginError
from apphost.network import NetworkConfig
from apphost.plugins.aggregator import AggregatedApplication, PluginSummary, aggregate_applications
from apphost.plugins.api import PluginAPI
from apphost.plugins.config import PluginConfigService
from apphost.plugins.discovery import PluginDiscovery
from apphost.plugins.lifecycle import PluginLifecycle
from apphost.plugins.mounter import RouteMounter
from apphost.plugins.registry import LoadedPlugin, PluginRegistry
from apphost.plugins.specifier import PluginSpecifier

logger = logging.getLogger(__name__)


class PluginManager:
    """Top-level plugin system orchestrator.

    Coordinates discovery, loading, registration, mounting and start/stop.
    Loading is fail-fast: the first invalid plugin aborts startup.
    """

    def __init__(
        self,
        network: NetworkConfig,
        config_service: Optional[PluginConfigService] = None,
        reserved_paths: Iterable[str] = RESERVED_PATHS,
    ):
        self.network = network
        self.config_service = config_service
        self.registry = PluginRegistry()
        self.discovery = PluginDiscovery()
        self.lifecycle = PluginLifecycle()
        self.mounter = RouteMounter(self.registry, reserved_paths)

    def load_all(
        self,
        specifiers: Iterable[PluginSpecifier],
        search_paths: Iterable[Path] = (),
    ) -> PluginRegistry:
        """Load explicit specifiers, then plugins found in search paths.

        Raises:
            PluginError: the first load or registration failure
        """
        all_specifiers = list(specifiers) + self.discovery.scan(search_paths)
        for specifier in all_specifiers:
            try:
                self.load_plugin(specifier)
            except PluginError as e:
                logger.error(f"Failed to load plugin '{specifier}': {e}")
                raise

        logger.info(f"Plugin system initialized, {self.registry.count()} plugin(s) loaded")
        return self.registry

    def load_plugin(self, specifier: PluginSpecifier) -> LoadedPlugin:
        """Load, validate and register a single plugin."""
        manifest = self.discovery.load_manifest(specifier)

        config = {}
        if self.config_service is not None:
            config = self.config_service.get_plugin_config(manifest.name, specifier.name)

        api = PluginAPI(
            plugin_name=manifest.name,
            module_path=Path(manifest.module_path),
            config=config,
            network=self.network,
        )
        plugin = self.lifecycle.load(manifest, api)
        return self.registry.register(manifest, plugin, specifier)

    def mount(self, app: FastAPI) -> None:
        """Mount all plugin routes on ``app``. Call once, after load_all()."""
        self.mounter.mount(app)

    async def start_all(self) -> None:
        """Run on_start for every plugin in registration order."""
        for loaded in self.registry.all():
            await self.lifecycle.start(loaded)

    async def stop_all(self) -> None:
        """Run on_stop for every plugin in reverse registration order."""
        for loaded in reversed(self.registry.all()):
            await self.lifecycle.stop(loaded)
        logger.info("All plugins stopped")

    def applications(self) -> List[AggregatedApplication]:
        """Aggregated applications of all plugins."""
        return aggregate_applications(self.registry)

    def list_plugins(self) -> List[PluginSummary]:
        """Summaries of all plugins in registration order."""
        return [PluginSummary.from_manifest(p.manifest) for p in self.registry.all()]
