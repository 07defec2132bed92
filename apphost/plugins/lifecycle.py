"""Plugin lifecycle - imports entry points and runs start/stop hooks."""
from __future__ import annotations

import importlib.util
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from apphost.errors import ManifestError
from apphost.plugins.base import Plugin
from apphost.plugins.manifest import PluginManifest

if TYPE_CHECKING:
    from apphost.plugins.api import PluginAPI
    from apphost.plugins.registry import LoadedPlugin

logger = logging.getLogger(__name__)


class PluginLifecycle:
    """Manages plugin load → start → stop."""

    def load(self, manifest: PluginManifest, api: PluginAPI) -> Plugin:
        """Import the plugin module and call its entry function.

        Args:
            manifest: Validated manifest (module_path must be set)
            api: PluginAPI object passed to the entry function

        Returns:
            The Plugin object returned by the entry function

        Raises:
            ManifestError: if the module cannot be imported or the entry
                function is missing or returns something other than a Plugin
        """
        module_name, func_name = manifest.entry_point.split(":", 1)
        plugin_dir = Path(manifest.module_path)
        module_file = plugin_dir / f"{module_name.replace('.', '/')}.py"
        if not module_file.is_file():
            raise ManifestError(f"Plugin '{manifest.name}': entry module not found: {module_file}")

        # Add plugin directory to sys.path temporarily so the module can
        # import its siblings
        plugin_dir_str = str(plugin_dir)
        added = plugin_dir_str not in sys.path
        if added:
            sys.path.insert(0, plugin_dir_str)

        try:
            spec = importlib.util.spec_from_file_location(
                f"apphost_plugin_{manifest.name.replace('-', '_').replace('.', '_')}_{module_name}",
                module_file,
            )
            if spec is None or spec.loader is None:
                raise ManifestError(f"Plugin '{manifest.name}': cannot load {module_file}")

            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
        except ManifestError:
            raise
        except Exception as e:
            raise ManifestError(f"Plugin '{manifest.name}': error importing {module_file}: {e}") from e
        finally:
            if added and plugin_dir_str in sys.path:
                sys.path.remove(plugin_dir_str)

        entry_func = getattr(module, func_name, None)
        if entry_func is None:
            raise ManifestError(f"Plugin '{manifest.name}': module {module_name} has no '{func_name}'")
        if not callable(entry_func):
            raise ManifestError(f"Plugin '{manifest.name}': {module_name}.{func_name} is not callable")

        try:
            plugin = entry_func(api)
        except Exception as e:
            raise ManifestError(f"Plugin '{manifest.name}': {func_name}() failed: {e}") from e

        if not isinstance(plugin, Plugin):
            raise ManifestError(
                f"Plugin '{manifest.name}': {func_name}() returned "
                f"{type(plugin).__name__}, expected a Plugin"
            )

        logger.info(f"Loaded plugin: {manifest.name} from {plugin_dir}")
        return plugin

    async def start(self, loaded: LoadedPlugin) -> None:
        """Run the plugin's on_start hook. Errors propagate."""
        await loaded.plugin.on_start()
        logger.info(f"Started plugin: {loaded.name}")

    async def stop(self, loaded: LoadedPlugin) -> bool:
        """Run the plugin's on_stop hook.

        Returns:
            True if stopped cleanly
        """
        try:
            await loaded.plugin.on_stop()
        except Exception as e:
            logger.error(f"Failed to stop plugin {loaded.name}: {e}", exc_info=True)
            return False
        logger.info(f"Stopped plugin: {loaded.name}")
        return True
