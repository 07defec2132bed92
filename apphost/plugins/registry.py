"""Plugin registry - tracks loaded plugins by name, in registration order."""

import logging
import posixpath
import threading
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import APIRouter

from apphost.errors import DuplicateNameError, ManifestError, RegistryClosedError
from apphost.plugins.base import ApplicationDescriptor, Plugin
from apphost.plugins.manifest import PluginManifest
from apphost.plugins.specifier import PluginSpecifier

logger = logging.getLogger(__name__)

_UNSET = object()


def join_router_path(router_path: str, sub_path: str) -> str:
    """Join an app-relative path onto a router path, refusing to escape it."""
    joined = posixpath.normpath(posixpath.join(router_path, sub_path.lstrip("/")))
    if joined != router_path and not joined.startswith(router_path + "/"):
        raise ValueError(f"'{sub_path}' escapes router path '{router_path}'")
    return joined


class LoadedPlugin:
    """A registered plugin: its manifest plus the capabilities it provides."""

    def __init__(
        self,
        manifest: PluginManifest,
        plugin: Plugin,
        specifier: Optional[PluginSpecifier] = None,
    ):
        self.manifest = manifest
        self.plugin = plugin
        self.specifier = specifier
        self._router = _UNSET
        self._applications = self._resolve_applications()

    @property
    def name(self) -> str:
        return self.manifest.name

    @property
    def alias(self) -> str:
        """Name the plugin was referenced by in configuration."""
        return self.specifier.name if self.specifier else self.manifest.name

    @property
    def router_path(self) -> str:
        return self.manifest.router_path

    @property
    def router(self) -> Optional[APIRouter]:
        """The plugin's router, created once on first access."""
        if self._router is _UNSET:
            self._router = self.plugin.create_router()
        return self._router

    @property
    def static_dir(self) -> Optional[Path]:
        """Absolute static asset directory, or None."""
        if self.plugin.static_dir is not None:
            return Path(self.plugin.static_dir).resolve()
        if self.manifest.static_dir:
            return (Path(self.manifest.module_path) / self.manifest.static_dir).resolve()
        return None

    def applications(self) -> List[ApplicationDescriptor]:
        """Applications declared by the plugin, with paths rooted at router_path."""
        return list(self._applications)

    def _resolve_applications(self) -> List[ApplicationDescriptor]:
        """Ask the plugin for its applications once and root their paths.

        Raises:
            ManifestError: if the plugin fails to list its applications or
                an application path escapes the router path
        """
        try:
            declared = list(self.plugin.applications())
        except Exception as e:
            raise ManifestError(f"Plugin '{self.name}': applications() failed: {e}") from e

        descriptors = []
        for app in declared:
            data = app.model_dump()
            try:
                data["path"] = join_router_path(self.router_path, app.path)
                if app.icon_path:
                    data["icon_path"] = join_router_path(self.router_path, app.icon_path)
            except ValueError as e:
                raise ManifestError(f"Plugin '{self.name}', application '{app.name}': {e}")
            descriptors.append(ApplicationDescriptor(**data))
        return descriptors

    def __repr__(self) -> str:
        return f"LoadedPlugin(name={self.name!r}, router_path={self.router_path!r})"


class PluginRegistry:
    """Central registry for loaded plugins.

    Populated once at startup and sealed when routes are mounted; reads
    need no locking after that.
    """

    def __init__(self):
        self._plugins: Dict[str, LoadedPlugin] = {}
        self._lock = threading.Lock()
        self._sealed = False

    def register(
        self,
        manifest: PluginManifest,
        plugin: Plugin,
        specifier: Optional[PluginSpecifier] = None,
    ) -> LoadedPlugin:
        """Register a loaded plugin.

        Raises:
            ManifestError: if the plugin's applications cannot be resolved
            DuplicateNameError: if a plugin with the same name is registered
            RegistryClosedError: if the registry has been sealed
        """
        loaded = LoadedPlugin(manifest, plugin, specifier)

        with self._lock:
            if self._sealed:
                raise RegistryClosedError(
                    f"Cannot register plugin '{manifest.name}': registry is sealed"
                )
            existing = self._plugins.get(manifest.name)
            if existing is not None:
                raise DuplicateNameError(
                    f"Plugin name '{manifest.name}' from {manifest.module_path} is already "
                    f"registered from {existing.manifest.module_path}"
                )
            self._plugins[manifest.name] = loaded

        logger.info(f"Registered plugin: {manifest.name} at {manifest.router_path}")
        return loaded

    def seal(self) -> None:
        """Stop accepting registrations."""
        with self._lock:
            self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def find(self, name: str) -> Optional[LoadedPlugin]:
        """Get a plugin by name."""
        return self._plugins.get(name)

    def all(self) -> List[LoadedPlugin]:
        """Get all plugins in registration order."""
        return list(self._plugins.values())

    def count(self) -> int:
        """Get total number of registered plugins."""
        return len(self._plugins)
