"""Route mounting - attaches plugin routers and static assets to the host app."""

import logging
from typing import Iterable, List, Optional, Tuple

from fastapi import APIRouter, FastAPI
from fastapi.staticfiles import StaticFiles

from apphost.constants import RESERVED_PATHS
from apphost.errors import ManifestError, RouteConflictError
from apphost.plugins.registry import LoadedPlugin, PluginRegistry

logger = logging.getLogger(__name__)


def paths_overlap(a: str, b: str) -> bool:
    """True if one path equals the other or is a segment-wise prefix of it.

    "/a" overlaps "/a" and "/a/b" but not "/ab".
    """
    a = a.rstrip("/") or "/"
    b = b.rstrip("/") or "/"
    if a == b or a == "/" or b == "/":
        return True
    return b.startswith(a + "/") or a.startswith(b + "/")


class RouteMounter:
    """Mounts every registered plugin under its router path, exactly once."""

    def __init__(self, registry: PluginRegistry, reserved_paths: Iterable[str] = RESERVED_PATHS):
        self.registry = registry
        self.reserved_paths = tuple(reserved_paths)
        self._mounted = False

    def check_conflicts(self) -> None:
        """Verify no router path overlaps another or a reserved host path.

        Raises:
            RouteConflictError: naming the first overlapping pair found
        """
        seen: List[Tuple[str, str]] = []
        for loaded in self.registry.all():
            path = loaded.router_path
            for reserved in self.reserved_paths:
                if paths_overlap(path, reserved):
                    raise RouteConflictError(
                        f"Plugin '{loaded.name}' router path '{path}' overlaps "
                        f"reserved host path '{reserved}'"
                    )
            for other_name, other_path in seen:
                if paths_overlap(path, other_path):
                    raise RouteConflictError(
                        f"Plugin '{loaded.name}' router path '{path}' overlaps "
                        f"'{other_path}' of plugin '{other_name}'"
                    )
            seen.append((loaded.name, path))

    def _prepare(self) -> List[Tuple[LoadedPlugin, Optional[APIRouter], Optional[StaticFiles]]]:
        """Build every plugin's router and static app without attaching them.

        Raises:
            ManifestError: if a router cannot be created or a static
                directory does not exist
        """
        prepared = []
        for loaded in self.registry.all():
            try:
                router = loaded.router
            except Exception as e:
                raise ManifestError(f"Plugin '{loaded.name}': create_router() failed: {e}") from e

            static_app = None
            static_dir = loaded.static_dir
            if static_dir is not None:
                if not static_dir.is_dir():
                    raise ManifestError(
                        f"Plugin '{loaded.name}': static directory does not exist: {static_dir}"
                    )
                static_app = StaticFiles(directory=str(static_dir), html=True)

            prepared.append((loaded, router, static_app))
        return prepared

    def mount(self, app: FastAPI) -> None:
        """Attach all plugin routers and static directories to ``app``.

        Explicit plugin routes are added before the plugin's static mount,
        so they win when both could serve a path. Nothing is attached unless
        every plugin is ready to mount.

        Raises:
            RouteConflictError: before anything is attached
            ManifestError: before anything is attached
            RuntimeError: if called a second time
        """
        if self._mounted:
            raise RuntimeError("Plugin routes are already mounted")

        self.check_conflicts()
        prepared = self._prepare()
        self.registry.seal()

        for loaded, router, static_app in prepared:
            if router is not None:
                app.include_router(router, prefix=loaded.router_path)
                logger.info(f"Mounted router for plugin '{loaded.name}' at '{loaded.router_path}'")

            if static_app is not None:
                app.mount(loaded.router_path, static_app, name=f"plugin-static-{loaded.name}")
                logger.info(f"Mounted static files for plugin '{loaded.name}' from {loaded.static_dir}")

        self._mounted = True
        logger.info(f"Mounted {self.registry.count()} plugin(s)")
