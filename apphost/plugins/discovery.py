"""Plugin discovery - resolves specifiers and loads plugin.json manifests."""

import json
import logging
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError

from apphost.constants import DEFAULT_STATIC_DIR, MANIFEST_FILE
from apphost.errors import ManifestError
from apphost.plugins.manifest import PluginManifest
from apphost.plugins.specifier import PluginSpecifier

logger = logging.getLogger(__name__)


class PluginDiscovery:
    """Finds plugin directories and loads their manifests."""

    MANIFEST_FILE = MANIFEST_FILE

    def scan(self, search_paths: Iterable[Path]) -> List[PluginSpecifier]:
        """Scan directories for plugin subdirectories.

        Args:
            search_paths: Directories searched in order

        Returns:
            One specifier (without declared name) per subdirectory holding
            a plugin.json, sorted within each search path
        """
        specifiers = []

        for search_path in search_paths:
            search_path = Path(search_path)
            if not search_path.is_dir():
                logger.debug(f"Plugin search path does not exist: {search_path}")
                continue

            for item in sorted(search_path.iterdir()):
                if item.is_dir() and (item / self.MANIFEST_FILE).is_file():
                    specifiers.append(PluginSpecifier(module_path=str(item)))

        logger.info(f"Found {len(specifiers)} plugin(s) in search paths")
        return specifiers

    def load_manifest(self, specifier: PluginSpecifier) -> PluginManifest:
        """Load and validate the manifest of the plugin at ``specifier``.

        Raises:
            ManifestError: if the directory or manifest is missing,
                unreadable, or invalid
        """
        plugin_dir = Path(specifier.module_path).expanduser().resolve()
        if not plugin_dir.is_dir():
            raise ManifestError(f"Plugin directory not found: {plugin_dir} (from '{specifier}')")

        manifest_file = plugin_dir / self.MANIFEST_FILE
        try:
            with open(manifest_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ManifestError(f"No {self.MANIFEST_FILE} found at {plugin_dir}")
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid JSON in {manifest_file}: {e}")
        except OSError as e:
            raise ManifestError(f"Cannot read {manifest_file}: {e}")

        if not isinstance(data, dict):
            raise ManifestError(f"{manifest_file} must contain a JSON object")

        data = dict(data)
        data["modulePath"] = str(plugin_dir)
        if not data.get("staticDir") and (plugin_dir / DEFAULT_STATIC_DIR).is_dir():
            data["staticDir"] = DEFAULT_STATIC_DIR

        try:
            manifest = PluginManifest.model_validate(data)
        except ValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise ManifestError(f"Invalid manifest in {manifest_file} ({fields}): {e}")

        if manifest.static_dir:
            static_path = (plugin_dir / manifest.static_dir).resolve()
            if not static_path.is_relative_to(plugin_dir):
                raise ManifestError(
                    f"Plugin '{manifest.name}': staticDir must be inside the plugin directory"
                )
            if not static_path.is_dir():
                raise ManifestError(
                    f"Plugin '{manifest.name}': static directory not found: {static_path}"
                )

        logger.debug(f"Loaded manifest: {manifest.name} at {plugin_dir}")
        return manifest
