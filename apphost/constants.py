"""Global constants for the plugin host."""

import os
from pathlib import Path

# Directory paths
HOST_ROOT = Path(__file__).resolve().parent.parent

PLUGINS_DIR = HOST_ROOT / "plugins"
BUNDLED_PLUGINS_DIR = PLUGINS_DIR / "bundled"
PLUGIN_CONFIG_FILE = Path(os.getenv("PLUGIN_CONFIG_FILE", str(PLUGINS_DIR / "config.json")))

# Plugin specifiers, comma-separated: "path[:name],path[:name]"
PLUGIN_SPECIFIERS = os.getenv("PLUGINS", "")

# Extra directories scanned for plugins (os.pathsep-separated)
PLUGIN_PATHS = [
    Path(p.strip()) for p in os.getenv("PLUGIN_PATHS", "").split(os.pathsep) if p.strip()
]

# URL prefixes owned by the host; plugin router paths may not overlap them
RESERVED_PATHS = ("/api", "/docs", "/redoc", "/openapi.json")

DEFAULT_ENTRY_POINT = "plugin:register"
MANIFEST_FILE = "plugin.json"
DEFAULT_STATIC_DIR = "public"
