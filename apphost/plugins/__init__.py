"""Plugin system for the application host.

Imports are lazy so lightweight pieces like parse_specifier or
PluginDiscovery can be used without pulling in FastAPI.
"""

__all__ = [
    "PluginSpecifier",
    "parse_specifier",
    "parse_specifier_list",
    "PluginManifest",
    "PluginDiscovery",
    "Plugin",
    "Application",
    "ApplicationDescriptor",
    "PluginAPI",
    "PluginRegistry",
    "LoadedPlugin",
    "RouteMounter",
    "AggregatedApplication",
    "PluginSummary",
    "aggregate_applications",
    "PluginLifecycle",
    "PluginManager",
    "PluginConfigService",
]


def __getattr__(name):
    if name in ("PluginSpecifier", "parse_specifier", "parse_specifier_list"):
        from apphost.plugins import specifier
        return getattr(specifier, name)
    if name == "PluginManifest":
        from apphost.plugins.manifest import PluginManifest
        return PluginManifest
    if name == "PluginDiscovery":
        from apphost.plugins.discovery import PluginDiscovery
        return PluginDiscovery
    if name in ("Plugin", "Application", "ApplicationDescriptor"):
        from apphost.plugins import base
        return getattr(base, name)
    if name == "PluginAPI":
        from apphost.plugins.api import PluginAPI
        return PluginAPI
    if name in ("PluginRegistry", "LoadedPlugin"):
        from apphost.plugins import registry
        return getattr(registry, name)
    if name == "RouteMounter":
        from apphost.plugins.mounter import RouteMounter
        return RouteMounter
    if name in ("AggregatedApplication", "PluginSummary", "aggregate_applications"):
        from apphost.plugins import aggregator
        return getattr(aggregator, name)
    if name == "PluginLifecycle":
        from apphost.plugins.lifecycle import PluginLifecycle
        return PluginLifecycle
    if name == "PluginManager":
        from apphost.plugins.manager import PluginManager
        return PluginManager
    if name == "PluginConfigService":
        from apphost.plugins.config import PluginConfigService
        return PluginConfigService
    raise AttributeError(f"module 'apphost.plugins' has no attribute {name!r}")
