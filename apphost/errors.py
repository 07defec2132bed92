"""Error types raised by the plugin host."""


class PluginError(Exception):
    """Base class for plugin system errors."""


class SpecifierError(PluginError):
    """A plugin specifier string is empty or malformed."""


class ManifestError(PluginError):
    """Plugin metadata is missing, invalid, or the plugin module cannot be loaded."""


class DuplicateNameError(PluginError):
    """A plugin with the same name is already registered."""


class RegistryClosedError(PluginError):
    """The registry no longer accepts registrations (routes are mounted)."""


class RouteConflictError(PluginError):
    """Two router paths overlap, or a router path overlaps a reserved host path."""


class NotFoundError(PluginError):
    """A requested plugin or resource does not exist (rendered as 404)."""
