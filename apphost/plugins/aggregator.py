"""Application aggregation - the host-wide listing behind /api/applications."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from apphost.plugins.base import ApplicationDescriptor
from apphost.plugins.manifest import PluginManifest
from apphost.plugins.registry import PluginRegistry


class PluginSummary(BaseModel):
    """Public fields of a plugin's manifest."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: str
    module_path: str = Field(alias="modulePath")
    display_name: str = Field(alias="displayName")
    description: Optional[str] = None
    router_path: str = Field(alias="routerPath")
    homepage_url: Optional[str] = Field(default=None, alias="homepageURL")

    @classmethod
    def from_manifest(cls, manifest: PluginManifest) -> "PluginSummary":
        return cls(
            name=manifest.name,
            version=manifest.version,
            module_path=manifest.module_path,
            display_name=manifest.display_name,
            description=manifest.description,
            router_path=manifest.router_path,
            homepage_url=manifest.homepage_url,
        )


class AggregatedApplication(ApplicationDescriptor):
    """An application plus a summary of the plugin that owns it."""

    plugin: PluginSummary


def aggregate_applications(registry: PluginRegistry) -> List[AggregatedApplication]:
    """List every application of every plugin.

    Order is plugin registration order, then the order each plugin
    declares its applications in.
    """
    result = []
    for loaded in registry.all():
        summary = PluginSummary.from_manifest(loaded.manifest)
        for app in loaded.applications():
            result.append(AggregatedApplication(**app.model_dump(), plugin=summary))
    return result
