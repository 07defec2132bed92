"""Plugin listing REST API endpoints."""

import logging

from fastapi import APIRouter, Depends

from apphost.dependencies import get_plugin_manager
from apphost.errors import NotFoundError
from apphost.plugins.aggregator import PluginSummary
from apphost.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plugins", tags=["plugins"])


@router.get("")
async def list_plugins(manager: PluginManager = Depends(get_plugin_manager)):
    """List all loaded plugins."""
    return {"plugins": [p.model_dump(by_alias=True) for p in manager.list_plugins()]}


@router.get("/{name}")
async def get_plugin(name: str, manager: PluginManager = Depends(get_plugin_manager)):
    """Get a plugin's summary and its applications."""
    loaded = manager.registry.find(name)
    if loaded is None:
        raise NotFoundError(f"Plugin '{name}' not found")

    summary = PluginSummary.from_manifest(loaded.manifest).model_dump(by_alias=True)
    summary["applications"] = [app.model_dump(by_alias=True) for app in loaded.applications()]
    return summary
