"""Aggregated application listing endpoint."""

from typing import List

from fastapi import APIRouter, Depends

from apphost.dependencies import get_plugin_manager
from apphost.plugins.aggregator import AggregatedApplication
from apphost.plugins.manager import PluginManager

router = APIRouter(prefix="/api/applications", tags=["applications"])


@router.get("", response_model=List[AggregatedApplication])
async def list_applications(manager: PluginManager = Depends(get_plugin_manager)):
    """List the applications of every loaded plugin."""
    return manager.applications()
