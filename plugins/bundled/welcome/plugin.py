"""Welcome plugin entry point."""

import logging
from typing import List

from fastapi import APIRouter, Request

from apphost.plugins.api import PluginAPI
from apphost.plugins.base import Application, Plugin

logger = logging.getLogger(__name__)


class WelcomePlugin(Plugin):
    """Static landing page plus a small JSON endpoint it reads from."""

    def __init__(self, api: PluginAPI):
        self.api = api
        self.greeting = api.config.get("greeting", "Welcome")

    def applications(self) -> List[Application]:
        return [
            Application(
                name="Welcome",
                version="1.0.0",
                description="Lists the applications installed on this host.",
                icon_path="/icon.svg",
                path="/",
            )
        ]

    def create_router(self) -> APIRouter:
        router = APIRouter(tags=["welcome"])
        greeting = self.greeting

        @router.get("/greeting")
        async def get_greeting(request: Request):
            manager = request.app.state.plugin_manager
            return {
                "greeting": greeting,
                "applications": len(manager.applications()),
            }

        return router


def register(api: PluginAPI) -> WelcomePlugin:
    """Plugin entry point - called by PluginLifecycle.load()."""
    plugin = WelcomePlugin(api)
    logger.info(f"Welcome plugin registered with config: {api.config}")
    return plugin
