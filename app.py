"""Main FastAPI application for the plugin host."""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Iterable, Optional

from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

# Configure logging BEFORE importing any modules that use logger
log_level = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Import after logging is configured
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apphost.constants import BUNDLED_PLUGINS_DIR, PLUGIN_PATHS, PLUGIN_SPECIFIERS
from apphost.dependencies import get_network_config, get_plugin_config_service
from apphost.errors import NotFoundError
from apphost.network import NetworkConfig
from apphost.plugins.config import PluginConfigService
from apphost.plugins.manager import PluginManager
from apphost.plugins.specifier import PluginSpecifier, parse_specifier_list
from apphost.routers import applications_router, plugins_router


def create_app(
    specifiers: Optional[Iterable[PluginSpecifier]] = None,
    search_paths: Optional[Iterable[Path]] = None,
    network: Optional[NetworkConfig] = None,
    config_service: Optional[PluginConfigService] = None,
) -> FastAPI:
    """Build the host app with every plugin loaded and mounted.

    Plugins are loaded and their routes mounted here, before the server
    accepts any connection. Any plugin error propagates and aborts startup.

    Args:
        specifiers: Plugin specifiers; defaults to $PLUGINS
        search_paths: Directories scanned for plugins; defaults to the
            bundled plugins directory plus $PLUGIN_PATHS
        network: Outbound proxy settings; defaults to the environment
        config_service: Per-plugin config; defaults to plugins/config.json
    """
    if specifiers is None:
        specifiers = parse_specifier_list(PLUGIN_SPECIFIERS)
    if search_paths is None:
        search_paths = [BUNDLED_PLUGINS_DIR, *PLUGIN_PATHS]

    manager = PluginManager(
        network=network or get_network_config(),
        config_service=config_service or get_plugin_config_service(),
    )
    manager.load_all(specifiers, search_paths)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run plugin start/stop hooks around the serving lifetime."""
        logger.info("Starting plugin host")
        logger.info(f"Working directory: {Path.cwd()}")
        await manager.start_all()
        yield
        logger.info("Shutting down plugin host")
        await manager.stop_all()

    app = FastAPI(
        title="Plugin Host",
        description="Hosts plugin sub-applications and lists them through a single API",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    # Host API routers go first so plugin mounts never shadow them
    app.include_router(applications_router)  # /api/applications
    app.include_router(plugins_router)  # /api/plugins

    manager.mount(app)
    app.state.plugin_manager = manager

    return app


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "8080"))
    uvicorn.run("app:create_app", factory=True, host="0.0.0.0", port=port)
