"""Plugin abstract base class and application models."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field


class Application(BaseModel):
    """An application as declared by a plugin.

    ``path`` and ``icon_path`` are relative to the plugin's router path,
    e.g. "/test-app" and "/test-app/icon.svg".
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: str
    description: Optional[str] = None
    icon_path: Optional[str] = Field(default=None, alias="iconPath")
    homepage_url: Optional[str] = Field(default=None, alias="homepageURL")
    path: str = "/"


class ApplicationDescriptor(Application):
    """An application with ``path`` and ``icon_path`` resolved under the router path."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Plugin(ABC):
    """Abstract base class for plugins.

    A plugin's entry function receives a PluginAPI and returns an instance
    of a Plugin subclass.
    """

    #: Static asset directory. None falls back to the manifest's staticDir
    #: (or "public" when present).
    static_dir: Optional[Path] = None

    @abstractmethod
    def applications(self) -> List[Application]:
        """Return the applications this plugin exposes, in display order."""
        ...

    def create_router(self) -> Optional[APIRouter]:
        """Create and return the FastAPI router for this plugin, if any."""
        return None

    async def on_start(self) -> None:
        """Called when the host starts. Override for initialization."""
        pass

    async def on_stop(self) -> None:
        """Called when the host stops. Override for cleanup."""
        pass
