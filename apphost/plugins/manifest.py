"""Plugin manifest model - describes a plugin's metadata, loaded from plugin.json."""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from apphost.constants import DEFAULT_ENTRY_POINT

_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")


def normalize_router_path(value: str) -> str:
    """Validate a router path and strip its trailing slash."""
    if not isinstance(value, str) or not value.startswith("/"):
        raise ValueError("routerPath must start with '/'")
    path = value.rstrip("/")
    if not path:
        raise ValueError("routerPath cannot be the root path '/'")
    segments = path.split("/")[1:]
    if any(seg == "" for seg in segments):
        raise ValueError("routerPath cannot contain empty segments")
    if any(seg in (".", "..") for seg in segments):
        raise ValueError("routerPath cannot contain '.' or '..' segments")
    return path


class PluginManifest(BaseModel):
    """Plugin manifest loaded from plugin.json."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., description="Unique plugin name")
    version: str = Field(..., description="Plugin version")
    display_name: str = Field(..., alias="displayName", description="Human-readable plugin name")
    description: Optional[str] = Field(default=None, description="Plugin description")
    router_path: str = Field(
        ...,
        alias="routerPath",
        description="URL prefix the plugin's routes and static assets are mounted under",
    )
    homepage_url: Optional[str] = Field(default=None, alias="homepageURL")
    entry_point: str = Field(
        default=DEFAULT_ENTRY_POINT,
        alias="entryPoint",
        description="Python module:function path relative to plugin directory, e.g. 'plugin:register'",
    )
    static_dir: Optional[str] = Field(
        default=None,
        alias="staticDir",
        description="Static asset directory relative to the plugin directory",
    )
    module_path: str = Field(
        default="",
        alias="modulePath",
        description="Absolute plugin directory, set by the loader",
    )

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not _NAME_RE.match(value):
            raise ValueError("name may only contain letters, digits, '.', '_' and '-'")
        return value

    @field_validator("version", "display_name")
    @classmethod
    def _check_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("router_path")
    @classmethod
    def _check_router_path(cls, value: str) -> str:
        return normalize_router_path(value)

    @field_validator("entry_point")
    @classmethod
    def _check_entry_point(cls, value: str) -> str:
        module_name, sep, func_name = value.partition(":")
        if not sep or not module_name or not func_name:
            raise ValueError("entryPoint must look like 'module:function'")
        return value
