"""Shared fixtures: throwaway plugin directories written under tmp_path."""

import json
from pathlib import Path

import pytest

PLUGIN_TEMPLATE = '''
from typing import List

from fastapi import APIRouter

from apphost.plugins.base import Application, Plugin

APPS = {apps!r}


class FixturePlugin(Plugin):
    def __init__(self, api):
        self.api = api

    def applications(self) -> List[Application]:
        return [Application(**app) for app in APPS]

    def create_router(self) -> APIRouter:
        router = APIRouter()
        api = self.api

        @router.get("/hello")
        async def hello():
            return {{"plugin": api.plugin_name, "config": api.config}}

        return router


def register(api):
    return FixturePlugin(api)
'''


@pytest.fixture
def make_plugin(tmp_path):
    """Factory writing a plugin directory and returning its path."""

    def _make(dirname, name=None, router_path=None, apps=(), files=None, source=None, **manifest):
        plugin_dir = tmp_path / dirname
        plugin_dir.mkdir(parents=True)
        name = name or plugin_dir.name
        data = {
            "name": name,
            "version": "1.0.0",
            "displayName": name.title(),
            "routerPath": router_path or f"/{plugin_dir.name}",
        }
        data.update(manifest)
        (plugin_dir / "plugin.json").write_text(json.dumps(data), encoding="utf-8")
        (plugin_dir / "plugin.py").write_text(
            source if source is not None else PLUGIN_TEMPLATE.format(apps=list(apps)),
            encoding="utf-8",
        )
        for rel, content in (files or {}).items():
            target = plugin_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return plugin_dir

    return _make


@pytest.fixture
def test_plugin_dir() -> Path:
    """The checked-in fixture plugin used by the end-to-end tests."""
    return Path(__file__).parent / "test_plugin"
