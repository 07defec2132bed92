"""End-to-end tests: the host app with the fixture plugin loaded as "<dir>:meow"."""

import pytest
from fastapi.testclient import TestClient

from app import create_app
from apphost.errors import ManifestError, RouteConflictError
from apphost.network import NetworkConfig
from apphost.plugins.config import PluginConfigService
from apphost.plugins.specifier import PluginSpecifier, parse_specifier


@pytest.fixture
def host_app(test_plugin_dir, tmp_path):
    return create_app(
        specifiers=[parse_specifier(f"{test_plugin_dir}:meow")],
        search_paths=[],
        network=NetworkConfig(),
        config_service=PluginConfigService(tmp_path / "config.json"),
    )


@pytest.fixture
def client(host_app):
    with TestClient(host_app) as c:
        yield c


class TestApplicationsEndpoint:
    """GET /api/applications."""

    def test_lists_test_app(self, client, test_plugin_dir):
        resp = client.get("/api/applications")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/json")
        assert resp.json() == [
            {
                "name": "Test App",
                "version": "4.0.0",

                "description": "This app does XYZ.",
                "iconPath": "/test-plugin/test-app/icon.svg",
                "homepageURL": "https://example.com",
                "path": "/test-plugin/test-app",

                "plugin": {
                    "name": "test-plugin",
                    "version": "1.0.0",
                    "modulePath": str(test_plugin_dir.resolve()),

                    "displayName": "Test Plugin",
                    "description": "Plugin used in code-server tests.",
                    "routerPath": "/test-plugin",
                    "homepageURL": "https://example.com",
                },
            },
        ]

    def test_repeated_calls_identical(self, client):
        assert client.get("/api/applications").json() == client.get("/api/applications").json()

    def test_order_follows_registration(self, test_plugin_dir, make_plugin, tmp_path):
        extra = make_plugin("extra", apps=[
            {"name": "Second", "version": "1.0.0", "path": "/second"},
            {"name": "First", "version": "1.0.0", "path": "/first"},
        ])
        app = create_app(
            specifiers=[PluginSpecifier(str(extra)), parse_specifier(f"{test_plugin_dir}:meow")],
            search_paths=[],
            network=NetworkConfig(),
            config_service=PluginConfigService(tmp_path / "config.json"),
        )
        with TestClient(app) as c:
            names = [a["name"] for a in c.get("/api/applications").json()]
        assert names == ["Second", "First", "Test App"]


class TestPluginRoutes:
    """Requests under the plugin's router path."""

    def test_test_app_serves_index_html(self, client, test_plugin_dir):
        index_html = (test_plugin_dir / "public" / "index.html").read_bytes()
        resp = client.get("/test-plugin/test-app")
        assert resp.status_code == 200
        assert resp.content == index_html

    def test_static_icon(self, client, test_plugin_dir):
        icon = (test_plugin_dir / "public" / "test-app" / "icon.svg").read_bytes()
        resp = client.get("/test-plugin/test-app/icon.svg")
        assert resp.status_code == 200
        assert resp.content == icon

    def test_unmounted_path_404(self, client):
        assert client.get("/test-plugin/does-not-exist").status_code == 404
        assert client.get("/test-plugin/test-app/nothing.png").status_code == 404

    def test_unknown_router_path_404(self, client):
        assert client.get("/other-plugin/test-app").status_code == 404


class TestPluginsEndpoint:
    """GET /api/plugins and /api/plugins/{name}."""

    def test_list(self, client):
        body = client.get("/api/plugins").json()
        assert [p["name"] for p in body["plugins"]] == ["test-plugin"]
        assert body["plugins"][0]["routerPath"] == "/test-plugin"

    def test_detail(self, client):
        body = client.get("/api/plugins/test-plugin").json()
        assert body["displayName"] == "Test Plugin"
        assert [a["path"] for a in body["applications"]] == ["/test-plugin/test-app"]

    def test_unknown_plugin_404(self, client):
        resp = client.get("/api/plugins/meow")
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Plugin 'meow' not found"}


class TestHostLifecycle:
    """Startup and shutdown hooks and startup-fatal errors."""

    def test_hooks_run(self, host_app):
        plugin = host_app.state.plugin_manager.registry.find("test-plugin").plugin
        assert not plugin.started
        with TestClient(host_app):
            assert plugin.started
            assert not plugin.stopped
        assert plugin.stopped

    def test_overlapping_router_paths_abort_startup(self, test_plugin_dir, make_plugin, tmp_path):
        nested = make_plugin("nested", router_path="/test-plugin/nested")
        with pytest.raises(RouteConflictError):
            create_app(
                specifiers=[parse_specifier(f"{test_plugin_dir}:meow"), PluginSpecifier(str(nested))],
                search_paths=[],
                network=NetworkConfig(),
                config_service=PluginConfigService(tmp_path / "config.json"),
            )

    def test_escaping_application_path_aborts_startup(self, make_plugin, tmp_path):
        bad = make_plugin("bad", apps=[{"name": "Escape", "version": "1.0.0", "path": "/../../etc"}])
        with pytest.raises(ManifestError, match="Escape"):
            create_app(
                specifiers=[PluginSpecifier(str(bad))],
                search_paths=[],
                network=NetworkConfig(),
                config_service=PluginConfigService(tmp_path / "config.json"),
            )

    def test_bundled_plugins_scanned(self, tmp_path):
        from apphost.constants import BUNDLED_PLUGINS_DIR

        app = create_app(
            specifiers=[],
            search_paths=[BUNDLED_PLUGINS_DIR],
            network=NetworkConfig(),
            config_service=PluginConfigService(tmp_path / "config.json"),
        )
        with TestClient(app) as c:
            apps = c.get("/api/applications").json()
            assert [a["path"] for a in apps] == ["/welcome"]
            greeting = c.get("/welcome/greeting").json()
            assert greeting == {"greeting": "Welcome", "applications": 1}
            assert c.get("/welcome/").status_code == 200


class TestDefaultServices:
    """create_app falls back to services built from the environment."""

    @pytest.fixture(autouse=True)
    def fresh_services(self):
        from apphost.dependencies import reset_services

        reset_services()
        yield
        reset_services()

    def test_network_config_from_environment(self, monkeypatch, test_plugin_dir):
        monkeypatch.setenv("HTTP_PROXY", "http://proxy.internal:3128")
        monkeypatch.delenv("HTTPS_PROXY", raising=False)
        monkeypatch.delenv("https_proxy", raising=False)

        app = create_app(specifiers=[parse_specifier(f"{test_plugin_dir}:meow")], search_paths=[])

        manager = app.state.plugin_manager
        assert manager.network.proxy_for("https://example.com") == "http://proxy.internal:3128"
        plugin_api = manager.registry.find("test-plugin").plugin.api
        assert plugin_api.network is manager.network
