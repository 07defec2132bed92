"""Tests for PluginManifest validation and PluginDiscovery."""

import json

import pytest
from pydantic import ValidationError

from apphost.errors import ManifestError
from apphost.plugins.discovery import PluginDiscovery
from apphost.plugins.manifest import PluginManifest
from apphost.plugins.specifier import PluginSpecifier, parse_specifier


def _manifest(**overrides):
    data = {
        "name": "test-plugin",
        "version": "1.0.0",
        "displayName": "Test Plugin",
        "routerPath": "/test-plugin",
    }
    data.update(overrides)
    return data


class TestPluginManifest:
    """PluginManifest model validation."""

    def test_valid_minimal(self):
        m = PluginManifest.model_validate(_manifest())
        assert m.name == "test-plugin"
        assert m.display_name == "Test Plugin"
        assert m.router_path == "/test-plugin"
        assert m.description is None
        assert m.homepage_url is None
        assert m.entry_point == "plugin:register"
        assert m.static_dir is None

    def test_aliases_round_trip(self):
        m = PluginManifest.model_validate(_manifest(homepageURL="https://example.com"))
        dumped = m.model_dump(by_alias=True)
        assert dumped["displayName"] == "Test Plugin"
        assert dumped["homepageURL"] == "https://example.com"
        assert dumped["routerPath"] == "/test-plugin"

    def test_trailing_slash_stripped(self):
        assert PluginManifest.model_validate(_manifest(routerPath="/x/y/")).router_path == "/x/y"

    @pytest.mark.parametrize("field", ["name", "version", "displayName", "routerPath"])
    def test_missing_required(self, field):
        data = _manifest()
        del data[field]
        with pytest.raises(ValidationError):
            PluginManifest.model_validate(data)

    @pytest.mark.parametrize("router_path", ["test-plugin", "/", "//", "/a//b", "/a/../b", "/./a"])
    def test_invalid_router_path(self, router_path):
        with pytest.raises(ValidationError):
            PluginManifest.model_validate(_manifest(routerPath=router_path))

    @pytest.mark.parametrize("name", ["", "has space", "a/b"])
    def test_invalid_name(self, name):
        with pytest.raises(ValidationError):
            PluginManifest.model_validate(_manifest(name=name))

    def test_invalid_entry_point(self):
        with pytest.raises(ValidationError):
            PluginManifest.model_validate(_manifest(entryPoint="plugin"))

    def test_blank_display_name(self):
        with pytest.raises(ValidationError):
            PluginManifest.model_validate(_manifest(displayName="  "))


class TestLoadManifest:
    """PluginDiscovery.load_manifest from the filesystem."""

    def test_fixture_plugin(self, test_plugin_dir):
        m = PluginDiscovery().load_manifest(parse_specifier(f"{test_plugin_dir}:meow"))
        assert m.name == "test-plugin"
        assert m.version == "1.0.0"
        assert m.display_name == "Test Plugin"
        assert m.description == "Plugin used in code-server tests."
        assert m.router_path == "/test-plugin"
        assert m.homepage_url == "https://example.com"
        assert m.module_path == str(test_plugin_dir.resolve())
        assert m.static_dir == "public"

    def test_module_path_is_absolute(self, make_plugin, monkeypatch):
        plugin_dir = make_plugin("hello")
        monkeypatch.chdir(plugin_dir.parent)
        m = PluginDiscovery().load_manifest(PluginSpecifier("hello"))
        assert m.module_path == str(plugin_dir.resolve())

    def test_no_static_dir_without_public(self, make_plugin):
        m = PluginDiscovery().load_manifest(PluginSpecifier(str(make_plugin("hello"))))
        assert m.static_dir is None

    def test_explicit_static_dir(self, make_plugin):
        plugin_dir = make_plugin("hello", staticDir="assets", files={"assets/a.txt": "a"})
        assert PluginDiscovery().load_manifest(PluginSpecifier(str(plugin_dir))).static_dir == "assets"

    def test_missing_static_dir(self, make_plugin):
        plugin_dir = make_plugin("hello", staticDir="assets")
        with pytest.raises(ManifestError, match="static directory not found"):
            PluginDiscovery().load_manifest(PluginSpecifier(str(plugin_dir)))

    def test_static_dir_outside_plugin(self, make_plugin):
        make_plugin("other", files={"x.txt": "x"})
        plugin_dir = make_plugin("hello", staticDir="../other")
        with pytest.raises(ManifestError, match="inside the plugin directory"):
            PluginDiscovery().load_manifest(PluginSpecifier(str(plugin_dir)))

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ManifestError, match="not found"):
            PluginDiscovery().load_manifest(PluginSpecifier(str(tmp_path / "nope")))

    def test_missing_manifest_file(self, tmp_path):
        (tmp_path / "empty").mkdir()
        with pytest.raises(ManifestError, match="No plugin.json"):
            PluginDiscovery().load_manifest(PluginSpecifier(str(tmp_path / "empty")))

    def test_invalid_json(self, tmp_path):
        plugin_dir = tmp_path / "broken"
        plugin_dir.mkdir()
        (plugin_dir / "plugin.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ManifestError, match="Invalid JSON"):
            PluginDiscovery().load_manifest(PluginSpecifier(str(plugin_dir)))

    def test_not_an_object(self, tmp_path):
        plugin_dir = tmp_path / "list"
        plugin_dir.mkdir()
        (plugin_dir / "plugin.json").write_text(json.dumps(["a"]), encoding="utf-8")
        with pytest.raises(ManifestError, match="JSON object"):
            PluginDiscovery().load_manifest(PluginSpecifier(str(plugin_dir)))

    def test_missing_required_field_named(self, tmp_path):
        plugin_dir = tmp_path / "partial"
        plugin_dir.mkdir()
        (plugin_dir / "plugin.json").write_text(
            json.dumps({"name": "partial", "version": "1.0.0", "displayName": "Partial"}),
            encoding="utf-8",
        )
        with pytest.raises(ManifestError, match="routerPath"):
            PluginDiscovery().load_manifest(PluginSpecifier(str(plugin_dir)))


class TestScan:
    """PluginDiscovery.scan over search paths."""

    def test_scan_sorted_and_skips_non_plugins(self, make_plugin, tmp_path):
        make_plugin("zeta")
        make_plugin("alpha")
        (tmp_path / "not-a-plugin").mkdir()
        (tmp_path / "file.txt").write_text("x", encoding="utf-8")

        specs = PluginDiscovery().scan([tmp_path])
        assert [s.name for s in specs] == ["alpha", "zeta"]
        assert all(s.declared_name is None for s in specs)

    def test_missing_search_path_skipped(self, tmp_path):
        assert PluginDiscovery().scan([tmp_path / "missing"]) == []
