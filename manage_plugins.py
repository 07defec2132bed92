#!/usr/bin/env python3
"""Plugin management CLI tool."""

import argparse
import json
import sys
from pathlib import Path

# Ensure project root is in path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from apphost.constants import BUNDLED_PLUGINS_DIR, PLUGIN_CONFIG_FILE, PLUGIN_PATHS, PLUGIN_SPECIFIERS
from apphost.errors import PluginError
from apphost.network import NetworkConfig
from apphost.plugins.config import PluginConfigService
from apphost.plugins.discovery import PluginDiscovery
from apphost.plugins.specifier import parse_specifier_list


SEARCH_PATHS = [BUNDLED_PLUGINS_DIR, *PLUGIN_PATHS]


def get_explicit_specifiers(args):
    """Specifiers from --plugin arguments, falling back to $PLUGINS."""
    text = ",".join(args.plugin) if args.plugin else PLUGIN_SPECIFIERS
    return parse_specifier_list(text)


def get_specifiers(args):
    """Explicit specifiers followed by those found in the search paths."""
    return get_explicit_specifiers(args) + PluginDiscovery().scan(SEARCH_PATHS)


def get_manager(args):
    """Load every plugin into a fresh PluginManager (without mounting)."""
    from apphost.plugins.manager import PluginManager

    manager = PluginManager(
        network=NetworkConfig.from_env(),
        config_service=PluginConfigService(PLUGIN_CONFIG_FILE),
    )
    manager.load_all(get_explicit_specifiers(args), SEARCH_PATHS)
    return manager


def cmd_list(args):
    """List all plugin manifests."""
    discovery = PluginDiscovery()
    specifiers = get_specifiers(args)

    if not specifiers:
        print("No plugins found.")
        return

    print(f"{'Name':<20} {'Display Name':<30} {'Router Path':<20} {'Version':<10} {'Path'}")
    print("-" * 100)

    for spec in specifiers:
        try:
            m = discovery.load_manifest(spec)
        except PluginError as e:
            print(f"{spec.name:<20} INVALID: {e}")
            continue
        print(f"{m.name:<20} {m.display_name:<30} {m.router_path:<20} {m.version:<10} {m.module_path}")


def cmd_info(args):
    """Show detailed plugin information."""
    manager = get_manager(args)
    loaded = manager.registry.find(args.name)
    if not loaded:
        print(f"Plugin '{args.name}' not found.")
        sys.exit(1)

    m = loaded.manifest
    print(f"Plugin: {m.name}")
    print(f"  Display Name: {m.display_name}")
    print(f"  Version:      {m.version}")
    print(f"  Description:  {m.description or '-'}")
    print(f"  Homepage:     {m.homepage_url or '-'}")
    print(f"  Router Path:  {m.router_path}")
    print(f"  Module Path:  {m.module_path}")
    print(f"  Entry Point:  {m.entry_point}")
    print(f"  Static Dir:   {loaded.static_dir or '-'}")
    print(f"  Router:       {'yes' if loaded.router is not None else 'no'}")
    print("  Applications:")
    for app in loaded.applications():
        print(f"    - {app.name} {app.version} at {app.path}")


def cmd_apps(args):
    """Print the aggregated application listing as JSON."""
    manager = get_manager(args)
    apps = [app.model_dump(by_alias=True) for app in manager.applications()]
    print(json.dumps(apps, indent=2, ensure_ascii=False))


def cmd_doctor(args):
    """Load every plugin and check route conflicts, like server startup does."""
    issues = []

    if not BUNDLED_PLUGINS_DIR.exists():
        issues.append(f"Bundled plugins directory missing: {BUNDLED_PLUGINS_DIR}")

    if PLUGIN_CONFIG_FILE.exists():
        try:
            with open(PLUGIN_CONFIG_FILE) as f:
                json.load(f)
        except json.JSONDecodeError as e:
            issues.append(f"Plugin config file has invalid JSON: {e}")

    count = 0
    try:
        manager = get_manager(args)
        manager.mounter.check_conflicts()
        for loaded in manager.registry.all():
            loaded.applications()
        count = manager.registry.count()
    except PluginError as e:
        issues.append(str(e))

    if issues:
        print(f"Found {len(issues)} issue(s):")
        for i, issue in enumerate(issues, 1):
            print(f"  {i}. {issue}")
        sys.exit(1)
    else:
        print(f"All checks passed. {count} plugin(s) loaded.")


def main():
    parser = argparse.ArgumentParser(description="Plugin Host Plugin Manager")
    parser.add_argument(
        "-p", "--plugin", action="append",
        help="Plugin specifier path[:name] (repeatable, overrides $PLUGINS)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list
    subparsers.add_parser("list", help="List all plugins")

    # info
    info_parser = subparsers.add_parser("info", help="Show plugin details")
    info_parser.add_argument("name", help="Plugin name")

    # apps
    subparsers.add_parser("apps", help="Print the aggregated application listing")

    # doctor
    subparsers.add_parser("doctor", help="Run health checks")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "list": cmd_list,
        "info": cmd_info,
        "apps": cmd_apps,
        "doctor": cmd_doctor,
    }

    try:
        commands[args.command](args)
    except PluginError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
