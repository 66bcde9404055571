"""
Command-line interface for managing assetkit extensions.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import yaml
from rich.console import Console
from rich.table import Table

from assetkit.config import DEFAULT_CONFIG_PATHS, RuntimeConfig
from assetkit.events import (
    LifecycleEvent,
    RecordCreated,
    RecordDeleted,
    RecordUpdated,
)
from assetkit.extensions.errors import ExtensionError
from assetkit.host import PluginHost
from assetkit.logging import setup_logging

console = Console()

# Startup and Shutdown are fired by the host itself around every emit
EMIT_CHOICES = ["created", "updated", "deleted"]


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Manage asset tracker extensions",
        prog="assetkit",
    )

    # Global options
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (debug logging)",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Config file (defaults to ./assetkit.yaml or ~/.config/assetkit/config.yaml)",
    )
    parser.add_argument(
        "-d",
        "--dir",
        dest="extensions_dir",
        default=None,
        help="Extensions directory (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # List command
    list_parser = subparsers.add_parser("list", help="List discovered extensions")
    list_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    info_parser = subparsers.add_parser("info", help="Show extension details")
    info_parser.add_argument("id", help="Extension id")

    enable_parser = subparsers.add_parser("enable", help="Enable an extension")
    enable_parser.add_argument("id", help="Extension id")

    disable_parser = subparsers.add_parser("disable", help="Disable an extension")
    disable_parser.add_argument("id", help="Extension id")

    # Emit command
    emit_parser = subparsers.add_parser(
        "emit", help="Start the runtime, deliver one record event, then shut down"
    )
    emit_parser.add_argument("event", choices=EMIT_CHOICES, help="Event to deliver")
    emit_parser.add_argument(
        "--payload",
        default="{}",
        help="JSON record snapshot for created/updated",
    )
    emit_parser.add_argument("--id", dest="record_id", default=None, help="Record id for deleted")

    # Config command with subcommands
    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_command", help="Config commands")
    config_subparsers.add_parser("show", help="Show current configuration")
    config_init_parser = config_subparsers.add_parser("init", help="Initialize a new config file")
    config_init_parser.add_argument(
        "-o",
        "--output",
        default="assetkit.yaml",
        help="Output file path",
    )

    args = parser.parse_args(argv)

    if getattr(args, "verbose", False):
        setup_logging("DEBUG")
    else:
        setup_logging("WARNING")

    if args.command == "list":
        cmd_list(args)
    elif args.command == "info":
        cmd_info(args)
    elif args.command == "enable":
        cmd_toggle(args, True)
    elif args.command == "disable":
        cmd_toggle(args, False)
    elif args.command == "emit":
        cmd_emit(args)
    elif args.command == "config":
        cmd_config(args)
    else:
        parser.print_help()


def _load_config(args: argparse.Namespace) -> RuntimeConfig:
    config_path = getattr(args, "config", None)
    config = RuntimeConfig.load(Path(config_path) if config_path else None)
    extensions_dir = getattr(args, "extensions_dir", None)
    if extensions_dir:
        config.extensions_dir = Path(extensions_dir)
    return config


def _create_host(args: argparse.Namespace) -> PluginHost:
    """Create a plugin host from CLI args."""
    return PluginHost(_load_config(args))


def cmd_list(args: argparse.Namespace) -> None:
    """List discovered extensions without running them."""
    host = _create_host(args)
    host.registry.discover()
    extensions = host.list_extensions()

    if args.json:
        console.print_json(json.dumps(extensions, indent=2))
        return

    if not extensions:
        console.print("[dim]No extensions found.[/dim]")
        return

    table = Table(title="Extensions")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Author", style="dim")
    table.add_column("Enabled")

    for ext in extensions:
        enabled = "[green]yes[/green]" if ext["enabled"] else "[dim]no[/dim]"
        table.add_row(ext["id"], ext["name"], ext["version"], ext["author"], enabled)

    console.print(table)
    console.print(f"\n[dim]Total: {len(extensions)} extensions[/dim]")

    for warning in host.registry.warnings:
        console.print(f"[yellow]Skipped {warning}[/yellow]")


def cmd_info(args: argparse.Namespace) -> None:
    """Show extension details."""
    host = _create_host(args)
    host.registry.discover()

    ext = host.registry.get(args.id)
    if ext is None:
        console.print(f"[red]Extension not found: {args.id}[/red]")
        sys.exit(1)

    console.print(f"\n[bold]{ext.name or ext.id}[/bold] v{ext.version or '?'}")
    if ext.description:
        console.print(f"[dim]{ext.description}[/dim]")
    console.print(f"  Id: {ext.id}")
    console.print(f"  Source: {ext.source_path}")
    if ext.author:
        console.print(f"  Author: {ext.author}")
    console.print(f"  Enabled: {'yes' if ext.enabled else 'no'}")


def cmd_toggle(args: argparse.Namespace, enabled: bool) -> None:
    """Enable or disable an extension and persist the choice."""
    host = _create_host(args)
    host.registry.discover()
    try:
        host.set_extension_enabled(args.id, enabled)
    except ExtensionError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    finally:
        host.registry.close()

    word = "Enabled" if enabled else "Disabled"
    console.print(f"[green]{word} extension: {args.id}[/green]")


def _build_event(args: argparse.Namespace) -> LifecycleEvent:
    if args.event not in EMIT_CHOICES:
        raise ValueError(f"Unsupported event: {args.event}")
    if args.event == "deleted":
        if args.record_id is None:
            raise ValueError("--id is required for the deleted event")
        return RecordDeleted(args.record_id)

    # Validate the payload before handing it to extensions
    json.loads(args.payload)
    if args.event == "created":
        return RecordCreated(args.payload)
    return RecordUpdated(args.payload)


def cmd_emit(args: argparse.Namespace) -> None:
    """Deliver one lifecycle event to the enabled extensions."""
    try:
        event = _build_event(args)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(2)

    with _create_host(args) as host:
        report = host.notify(event)

    console.print(
        f"[bold]{report.hook_name}[/bold]: "
        f"{len(report.delivered)} delivered, {len(report.skipped)} without hook, "
        f"{len(report.failures)} failed"
    )
    for failure in report.failures:
        console.print(f"  [red]✗[/red] {failure.extension_id}: {failure.message}")
    if not report.ok:
        sys.exit(1)


def cmd_config(args: argparse.Namespace) -> None:
    """Configuration management commands."""
    if args.config_command == "show":
        _config_show(args)
    elif args.config_command == "init":
        _config_init(args.output)
    else:
        console.print("[yellow]Usage: assetkit config <show|init>[/yellow]")


def _config_show(args: argparse.Namespace) -> None:
    """Show current configuration."""
    if args.config:
        console.print(f"[dim]Loaded from: {args.config}[/dim]\n")
    else:
        found = next((p for p in DEFAULT_CONFIG_PATHS if p.is_file()), None)
        if found is None:
            console.print("[dim]No config file found. Using defaults.[/dim]")
        else:
            console.print(f"[dim]Loaded from: {found}[/dim]\n")

    config = _load_config(args)
    console.print("[bold]Current Configuration:[/bold]\n")
    console.print(yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False))


def _config_init(output: str) -> None:
    """Initialize a new config file."""
    output_path = Path(output)

    if output_path.exists():
        console.print(f"[red]File already exists: {output_path}[/red]")
        sys.exit(1)

    default_config = RuntimeConfig().to_dict()
    default_config["state_file"] = "./plugins/state.json"

    with open(output_path, "w") as f:
        yaml.dump(default_config, f, default_flow_style=False, sort_keys=False)

    console.print(f"[green]Created config file: {output_path}[/green]")


if __name__ == "__main__":
    main()
