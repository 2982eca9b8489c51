"""CLI module for syncing schema definition files with a live engine.

Provides commands for listing profiles, showing drift, and pushing
definitions in either direction.

Usage:
    csl-sync profiles
    csl-sync diff --profile dev
    csl-sync push --profile dev --root schema            # dry run
    csl-sync push --profile dev --root schema --confirm
    csl-sync pull --profile dev --root schema --delete --confirm

Commands:
    profiles  - List available profiles
    diff      - Show drift between the files and the live engine
    push      - Apply file definitions to the live engine
    pull      - Write live definitions to the files
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from csl_sync.adapters.base import SchemaClient
from csl_sync.config.loader import load_sync_config
from csl_sync.config.models import SyncConfig
from csl_sync.errors import SyncError
from csl_sync.factory import create_client, get_profile
from csl_sync.schema.comparator import compare_definitions
from csl_sync.schema.models import DriftReport, SchemaObject, SyncResult, SyncTarget
from csl_sync.schema.store import load_definitions
from csl_sync.schema.sync import SyncEngine

console = Console()


# ============================================================================
# Helpers
# ============================================================================


def _connect(
    profile_name: str, config: SyncConfig, env_prefix: str
) -> tuple[SchemaClient, list[SchemaObject]] | None:
    """Create a client for the profile and list the live definitions.

    Prints the error and returns None when the engine cannot be reached
    (unknown dialect, bad URL, authentication or network failure).
    """
    try:
        client = create_client(profile_name, config, env_prefix)
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] Connection failed: {e}")
        return None

    try:
        remote: list[SchemaObject] = [*client.list_tables(), *client.list_functions()]
    except Exception as e:
        client.close()
        console.print(f"\n[bold red]Error:[/bold red] Connection failed: {e}")
        return None

    return client, remote


def _plan(
    report: DriftReport,
    source: list[SchemaObject],
    stale: list[SchemaObject],
    to_remote: bool,
) -> tuple[list[SchemaObject], list[SchemaObject]]:
    """Split drift into objects to push and objects to retract.

    Args:
        report: Drift between files (local) and engine (remote).
        source: Objects on the side being copied from.
        stale: Objects on the side being written to.
        to_remote: True when files are the source.

    Returns:
        Tuple of (objects to push, objects to retract).
    """
    source_index = {(obj.kind, obj.name): obj for obj in source}
    stale_index = {(obj.kind, obj.name): obj for obj in stale}

    missing = report.only_local if to_remote else report.only_remote
    extra = report.only_remote if to_remote else report.only_local

    to_push = [source_index[(e.kind, e.name)] for e in [*missing, *report.modified]]
    to_retract = [stale_index[(e.kind, e.name)] for e in extra]
    return to_push, to_retract


def _print_results(results: list[SyncResult]) -> None:
    table = Table(title="Sync Results", show_header=True, header_style="bold")
    table.add_column("", width=2)
    table.add_column("Action")
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("Detail")

    for result in results:
        marker = "[bold green]v[/bold green]" if result.success else "[bold red]x[/bold red]"
        detail = result.error or result.path or ""
        if result.cleanup_warnings:
            detail = f"{detail} [yellow]({len(result.cleanup_warnings)} cleanup warnings)[/yellow]"
        table.add_row(marker, result.action, result.kind.value, result.name, detail)

    console.print(table)

    for result in results:
        for warning in result.cleanup_warnings:
            console.print(f"[yellow]warning:[/yellow] {warning}")


def _resolve(args: argparse.Namespace) -> tuple[SyncConfig, Path]:
    config = load_sync_config(Path(args.config) if args.config else None)
    root = Path(args.root) if args.root else Path(config.root_folder)
    return config, root


# ============================================================================
# Commands
# ============================================================================


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from sync.toml.

    Returns:
        0 on success, 1 if sync.toml not found.
    """
    try:
        config = load_sync_config(Path(args.config) if args.config else None)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    table = Table(title="Sync Profiles", show_header=True, header_style="bold")
    table.add_column("Profile")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        table.add_row(name, profile.description or "")

    console.print(table)
    return 0


def cmd_diff(args: argparse.Namespace) -> int:
    """Show drift between the definition files and the live engine.

    Returns:
        0 if no drift, 1 if drift or on error.
    """
    try:
        config, root = _resolve(args)
        profile_name, _ = get_profile(args.profile, config, args.env_prefix)
        local = load_definitions(root)
    except (FileNotFoundError, SyncError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    console.print(
        f"Comparing [bold]{root}[/bold] with profile "
        f"[bold cyan]{profile_name}[/bold cyan]...",
        style="dim",
    )

    connected = _connect(profile_name, config, args.env_prefix)
    if connected is None:
        return 1
    client, remote = connected
    client.close()

    report = compare_definitions(local, remote, config.use_legacy)
    console.print(report.format_report())
    return 1 if report.has_drift else 0


def _run_sync(args: argparse.Namespace, to_remote: bool) -> int:
    try:
        config, root = _resolve(args)
        profile_name, _ = get_profile(args.profile, config, args.env_prefix)
        local = load_definitions(root)
    except (FileNotFoundError, SyncError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    connected = _connect(profile_name, config, args.env_prefix)
    if connected is None:
        return 1
    client, remote = connected

    try:
        report = compare_definitions(local, remote, config.use_legacy)

        if to_remote:
            to_push, to_retract = _plan(report, local, remote, to_remote=True)
            target = SyncTarget.REMOTE
        else:
            to_push, to_retract = _plan(report, remote, local, to_remote=False)
            target = SyncTarget.FILE

        if not args.delete:
            to_retract = []

        if not to_push and not to_retract:
            console.print("[bold green]v[/bold green] Nothing to sync")
            return 0

        direction = "files -> remote" if to_remote else "remote -> files"
        console.print(f"\n[bold]Sync plan ({direction}):[/bold]")
        for obj in to_push:
            console.print(f"  [green]push[/green]    {obj.kind.value} {obj.name}")
        for obj in to_retract:
            console.print(f"  [red]retract[/red] {obj.kind.value} {obj.name}")

        if not args.confirm:
            console.print("\n[dim]Dry run. Re-run with[/dim] [cyan]--confirm[/cyan] [dim]to apply.[/dim]")
            return 0

        engine = SyncEngine(root, client=client, use_legacy=config.use_legacy)
        results = engine.push_many(to_push, target) + engine.retract_many(to_retract, target)
    finally:
        client.close()

    console.print()
    _print_results(results)
    return 0 if all(r.success for r in results) else 1


def cmd_push(args: argparse.Namespace) -> int:
    """Apply file definitions to the live engine."""
    return _run_sync(args, to_remote=True)


def cmd_pull(args: argparse.Namespace) -> int:
    """Write live definitions to the definition files."""
    return _run_sync(args, to_remote=False)


# ============================================================================
# Main entry point
# ============================================================================


def _add_sync_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--profile", "-p", help="Profile from sync.toml")
    parser.add_argument("--root", help="Root folder of the definition files")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="csl-sync",
        description="Sync schema definition files with a live engine",
    )
    parser.add_argument(
        "--config",
        help="Path to sync.toml (default: ./sync.toml)",
    )
    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix APP_ reads APP_SYNC_PROFILE)"
        ),
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log each file and command operation",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # profiles command
    p_profiles = subparsers.add_parser("profiles", help="List available profiles")
    p_profiles.set_defaults(func=cmd_profiles)

    # diff command
    p_diff = subparsers.add_parser(
        "diff",
        help="Show drift between the files and the live engine",
    )
    _add_sync_options(p_diff)
    p_diff.set_defaults(func=cmd_diff)

    # push / pull commands
    for name, func, help_text in (
        ("push", cmd_push, "Apply file definitions to the live engine"),
        ("pull", cmd_pull, "Write live definitions to the files"),
    ):
        p_sync = subparsers.add_parser(name, help=help_text)
        _add_sync_options(p_sync)
        p_sync.add_argument(
            "--delete",
            action="store_true",
            help="Also remove objects that exist only on the destination side",
        )
        p_sync.add_argument(
            "--confirm",
            action="store_true",
            help="Actually perform the sync (default is a dry run)",
        )
        p_sync.set_defaults(func=func)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
