"""CLI for tailor-shop backup export and restore.

Usage:
    tailor-backup profiles
    tailor-backup export
    tailor-backup export --output backups/today.json --share
    tailor-backup validate backups/tailor-backup-2024-01-01.json
    tailor-backup restore backups/tailor-backup-2024-01-01.json --dry-run
    tailor-backup --profile shop restore backups/tailor-backup-2024-01-01.json --yes

Commands:
    profiles  - List configured store profiles
    export    - Export all customers and orders to a JSON backup
    validate  - Check a backup file offline (no store access)
    restore   - Replace all store data with the contents of a backup
"""

import argparse
import asyncio
import logging
import sys
import webbrowser
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from tailor_backup.adapters.base import RecordStore
from tailor_backup.backup.exporter import (
    build_share_message,
    build_share_url,
    export_snapshot,
    write_snapshot,
)
from tailor_backup.backup.outcomes import RestoreError
from tailor_backup.backup.restorer import load_backup_bytes, prepare_restore, restore_backup
from tailor_backup.config.loader import load_config
from tailor_backup.config.models import AppConfig, BackupSettings
from tailor_backup.factory import ProfileNotFoundError, get_store

console = Console()


# ============================================================================
# Helpers
# ============================================================================


def _configure_logging(verbosity: int) -> None:
    """Route library logging through rich (stderr)."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _backup_settings(args: argparse.Namespace) -> BackupSettings | None:
    """Backup settings from the config file, or defaults when there is none.

    Prints the problem and returns None when the file exists but is not
    valid TOML or does not match the config schema.
    """
    try:
        return load_config(args.config).backup
    except FileNotFoundError:
        return BackupSettings()
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return None


def _open_store(args: argparse.Namespace) -> tuple[AppConfig, RecordStore] | None:
    """Load config and build the store; print the problem and return None on failure."""
    try:
        config = load_config(args.config)
        store = get_store(
            profile_name=args.profile, env_prefix=args.env_prefix, config=config
        )
    except (FileNotFoundError, ProfileNotFoundError, KeyError, ValueError, ImportError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return None
    return config, store


def _print_counts(title: str, customers: int, orders: int) -> None:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Records", style="dim")
    table.add_column("Count", justify="right")
    table.add_row("customers", str(customers))
    table.add_row("orders", str(orders))
    console.print(table)


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_export(args: argparse.Namespace) -> int:
    """Async implementation for export command.

    Args:
        args: Parsed arguments with output and share.

    Returns:
        0 on success, 1 on failure.
    """
    opened = _open_store(args)
    if opened is None:
        return 1
    config, store = opened

    console.print("Exporting customers and orders...", style="dim")
    try:
        snapshot = await export_snapshot(store)
    except Exception as e:
        console.print(f"[bold red]x[/bold red] Export failed: {escape(str(e))}")
        return 1
    finally:
        await store.close()

    try:
        path = write_snapshot(snapshot, args.output, output_dir=config.backup.output_dir)
    except OSError as e:
        console.print(f"[bold red]x[/bold red] Cannot write backup: {escape(str(e))}")
        return 1

    console.print()
    _print_counts("Backup", len(snapshot.customers), len(snapshot.orders))
    console.print(f"[bold green]v[/bold green] Backup written to [cyan]{escape(path)}[/cyan]")

    if args.share:
        if not config.backup.share_phone:
            console.print(
                "[yellow]No share_phone in \\[backup] config; skipping share link.[/yellow]"
            )
            return 0
        try:
            url = build_share_url(build_share_message(snapshot), config.backup.share_phone)
        except ValueError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            return 1
        console.print(f"Share link: {url}")
        webbrowser.open(url)

    return 0


async def _async_restore(args: argparse.Namespace) -> int:
    """Async implementation for restore command.

    Args:
        args: Parsed arguments with backup_path and dry_run.

    Returns:
        0 on success, 1 on any failure.
    """
    opened = _open_store(args)
    if opened is None:
        return 1
    config, store = opened

    try:
        result = await restore_backup(
            store,
            args.backup_path,
            max_bytes=config.backup.max_bytes,
            dry_run=args.dry_run,
        )
    finally:
        await store.close()

    console.print()
    if result.success:
        if result.dry_run:
            console.print("[bold yellow]DRY RUN[/bold yellow] - No changes made.")
        _print_counts("Restore", result.customers_restored, result.orders_restored)
        console.print(f"[bold green]v[/bold green] {escape(result.format_report())}")
        return 0

    console.print(f"[bold red]x[/bold red] {escape(result.format_report())}")
    return 1


# ============================================================================
# Sync command wrappers
# ============================================================================


def cmd_profiles(args: argparse.Namespace) -> int:
    """List configured profiles.

    Reads only the local TOML config -- no store calls.

    Returns:
        0 on success, 1 if the config file is missing or invalid.
    """
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    table = Table(title="Store Profiles", show_header=True, header_style="bold")
    table.add_column("Profile")
    table.add_column("Provider")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        marker = "[bold cyan]" + name + "[/bold cyan]" if name == args.profile else name
        table.add_row(marker, profile.provider, profile.description or "")

    console.print(table)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Export the store to a backup file.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_export(args))


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a backup file without touching the store.

    Runs the load, parse, validate and integrity stages of a restore.

    Returns:
        0 if the backup could be restored, 1 otherwise.
    """
    settings = _backup_settings(args)
    if settings is None:
        return 1
    console.print(f"Validating: {escape(args.backup_path)}")

    try:
        payload = load_backup_bytes(args.backup_path, max_bytes=settings.max_bytes)
        records = prepare_restore(
            payload, Path(args.backup_path).name, max_bytes=settings.max_bytes
        )
    except RestoreError as e:
        console.print()
        console.print(f"[bold red]x[/bold red] {escape(e.to_result().format_report())}")
        return 1

    console.print()
    _print_counts("Backup contents", len(records.customers), len(records.orders))
    console.print("[bold green]v[/bold green] Backup is valid")
    return 0


def cmd_restore(args: argparse.Namespace) -> int:
    """Restore the store from a backup file.

    Asks for confirmation unless ``--yes`` or ``--dry-run`` is given, then
    wraps the async implementation with ``asyncio.run()``.
    """
    if not args.yes and not args.dry_run:
        console.print(f"This will restore data from: [cyan]{escape(args.backup_path)}[/cyan]")
        console.print(
            "[bold yellow]WARNING:[/bold yellow] ALL existing customers and orders "
            "will be deleted first."
        )
        response = input("Continue? [y/N] ")
        if response.lower() not in ["y", "yes"]:
            console.print("Cancelled.")
            return 0

    return asyncio.run(_async_restore(args))


# ============================================================================
# Main entry point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for ``tailor-backup``."""
    parser = argparse.ArgumentParser(
        prog="tailor-backup",
        description="Backup export and restore for the tailor shop",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to tailor.toml (default: $TAILOR_CONFIG or ./tailor.toml)",
    )
    parser.add_argument(
        "--profile",
        "-p",
        default=None,
        help="Store profile to use (default: $TAILOR_PROFILE or the only profile)",
    )
    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix APP_ reads APP_TAILOR_PROFILE)"
        ),
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log progress (-v) or debug detail (-vv)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # profiles command
    p_profiles = subparsers.add_parser("profiles", help="List configured store profiles")
    p_profiles.set_defaults(func=cmd_profiles)

    # export command
    p_export = subparsers.add_parser("export", help="Export all data to a JSON backup")
    p_export.add_argument(
        "--output",
        "-o",
        default=None,
        help="Output file path (default: <output_dir>/tailor-backup-YYYY-MM-DD.json)",
    )
    p_export.add_argument(
        "--share",
        action="store_true",
        help="Open a WhatsApp share link with a backup summary",
    )
    p_export.set_defaults(func=cmd_export)

    # validate command
    p_validate = subparsers.add_parser("validate", help="Validate a backup file offline")
    p_validate.add_argument("backup_path", help="Path to backup JSON file")
    p_validate.set_defaults(func=cmd_validate)

    # restore command
    p_restore = subparsers.add_parser(
        "restore", help="Delete all data and restore it from a backup"
    )
    p_restore.add_argument("backup_path", help="Path to backup JSON file")
    p_restore.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and count without changing the store",
    )
    p_restore.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Skip confirmation prompt",
    )
    p_restore.set_defaults(func=cmd_restore)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
