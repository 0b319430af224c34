"""Read-only CLI commands - status, version."""
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from platform_admin import __version__
from platform_admin.core.errors import ScaffoldError

# Module-level console instance (will be set by register function)
console: Console = Console()


def status(
    project_dir: Optional[str] = typer.Argument(".", help="Path to the project directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show every drifted file"),
):
    """Show the manifest of a project and which tracked files changed."""
    from platform_admin.cli_support import (
        handle_cli_error,
        print_success,
        print_warning,
        resolve_project_dir,
    )
    from platform_admin.core.drift_engine import DriftEngine, summarize_drift_report
    from platform_admin.core.errors import ManifestMissingError
    from platform_admin.core.manifest import MANIFEST_FILENAME, read_manifest

    target = resolve_project_dir(project_dir)

    try:
        manifest = read_manifest(target)
        if manifest is None:
            raise ManifestMissingError(
                f"No {MANIFEST_FILENAME} found in {target}. Run: platform-admin adopt {target}"
            )
    except ScaffoldError as e:
        handle_cli_error(e, console, verbose)

    console.print(f"\n[bold]Project[/bold]: {manifest.context.project_name} ({manifest.context.project_slug})")
    console.print(f"[bold]Tier[/bold]: {manifest.tier}")
    console.print(f"[bold]SDK version[/bold]: {manifest.sdk_version}")
    console.print(f"[bold]Generated[/bold]: {manifest.generated_at}")
    console.print(f"[bold]Tracked files[/bold]: {len(manifest.files)}")
    console.print(f"[bold]Highest scaffold migration[/bold]: {manifest.highest_scaffold_migration}")

    if manifest.sdk_version != __version__:
        print_warning(console, f"Templates are at {__version__}. Run: platform-admin upgrade {project_dir}")

    report = DriftEngine(target, manifest).run()
    if report.is_clean():
        print_success(console, "All tracked files match the manifest")
        return

    summary = summarize_drift_report(report, limit=len(report.items) if verbose else 5)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Status")
    table.add_column("Path")
    for sample in summary["samples"]:
        table.add_row(f"[yellow]{sample['status']}[/yellow]", sample["path"])
    console.print(table)

    counts = ", ".join(f"{count} {state}" for state, count in sorted(summary["counts"].items()))
    console.print(f"\n{counts}, {summary['clean']} unchanged")
    hidden = len(report.items) - len(summary["samples"])
    if hidden:
        console.print(f"[dim]... and {hidden} more (use --verbose)[/dim]")


def version():
    """Show platform-admin version."""
    console.print(f"platform-admin v{__version__}")


def register_status_commands(app: typer.Typer, shared_console: Console):
    """Register read-only commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(status)
    app.command()(version)
