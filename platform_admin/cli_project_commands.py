"""Project lifecycle CLI commands - scaffold, upgrade, adopt."""
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from platform_admin.core.errors import ScaffoldError

# Module-level console instance (will be set by register function)
console: Console = Console()


def scaffold(
    project_name: str = typer.Argument(..., help="Name of the project to create"),
    tier: str = typer.Option("minimal", "--tier", "-t", help="Infrastructure tier (minimal, standard, full)"),
    project_slug: Optional[str] = typer.Option(None, "--project-slug", help="Slug for resource naming (default: derived from name)"),
    github_org: str = typer.Option("", "--github-org", help="GitHub organisation for error issue creation"),
    gatus_url: str = typer.Option("", "--gatus-url", help="Status page URL for heartbeat monitoring"),
    default_assignee: str = typer.Option("", "--default-assignee", help="Default GitHub assignee for error issues"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", "-o", help="Parent directory (default: current directory)"),
    templates_dir: Optional[str] = typer.Option(None, "--templates-dir", help="Use a different template set"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Scaffold a new platform project."""
    from platform_admin.cli_support import (
        get_catalog,
        handle_cli_error,
        parse_tier_option,
        print_success,
        resolve_project_dir,
        setup_file_logging,
    )
    from platform_admin.scaffold import ScaffoldManager, ScaffoldOptions

    setup_file_logging(log_file=log_file, verbose=verbose)

    try:
        options = ScaffoldOptions(
            project_name=project_name,
            project_slug=project_slug,
            tier=parse_tier_option(tier),
            github_org=github_org,
            gatus_url=gatus_url,
            default_assignee=default_assignee,
        )
        target = resolve_project_dir(output_dir) / (project_slug or project_name)

        console.print(f"\n[bold]Project[/bold]: {project_name}")
        console.print(f"[bold]Tier[/bold]: {options.tier}")
        console.print(f"[bold]Output[/bold]: {target}\n")

        manifest = ScaffoldManager(get_catalog(templates_dir)).scaffold_project(options, target)
    except (ScaffoldError, ValueError) as e:
        handle_cli_error(e, console, verbose)

    print_success(console, f"Created {len(manifest.files)} files in {target}")
    console.print("\n[cyan]Next steps:[/cyan]")
    console.print(f"  cd {target.name}")
    console.print("  npm install")
    console.print(f"  npx wrangler d1 migrations apply {manifest.context.project_slug}-metrics --remote")


def upgrade(
    project_dir: Optional[str] = typer.Argument(".", help="Path to the project directory"),
    tier: Optional[str] = typer.Option(None, "--tier", "-t", help="Upgrade to a higher tier (minimal -> standard -> full)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would change without writing files"),
    templates_dir: Optional[str] = typer.Option(None, "--templates-dir", help="Use a different template set"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Upgrade a scaffolded project to the current template version.

    Files you have edited are never overwritten. New scaffold migrations are
    renumbered after the highest migration already in the project.
    """
    from platform_admin.cli_support import (
        get_catalog,
        handle_cli_error,
        parse_tier_option,
        print_success,
        print_warning,
        resolve_project_dir,
        setup_file_logging,
    )
    from platform_admin.core.upgrade import UpgradeOptions, upgrade as run_upgrade

    setup_file_logging(log_file=log_file, verbose=verbose)

    target = resolve_project_dir(project_dir)
    console.print(f"\n[bold]Upgrading[/bold]: {target}")
    if tier:
        console.print(f"[bold]Target tier[/bold]: {tier}")
    if dry_run:
        console.print("[yellow]DRY RUN[/yellow] - no files will be written")

    try:
        options = UpgradeOptions(tier=parse_tier_option(tier), dry_run=dry_run)
        result = run_upgrade(target, options, catalog=get_catalog(templates_dir))
    except (ScaffoldError, ValueError) as e:
        handle_cli_error(e, console, verbose)

    if result.is_empty():
        print_success(console, "Already up to date.")
        return

    _display_upgrade_result(result)

    console.print(
        f"\n[green]{len(result.created)} created[/green], "
        f"[cyan]{len(result.updated)} updated[/cyan], "
        f"[yellow]{len(result.skipped)} skipped[/yellow], "
        f"[yellow]{len(result.removed)} removed[/yellow], "
        f"[green]{len(result.migrations)} migrations[/green]"
    )
    for warning in result.warnings:
        print_warning(console, warning)

    if result.migrations and not dry_run:
        console.print("\n[bold]Run migrations:[/bold]")
        console.print("  npx wrangler d1 migrations apply YOUR_DB --remote")


def adopt(
    project_dir: Optional[str] = typer.Argument(".", help="Path to the project directory"),
    project_name: str = typer.Option(..., "--project-name", help="Project name (as used during scaffold)"),
    project_slug: Optional[str] = typer.Option(None, "--project-slug", help="Project slug (default: derived from name)"),
    tier: str = typer.Option("minimal", "--tier", "-t", help="Infrastructure tier (minimal, standard, full)"),
    github_org: str = typer.Option("", "--github-org", help="GitHub organisation"),
    gatus_url: str = typer.Option("", "--gatus-url", help="Status page URL"),
    default_assignee: str = typer.Option("", "--default-assignee", help="Default GitHub assignee"),
    from_version: Optional[str] = typer.Option(None, "--from-version", help="SDK version that originally generated the scaffold"),
    templates_dir: Optional[str] = typer.Option(None, "--templates-dir", help="Use a different template set"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
):
    """Add upgrade support to a project scaffolded without a manifest."""
    from platform_admin.cli_support import (
        get_catalog,
        handle_cli_error,
        parse_tier_option,
        print_info,
        print_success,
        resolve_project_dir,
        setup_file_logging,
    )
    from platform_admin.core.adopt import AdoptOptions, adopt as run_adopt

    setup_file_logging(log_file=log_file, verbose=verbose)

    target = resolve_project_dir(project_dir)
    console.print(f"\n[bold]Adopting[/bold]: {target}")

    try:
        options = AdoptOptions(
            project_name=project_name,
            project_slug=project_slug,
            tier=parse_tier_option(tier),
            github_org=github_org,
            gatus_url=gatus_url,
            default_assignee=default_assignee,
            from_version=from_version,
        )
        manifest = run_adopt(target, options, catalog=get_catalog(templates_dir))
    except (ScaffoldError, ValueError) as e:
        handle_cli_error(e, console, verbose)

    print_success(console, f"Tracking {len(manifest.files)} files (tier {manifest.tier}, SDK {manifest.sdk_version})")
    print_info(console, "You can now run: platform-admin upgrade")


def _display_upgrade_result(result):
    """Display a table of every reported file."""
    labels = [
        ("created", "[green]create[/green]"),
        ("updated", "[cyan]update[/cyan]"),
        ("skipped", "[yellow]skip (user modified)[/yellow]"),
        ("removed", "[yellow]removed from template set[/yellow]"),
        ("migrations", "[green]new migration[/green]"),
    ]

    table = Table(show_header=True, header_style="bold")
    table.add_column("Action")
    table.add_column("Path")

    for attribute, label in labels:
        for path in getattr(result, attribute):
            table.add_row(label, path)

    console.print(table)


def register_project_commands(app: typer.Typer, shared_console: Console):
    """Register project lifecycle commands with the main Typer app.

    Args:
        app: Main Typer application
        shared_console: Shared Rich console instance
    """
    global console
    console = shared_console

    app.command()(scaffold)
    app.command()(upgrade)
    app.command()(adopt)
