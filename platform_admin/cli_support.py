"""Shared utilities for platform-admin CLI modules."""
from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from platform_admin.core.config import get_config
from platform_admin.core.template_catalog import TemplateCatalog
from platform_admin.core.tiers import Tier, parse_tier


def resolve_project_dir(project_dir: Optional[str]) -> Path:
    """Resolve a project directory argument against the current directory."""
    return (Path.cwd() / (project_dir or ".")).resolve()


def parse_tier_option(tier: Optional[str]) -> Optional[Tier]:
    """Validate a --tier value; None means "keep the project's tier"."""
    if tier is None:
        return None
    return parse_tier(tier)


def get_catalog(templates_dir: Optional[str] = None) -> TemplateCatalog:
    return TemplateCatalog(Path(templates_dir) if templates_dir else None)


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Enable file logging when --log-file or PLATFORM_ADMIN_LOG_FILE names a file."""
    config = get_config()
    target = log_file or config.log_file
    if not target:
        return

    from platform_admin.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=target, verbose=verbose or config.verbose)


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> NoReturn:
    """Print an error and exit.

    The first line of the message is the error itself; any further lines are
    hints (e.g. the command to run instead) and are printed dimmed.

    Args:
        e: Exception to report
        console: Rich console for output
        verbose: Also print the traceback
        exit_code: Exit code to use
    """
    headline, _, hint = str(e).partition("\n")
    console.print(f"[red]Error:[/red] {escape(headline)}")
    if hint:
        console.print(f"[dim]{escape(hint)}[/dim]")
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def print_success(console: Console, message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")


def print_warning(console: Console, message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def print_info(console: Console, message: str) -> None:
    console.print(f"[cyan]ℹ[/cyan] {escape(message)}")
