#!/usr/bin/env python3
"""platform-admin CLI - Scaffold and upgrade platform projects."""

import typer
from rich.console import Console

from platform_admin.cli_project_commands import register_project_commands
from platform_admin.cli_status_commands import register_status_commands
from platform_admin.core.logger import get_logger

app = typer.Typer(
    name="platform-admin",
    help="""platform-admin - Scaffold and upgrade platform projects

Generated files are tracked by hash so upgrades never overwrite your edits.

Quick start:
  platform-admin scaffold my-app --tier standard   # New project
  platform-admin upgrade my-app --dry-run           # Preview an upgrade
  platform-admin upgrade my-app                     # Apply it
  platform-admin adopt old-app --project-name "Old App"  # Track an old scaffold
""",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

# Attach modular subcommands
register_project_commands(app, console)
register_status_commands(app, console)

if __name__ == "__main__":
    app()
