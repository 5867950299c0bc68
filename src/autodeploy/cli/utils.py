#!/usr/bin/env python3
"""
Utility functions for autodeploy CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import json
import logging
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from autodeploy.core.config import DeploymentRequest
from autodeploy.core.errors import ErrorHandler, set_error_handler
from autodeploy.orchestration.deploy_orchestrator import DeploymentReport
from .constants import ExitCode, SECRET_FIELDS


# Initialize Rich console
console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Setup Rich logging configuration and unified error handler."""
    log_level = logging.DEBUG if verbose else logging.INFO

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=verbose,
        markup=True,
        rich_tracebacks=True,
    )

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
        force=True,
    )

    error_handler = ErrorHandler(console=console, verbose=verbose)
    set_error_handler(error_handler)


def collect_cli_values(**kwargs: Any) -> Dict[str, Any]:
    """Drop options that were not given so lower config layers show through."""
    return {key: value for key, value in kwargs.items() if value is not None}


def mask_secret(value: Optional[str]) -> str:
    if not value:
        return "-"
    return "****" if len(value) <= 8 else f"{value[:4]}****"


def display_request_panel(request: DeploymentRequest, title: str) -> None:
    """Show the effective configuration, masking credentials."""
    lines = []
    for name in DeploymentRequest.field_names():
        value = getattr(request, name)
        if value is None or value == "":
            continue
        shown = mask_secret(str(value)) if name in SECRET_FIELDS else value
        lines.append(f"{name}: [yellow]{shown}[/yellow]")

    console.print(Panel("\n".join(lines), title=title, border_style="cyan"))


def save_summary_with_feedback(
    summary: Dict, output_path: Optional[str], summary_type: str
) -> None:
    """Save summary to file with user feedback."""
    if output_path:
        try:
            with open(output_path, "w") as f:
                json.dump(summary, f, indent=2)
            console.print(
                f"💾 {summary_type} summary saved to: [cyan]{output_path}[/cyan]"
            )
        except IOError as e:
            console.print(f"❌ Failed to save {summary_type} summary: [red]{e}[/red]")
            raise typer.Exit(ExitCode.FAILURE)


def display_report_table(report: DeploymentReport, request: DeploymentRequest) -> None:
    """Display the deployment result as a table."""
    table = Table(title="Deployment Results", show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    status = "✅ Success" if report.is_success else "❌ Failed"
    table.add_row("Status", status)
    table.add_row("Application", request.app_name)
    table.add_row("Environment", request.environment)
    table.add_row("Platform", request.platform)

    if report.is_success:
        table.add_row("Deployment ID", report.deployment_id)
        table.add_row("Deployment URL", report.deployment_url)
    else:
        table.add_row("Error", f"[red]{escape(report.error_message or '')}[/red]")

    if report.health is not None:
        health = "✅ Healthy" if report.health.healthy else f"❌ {escape(report.health.error or '')}"
        table.add_row("Health", health)
    if report.rollback_outcome is not None:
        rollback = (
            "✅ Rolled back"
            if report.rollback_outcome.success
            else f"❌ {escape(report.rollback_outcome.error or '')}"
        )
        table.add_row("Rollback", rollback)

    table.add_row("Time", report.deployment_time)
    console.print(table)

