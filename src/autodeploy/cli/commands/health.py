#!/usr/bin/env python3
"""
Health check command for autodeploy CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from typing import Annotated

import typer
from rich.markup import escape

from autodeploy.services.health import HealthVerifier

from .. import options
from ..constants import ExitCode, DEFAULT_HEALTH_RETRY_DELAY
from ..utils import console, setup_logging, collect_cli_values, save_summary_with_feedback
from ..validators import load_request


def health_check(
    environment: options.Environment = None,
    deployment_type: options.Platform = None,
    app_name: options.AppName = None,
    github_token: options.AuthToken = None,
    docker_image: options.DockerImage = None,
    k8s_manifest: options.K8sManifest = None,
    serverless_config: options.ServerlessConfig = None,
    health_check_url: options.HealthCheckUrl = None,
    health_check_timeout: options.HealthCheckTimeout = None,
    config_file: options.ConfigFile = None,
    health_retry_delay: Annotated[
        float,
        typer.Option("--health-retry-delay", help="Seconds between health check attempts"),
    ] = DEFAULT_HEALTH_RETRY_DELAY,
    summary_output: options.SummaryOutput = None,
    verbose: options.Verbose = False,
) -> None:
    """
    🏥 Check the health check URL of a deployed application.
    """
    setup_logging(verbose)

    request = load_request(
        collect_cli_values(
            environment=environment,
            deployment_type=deployment_type,
            app_name=app_name,
            github_token=github_token,
            docker_image=docker_image,
            k8s_manifest=k8s_manifest,
            serverless_config=serverless_config,
            health_check_url=health_check_url,
            health_check_timeout=health_check_timeout,
        ),
        config_file,
    )

    if not request.health_check_url:
        console.print("ℹ️  [yellow]No health check URL configured, nothing to check[/yellow]")

    verdict = HealthVerifier(request, retry_delay=health_retry_delay).perform_health_check()
    save_summary_with_feedback(verdict.to_dict(), summary_output, "Health check")

    if verdict.healthy:
        if verdict.response_time_ms is not None:
            console.print(
                f"✅ [bold green]Healthy[/bold green] "
                f"(HTTP {verdict.status_code}, {verdict.response_time_ms:.0f} ms)"
            )
        raise typer.Exit(ExitCode.SUCCESS)

    console.print(f"❌ [bold red]Unhealthy: {escape(verdict.error or '')}[/bold red]")
    raise typer.Exit(ExitCode.HEALTH_FAILURE)
