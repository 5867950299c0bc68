#!/usr/bin/env python3
"""
Deploy command for autodeploy CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import os
from typing import Annotated

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn

from autodeploy.core.console import Console as ToolConsole
from autodeploy.core.errors import AutoDeployError, HealthCheckFailure, handle_error
from autodeploy.orchestration.deploy_orchestrator import DeployOrchestrator, write_ci_outputs

from .. import options
from ..constants import ExitCode, DEFAULT_HEALTH_RETRY_DELAY, GITHUB_OUTPUT_ENV
from ..utils import (
    console,
    setup_logging,
    collect_cli_values,
    display_request_panel,
    display_report_table,
    save_summary_with_feedback,
)
from ..validators import load_request


def deploy(
    environment: options.Environment = None,
    deployment_type: options.Platform = None,
    app_name: options.AppName = None,
    github_token: options.AuthToken = None,
    docker_image: options.DockerImage = None,
    k8s_manifest: options.K8sManifest = None,
    serverless_config: options.ServerlessConfig = None,
    health_check_url: options.HealthCheckUrl = None,
    health_check_timeout: options.HealthCheckTimeout = None,
    rollback_on_failure: options.RollbackOnFailure = None,
    notification_webhook: options.NotificationWebhook = None,
    slack_token: options.SlackToken = None,
    slack_channel: options.SlackChannel = None,
    aws_region: options.AwsRegion = None,
    aws_access_key_id: options.AwsAccessKeyId = None,
    aws_secret_access_key: options.AwsSecretAccessKey = None,
    config_file: options.ConfigFile = None,
    health_retry_delay: Annotated[
        float,
        typer.Option("--health-retry-delay", help="Seconds between health check attempts"),
    ] = DEFAULT_HEALTH_RETRY_DELAY,
    summary_output: options.SummaryOutput = None,
    live_output: options.LiveOutput = False,
    verbose: options.Verbose = False,
) -> None:
    """
    🚀 Deploy an application, verify its health and roll back on failure.
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
            rollback_on_failure=rollback_on_failure,
            notification_webhook=notification_webhook,
            slack_token=slack_token,
            slack_channel=slack_channel,
            aws_region=aws_region,
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
        ),
        config_file,
    )
    display_request_panel(request, "Deployment Configuration")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Initializing deploy orchestrator...", total=None)
            orchestrator = DeployOrchestrator(
                request,
                console=ToolConsole(live_output=live_output),
                health_retry_delay=health_retry_delay,
            )
            progress.update(task, description=f"Deploying {request.app_name}...")
            report = orchestrator.execute()
            progress.update(task, description="Deployment finished!")

    except AutoDeployError as e:
        handle_error(e)
        raise typer.Exit(ExitCode.DEPLOY_FAILURE)

    write_ci_outputs(report.to_outputs(), os.environ.get(GITHUB_OUTPUT_ENV))
    display_report_table(report, request)
    save_summary_with_feedback(report.to_dict(), summary_output, "Deployment")

    if report.is_success:
        console.print(
            f"🎉 [bold green]{request.app_name} deployed to {request.environment}![/bold green]"
        )
        raise typer.Exit(ExitCode.SUCCESS)

    if report.error is not None:
        handle_error(report.error)
    if isinstance(report.error, HealthCheckFailure):
        raise typer.Exit(ExitCode.HEALTH_FAILURE)
    raise typer.Exit(ExitCode.DEPLOY_FAILURE)
