#!/usr/bin/env python3
"""
Rollback command for autodeploy CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import os

import typer
from rich.markup import escape

from autodeploy.core.console import Console as ToolConsole
from autodeploy.core.errors import AutoDeployError, handle_error
from autodeploy.deployment.coordinator import DeploymentCoordinator
from autodeploy.orchestration.deploy_orchestrator import (
    STATUS_FAILED,
    STATUS_SUCCESS,
    write_ci_outputs,
)

from .. import options
from ..constants import ExitCode, GITHUB_OUTPUT_ENV
from ..utils import (
    console,
    setup_logging,
    collect_cli_values,
    display_request_panel,
    save_summary_with_feedback,
)
from ..validators import load_request


def rollback(
    environment: options.Environment = None,
    deployment_type: options.Platform = None,
    app_name: options.AppName = None,
    github_token: options.AuthToken = None,
    docker_image: options.DockerImage = None,
    k8s_manifest: options.K8sManifest = None,
    serverless_config: options.ServerlessConfig = None,
    aws_region: options.AwsRegion = None,
    aws_access_key_id: options.AwsAccessKeyId = None,
    aws_secret_access_key: options.AwsSecretAccessKey = None,
    config_file: options.ConfigFile = None,
    summary_output: options.SummaryOutput = None,
    live_output: options.LiveOutput = False,
    verbose: options.Verbose = False,
) -> None:
    """
    ⏪ Restore the previous version of a deployed application.
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
            aws_region=aws_region,
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
        ),
        config_file,
    )
    display_request_panel(request, "Rollback Configuration")

    try:
        coordinator = DeploymentCoordinator(request, console=ToolConsole(live_output=live_output))
        outcome = coordinator.rollback()
    except AutoDeployError as e:
        handle_error(e)
        raise typer.Exit(ExitCode.ROLLBACK_FAILURE)

    status = STATUS_SUCCESS if outcome.success else STATUS_FAILED
    outputs = {"deployment_status": status, "deployment_id": outcome.deployment_id}
    if not outcome.success:
        outputs["error_message"] = outcome.error or ""
    write_ci_outputs(outputs, os.environ.get(GITHUB_OUTPUT_ENV))
    save_summary_with_feedback(outcome.to_dict(), summary_output, "Rollback")

    if outcome.success:
        console.print(
            f"⏪ [bold green]Rolled back {request.app_name} in {request.environment} "
            f"({outcome.deployment_id})[/bold green]"
        )
        raise typer.Exit(ExitCode.SUCCESS)

    console.print(f"💥 [bold red]Rollback failed: {escape(outcome.error or '')}[/bold red]")
    raise typer.Exit(ExitCode.ROLLBACK_FAILURE)
