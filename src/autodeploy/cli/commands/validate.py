#!/usr/bin/env python3
"""
Validate command for autodeploy CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from typing import Annotated

import typer

from autodeploy.core.errors import AutoDeployError, handle_error
from autodeploy.deployment.factory import DeployerFactory

from .. import options
from ..constants import ExitCode
from ..utils import console, setup_logging, collect_cli_values, display_request_panel
from ..validators import load_request


def validate(
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
    check_platform: Annotated[
        bool,
        typer.Option(
            "--check-platform",
            help="Also check the platform tool and artifact without deploying",
        ),
    ] = False,
    verbose: options.Verbose = False,
) -> None:
    """
    🔍 Validate deployment inputs without deploying.
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
    display_request_panel(request, "Validated Configuration")

    if check_platform:
        try:
            DeployerFactory.create(request).validate()
        except AutoDeployError as e:
            handle_error(e)
            raise typer.Exit(ExitCode.INVALID_ARGS)
        console.print(f"✅ [green]{request.platform} tool and artifact are available[/green]")

    console.print("✅ [bold green]Configuration is valid[/bold green]")
