#!/usr/bin/env python3
"""
Shared command-line options for autodeploy CLI

Every option defaults to None so that values from the config file and the
environment are only overridden when a flag is actually given.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from typing import Annotated, Optional

import typer

from .constants import VALID_PLATFORMS


Environment = Annotated[
    Optional[str],
    typer.Option("--environment", "-e", help="Target environment name"),
]
Platform = Annotated[
    Optional[str],
    typer.Option(
        "--deployment-type", "-p", help=f"Deployment platform: {', '.join(VALID_PLATFORMS)}"
    ),
]
AppName = Annotated[
    Optional[str], typer.Option("--app-name", "-a", help="Application name")
]
AuthToken = Annotated[
    Optional[str],
    typer.Option("--github-token", help="GitHub token for deployment status updates"),
]
DockerImage = Annotated[
    Optional[str], typer.Option("--docker-image", help="Docker image to deploy")
]
K8sManifest = Annotated[
    Optional[str], typer.Option("--k8s-manifest", help="Kubernetes manifest path")
]
ServerlessConfig = Annotated[
    Optional[str], typer.Option("--serverless-config", help="Serverless config path")
]
HealthCheckUrl = Annotated[
    Optional[str], typer.Option("--health-check-url", help="URL checked after deployment")
]
HealthCheckTimeout = Annotated[
    Optional[int],
    typer.Option("--health-check-timeout", help="Per-attempt health check timeout (30-1800s)"),
]
RollbackOnFailure = Annotated[
    Optional[bool],
    typer.Option(
        "--rollback-on-failure/--no-rollback-on-failure",
        help="Roll back when the health check fails",
    ),
]
NotificationWebhook = Annotated[
    Optional[str], typer.Option("--notification-webhook", help="Webhook for status events")
]
SlackToken = Annotated[Optional[str], typer.Option("--slack-token", help="Slack bot token")]
SlackChannel = Annotated[
    Optional[str], typer.Option("--slack-channel", help="Slack channel for notifications")
]
AwsRegion = Annotated[Optional[str], typer.Option("--aws-region", help="AWS region")]
AwsAccessKeyId = Annotated[
    Optional[str], typer.Option("--aws-access-key-id", help="AWS access key id")
]
AwsSecretAccessKey = Annotated[
    Optional[str], typer.Option("--aws-secret-access-key", help="AWS secret access key")
]
ConfigFile = Annotated[
    Optional[str],
    typer.Option("--config-file", "-f", help="YAML/JSON file with deployment inputs"),
]
SummaryOutput = Annotated[
    Optional[str], typer.Option("--summary-output", "-s", help="Output file for summary JSON")
]
LiveOutput = Annotated[
    bool, typer.Option("--live-output", "-l", help="Print tool output in real-time")
]
Verbose = Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging")]
