#!/usr/bin/env python3
"""
Validation functions for autodeploy CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
from typing import Any, Dict, Optional

import typer

from autodeploy.core.config import DeploymentRequest, is_valid_url
from autodeploy.core.errors import ConfigurationError, handle_error
from autodeploy.deployment.config_loader import ConfigLoader
from autodeploy.services.notifications import NotificationService
from .constants import ExitCode


logger = logging.getLogger(__name__)


def load_request(
    cli_values: Dict[str, Any], config_file: Optional[str] = None
) -> DeploymentRequest:
    """
    Merge configuration layers and validate them into a DeploymentRequest.

    Args:
        cli_values: Options given on the command line
        config_file: Optional YAML/JSON file with deployment inputs

    Returns:
        The validated request

    Raises:
        typer.Exit: If configuration is invalid
    """
    values: Dict[str, Any] = {}
    try:
        values = ConfigLoader.load(cli_values=cli_values, config_file=config_file)
        return ConfigLoader.build_request(values)
    except ConfigurationError as e:
        handle_error(e)
        notify_configuration_failure(values, e.message)
        raise typer.Exit(ExitCode.INVALID_ARGS)


def _text(values: Dict[str, Any], key: str) -> str:
    value = values.get(key)
    return value.strip() if isinstance(value, str) else ""


def notify_configuration_failure(values: Dict[str, Any], message: str) -> bool:
    """
    Best-effort failure notification for a configuration that did not validate.

    Only the application identity and the Slack and webhook targets are used.
    The GitHub deployment status is never touched without a valid request.

    Returns:
        True if a notification was dispatched
    """
    app_name = _text(values, "app_name")
    environment = _text(values, "environment")
    webhook = _text(values, "notification_webhook")
    slack_token = _text(values, "slack_token")
    slack_channel = _text(values, "slack_channel")

    if not webhook or not is_valid_url(webhook):
        webhook = ""
    if not (slack_token and slack_channel):
        slack_token = slack_channel = ""
    if not (app_name and environment) or not (webhook or slack_token):
        return False

    partial = DeploymentRequest(
        environment=environment,
        platform=_text(values, "platform"),
        app_name=app_name,
        auth_token="",
        notification_webhook=webhook or None,
        slack_token=slack_token or None,
        slack_channel=slack_channel or None,
    )
    try:
        NotificationService(partial).send_deployment_failure(message)
    except Exception as e:
        logger.warning("Failed to send configuration failure notification: %s", e)
        return False
    return True
