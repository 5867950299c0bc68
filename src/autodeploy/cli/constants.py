#!/usr/bin/env python3
"""
Constants and configuration for autodeploy CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""


# Exit codes
class ExitCode:
    """Exit codes for CLI commands."""

    SUCCESS = 0
    FAILURE = 1
    DEPLOY_FAILURE = 2
    HEALTH_FAILURE = 3
    INVALID_ARGS = 4
    ROLLBACK_FAILURE = 5


# Valid values for validation
VALID_PLATFORMS = ["docker", "kubernetes", "k8s", "serverless"]

# Configuration fields never echoed back to the terminal
SECRET_FIELDS = ["auth_token", "slack_token", "aws_access_key_id", "aws_secret_access_key"]

# Default values
DEFAULT_HEALTH_RETRY_DELAY = 10.0
GITHUB_OUTPUT_ENV = "GITHUB_OUTPUT"
