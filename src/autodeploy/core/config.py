#!/usr/bin/env python3
"""
Deployment request model and configuration validation.

The DeploymentRequest is built once per invocation, after every input has
passed ConfigValidator. Nothing downstream mutates it.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import re
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse


DEFAULT_HEALTH_CHECK_TIMEOUT = 300
MIN_HEALTH_CHECK_TIMEOUT = 30
MAX_HEALTH_CHECK_TIMEOUT = 1800

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

TRUE_VALUES = {"true", "yes", "1"}
FALSE_VALUES = {"false", "no", "0"}


class PlatformKind(str, Enum):
    """Deployment platform kinds."""

    CONTAINER = "docker"
    CLUSTER = "kubernetes"
    FUNCTION = "serverless"


# Platform aliases accepted on input
PLATFORM_ALIASES = {"k8s": PlatformKind.CLUSTER.value}

ARTIFACT_FIELDS = {
    PlatformKind.CONTAINER: "docker_image",
    PlatformKind.CLUSTER: "k8s_manifest",
    PlatformKind.FUNCTION: "serverless_config",
}

ARTIFACT_REQUIRED_MESSAGES = {
    PlatformKind.CONTAINER: "Docker image is required for Docker deployment",
    PlatformKind.CLUSTER: "Kubernetes manifest is required for Kubernetes deployment",
    PlatformKind.FUNCTION: "Serverless config is required for serverless deployment",
}


@dataclass(frozen=True)
class DeploymentRequest:
    """Immutable description of one deployment attempt."""

    environment: str
    platform: str
    app_name: str
    auth_token: str
    docker_image: Optional[str] = None
    k8s_manifest: Optional[str] = None
    serverless_config: Optional[str] = None
    health_check_url: Optional[str] = None
    health_check_timeout: int = DEFAULT_HEALTH_CHECK_TIMEOUT
    rollback_on_failure: bool = False
    notification_webhook: Optional[str] = None
    slack_token: Optional[str] = None
    slack_channel: Optional[str] = None
    aws_region: Optional[str] = None
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None

    @property
    def platform_kind(self) -> Optional[PlatformKind]:
        """Canonical platform kind, or None for unknown platforms."""
        return resolve_platform(self.platform)

    @property
    def artifact_reference(self) -> Optional[str]:
        """The artifact reference used by this request's platform."""
        kind = self.platform_kind
        if kind is None:
            return None
        return getattr(self, ARTIFACT_FIELDS[kind]) or None

    @property
    def instance_name(self) -> str:
        return f"{self.app_name}-{self.environment}"

    @property
    def backup_instance_name(self) -> str:
        return f"{self.instance_name}-backup"

    @property
    def has_aws_credentials(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


def resolve_platform(platform: Optional[str]) -> Optional[PlatformKind]:
    """Map a platform name or alias to its PlatformKind."""
    if not platform:
        return None
    name = PLATFORM_ALIASES.get(platform.lower(), platform.lower())
    try:
        return PlatformKind(name)
    except ValueError:
        return None


def parse_bool(value: Any) -> Optional[bool]:
    """Parse a boolean input; returns None when it is not recognisable."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return None


def is_valid_url(url: str) -> bool:
    """True when the URL has a scheme, a host and a port in range."""
    try:
        parsed = urlparse(url)
        parsed.port
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


class ConfigValidator:
    """Validates raw configuration values before a request is built."""

    def validate(self, values: Dict[str, Any]) -> List[str]:
        """
        Validate configuration values.

        Args:
            values: Flat mapping of DeploymentRequest field names to raw values

        Returns:
            List of error messages, empty when the configuration is valid
        """
        errors: List[str] = []

        environment = values.get("environment")
        platform = values.get("platform")
        app_name = values.get("app_name")

        if not environment:
            errors.append("Environment is required")
        if not platform:
            errors.append("Deployment type is required")
        if not app_name:
            errors.append("Application name is required")
        if not values.get("auth_token"):
            errors.append("GitHub token is required")

        if platform:
            errors.extend(self._validate_platform(platform, values))

        if environment and not NAME_PATTERN.match(str(environment)):
            errors.append(
                "Environment name can only contain alphanumeric characters, "
                "hyphens, and underscores"
            )
        if app_name and not NAME_PATTERN.match(str(app_name)):
            errors.append(
                "Application name can only contain alphanumeric characters, "
                "hyphens, and underscores"
            )

        timeout = values.get("health_check_timeout")
        if timeout not in (None, ""):
            parsed = self._parse_timeout(timeout)
            if parsed is None:
                errors.append("Health check timeout must be an integer number of seconds")
            elif not MIN_HEALTH_CHECK_TIMEOUT <= parsed <= MAX_HEALTH_CHECK_TIMEOUT:
                errors.append(
                    f"Health check timeout must be between {MIN_HEALTH_CHECK_TIMEOUT} "
                    f"and {MAX_HEALTH_CHECK_TIMEOUT} seconds"
                )

        rollback = values.get("rollback_on_failure")
        if rollback not in (None, "") and parse_bool(rollback) is None:
            errors.append("rollback_on_failure must be a boolean")

        health_url = values.get("health_check_url")
        if health_url and not is_valid_url(health_url):
            errors.append("Health check URL is not valid")

        webhook = values.get("notification_webhook")
        if webhook and not is_valid_url(webhook):
            errors.append("Notification webhook URL is not valid")

        return errors

    def _validate_platform(self, platform: str, values: Dict[str, Any]) -> List[str]:
        from autodeploy.deployment.factory import DeployerFactory

        kind = resolve_platform(platform)
        if kind is None or platform.lower() not in DeployerFactory.available_platforms():
            return [f"Unsupported deployment type: {platform}"]

        errors = []
        expected = ARTIFACT_FIELDS[kind]
        if not values.get(expected):
            errors.append(ARTIFACT_REQUIRED_MESSAGES[kind])
        for other in ARTIFACT_FIELDS.values():
            if other != expected and values.get(other):
                errors.append(f"{other} does not apply to {kind.value} deployment")
        return errors

    @staticmethod
    def _parse_timeout(value: Any) -> Optional[int]:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return None
