#!/usr/bin/env python3
"""
Base classes for deployment layer.

Defines the abstract base class shared by every deployment platform
(docker, kubernetes, serverless). All variants expose the same four
operations and the same result shape, so callers never branch on the
platform after the deployer has been created.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from autodeploy.core.config import (
    ARTIFACT_FIELDS,
    ARTIFACT_REQUIRED_MESSAGES,
    DeploymentRequest,
    PlatformKind,
)
from autodeploy.core.console import CommandError, Console
from autodeploy.core.errors import (
    ConfigurationError,
    ToolUnavailableError,
    create_error_context,
)


@dataclass(frozen=True)
class DeploymentOutcome:
    """Result of a deploy or rollback operation."""

    success: bool
    deployment_id: str
    deployment_url: str
    error: Optional[str] = None
    container_name: Optional[str] = None

    @classmethod
    def failed(cls, error: str) -> "DeploymentOutcome":
        """Failure-shaped outcome with no identifier or URL."""
        return cls(success=False, deployment_id="", deployment_url="", error=error)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def unix_millis() -> int:
    return int(time.time() * 1000)


class BaseDeployer(ABC):
    """
    Abstract base class for all deployment platforms.

    Lifecycle driven by DeploymentCoordinator:
    1. validate() - artifact reference present, tool invocable, artifact resolves
    2. deploy() - platform state change, returns a DeploymentOutcome
    3. post_deployment_tasks() - best-effort cleanup, never raises
    4. rollback() - only when the coordinator decides to revert
    """

    PLATFORM: PlatformKind
    TOOL: str = ""
    VERSION_ARGS: List[str] = []

    def __init__(self, request: DeploymentRequest, console: Optional[Console] = None):
        """
        Initialize deployer.

        Args:
            request: Immutable deployment request
            console: Command runner for the platform tool
        """
        self.request = request
        self.console = console or Console()
        self.logger = logging.getLogger(f"{__name__}.{type(self).__name__}")

    @property
    def artifact(self) -> Optional[str]:
        return getattr(self.request, ARTIFACT_FIELDS[self.PLATFORM]) or None

    def _context(self, operation: str, **kwargs):
        return create_error_context(
            operation,
            component=type(self).__name__,
            app_name=self.request.app_name,
            environment=self.request.environment,
            **kwargs,
        )

    def _require_artifact(self) -> str:
        """Return the artifact reference or raise ConfigurationError."""
        artifact = self.artifact
        if not artifact:
            raise ConfigurationError(
                ARTIFACT_REQUIRED_MESSAGES[self.PLATFORM],
                context=self._context("validate"),
            )
        return artifact

    def _check_tool(self) -> None:
        """Invoke the platform tool with a no-op command."""
        try:
            self.console.sh([self.TOOL] + self.VERSION_ARGS, timeout=30)
        except (CommandError, OSError) as e:
            raise ToolUnavailableError(
                f"{self.TOOL} is not available or not configured",
                context=self._context("validate"),
                suggestions=[f"Install {self.TOOL} and make sure it is on PATH"],
                cause=e,
            )
        self.logger.info("✓ %s validated", self.TOOL)

    def _run(self, *args: str, **kwargs) -> str:
        return self.console.sh([self.TOOL] + list(args), **kwargs)

    def _new_deployment_id(self) -> str:
        return f"{self.request.app_name}-{unix_millis()}"

    @staticmethod
    def _rollback_id() -> str:
        return f"rollback-{unix_millis()}"

    @abstractmethod
    def validate(self) -> None:
        """
        Pre-flight checks.

        Raises:
            ConfigurationError: Artifact reference missing
            ToolUnavailableError: Platform tool cannot be invoked
            ArtifactNotFoundError: Artifact does not resolve
        """

    @abstractmethod
    def deploy(self) -> DeploymentOutcome:
        """
        Execute the platform deployment sequence.

        Raises:
            DeploymentError: Wrapping the platform tool's failure
        """

    @abstractmethod
    def rollback(self) -> DeploymentOutcome:
        """
        Revert to the previous known-good state.

        Raises:
            RollbackError: When no prior state resolves
        """

    @abstractmethod
    def post_deployment_tasks(self) -> None:
        """Best-effort cleanup. Failures are logged, never raised."""
