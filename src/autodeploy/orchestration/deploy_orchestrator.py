#!/usr/bin/env python3
"""
Deploy Orchestrator - Coordinates one end-to-end deployment attempt.

Workflow:
1. Notify start
2. Deploy through the DeploymentCoordinator
3. Health check (when a URL is configured)
4. Roll back on an unhealthy deployment (when enabled)
5. Notify success or failure and report CI outputs

A successful rollback still ends the run as failed: rollback restores the
previous version, it does not make the new one succeed.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from autodeploy.core.config import DeploymentRequest
from autodeploy.core.console import Console
from autodeploy.core.errors import (
    AutoDeployError,
    DeploymentError,
    HealthCheckFailure,
    create_error_context,
)
from autodeploy.deployment.base import DeploymentOutcome
from autodeploy.deployment.coordinator import DeploymentCoordinator
from autodeploy.services.health import DEFAULT_RETRY_DELAY, HealthVerdict, HealthVerifier
from autodeploy.services.notifications import NotificationService


logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


@dataclass
class DeploymentReport:
    """Terminal result of an orchestrated deployment."""

    status: str
    deployment_id: str = ""
    deployment_url: str = ""
    error_message: Optional[str] = None
    deployment_time: str = ""
    health: Optional[HealthVerdict] = None
    rolled_back: bool = False
    rollback_outcome: Optional[DeploymentOutcome] = None
    error: Optional[AutoDeployError] = None

    @property
    def is_success(self) -> bool:
        return self.status == STATUS_SUCCESS

    def to_outputs(self) -> Dict[str, str]:
        """CI output values."""
        outputs = {"deployment_status": self.status}
        if self.is_success:
            outputs.update(
                {
                    "deployment_id": self.deployment_id,
                    "deployment_url": self.deployment_url,
                    "deployment_time": self.deployment_time,
                }
            )
        else:
            outputs["error_message"] = self.error_message or ""
        return outputs

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "deployment_id": self.deployment_id,
            "deployment_url": self.deployment_url,
            "error_message": self.error_message,
            "deployment_time": self.deployment_time,
            "health": self.health.to_dict() if self.health else None,
            "rolled_back": self.rolled_back,
            "rollback": self.rollback_outcome.to_dict() if self.rollback_outcome else None,
        }


class DeployOrchestrator:
    """
    Orchestrates the deploy workflow.

    Responsibilities:
    - Drive the coordinator through deploy (and rollback when needed)
    - Gate success on the health verdict
    - Emit lifecycle notifications without letting them affect the result
    """

    def __init__(
        self,
        request: DeploymentRequest,
        console: Optional[Console] = None,
        health_retry_delay: float = DEFAULT_RETRY_DELAY,
        notifier: Optional[NotificationService] = None,
        verifier: Optional[HealthVerifier] = None,
    ):
        """
        Initialize deploy orchestrator.

        Args:
            request: Validated deployment request
            console: Command runner for platform tools
            health_retry_delay: Seconds between failed health-check attempts
            notifier: Notification service (built from the request if omitted)
            verifier: Health verifier (built from the request if omitted)

        Raises:
            UnsupportedPlatformError: If no deployer handles the platform
        """
        self.request = request
        self.coordinator = DeploymentCoordinator(request, console=console)
        self.notifier = notifier or NotificationService(request)
        self.verifier = verifier or HealthVerifier(request, retry_delay=health_retry_delay)

    def execute(self) -> DeploymentReport:
        """Run the full deployment workflow; never raises deployment errors."""
        self._notify("start", self.notifier.send_deployment_start)

        health: Optional[HealthVerdict] = None
        rollback_outcome: Optional[DeploymentOutcome] = None

        try:
            logger.info("🔄 Starting %s deployment...", self.request.platform)
            outcome = self.coordinator.deploy()
            if not outcome.success:
                raise DeploymentError(
                    f"Deployment failed: {outcome.error}",
                    context=self._context("deploy"),
                )
            logger.info("✅ Deployment completed successfully")

            if self.request.health_check_url:
                logger.info("🏥 Performing health check...")
                health = self.verifier.perform_health_check()
                if not health.healthy:
                    if self.request.rollback_on_failure:
                        logger.warning("❌ Health check failed, initiating rollback...")
                        rollback_outcome = self.coordinator.rollback()
                    raise HealthCheckFailure(
                        _health_failure_message(health, rollback_outcome),
                        context=self._context("health_check"),
                    )
                logger.info("✅ Health check passed")

        except AutoDeployError as e:
            logger.error("❌ %s", e.message)
            report = DeploymentReport(
                status=STATUS_FAILED,
                error_message=e.message,
                deployment_time=_utc_now(),
                health=health,
                rolled_back=bool(rollback_outcome and rollback_outcome.success),
                rollback_outcome=rollback_outcome,
                error=e,
            )
            self._notify(
                "failure", lambda: self.notifier.send_deployment_failure(e.message)
            )
            return report

        report = DeploymentReport(
            status=STATUS_SUCCESS,
            deployment_id=outcome.deployment_id,
            deployment_url=outcome.deployment_url,
            deployment_time=_utc_now(),
            health=health,
        )
        self._notify("success", lambda: self.notifier.send_deployment_success(outcome))
        logger.info("🎉 %s deployed to %s", self.request.app_name, self.request.environment)
        return report

    def rollback(self) -> DeploymentOutcome:
        """Roll back without deploying (explicit rollback command)."""
        return self.coordinator.rollback()

    def _notify(self, event: str, send) -> None:
        try:
            send()
        except Exception as e:
            logger.warning("Failed to send %s notification: %s", event, e)

    def _context(self, operation: str):
        return create_error_context(
            operation,
            component="DeployOrchestrator",
            app_name=self.request.app_name,
            environment=self.request.environment,
        )


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _health_failure_message(
    health: HealthVerdict, rollback_outcome: Optional[DeploymentOutcome]
) -> str:
    if rollback_outcome is None:
        return f"Health check failed: {health.error}"
    if rollback_outcome.success:
        return f"Health check failed and rollback completed: {health.error}"
    return (
        f"Health check failed and rollback failed: {health.error} "
        f"(rollback: {rollback_outcome.error})"
    )


def write_ci_outputs(outputs: Dict[str, str], output_file: Optional[str]) -> bool:
    """
    Append outputs to a GitHub Actions output file.

    Args:
        outputs: Output names and values
        output_file: Path from $GITHUB_OUTPUT (skipped when empty)

    Returns:
        True if outputs were written
    """
    if not output_file:
        return False

    lines = []
    for key, value in outputs.items():
        value = "" if value is None else str(value)
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4().hex}"
            lines.append(f"{key}<<{delimiter}\n{value}\n{delimiter}")
        else:
            lines.append(f"{key}={value}")

    with open(Path(output_file), "a") as f:
        f.write("\n".join(lines) + "\n")
    return True
