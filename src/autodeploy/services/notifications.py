#!/usr/bin/env python3
"""
Deployment status notifications.

Each lifecycle event (start, success, failure) fans out concurrently to
Slack, a generic webhook and the GitHub deployment status API. A channel
that is not configured is skipped; a channel that fails is logged and
ignored so notifications never change the deployment result.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional

import httpx

from autodeploy.core.config import DeploymentRequest
from autodeploy.deployment.base import DeploymentOutcome


logger = logging.getLogger(__name__)

SLACK_API_URL = "https://slack.com/api/chat.postMessage"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
NOTIFICATION_FOOTER = "autodeploy"
REQUEST_TIMEOUT = 10.0


@dataclass(frozen=True)
class GitHubContext:
    """Provenance of the CI run, read from the GitHub Actions environment."""

    repository: str = ""
    sha: str = ""
    actor: str = ""
    api_url: str = DEFAULT_GITHUB_API_URL
    deployment_id: Optional[int] = None

    @property
    def owner(self) -> str:
        return self.repository.partition("/")[0]

    @property
    def repo(self) -> str:
        return self.repository.partition("/")[2]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GitHubContext":
        environ = os.environ if environ is None else environ
        deployment_id = environ.get("GITHUB_DEPLOYMENT_ID", "")
        return cls(
            repository=environ.get("GITHUB_REPOSITORY", ""),
            sha=environ.get("GITHUB_SHA", ""),
            actor=environ.get("GITHUB_ACTOR", ""),
            api_url=environ.get("GITHUB_API_URL", DEFAULT_GITHUB_API_URL).rstrip("/"),
            deployment_id=int(deployment_id) if deployment_id.isdigit() else None,
        )


class NotificationService:
    """Fire-and-forget lifecycle notifications."""

    def __init__(
        self,
        request: DeploymentRequest,
        github: Optional[GitHubContext] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.request = request
        self.github = github or GitHubContext.from_env()
        self.transport = transport

    def send_deployment_start(self) -> None:
        message = (
            f"🚀 Deployment started for {self.request.app_name} "
            f"to {self.request.environment}"
        )
        self._dispatch(
            {
                "Slack": lambda client: self._send_slack(client, message, "warning"),
                "webhook": lambda client: self._send_webhook(
                    client, self._payload("started", message)
                ),
                "GitHub deployment status": lambda client: self._send_github_status(
                    client, "pending"
                ),
            }
        )

    def send_deployment_success(self, outcome: DeploymentOutcome) -> None:
        message = (
            f"✅ Deployment successful for {self.request.app_name} "
            f"to {self.request.environment}\nURL: {outcome.deployment_url}"
        )
        payload = self._payload(
            "success",
            message,
            deploymentUrl=outcome.deployment_url,
            deploymentId=outcome.deployment_id,
        )
        self._dispatch(
            {
                "Slack": lambda client: self._send_slack(client, message, "good"),
                "webhook": lambda client: self._send_webhook(client, payload),
                "GitHub deployment status": lambda client: self._send_github_status(
                    client, "success", outcome.deployment_url
                ),
            }
        )

    def send_deployment_failure(self, error: str) -> None:
        message = (
            f"❌ Deployment failed for {self.request.app_name} "
            f"to {self.request.environment}\nError: {error}"
        )
        self._dispatch(
            {
                "Slack": lambda client: self._send_slack(client, message, "danger"),
                "webhook": lambda client: self._send_webhook(
                    client, self._payload("failed", message, error=error)
                ),
                "GitHub deployment status": lambda client: self._send_github_status(
                    client, "failure"
                ),
            }
        )

    def _dispatch(self, channels: Dict[str, Callable[[httpx.Client], None]]) -> None:
        """Run every channel concurrently; wait for all, ignore failures."""
        with httpx.Client(transport=self.transport, timeout=REQUEST_TIMEOUT) as client:
            with ThreadPoolExecutor(max_workers=len(channels)) as executor:
                futures = {
                    executor.submit(send, client): name for name, send in channels.items()
                }
                for future in as_completed(futures):
                    name = futures[future]
                    try:
                        future.result()
                    except Exception as e:
                        logger.warning("Error sending %s notification: %s", name, e)

    def _payload(self, status: str, message: str, **extra: Any) -> Dict[str, Any]:
        payload = {
            "status": status,
            "application": self.request.app_name,
            "environment": self.request.environment,
            "message": message,
        }
        payload.update(extra)
        return payload

    def _send_slack(self, client: httpx.Client, message: str, color: str) -> None:
        if not self.request.slack_token or not self.request.slack_channel:
            return

        response = client.post(
            SLACK_API_URL,
            headers={"Authorization": f"Bearer {self.request.slack_token}"},
            json={
                "channel": self.request.slack_channel,
                "attachments": [
                    {
                        "color": color,
                        "text": message,
                        "footer": NOTIFICATION_FOOTER,
                        "ts": int(time.time()),
                    }
                ],
            },
        )
        if not response.is_success:
            logger.warning("Failed to send Slack notification: %s", response.text)

    def _send_webhook(self, client: httpx.Client, payload: Dict[str, Any]) -> None:
        if not self.request.notification_webhook:
            return

        body = dict(payload)
        body.update(
            {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "repository": {"owner": self.github.owner, "repo": self.github.repo},
                "commit": self.github.sha,
                "actor": self.github.actor,
            }
        )
        response = client.post(self.request.notification_webhook, json=body)
        if not response.is_success:
            logger.warning("Failed to send webhook notification: %s", response.text)

    def _send_github_status(
        self, client: httpx.Client, state: str, environment_url: Optional[str] = None
    ) -> None:
        if not self.request.auth_token:
            return
        if not self.github.repository or self.github.deployment_id is None:
            logger.debug("No GitHub deployment to update, skipping %s status", state)
            return

        body = {
            "state": state,
            "description": f"Deployment {state} for {self.request.app_name}",
        }
        if environment_url:
            body["environment_url"] = environment_url

        response = client.post(
            f"{self.github.api_url}/repos/{self.github.owner}/{self.github.repo}"
            f"/deployments/{self.github.deployment_id}/statuses",
            headers={
                "Authorization": f"Bearer {self.request.auth_token}",
                "Accept": "application/vnd.github+json",
            },
            json=body,
        )
        if not response.is_success:
            logger.warning("Failed to create GitHub deployment status: %s", response.text)
