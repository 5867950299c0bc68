#!/usr/bin/env python3
"""
Unit tests for deployment notifications.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import json
import logging
import threading
from dataclasses import replace

import httpx
import pytest

from autodeploy.deployment.base import DeploymentOutcome
from autodeploy.services.notifications import (
    SLACK_API_URL,
    GitHubContext,
    NotificationService,
)


GITHUB = GitHubContext(
    repository="acme/web",
    sha="abc123",
    actor="octocat",
    api_url="https://api.github.test",
    deployment_id=42,
)


class RecordingHandler:
    """Collects requests across notifier threads."""

    def __init__(self, status_code=200, fail_hosts=()):
        self.status_code = status_code
        self.fail_hosts = set(fail_hosts)
        self.requests = []
        self._lock = threading.Lock()

    def __call__(self, request):
        with self._lock:
            self.requests.append(request)
        if request.url.host in self.fail_hosts:
            raise httpx.ConnectError("unreachable", request=request)
        return httpx.Response(self.status_code, json={"ok": True})

    def to(self, host):
        return [r for r in self.requests if r.url.host == host]


@pytest.fixture
def notify_request(docker_request):
    return replace(
        docker_request,
        slack_token="xoxb-token",
        slack_channel="#deploys",
        notification_webhook="https://hooks.example.com/deploy",
    )


def _service(request, handler, github=GITHUB):
    return NotificationService(request, github=github, transport=httpx.MockTransport(handler))


@pytest.mark.unit
class TestGitHubContext:
    """Environment parsing."""

    def test_from_env(self):
        context = GitHubContext.from_env(
            {
                "GITHUB_REPOSITORY": "acme/web",
                "GITHUB_SHA": "abc",
                "GITHUB_ACTOR": "octocat",
                "GITHUB_API_URL": "https://ghe.example.com/api/v3/",
                "GITHUB_DEPLOYMENT_ID": "7",
            }
        )

        assert context.owner == "acme"
        assert context.repo == "web"
        assert context.api_url == "https://ghe.example.com/api/v3"
        assert context.deployment_id == 7

    def test_from_empty_env(self):
        context = GitHubContext.from_env({})

        assert context.repository == ""
        assert context.api_url == "https://api.github.com"
        assert context.deployment_id is None


@pytest.mark.unit
class TestDeploymentStart:
    """Start event fans out to every configured channel."""

    def test_slack_message(self, notify_request):
        handler = RecordingHandler()

        _service(notify_request, handler).send_deployment_start()

        (slack,) = handler.to("slack.com")
        assert str(slack.url) == SLACK_API_URL
        assert slack.headers["Authorization"] == "Bearer xoxb-token"
        body = json.loads(slack.content)
        assert body["channel"] == "#deploys"
        attachment = body["attachments"][0]
        assert attachment["color"] == "warning"
        assert attachment["text"] == "🚀 Deployment started for web to staging"
        assert attachment["footer"] == "autodeploy"

    def test_webhook_payload(self, notify_request):
        handler = RecordingHandler()

        _service(notify_request, handler).send_deployment_start()

        (webhook,) = handler.to("hooks.example.com")
        body = json.loads(webhook.content)
        assert body["status"] == "started"
        assert body["application"] == "web"
        assert body["environment"] == "staging"
        assert body["repository"] == {"owner": "acme", "repo": "web"}
        assert body["commit"] == "abc123"
        assert body["actor"] == "octocat"
        assert "timestamp" in body

    def test_github_status_pending(self, notify_request):
        handler = RecordingHandler()

        _service(notify_request, handler).send_deployment_start()

        (status,) = handler.to("api.github.test")
        assert status.url.path == "/repos/acme/web/deployments/42/statuses"
        assert status.headers["Authorization"] == "Bearer ghp_token"
        assert json.loads(status.content) == {
            "state": "pending",
            "description": "Deployment pending for web",
        }


@pytest.mark.unit
class TestDeploymentOutcomes:
    """Success and failure events."""

    def test_success(self, notify_request):
        handler = RecordingHandler()
        outcome = DeploymentOutcome(
            success=True, deployment_id="web-1", deployment_url="http://localhost:80"
        )

        _service(notify_request, handler).send_deployment_success(outcome)

        slack = json.loads(handler.to("slack.com")[0].content)["attachments"][0]
        assert slack["color"] == "good"
        assert "URL: http://localhost:80" in slack["text"]
        webhook = json.loads(handler.to("hooks.example.com")[0].content)
        assert webhook["status"] == "success"
        assert webhook["deploymentUrl"] == "http://localhost:80"
        assert webhook["deploymentId"] == "web-1"
        status = json.loads(handler.to("api.github.test")[0].content)
        assert status["state"] == "success"
        assert status["environment_url"] == "http://localhost:80"

    def test_failure(self, notify_request):
        handler = RecordingHandler()

        _service(notify_request, handler).send_deployment_failure("Health check failed: HTTP 500")

        slack = json.loads(handler.to("slack.com")[0].content)["attachments"][0]
        assert slack["color"] == "danger"
        assert "Error: Health check failed: HTTP 500" in slack["text"]
        webhook = json.loads(handler.to("hooks.example.com")[0].content)
        assert webhook["status"] == "failed"
        assert webhook["error"] == "Health check failed: HTTP 500"
        status = json.loads(handler.to("api.github.test")[0].content)
        assert status["state"] == "failure"


@pytest.mark.unit
class TestChannelSelection:
    """Unconfigured channels are skipped; failures never propagate."""

    def test_nothing_configured_sends_nothing(self, docker_request):
        handler = RecordingHandler()
        request = replace(docker_request, auth_token="")

        _service(request, handler, github=GitHubContext()).send_deployment_start()

        assert handler.requests == []

    def test_slack_needs_token_and_channel(self, notify_request):
        handler = RecordingHandler()

        _service(replace(notify_request, slack_channel=None), handler).send_deployment_start()

        assert handler.to("slack.com") == []
        assert len(handler.to("hooks.example.com")) == 1

    def test_github_status_needs_deployment(self, notify_request):
        handler = RecordingHandler()
        github = replace(GITHUB, deployment_id=None)

        _service(notify_request, handler, github=github).send_deployment_start()

        assert handler.to("api.github.test") == []

    def test_channel_error_is_logged_not_raised(self, notify_request, caplog):
        handler = RecordingHandler(fail_hosts={"slack.com"})

        with caplog.at_level(logging.WARNING):
            _service(notify_request, handler).send_deployment_failure("boom")

        assert "Error sending Slack notification" in caplog.text
        assert len(handler.to("hooks.example.com")) == 1

    def test_http_error_status_is_logged(self, notify_request, caplog):
        handler = RecordingHandler(status_code=500)

        with caplog.at_level(logging.WARNING):
            _service(notify_request, handler).send_deployment_start()

        assert "Failed to send webhook notification" in caplog.text
