"""
Pytest configuration and shared fixtures for autodeploy tests.

Provides deployment requests for every platform, a scripted command runner
standing in for the docker/kubectl/serverless CLIs, and temporary artifact
files.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from typing import Dict, List, Optional

import pytest

from autodeploy.core.config import DeploymentRequest
from autodeploy.core.console import CommandError


# ============================================================================
# Command Runner Fixtures
# ============================================================================

def _matches(joined: str, prefix: str) -> bool:
    return joined == prefix or joined.startswith(prefix + " ")


class FakeConsole:
    """Records commands and answers them from prefix-matched scripts.

    ``responses`` maps a command prefix (space-joined, matched on whole
    arguments) to its output and ``failures`` lists prefixes that exit
    non-zero. The first matching failure wins over any response.
    """

    def __init__(
        self,
        responses: Optional[Dict[str, str]] = None,
        failures: Optional[List[str]] = None,
    ):
        self.responses = dict(responses or {})
        self.failures = list(failures or [])
        self.commands: List[List[str]] = []
        self.envs: List[Optional[Dict[str, str]]] = []

    def sh(self, command, can_fail=False, timeout=600, env=None):
        self.commands.append(list(command))
        self.envs.append(env)
        joined = " ".join(command)

        for prefix in self.failures:
            if _matches(joined, prefix):
                if can_fail:
                    return "error"
                raise CommandError(list(command), 1, f"{prefix}: error")

        for prefix, output in self.responses.items():
            if _matches(joined, prefix):
                return output
        return ""

    def ran(self, prefix: str) -> bool:
        return any(_matches(" ".join(cmd), prefix) for cmd in self.commands)

    def joined(self) -> List[str]:
        return [" ".join(cmd) for cmd in self.commands]


@pytest.fixture
def fake_console():
    """Command runner where every command succeeds with no output."""
    return FakeConsole()


@pytest.fixture
def make_console():
    """Factory for scripted command runners."""
    return FakeConsole


# ============================================================================
# Artifact Fixtures
# ============================================================================

@pytest.fixture
def manifest_file(tmp_path):
    """Minimal Kubernetes manifest on disk."""
    path = tmp_path / "deployment.yaml"
    path.write_text(
        "apiVersion: apps/v1\n"
        "kind: Deployment\n"
        "metadata:\n"
        "  name: web\n"
    )
    return str(path)


@pytest.fixture
def serverless_file(tmp_path):
    """Minimal serverless framework config on disk."""
    path = tmp_path / "serverless.yml"
    path.write_text("service: web\nprovider:\n  name: aws\n")
    return str(path)


# ============================================================================
# Request Fixtures
# ============================================================================

@pytest.fixture
def docker_request():
    """Docker deployment request with health check and rollback enabled."""
    return DeploymentRequest(
        environment="staging",
        platform="docker",
        app_name="web",
        auth_token="ghp_token",
        docker_image="web:1.0",
        health_check_url="http://localhost/health",
        health_check_timeout=30,
        rollback_on_failure=True,
    )


@pytest.fixture
def k8s_request(manifest_file):
    """Kubernetes deployment request backed by a real manifest file."""
    return DeploymentRequest(
        environment="production",
        platform="kubernetes",
        app_name="api",
        auth_token="ghp_token",
        k8s_manifest=manifest_file,
    )


@pytest.fixture
def serverless_request(serverless_file):
    """Serverless deployment request with AWS credentials."""
    return DeploymentRequest(
        environment="dev",
        platform="serverless",
        app_name="fn",
        auth_token="ghp_token",
        serverless_config=serverless_file,
        aws_region="us-east-1",
        aws_access_key_id="AKIAEXAMPLE",
        aws_secret_access_key="secret-key",
    )


@pytest.fixture
def valid_inputs():
    """Raw configuration values that pass validation."""
    return {
        "environment": "staging",
        "platform": "docker",
        "app_name": "web",
        "auth_token": "ghp_token",
        "docker_image": "web:1.0",
    }


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (may be slow)"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as fast unit tests"
    )
