#!/usr/bin/env python3
"""
Unit tests for the deployer factory and deployment coordinator.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest

from autodeploy.core.errors import UnsupportedPlatformError
from autodeploy.deployment.base import DeploymentOutcome
from autodeploy.deployment.cluster import ClusterDeployer
from autodeploy.deployment.container import ContainerDeployer
from autodeploy.deployment.coordinator import DeploymentCoordinator
from autodeploy.deployment.factory import DeployerFactory
from autodeploy.deployment.function import FunctionDeployer


@pytest.mark.unit
class TestDeployerFactory:
    """Registry lookups."""

    def test_default_platforms_registered(self):
        available = DeployerFactory.available_platforms()
        for name in ("docker", "kubernetes", "k8s", "serverless"):
            assert name in available

    @pytest.mark.parametrize(
        "platform,expected",
        [
            ("docker", ContainerDeployer),
            ("kubernetes", ClusterDeployer),
            ("K8S", ClusterDeployer),
            ("serverless", FunctionDeployer),
        ],
    )
    def test_deployer_class(self, platform, expected):
        assert DeployerFactory.deployer_class(platform) is expected

    def test_unknown_platform(self, docker_request):
        with pytest.raises(UnsupportedPlatformError, match="Unsupported deployment type: heroku"):
            DeployerFactory.create(replace(docker_request, platform="heroku"))

    def test_create_shares_console(self, docker_request, fake_console):
        deployer = DeployerFactory.create(docker_request, console=fake_console)

        assert isinstance(deployer, ContainerDeployer)
        assert deployer.console is fake_console


@pytest.mark.unit
class TestCoordinatorDeploy:
    """Lifecycle ordering and error normalization."""

    def test_successful_deploy_runs_post_tasks(self, docker_request, fake_console):
        coordinator = DeploymentCoordinator(docker_request, console=fake_console)

        outcome = coordinator.deploy()

        assert outcome.success is True
        assert fake_console.ran("docker ps")

    def test_validation_failure_never_deploys(self, docker_request, make_console):
        console = make_console(failures=["docker image inspect"])

        outcome = DeploymentCoordinator(docker_request, console=console).deploy()

        assert outcome.success is False
        assert outcome.error == "Docker image web:1.0 not found or invalid"
        assert outcome.deployment_id == ""
        assert outcome.deployment_url == ""
        assert not console.ran("docker run")

    def test_unexpected_exception_is_normalized(self, docker_request, fake_console):
        coordinator = DeploymentCoordinator(docker_request, console=fake_console)
        coordinator.deployer = MagicMock()
        coordinator.deployer.deploy.side_effect = KeyError()

        outcome = coordinator.deploy()

        assert outcome.success is False
        assert outcome.error == "KeyError"

    def test_post_task_exception_does_not_fail_deploy(self, docker_request, fake_console):
        coordinator = DeploymentCoordinator(docker_request, console=fake_console)
        with patch.object(
            coordinator.deployer, "post_deployment_tasks", side_effect=RuntimeError("boom")
        ):
            outcome = coordinator.deploy()

        assert outcome.success is True

    def test_missing_manifest_never_applies(self, k8s_request, fake_console, tmp_path):
        missing = str(tmp_path / "absent" / "deploy.yaml")
        request = replace(k8s_request, k8s_manifest=missing)

        outcome = DeploymentCoordinator(request, console=fake_console).deploy()

        assert outcome.success is False
        assert missing in outcome.error
        assert not fake_console.ran("kubectl apply")


@pytest.mark.unit
class TestCoordinatorRollback:
    """Rollback never raises."""

    def test_rollback_error_is_normalized(self, docker_request, make_console):
        console = make_console(failures=["docker container inspect web-staging-backup"])

        outcome = DeploymentCoordinator(docker_request, console=console).rollback()

        assert outcome == DeploymentOutcome.failed(
            "No backup container web-staging-backup found to roll back to"
        )

    def test_serverless_rollback_passes_through(self, serverless_request, fake_console):
        outcome = DeploymentCoordinator(serverless_request, console=fake_console).rollback()

        assert outcome.success is False
        assert "manual intervention required" in outcome.error
