#!/usr/bin/env python3
"""
Docker Deployment - single-host container deployment using the docker CLI.

Keeps one rollback generation by renaming the running container to
``{app}-{env}-backup`` before starting the new one. The backup is found
again purely by name, so a later process can roll back without any
stored state.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from autodeploy.core.config import PlatformKind
from autodeploy.core.console import CommandError
from autodeploy.core.errors import (
    ArtifactNotFoundError,
    DeploymentError,
    RollbackError,
)

from .base import BaseDeployer, DeploymentOutcome


class ContainerDeployer(BaseDeployer):
    """
    Docker deployment using CLI commands.

    Uses subprocess to call docker locally:
    - docker image inspect: verify the image resolves
    - docker rename / stop: move the running container aside as the backup
    - docker run: start the new container
    - docker start / rename: restore the backup on rollback
    """

    PLATFORM = PlatformKind.CONTAINER
    TOOL = "docker"
    VERSION_ARGS = ["--version"]

    HOST_PORT = 80
    CONTAINER_PORT = 8080
    RESTART_POLICY = "unless-stopped"
    INSTANCE_LABEL = "autodeploy.instance"

    @property
    def deployment_url(self) -> str:
        return f"http://localhost:{self.HOST_PORT}"

    def validate(self) -> None:
        """Validate image reference, docker CLI and image presence."""
        image = self._require_artifact()
        self._check_tool()

        try:
            self._run("image", "inspect", image, timeout=60)
        except CommandError as e:
            raise ArtifactNotFoundError(
                f"Docker image {image} not found or invalid",
                context=self._context("validate"),
                suggestions=[f"Pull or build {image} before deploying"],
                cause=e,
            )
        self.logger.info("✓ Docker image %s validated", image)

    def deploy(self) -> DeploymentOutcome:
        """Move the running container aside and start the new image."""
        deployment_id = self._new_deployment_id()
        name = self.request.instance_name

        try:
            self._backup_existing_container(name)
            self._run(
                "run",
                "-d",
                "--name",
                name,
                "--restart",
                self.RESTART_POLICY,
                "-p",
                f"{self.HOST_PORT}:{self.CONTAINER_PORT}",
                "--label",
                f"{self.INSTANCE_LABEL}={name}",
                self.artifact,
            )
        except CommandError as e:
            raise DeploymentError(
                f"Docker deployment failed: {e}",
                context=self._context("deploy"),
                cause=e,
            )

        self.logger.info("✓ Container %s started successfully", name)
        return DeploymentOutcome(
            success=True,
            deployment_id=deployment_id,
            deployment_url=self.deployment_url,
            container_name=name,
        )

    def rollback(self) -> DeploymentOutcome:
        """Replace the current container with the backup generation."""
        name = self.request.instance_name
        backup = self.request.backup_instance_name

        if not self._container_exists(backup):
            raise RollbackError(
                f"No backup container {backup} found to roll back to",
                context=self._context("rollback"),
            )

        try:
            if self._container_exists(name):
                self._run("stop", name)
                self._run("rm", name)
            self._run("start", backup)
            self._run("rename", backup, name)
        except CommandError as e:
            raise RollbackError(
                f"Docker rollback failed: {e}",
                context=self._context("rollback"),
                cause=e,
            )

        self.logger.info("✓ Rollback completed successfully")
        return DeploymentOutcome(
            success=True,
            deployment_id=self._rollback_id(),
            deployment_url=self.deployment_url,
            container_name=name,
        )

    def post_deployment_tasks(self) -> None:
        """Remove exited containers of this instance, keeping the backup."""
        name = self.request.instance_name
        backup = self.request.backup_instance_name
        try:
            output = self._run(
                "ps",
                "-a",
                "--filter",
                "status=exited",
                "--filter",
                f"label={self.INSTANCE_LABEL}={name}",
                "--format",
                "{{.Names}}",
            )
            stale = [line.strip() for line in output.splitlines() if line.strip()]
            stale = [container for container in stale if container != backup]
            for container in stale:
                self._run("rm", container)
            self.logger.info("✓ Cleaned up %d old containers", len(stale))
        except (CommandError, OSError) as e:
            self.logger.warning("Failed to clean up old containers: %s", e)

    def _container_exists(self, name: str) -> bool:
        try:
            self._run("container", "inspect", name)
            return True
        except CommandError:
            return False

    def _backup_existing_container(self, name: str) -> None:
        """Rename and stop the running container; absence is fine."""
        if not self._container_exists(name):
            self.logger.info("No existing container %s to stop", name)
            return

        backup = self.request.backup_instance_name
        if self._container_exists(backup):
            # only one rollback generation is retained
            self._run("rm", "-f", backup)

        self._run("rename", name, backup)
        self._run("stop", backup)
        self.logger.info("Existing container %s kept as %s", name, backup)
