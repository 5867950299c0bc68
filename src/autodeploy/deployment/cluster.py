#!/usr/bin/env python3
"""
Kubernetes Deployment - cluster deployment using kubectl.

Uses subprocess to call kubectl (apply, rollout status, rollout undo).
Rollback relies on the Deployment's own revision history, so no state is
kept between invocations.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from autodeploy.core.config import PlatformKind
from autodeploy.core.console import CommandError
from autodeploy.core.errors import (
    ArtifactNotFoundError,
    DeploymentError,
    RollbackError,
)

from .base import BaseDeployer, DeploymentOutcome


class ClusterDeployer(BaseDeployer):
    """
    Kubernetes deployment using CLI commands.

    **Workflow**:
    1. kubectl apply -f <manifest>
    2. kubectl rollout status deployment/<app> --timeout=300s
    3. Service reachable at http://<app>.<env>.svc.cluster.local
    """

    PLATFORM = PlatformKind.CLUSTER
    TOOL = "kubectl"
    VERSION_ARGS = ["version", "--client"]

    ROLLOUT_TIMEOUT = 300
    CLUSTER_DOMAIN = "svc.cluster.local"

    @property
    def workload(self) -> str:
        return f"deployment/{self.request.app_name}"

    @property
    def service_url(self) -> str:
        return f"http://{self.request.app_name}.{self.request.environment}.{self.CLUSTER_DOMAIN}"

    def validate(self) -> None:
        """Validate manifest reference, kubectl and manifest file."""
        manifest = self._require_artifact()
        self._check_tool()

        if not Path(manifest).is_file():
            raise ArtifactNotFoundError(
                f"Kubernetes manifest file not found: {manifest}",
                context=self._context("validate", file_path=manifest),
            )
        self.logger.info("✓ Kubernetes manifest %s found", manifest)

    def deploy(self) -> DeploymentOutcome:
        """Apply the manifest and wait for the rollout to finish."""
        deployment_id = self._new_deployment_id()

        try:
            self._run("apply", "-f", self.artifact)
            self.logger.info("✓ Kubernetes manifest applied successfully")
            self._wait_for_rollout()
        except CommandError as e:
            raise DeploymentError(
                f"Kubernetes deployment failed: {e}",
                context=self._context("deploy", file_path=self.artifact),
                cause=e,
            )

        return DeploymentOutcome(
            success=True,
            deployment_id=deployment_id,
            deployment_url=self.service_url,
        )

    def rollback(self) -> DeploymentOutcome:
        """Undo to the previous revision and wait until it is ready."""
        try:
            self._run("rollout", "undo", self.workload)
            self._wait_for_rollout()
        except CommandError as e:
            raise RollbackError(
                f"Kubernetes rollback failed: {e}",
                context=self._context("rollback"),
                cause=e,
            )

        self.logger.info("✓ Kubernetes rollback completed successfully")
        return DeploymentOutcome(
            success=True,
            deployment_id=self._rollback_id(),
            deployment_url=self.service_url,
        )

    def post_deployment_tasks(self) -> None:
        """Delete scaled-down replica sets, keeping the newest one for undo."""
        try:
            output = self._run(
                "get", "rs", "-l", f"app={self.request.app_name}", "-o", "json"
            )
            stale = self._stale_replica_sets(json.loads(output or "{}"))
            for name in stale:
                self._run("delete", "rs", name)
            self.logger.info("✓ Cleaned up %d old replica sets", len(stale))
        except (CommandError, OSError, ValueError) as e:
            self.logger.warning("Failed to clean up old replica sets: %s", e)

    def _wait_for_rollout(self) -> None:
        self._run(
            "rollout",
            "status",
            self.workload,
            f"--timeout={self.ROLLOUT_TIMEOUT}s",
            timeout=self.ROLLOUT_TIMEOUT + 30,
        )

    @staticmethod
    def _stale_replica_sets(listing: Dict[str, Any]) -> List[str]:
        """Names of idle replica sets, oldest first, minus the newest idle one."""
        idle = []
        for item in listing.get("items", []):
            if item.get("spec", {}).get("replicas", 0) != 0:
                continue
            metadata = item.get("metadata", {})
            revision = metadata.get("annotations", {}).get(
                "deployment.kubernetes.io/revision", "0"
            )
            try:
                revision = int(revision)
            except ValueError:
                revision = 0
            idle.append((revision, metadata.get("name", "")))

        idle.sort()
        return [name for _, name in idle[:-1] if name]
