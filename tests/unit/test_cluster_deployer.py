#!/usr/bin/env python3
"""
Unit tests for the Kubernetes deployer.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import json
from dataclasses import replace

import pytest

from autodeploy.core.errors import (
    ArtifactNotFoundError,
    DeploymentError,
    RollbackError,
    ToolUnavailableError,
)
from autodeploy.deployment.cluster import ClusterDeployer


def _replica_set(name, revision, replicas):
    return {
        "metadata": {
            "name": name,
            "annotations": {"deployment.kubernetes.io/revision": str(revision)},
        },
        "spec": {"replicas": replicas},
    }


@pytest.mark.unit
class TestValidate:
    """Pre-flight checks."""

    def test_kubectl_not_available(self, k8s_request, make_console):
        console = make_console(failures=["kubectl version --client"])

        with pytest.raises(ToolUnavailableError, match="kubectl is not available"):
            ClusterDeployer(k8s_request, console).validate()

    def test_manifest_missing_on_disk(self, k8s_request, fake_console, tmp_path):
        missing = str(tmp_path / "missing.yaml")
        deployer = ClusterDeployer(replace(k8s_request, k8s_manifest=missing), fake_console)

        with pytest.raises(ArtifactNotFoundError, match="Kubernetes manifest file not found"):
            deployer.validate()

    def test_valid(self, k8s_request, fake_console):
        ClusterDeployer(k8s_request, fake_console).validate()
        assert fake_console.joined() == ["kubectl version --client"]


@pytest.mark.unit
class TestDeploy:
    """kubectl apply then wait for the rollout."""

    def test_apply_and_rollout(self, k8s_request, fake_console, manifest_file):
        outcome = ClusterDeployer(k8s_request, fake_console).deploy()

        assert outcome.success is True
        assert outcome.deployment_url == "http://api.production.svc.cluster.local"
        assert outcome.deployment_id.startswith("api-")
        assert fake_console.joined() == [
            f"kubectl apply -f {manifest_file}",
            "kubectl rollout status deployment/api --timeout=300s",
        ]

    def test_rollout_failure(self, k8s_request, make_console):
        console = make_console(failures=["kubectl rollout status"])

        with pytest.raises(DeploymentError, match="Kubernetes deployment failed"):
            ClusterDeployer(k8s_request, console).deploy()

    def test_apply_failure_skips_rollout(self, k8s_request, make_console):
        console = make_console(failures=["kubectl apply"])

        with pytest.raises(DeploymentError):
            ClusterDeployer(k8s_request, console).deploy()
        assert not console.ran("kubectl rollout")


@pytest.mark.unit
class TestRollback:
    """Revision-based undo."""

    def test_undo_and_wait(self, k8s_request, fake_console):
        outcome = ClusterDeployer(k8s_request, fake_console).rollback()

        assert outcome.success is True
        assert outcome.deployment_id.startswith("rollback-")
        assert fake_console.joined() == [
            "kubectl rollout undo deployment/api",
            "kubectl rollout status deployment/api --timeout=300s",
        ]

    def test_undo_failure(self, k8s_request, make_console):
        console = make_console(failures=["kubectl rollout undo"])

        with pytest.raises(RollbackError, match="Kubernetes rollback failed"):
            ClusterDeployer(k8s_request, console).rollback()


@pytest.mark.unit
class TestPostDeploymentTasks:
    """Replica set cleanup keeps rollout history usable."""

    def test_stale_replica_sets_keep_newest_idle(self):
        listing = {
            "items": [
                _replica_set("api-3", 3, 2),
                _replica_set("api-1", 1, 0),
                _replica_set("api-2", 2, 0),
            ]
        }

        assert ClusterDeployer._stale_replica_sets(listing) == ["api-1"]

    def test_no_idle_replica_sets(self):
        listing = {"items": [_replica_set("api-1", 1, 3)]}
        assert ClusterDeployer._stale_replica_sets(listing) == []

    def test_deletes_only_stale(self, k8s_request, make_console):
        listing = {
            "items": [
                _replica_set("api-4", 4, 2),
                _replica_set("api-3", 3, 0),
                _replica_set("api-2", 2, 0),
                _replica_set("api-1", 1, 0),
            ]
        }
        console = make_console(responses={"kubectl get rs": json.dumps(listing)})

        ClusterDeployer(k8s_request, console).post_deployment_tasks()

        assert console.ran("kubectl delete rs api-1")
        assert console.ran("kubectl delete rs api-2")
        assert not console.ran("kubectl delete rs api-3")
        assert not console.ran("kubectl delete rs api-4")

    def test_invalid_listing_is_swallowed(self, k8s_request, make_console):
        console = make_console(responses={"kubectl get rs": "not json"})

        ClusterDeployer(k8s_request, console).post_deployment_tasks()

        assert not console.ran("kubectl delete")
