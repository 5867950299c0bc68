"""
Deployment layer for single-shot application deployments.

Provides deployer implementations for docker, Kubernetes and serverless
targets. Uses Factory pattern for creating the matching deployer.

Architecture:
- BaseDeployer: Abstract base class defining the deployer lifecycle
- ContainerDeployer: docker CLI deployment with backup-by-rename rollback
- ClusterDeployer: kubectl deployment with revision-based rollback
- FunctionDeployer: serverless CLI deployment (no rollback support)
- DeployerFactory: Factory for creating deployer instances
- DeploymentCoordinator: Drives a deployer and normalizes outcomes

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from .base import BaseDeployer, DeploymentOutcome
from .cluster import ClusterDeployer
from .config_loader import ConfigLoader
from .container import ContainerDeployer
from .coordinator import DeploymentCoordinator
from .factory import DeployerFactory
from .function import FunctionDeployer

__all__ = [
    "BaseDeployer",
    "DeploymentOutcome",
    "ClusterDeployer",
    "ConfigLoader",
    "ContainerDeployer",
    "DeploymentCoordinator",
    "DeployerFactory",
    "FunctionDeployer",
]
