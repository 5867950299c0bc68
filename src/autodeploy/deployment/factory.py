#!/usr/bin/env python3
"""
Deployer Factory - Creates the deployer matching a request's platform.

Implements Factory pattern so the platform tag is matched exactly once,
when the deployer is built.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from typing import Dict, List, Optional, Type

from autodeploy.core.config import DeploymentRequest
from autodeploy.core.console import Console
from autodeploy.core.errors import UnsupportedPlatformError, create_error_context

from .base import BaseDeployer


class DeployerFactory:
    """
    Factory for creating deployer instances.

    Supports dynamic registration and creation of deployer types.
    Currently supports: docker, kubernetes/k8s, serverless
    """

    _deployers: Dict[str, Type[BaseDeployer]] = {}

    @classmethod
    def register(cls, platform: str, deployer_class: Type[BaseDeployer]):
        """
        Register a deployer for a platform name.

        Args:
            platform: Name of platform (e.g., "docker", "k8s")
            deployer_class: Class implementing BaseDeployer
        """
        cls._deployers[platform.lower()] = deployer_class

    @classmethod
    def deployer_class(cls, platform: str) -> Type[BaseDeployer]:
        """
        Look up the deployer class for a platform.

        Raises:
            UnsupportedPlatformError: If no deployer is registered
        """
        deployer_class = cls._deployers.get((platform or "").lower())
        if not deployer_class:
            available = ", ".join(cls.available_platforms())
            raise UnsupportedPlatformError(
                f"Unsupported deployment type: {platform}. Available: {available}",
                context=create_error_context("create_deployer", component="DeployerFactory"),
            )
        return deployer_class

    @classmethod
    def create(
        cls, request: DeploymentRequest, console: Optional[Console] = None
    ) -> BaseDeployer:
        """
        Create a deployer for the request's platform.

        Args:
            request: Deployment request with platform kind
            console: Optional command runner shared with the deployer

        Returns:
            Deployer instance for the specified platform

        Raises:
            UnsupportedPlatformError: If the platform is not registered
        """
        return cls.deployer_class(request.platform)(request, console=console)

    @classmethod
    def available_platforms(cls) -> List[str]:
        """
        Get list of available platform names.

        Returns:
            List of registered platform names
        """
        return list(cls._deployers.keys())


def register_default_deployers():
    """
    Register default deployer implementations.

    Called on module import to register built-in deployers.
    """
    from .cluster import ClusterDeployer
    from .container import ContainerDeployer
    from .function import FunctionDeployer

    DeployerFactory.register("docker", ContainerDeployer)
    DeployerFactory.register("kubernetes", ClusterDeployer)
    DeployerFactory.register("k8s", ClusterDeployer)
    DeployerFactory.register("serverless", FunctionDeployer)


# Auto-register on module import
register_default_deployers()
