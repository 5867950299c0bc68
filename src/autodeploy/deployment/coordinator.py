#!/usr/bin/env python3
"""
Deployment Coordinator - drives a deployer through its lifecycle.

Pure dispatch plus error normalization: every failure raised by a deployer
is turned into a failure-shaped DeploymentOutcome, so callers never see a
raw exception from deploy() or rollback().

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
from typing import Optional

from autodeploy.core.config import DeploymentRequest
from autodeploy.core.console import Console

from .base import BaseDeployer, DeploymentOutcome
from .factory import DeployerFactory


logger = logging.getLogger(__name__)


class DeploymentCoordinator:
    """Selects the deployer for a request and runs deploy/rollback."""

    def __init__(self, request: DeploymentRequest, console: Optional[Console] = None):
        """
        Initialize coordinator.

        Args:
            request: Validated deployment request
            console: Optional command runner passed to the deployer

        Raises:
            UnsupportedPlatformError: If no deployer handles the platform
        """
        self.request = request
        self.deployer: BaseDeployer = DeployerFactory.create(request, console=console)

    def deploy(self) -> DeploymentOutcome:
        """Run validate -> deploy -> post-deployment tasks."""
        try:
            logger.info(
                "Deploying %s to %s", self.request.app_name, self.request.environment
            )
            self.deployer.validate()
            outcome = self.deployer.deploy()
        except Exception as e:
            logger.error("Deployment failed: %s", e)
            return DeploymentOutcome.failed(str(e) or type(e).__name__)

        try:
            self.deployer.post_deployment_tasks()
        except Exception as e:
            logger.warning("Post-deployment tasks failed: %s", e)

        return outcome

    def rollback(self) -> DeploymentOutcome:
        """Revert using the deployer's rollback."""
        try:
            logger.info("Initiating rollback...")
            return self.deployer.rollback()
        except Exception as e:
            logger.error("Rollback failed: %s", e)
            return DeploymentOutcome.failed(str(e) or type(e).__name__)
