#!/usr/bin/env python3
"""
Serverless Deployment - function-as-a-service deployment using the serverless CLI.

Cloud credentials are handed to the serverless process through its own
environment only; the orchestrator's environment is left untouched.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import re
from pathlib import Path
from typing import Dict, Optional

from autodeploy.core.config import PlatformKind
from autodeploy.core.console import CommandError
from autodeploy.core.errors import ArtifactNotFoundError, DeploymentError

from .base import BaseDeployer, DeploymentOutcome


ROLLBACK_NOT_SUPPORTED = "Serverless rollback not implemented - manual intervention required"

_ENDPOINT_HEADER = re.compile(r"^[ \t]*endpoints?:", re.IGNORECASE | re.MULTILINE)
_URL = re.compile(r"https?://[^\s\"']+")


class FunctionDeployer(BaseDeployer):
    """
    Serverless framework deployment using CLI commands.

    The serverless tool has no rollback primitive, so rollback() reports
    failure with a fixed diagnostic instead of pretending to succeed.
    """

    PLATFORM = PlatformKind.FUNCTION
    TOOL = "serverless"
    VERSION_ARGS = ["--version"]

    PROVIDER_DOMAIN = "amazonaws.com"
    DEPLOY_TIMEOUT = 1800

    @property
    def conventional_url(self) -> str:
        return f"https://{self.request.instance_name}.{self.PROVIDER_DOMAIN}"

    def validate(self) -> None:
        """Validate config reference, serverless CLI and config file."""
        config_path = self._require_artifact()
        self._check_tool()

        if not Path(config_path).is_file():
            raise ArtifactNotFoundError(
                f"Serverless config file not found: {config_path}",
                context=self._context("validate", file_path=config_path),
            )
        self.logger.info("✓ Serverless config %s found", config_path)

    def deploy(self) -> DeploymentOutcome:
        """Run serverless deploy for the request's stage."""
        deployment_id = self._new_deployment_id()

        try:
            output = self._run(
                "deploy",
                "--config",
                self.artifact,
                "--stage",
                self.request.environment,
                "--verbose",
                timeout=self.DEPLOY_TIMEOUT,
                env=self._credential_env(),
            )
        except CommandError as e:
            raise DeploymentError(
                f"Serverless deployment failed: {e}",
                context=self._context("deploy", file_path=self.artifact),
                cause=e,
            )

        self.logger.info("✓ Serverless deployment completed successfully")
        return DeploymentOutcome(
            success=True,
            deployment_id=deployment_id,
            deployment_url=self._resolve_url(output),
        )

    def rollback(self) -> DeploymentOutcome:
        self.logger.warning(ROLLBACK_NOT_SUPPORTED)
        return DeploymentOutcome.failed(ROLLBACK_NOT_SUPPORTED)

    def post_deployment_tasks(self) -> None:
        self.logger.info("✓ Serverless post-deployment tasks completed")

    def _credential_env(self) -> Dict[str, str]:
        """Environment additions for the serverless child process."""
        env = {}
        if self.request.has_aws_credentials:
            env["AWS_ACCESS_KEY_ID"] = self.request.aws_access_key_id
            env["AWS_SECRET_ACCESS_KEY"] = self.request.aws_secret_access_key
        if self.request.aws_region:
            env["AWS_REGION"] = self.request.aws_region
        return env

    def _resolve_url(self, output: str) -> str:
        url = self.parse_endpoint(output)
        if url is None:
            self.logger.debug("No endpoint in serverless output, using %s", self.conventional_url)
            return self.conventional_url
        return url

    @staticmethod
    def parse_endpoint(output: str) -> Optional[str]:
        """First URL listed under ``endpoint:``/``endpoints:`` in deploy output."""
        header = _ENDPOINT_HEADER.search(output or "")
        if header is None:
            return None
        indent = len(header.group(0)) - len(header.group(0).lstrip())
        first, _, rest = output[header.end():].partition("\n")
        block = [first]
        for line in rest.splitlines():
            if not line.strip():
                continue
            if len(line) - len(line.lstrip()) <= indent:
                break
            block.append(line)

        match = _URL.search("\n".join(block))
        return match.group(0) if match else None
