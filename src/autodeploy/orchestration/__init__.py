"""
Orchestration layer for autodeploy workflows.

Sits between the CLI (presentation) and the deployment/services layers.

Architecture:
- DeployOrchestrator: deploy, health check, rollback and notifications
- DeploymentReport: terminal result and CI outputs
"""

from .deploy_orchestrator import DeployOrchestrator, DeploymentReport, write_ci_outputs

__all__ = ["DeployOrchestrator", "DeploymentReport", "write_ci_outputs"]
