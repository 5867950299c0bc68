#!/usr/bin/env python3
"""
Unified error handling for autodeploy.

Defines the error taxonomy raised by configuration loading, the deployers
and the health verifier, plus a Rich-based handler that renders a single
terminal message for the first fatal error.

Taxonomy:
- ConfigurationError: missing/malformed input, raised before any platform action
- ToolUnavailableError / ArtifactNotFoundError: pre-flight validation failures
- DeploymentError: a platform action failed
- RollbackError: no prior state to return to, or rollback unsupported
- HealthCheckFailure: deployed application did not become healthy
- UnsupportedPlatformError: no deployer registered for the platform

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text


class ErrorCategory(Enum):
    """Error category enumeration."""

    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    DEPLOYMENT = "deployment"
    ROLLBACK = "rollback"
    HEALTH_CHECK = "health_check"
    PLATFORM = "platform"


@dataclass
class ErrorContext:
    """Where an error happened."""

    operation: str
    phase: Optional[str] = None
    component: Optional[str] = None
    app_name: Optional[str] = None
    environment: Optional[str] = None
    file_path: Optional[str] = None
    additional_info: Optional[Dict[str, Any]] = None


class AutoDeployError(Exception):
    """Base class for all autodeploy errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        context: Optional[ErrorContext] = None,
        recoverable: bool = False,
        suggestions: Optional[List[str]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.context = context
        self.recoverable = recoverable
        self.suggestions = suggestions or []
        self.cause = cause


class ConfigurationError(AutoDeployError):
    """Missing or malformed configuration."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", True)
        super().__init__(message, ErrorCategory.CONFIGURATION, **kwargs)


class ToolUnavailableError(AutoDeployError):
    """The platform command-line tool cannot be invoked."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, ErrorCategory.VALIDATION, **kwargs)


class ArtifactNotFoundError(AutoDeployError):
    """The referenced image, manifest or config does not resolve."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, ErrorCategory.VALIDATION, **kwargs)


class DeploymentError(AutoDeployError):
    """A platform deployment action failed."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, ErrorCategory.DEPLOYMENT, **kwargs)


class RollbackError(AutoDeployError):
    """No prior state could be restored."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", True)
        super().__init__(message, ErrorCategory.ROLLBACK, **kwargs)


class HealthCheckFailure(AutoDeployError):
    """The deployed application failed its health check."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("recoverable", True)
        super().__init__(message, ErrorCategory.HEALTH_CHECK, **kwargs)


class UnsupportedPlatformError(AutoDeployError):
    """No deployer is registered for the requested platform."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, ErrorCategory.PLATFORM, **kwargs)


_CATEGORY_DISPLAY = {
    ErrorCategory.CONFIGURATION: ("⚙️", "Configuration Error"),
    ErrorCategory.VALIDATION: ("⚠️", "Validation Error"),
    ErrorCategory.DEPLOYMENT: ("🚀", "Deployment Error"),
    ErrorCategory.ROLLBACK: ("⏪", "Rollback Error"),
    ErrorCategory.HEALTH_CHECK: ("🏥", "Health Check Error"),
    ErrorCategory.PLATFORM: ("🧩", "Platform Error"),
}


def create_error_context(operation: str, **kwargs) -> ErrorContext:
    """Convenience constructor for ErrorContext."""
    return ErrorContext(operation=operation, **kwargs)


class ErrorHandler:
    """Renders errors to a Rich console and the log."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose
        self.logger = logging.getLogger(__name__)

    def handle_error(
        self,
        error: BaseException,
        context: Optional[ErrorContext] = None,
        show_traceback: bool = False,
    ) -> None:
        """Display an error panel and log it."""
        if isinstance(error, AutoDeployError):
            emoji, title = _CATEGORY_DISPLAY[error.category]
            context = context or error.context
            suggestions = error.suggestions
            cause = error.cause
        else:
            emoji, title = "❌", type(error).__name__
            suggestions = []
            cause = error.__cause__

        body = Text(str(error), style="bold red")
        if context is not None:
            body.append(f"\n\nOperation: {context.operation}", style="dim")
            if context.component:
                body.append(f"\nComponent: {context.component}", style="dim")
            if context.app_name:
                body.append(f"\nApplication: {context.app_name}", style="dim")
            if context.file_path:
                body.append(f"\nFile: {context.file_path}", style="dim")
        if cause is not None:
            body.append(f"\n\nCaused by: {type(cause).__name__}: {cause}", style="yellow")
        if suggestions:
            body.append("\n\n💡 Suggestions:", style="bold cyan")
            for suggestion in suggestions:
                body.append(f"\n  • {suggestion}", style="cyan")

        self.logger.debug("Handled %s: %s", type(error).__name__, error)
        self.console.print(Panel(body, title=f"{emoji} {title}", border_style="red"))

        if self.verbose and show_traceback:
            self.console.print_exception()


_error_handler: Optional[ErrorHandler] = None


def set_error_handler(handler: Optional[ErrorHandler]) -> None:
    """Install the process-wide error handler."""
    global _error_handler
    _error_handler = handler


def get_error_handler() -> Optional[ErrorHandler]:
    """Return the process-wide error handler, if any."""
    return _error_handler


def handle_error(
    error: BaseException,
    context: Optional[ErrorContext] = None,
    show_traceback: bool = False,
) -> None:
    """Route an error to the global handler, falling back to logging."""
    if _error_handler is None:
        logging.error("%s: %s", type(error).__name__, error)
        return
    _error_handler.handle_error(error, context=context, show_traceback=show_traceback)
