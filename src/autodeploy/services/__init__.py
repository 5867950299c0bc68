"""
Services used around a deployment: health verification and notifications.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from .health import HealthVerdict, HealthVerifier
from .notifications import GitHubContext, NotificationService

__all__ = ["HealthVerdict", "HealthVerifier", "GitHubContext", "NotificationService"]
