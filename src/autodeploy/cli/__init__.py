#!/usr/bin/env python3
"""
CLI Package for autodeploy

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from .app import app, cli_main
from .constants import ExitCode, VALID_PLATFORMS
from .utils import (
    setup_logging,
    save_summary_with_feedback,
    display_report_table,
)
from .validators import load_request

__all__ = [
    "app",
    "cli_main",
    "ExitCode",
    "VALID_PLATFORMS",
    "setup_logging",
    "save_summary_with_feedback",
    "display_report_table",
    "load_request",
]
