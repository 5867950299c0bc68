#!/usr/bin/env python3
"""
CLI Commands Package for autodeploy

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from .deploy import deploy
from .rollback import rollback
from .health import health_check
from .validate import validate

__all__ = ["deploy", "rollback", "health_check", "validate"]
