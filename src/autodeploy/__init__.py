"""
autodeploy - single-shot application deployment for CI pipelines.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

__version__ = "1.0.0"
