#!/usr/bin/env python3
"""
Unit tests for the command runner.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import os
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from autodeploy.core.console import CommandError, Console


def _process(output=b"", returncode=0):
    proc = MagicMock()
    proc.communicate.return_value = (output, None)
    proc.returncode = returncode
    return proc


@pytest.mark.unit
class TestConsole:
    """Console.sh behaviour around subprocess."""

    @patch("autodeploy.core.console.subprocess.Popen")
    def test_returns_stripped_output(self, mock_popen):
        mock_popen.return_value = _process(b"  Docker version 24.0\n")

        assert Console().sh(["docker", "--version"]) == "Docker version 24.0"
        args, kwargs = mock_popen.call_args
        assert args[0] == ["docker", "--version"]
        assert kwargs["stderr"] == subprocess.STDOUT
        assert kwargs["env"] is None

    @patch("autodeploy.core.console.subprocess.Popen")
    def test_non_zero_exit_raises(self, mock_popen):
        mock_popen.return_value = _process(b"pulling\nError: No such image\n", returncode=1)

        with pytest.raises(CommandError) as exc_info:
            Console().sh(["docker", "image", "inspect", "web:1.0"])

        assert exc_info.value.returncode == 1
        assert str(exc_info.value) == (
            "Command 'docker image inspect web:1.0' failed with exit code 1: "
            "Error: No such image"
        )

    @patch("autodeploy.core.console.subprocess.Popen")
    def test_can_fail_returns_output(self, mock_popen):
        mock_popen.return_value = _process(b"not found", returncode=1)
        assert Console().sh(["kubectl", "get", "rs"], can_fail=True) == "not found"

    @patch("autodeploy.core.console.subprocess.Popen")
    def test_timeout_kills_process(self, mock_popen):
        proc = _process()
        proc.communicate.side_effect = [
            subprocess.TimeoutExpired(["kubectl"], 5),
            (b"", None),
        ]
        mock_popen.return_value = proc

        with pytest.raises(CommandError, match="timed out after 5s"):
            Console().sh(["kubectl", "rollout", "status"], timeout=5)
        proc.kill.assert_called_once()

    def test_env_is_layered_for_child_only(self, monkeypatch):
        monkeypatch.delenv("AWS_REGION", raising=False)

        with patch("autodeploy.core.console.subprocess.Popen") as mock_popen:
            mock_popen.return_value = _process()
            Console().sh(["serverless", "deploy"], env={"AWS_REGION": "eu-west-1"})

        child_env = mock_popen.call_args[1]["env"]
        assert child_env["AWS_REGION"] == "eu-west-1"
        assert child_env.get("PATH") == os.environ.get("PATH")
        assert "AWS_REGION" not in os.environ
