#!/usr/bin/env python3
"""Module to run platform command-line tools.

This module provides a class to run external commands (docker, kubectl,
serverless) and capture their output.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""
# built-in modules
import logging
import os
import subprocess
import typing


logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """Raised when a command exits with a non-zero status.

    Attributes:
        command (list): The command that failed.
        returncode (int): The exit code.
        output (str): Combined stdout/stderr of the command.
    """

    def __init__(self, command: typing.List[str], returncode: int, output: str) -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        detail = output.strip().splitlines()[-1] if output.strip() else "no output"
        super().__init__(
            f"Command '{' '.join(command)}' failed with exit code {returncode}: {detail}"
        )


class Console:
    """Class to run console commands.

    Attributes:
        live_output (bool): Echo command output as it arrives.
    """

    def __init__(self, live_output: bool = False) -> None:
        """Constructor of the Console class.

        Args:
            live_output (bool): The live output flag.
        """
        self.live_output = live_output

    def sh(
        self,
        command: typing.List[str],
        can_fail: bool = False,
        timeout: int = 600,
        env: typing.Optional[typing.Dict[str, str]] = None,
    ) -> str:
        """Run a command without a shell.

        Args:
            command (list): The program and its arguments.
            can_fail (bool): Return the output instead of raising on failure.
            timeout (int): The timeout in seconds.
            env (dict): Extra environment variables for this invocation only.
                They are layered over the current process environment.

        Returns:
            str: The stripped output of the command.

        Raises:
            CommandError: If the command exits non-zero and can_fail is False.
            FileNotFoundError: If the program does not exist.
        """
        logger.debug("> %s", " ".join(command))

        child_env = None
        if env:
            child_env = dict(os.environ)
            child_env.update(env)

        proc = subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            universal_newlines=False,
            env=child_env,
        )

        try:
            if not self.live_output:
                raw_outs, _ = proc.communicate(timeout=timeout)
                outs = raw_outs.decode("utf-8", errors="replace")
            else:
                lines = []
                for raw_line in iter(proc.stdout.readline, b""):
                    line = raw_line.decode("utf-8", errors="replace")
                    print(line, end="")
                    lines.append(line)
                outs = "".join(lines)
                proc.stdout.close()
                proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            proc.kill()
            proc.communicate()
            raise CommandError(command, -1, f"timed out after {timeout}s") from exc

        if proc.returncode != 0 and not can_fail:
            raise CommandError(command, proc.returncode, outs)

        return outs.strip()
