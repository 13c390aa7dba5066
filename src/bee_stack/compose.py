#!/usr/bin/env python3
"""
Thin wrapper around ``<runtime> compose``.

All orchestration is done by the runtime; this module only builds the
command lines, runs them in the stack directory and maps failures to
ComposeError.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

from .errors import ComposeError, RuntimeMissing

logger = logging.getLogger(__name__)


class ComposeRunner:
    """Run compose and runtime commands for one stack directory."""

    def __init__(self, runtime: str, cwd: Optional[Path] = None):
        self.runtime = runtime
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()

    def run_cmd(self, cmd: list[str], capture_output: bool = False, check: bool = True) -> subprocess.CompletedProcess:
        """
        Run a command in the stack directory.

        With ``capture_output`` stdout/stderr are returned as text; otherwise
        output streams to the terminal.
        """
        logger.debug(f"Running: {' '.join(cmd)} (cwd={self.cwd})")
        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                capture_output=capture_output,
                text=True,
                check=False
            )
        except FileNotFoundError as e:
            raise RuntimeMissing(
                f"Container runtime '{self.runtime}' could not be executed.",
                f"Check the {cmd[0]} installation or the RUNTIME value in .env",
                show_help=True
            ) from e

        if check and result.returncode != 0:
            if capture_output and result.stderr:
                logger.debug(result.stderr.strip())
            raise ComposeError(
                f"Command failed with exit code {result.returncode}: {' '.join(cmd)}"
            )
        return result

    def compose_cmd(self, *args: str, profile: Optional[str] = None) -> list[str]:
        cmd = [self.runtime, 'compose']
        if profile:
            cmd += ['--profile', profile]
        return cmd + list(args)

    def up(self, profile: str) -> None:
        self.run_cmd(self.compose_cmd('up', '-d', profile=profile))

    def down(self, profile: str, volumes: bool = False) -> None:
        args = ['down', '--volumes'] if volumes else ['down']
        self.run_cmd(self.compose_cmd(*args, profile=profile))

    def ps_ids(self) -> list[str]:
        """IDs of all containers of the project, running or not. A failing ``ps`` counts as none."""
        result = self.run_cmd(self.compose_cmd('ps', '-aq'), capture_output=True, check=False)
        if result.returncode != 0:
            logger.debug(f"compose ps exited with {result.returncode}, assuming no containers")
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def config_services(self, profile: str) -> list[str]:
        result = self.run_cmd(self.compose_cmd('config', '--services', profile=profile), capture_output=True)
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def logs(self, service: str) -> str:
        result = self.run_cmd(self.compose_cmd('logs', service), capture_output=True, check=False)
        if result.returncode != 0:
            logger.warning(f"compose logs {service} exited with {result.returncode}")
        return result.stdout

    def version(self) -> str:
        return self.run_cmd(self.compose_cmd('version'), capture_output=True, check=False).stdout

    def runtime_version(self) -> str:
        return self.run_cmd([self.runtime, 'version'], capture_output=True, check=False).stdout

    def run_container(self, image: str, *args: str) -> int:
        """Run a throwaway container and return its exit code."""
        result = self.run_cmd([self.runtime, 'run', '--rm', image, *args], check=False)
        return result.returncode
