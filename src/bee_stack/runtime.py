#!/usr/bin/env python3
"""
Container runtime and compose detection.

Resolution order for the runtime:
1. ``RUNTIME`` in the process environment
2. ``RUNTIME`` in the working directory's .env
3. Detection: installed runtimes on PATH, compose executable, compose version
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional

from .config_constants import (
    COMPOSE_EXECUTABLE,
    REQUIRED_COMPOSE_VERSION,
    RUNTIME_KEY,
    SUPPORTED_RUNTIMES,
)
from .env_file import read_env_value
from .errors import ComposeError, RuntimeMissing
from .prompts import Prompter

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"v?(\d+)\.(\d+)")


def find_runtimes() -> list[str]:
    """Return the supported runtimes installed on PATH, docker first."""
    found = [runtime for runtime in SUPPORTED_RUNTIMES if shutil.which(runtime)]
    logger.debug(f"Runtimes found on PATH: {found}")
    return found


def find_compose_executable() -> Optional[str]:
    """Locate docker-compose (``shutil.which`` covers POSIX and Windows lookups)."""
    path = shutil.which(COMPOSE_EXECUTABLE)
    logger.debug(f"{COMPOSE_EXECUTABLE} executable: {path or 'not found'}")
    return path


def get_compose_version(executable: str = COMPOSE_EXECUTABLE) -> str:
    """
    Run ``docker-compose version --short`` and return its output.

    Raises:
        ComposeError: If the executable cannot be run or reports a failure
    """
    try:
        result = subprocess.run(
            [executable, 'version', '--short'],
            capture_output=True,
            text=True,
            timeout=15
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        raise ComposeError(
            "Failed to retrieve compose version. Ensure docker-compose is correctly installed."
        ) from e

    version = (result.stdout or '').strip()
    if result.returncode != 0 or not version:
        logger.debug(f"compose version stderr: {(result.stderr or '').strip()}")
        raise ComposeError(
            "Failed to retrieve compose version. Ensure docker-compose is correctly installed."
        )
    return version


def parse_version(text: str) -> tuple[int, int]:
    """
    Extract (major, minor) from a version string.

    Examples:
        >>> parse_version('2.29.1')
        (2, 29)
        >>> parse_version('v2.26.0-desktop.1')
        (2, 26)
    """
    match = VERSION_PATTERN.search(text.strip())
    if not match:
        raise ComposeError(f"Unable to parse compose version '{text.strip()}'.")
    return int(match.group(1)), int(match.group(2))


def check_compose_version(version: str, required: str = REQUIRED_COMPOSE_VERSION) -> None:
    """Raise ComposeError if ``version`` is older than ``required``."""
    if parse_version(version) < parse_version(required):
        raise ComposeError(
            f"The compose version ({version}) does not meet the required version {required}."
        )
    logger.debug(f"Compose version {version} satisfies >= {required}")


def verify_installation() -> tuple[list[str], str]:
    """
    Validate runtimes and the compose tool.

    Returns:
        (installed runtimes, compose version)

    Raises:
        RuntimeMissing: No supported runtime installed (exit 1)
        ComposeError: Compose missing, unreadable or too old (exit 2)
    """
    runtimes = find_runtimes()
    if not runtimes:
        raise RuntimeMissing(
            "None of the supported container runtimes are installed (docker, rancher, or podman)",
            show_help=True
        )

    compose_path = find_compose_executable()
    if not compose_path:
        raise ComposeError("Compose extension is not installed.", show_help=True)

    version = get_compose_version(compose_path)
    check_compose_version(version)
    return runtimes, version


def detect_runtime(prompter: Prompter) -> str:
    """Detect the runtime to use, asking when several are installed."""
    runtimes, _ = verify_installation()
    if len(runtimes) > 1:
        return prompter.choose("Multiple runtimes detected. Select the runtime to use", runtimes)
    return runtimes[0]


def resolve_runtime(
    env_path: Path,
    prompter: Prompter,
    environ: Optional[Mapping[str, str]] = None
) -> str:
    """
    Return the configured runtime, falling back to detection.
    """
    environ = os.environ if environ is None else environ

    runtime = (environ.get(RUNTIME_KEY) or '').strip()
    if runtime:
        logger.debug(f"Using {RUNTIME_KEY}={runtime} from environment")
        return runtime

    runtime = (read_env_value(env_path, RUNTIME_KEY) or '').strip()
    if runtime:
        logger.debug(f"Using {RUNTIME_KEY}={runtime} from {env_path}")
        return runtime

    return detect_runtime(prompter)
