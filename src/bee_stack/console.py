#!/usr/bin/env python3
"""
Terminal output and logging setup.

User-facing messages go through the coloured helpers below. Diagnostic
tracing (commands executed, values detected) goes through ``logging`` and is
only visible with ``--log-level DEBUG``.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .config_constants import TROUBLESHOOTING_URL

# Color codes for output
ORANGE = '\033[1;33m'
BLUE = '\033[1;34m'
GREEN = '\033[92m'
RESET = '\033[0m'

MISSING_COMPOSE_MSG = f"""For installation instructions, see:
- {BLUE}Podman desktop:{RESET} https://podman.io
  ⚠️ install using the official installer (not through package manager like brew, apt, etc.)
  ⚠️ use rootful machine (default)
  ⚠️ use docker compatibility mode
- {BLUE}Rancher desktop:{RESET} https://rancherdesktop.io
- {BLUE}Docker desktop:{RESET} https://www.docker.com/
"""

logger = logging.getLogger(__name__)


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure logging module with specified level.
    """
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR
    }

    level = level_map.get(str(log_level).upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='[%(levelname)s] %(message)s',
        force=True  # Reconfigure if already configured
    )

    logger.debug(f"Logging configured: {str(log_level).upper()}")


def print_header(msg: str) -> None:
    print(f"{BLUE}{msg}{RESET}", flush=True)


def info(msg: str) -> None:
    print(msg, flush=True)


def success(msg: str) -> None:
    print(f"{GREEN}{msg}{RESET}", flush=True)


def warn(msg: str) -> None:
    print(f"{ORANGE}⚠️  {msg}{RESET}", flush=True)


def print_error(msg: str, details: Iterable[str] = ()) -> None:
    """
    Print an error with optional detail lines and the troubleshooting link.
    """
    print(f"{ORANGE}❗ERROR: {msg}{RESET}", flush=True)
    for line in details:
        print(f"{ORANGE}❗       {line}{RESET}", flush=True)
    print(f"❗\n{ORANGE}❗Visit the troubleshooting guide:{RESET}", flush=True)
    print(f"❗{BLUE}{TROUBLESHOOTING_URL}{RESET}", flush=True)


def print_install_help() -> None:
    print(f"\n{MISSING_COMPOSE_MSG}", flush=True)
