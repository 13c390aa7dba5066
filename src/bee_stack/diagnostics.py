#!/usr/bin/env python3
"""
Collect stack logs into a timestamped folder and zip archive for bug reports.

Layout:
    logs/<timestamp>/<service>.log   one file per compose service
    logs/<timestamp>/<runtime>.log   runtime and compose version output
    logs/<timestamp>/summary.toml    runtime, backend, services, .env keys
    logs/<timestamp>.zip
"""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

import tomli_w

from .compose import ComposeRunner
from .config_constants import (
    ENV_FILE,
    ISSUE_URL,
    LLM_BACKEND_KEY,
    LOGS_DIR,
    LOGS_SUMMARY_FILE,
    LOGS_TIMESTAMP_FORMAT,
    PROFILE_ALL,
)
from .console import BLUE, ORANGE, RESET, warn
from .env_file import parse_env_file

logger = logging.getLogger(__name__)


def build_summary(root: Path, runner: ComposeRunner, services: list[str], created: datetime) -> dict:
    """
    Describe the installation without leaking credentials: only .env key
    names are recorded, never their values.
    """
    env_values = parse_env_file(root / ENV_FILE)
    return {
        "created": created.strftime("%Y-%m-%dT%H:%M:%S"),
        "runtime": runner.runtime,
        "backend": env_values.get(LLM_BACKEND_KEY, ""),
        "services": services,
        "env": {
            "configured": bool(env_values),
            "keys": sorted(env_values),
        },
    }


def dump_logs(root: Path, runner: ComposeRunner, now: Optional[datetime] = None) -> Path:
    """
    Write service logs and version info, then zip the folder.

    Returns:
        Path of the logs folder
    """
    created = now or datetime.now()
    folder = root / LOGS_DIR / created.strftime(LOGS_TIMESTAMP_FORMAT)
    folder.mkdir(parents=True, exist_ok=True)

    services = runner.config_services(PROFILE_ALL)
    for service in services:
        logger.debug(f"Collecting logs for {service}")
        (folder / f"{service}.log").write_text(runner.logs(service), encoding="utf-8")

    (folder / f"{runner.runtime}.log").write_text(
        runner.runtime_version() + "\n" + runner.version(),
        encoding="utf-8"
    )

    summary = build_summary(root, runner, services, created)
    with open(folder / LOGS_SUMMARY_FILE, "wb") as f:
        tomli_w.dump(summary, f)

    archive = f"{folder}.zip"
    try:
        shutil.make_archive(str(folder), "zip", root_dir=folder.parent, base_dir=folder.name)
    except OSError as e:
        logger.debug(f"Failed to create {archive}: {e}")
        warn("Could not create the zip archive, please upload individual logs")

    relative = folder.relative_to(root)
    print(f"{ORANGE}Logs were created in ./{relative}{RESET}.", flush=True)
    print("If you have issues running bee-stack, please create an issue ", end="", flush=True)
    print(f"and attach the file {ORANGE}./{relative}.zip{RESET} at:", flush=True)
    print(f"{BLUE}{ISSUE_URL}{RESET}", flush=True)
    return folder
