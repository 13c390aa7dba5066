#!/usr/bin/env python3
"""
Reading, rendering and writing the stack's .env file.

The file is rendered from ``templates/env.j2`` and written through a staging
file that is renamed into place, so an interrupted setup never leaves a
partial .env behind.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Mapping, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from .config_constants import ENV_TEMPLATE, TEMPLATES_DIR, staged_env_path

logger = logging.getLogger(__name__)


def parse_env_file(env_path: Path) -> Dict[str, str]:
    """
    Parse KEY=VALUE lines. Blank lines and # comments are skipped and
    surrounding quotes are removed from values. A missing file yields {}.
    """
    values: Dict[str, str] = {}
    if not env_path.is_file():
        return values

    with open(env_path, 'r', encoding='utf-8') as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            key, val = line.split('=', 1)
            key = key.strip()
            if key.startswith('export '):
                key = key[len('export '):].strip()
            val = val.strip()
            if len(val) >= 2 and val[0] == val[-1] and val[0] in ('"', "'"):
                val = val[1:-1]
            values[key] = val

    return values


def read_env_value(env_path: Path, key: str) -> Optional[str]:
    return parse_env_file(env_path).get(key)


def render_env(backend: str, values: Mapping[str, str], runtime: str) -> str:
    """
    Render the .env content for a provider selection.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    try:
        template = env.get_template(ENV_TEMPLATE)
        return template.render(
            backend=backend,
            values=dict(values),
            runtime=runtime,
            generated_at=datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ'),
        )
    except TemplateError as e:
        logger.error(f"Failed to render {ENV_TEMPLATE}: {e}")
        raise


def write_env_atomic(env_path: Path, content: str) -> None:
    """
    Write ``content`` to the staging file, then rename it onto ``env_path``.
    """
    tmp_path = staged_env_path(env_path)
    try:
        with open(tmp_path, 'w', encoding='utf-8') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, env_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug(f"Wrote {env_path}")


def discard_staged_env(env_path: Path) -> None:
    """Remove a leftover staging file from an interrupted setup."""
    staged_env_path(env_path).unlink(missing_ok=True)
