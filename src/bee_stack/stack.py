#!/usr/bin/env python3
"""
Stack lifecycle operations: setup, start, start:infra, stop, clean, check.

Each operation is a short sequence of prompts and compose invocations. Errors
propagate as BeeStackError subclasses and are reported by ``cli.main``.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from .compose import ComposeRunner
from .config_constants import (
    CODE_INTERPRETER_STORAGE,
    ENV_FILE,
    PROFILE_ALL,
    PROFILE_INFRA,
    TMP_DIR,
    UI_URL,
)
from .console import BLUE, RESET, info, print_header, success
from .env_file import discard_staged_env, render_env, write_env_atomic
from .errors import NotConfigured, UserAbort
from .prompts import Prompter
from .providers import get_provider, provider_names
from .runtime import verify_installation

logger = logging.getLogger(__name__)

WELCOME = (
    "🐝 Welcome to the bee-stack! You're just a few questions away from building agents!\n"
    "(Press ^C to exit)\n"
)


class Stack:
    """The bee-stack checkout in ``root``, driven through one runtime."""

    def __init__(self, root: Path, runtime: str, prompter: Prompter, runner: Optional[ComposeRunner] = None):
        self.root = Path(root)
        self.runtime = runtime
        self.prompter = prompter
        self.runner = runner or ComposeRunner(runtime, cwd=self.root)

    @property
    def env_path(self) -> Path:
        return self.root / ENV_FILE

    def is_configured(self) -> bool:
        return self.env_path.is_file()

    def setup(self, offer_start: bool = True) -> None:
        """
        Ask for a provider and its credentials, then write .env.

        Raises:
            UserAbort: Existing .env or stack data must be kept
        """
        print(WELCOME, flush=True)
        discard_staged_env(self.env_path)

        backend = self.prompter.choose("Choose LLM provider", provider_names())
        values = get_provider(backend).configure(self.prompter, self.runner)
        logger.debug(f"Collected keys for {backend}: {sorted(values)}")

        if self.is_configured():
            print("\n", flush=True)
            if not self.prompter.ask_yes_no(f"{ENV_FILE} file already exists. Do you want to override it?"):
                raise UserAbort(f"Kept the existing {ENV_FILE} file, configuration was not changed.")
            if self.runner.ps_ids():
                if not self.prompter.ask_yes_no("bee-stack data must be removed when changing configuration, are you sure?"):
                    raise UserAbort("Kept the existing bee-stack data, configuration was not changed.")
                self.clean()

        write_env_atomic(self.env_path, render_env(backend, values, self.runtime))
        success(f"Configuration written to {self.env_path}")

        if offer_start and self.prompter.ask_yes_no("Do you want to start bee-stack now?"):
            self.start()

    def start(self) -> None:
        """
        Start the full stack, running setup first when .env is missing.

        Raises:
            NotConfigured: User declined to configure the stack (exit 3)
        """
        if not self.is_configured():
            if not self.prompter.ask_yes_no("bee-stack is not yet configured, do you want to configure it now?"):
                raise NotConfigured("bee-stack is not configured. Run the setup command first.")
            self.setup(offer_start=False)

        self.runner.up(PROFILE_ALL)
        print(f"Done. You can visit the UI at {BLUE}{UI_URL}{RESET}", flush=True)

    def ensure_storage(self) -> None:
        (self.root / CODE_INTERPRETER_STORAGE).mkdir(parents=True, exist_ok=True)

    def start_infra(self) -> None:
        self.ensure_storage()
        self.runner.up(PROFILE_INFRA)

    def stop(self) -> None:
        self.runner.down(PROFILE_ALL)
        self.runner.down(PROFILE_INFRA)

    def clean(self) -> None:
        """Remove containers and volumes of both profiles and reset ./tmp."""
        self.runner.down(PROFILE_ALL, volumes=True)
        self.runner.down(PROFILE_INFRA, volumes=True)

        tmp_dir = self.root / TMP_DIR
        if tmp_dir.exists():
            logger.debug(f"Removing {tmp_dir}")
            shutil.rmtree(tmp_dir)
        self.ensure_storage()


def check_installation() -> None:
    """Verify runtimes and compose and print what was found."""
    runtimes, compose_version = verify_installation()
    print_header("Container runtime check")
    info(f"  Runtimes:        {', '.join(runtimes)}")
    info(f"  Compose version: {compose_version}")
    success("All requirements are met.")
