#!/usr/bin/env python3
"""
LLM provider catalogue.

Each provider lists the environment keys setup asks for. A key with a
default may be left empty; a key without one is required. Providers may
define a check that runs once their values are collected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .compose import ComposeRunner
from .config_constants import CURL_IMAGE, OLLAMA_FAQ_URL
from .console import BLUE, RESET, print_header
from .errors import ComposeError
from .prompts import Prompter


@dataclass(frozen=True)
class EnvField:
    name: str
    default: Optional[str] = None


ProviderCheck = Callable[[Dict[str, str], ComposeRunner], None]


@dataclass(frozen=True)
class Provider:
    name: str
    fields: List[EnvField] = field(default_factory=list)
    check: Optional[ProviderCheck] = None

    def configure(self, prompter: Prompter, runner: ComposeRunner) -> Dict[str, str]:
        """Prompt for every field, run the provider check, return the values."""
        values: Dict[str, str] = {}
        for env_field in self.fields:
            values[env_field.name] = prompter.prompt_value(env_field.name, env_field.default)
        if self.check is not None:
            self.check(values, runner)
        return values


def check_ollama(values: Dict[str, str], runner: ComposeRunner) -> None:
    """
    Verify Ollama is reachable from inside a container, not just the host.
    """
    url = values["OLLAMA_URL"]
    print_header("Checking Ollama connection")
    if runner.run_container(CURL_IMAGE, "--silent", "--show-error", url) == 0:
        print("", flush=True)
        return

    raise ComposeError(
        f"Ollama is not running or accessible from containers ({url}).",
        "Make sure you configured OLLAMA_HOST=0.0.0.0",
        f"see {OLLAMA_FAQ_URL}",
        f"or run ollama from command line {BLUE}OLLAMA_HOST=0.0.0.0 ollama serve{RESET}",
        f"Do not forget to pull the required LLMs {BLUE}ollama pull llama3.1{RESET}",
    )


# Menu order
PROVIDERS: List[Provider] = [
    Provider("watsonx", [
        EnvField("WATSONX_PROJECT_ID"),
        EnvField("WATSONX_API_KEY"),
        EnvField("WATSONX_REGION", "us-south"),
    ]),
    Provider("ollama", [
        EnvField("OLLAMA_URL", "http://host.docker.internal:11434"),
    ], check=check_ollama),
    Provider("bam", [
        EnvField("BAM_API_KEY"),
    ]),
    Provider("openai", [
        EnvField("OPENAI_API_KEY"),
    ]),
]


def provider_names() -> List[str]:
    return [provider.name for provider in PROVIDERS]


def get_provider(name: str) -> Provider:
    for provider in PROVIDERS:
        if provider.name == name:
            return provider
    raise KeyError(f"Unknown provider: {name}")
