#!/usr/bin/env python3
"""Interactive prompts used by setup and the lifecycle commands."""

from __future__ import annotations

import re
from typing import Callable, Optional, Sequence

from .console import print_error, print_header

Reader = Callable[[str], str]


class Prompter:
    """
    Read answers from the user.

    ``reader`` defaults to ``input`` and is swapped for a scripted callable in
    tests. With ``assume_yes`` every yes/no question is answered yes without
    reading input; menus and value prompts still ask.
    """

    def __init__(self, reader: Optional[Reader] = None, assume_yes: bool = False):
        self._read = reader or input
        self.assume_yes = assume_yes

    def choose(self, title: str, options: Sequence[str]) -> str:
        """Show a numbered menu and return the selected option."""
        if not options:
            raise ValueError("choose() needs at least one option")

        print_header(f"{title}:")
        range_text = f"[1-{len(options)}]"
        for idx, option in enumerate(options, start=1):
            print(f"[{idx}]: {option}", flush=True)

        while True:
            answer = self._read(f"Select {range_text}: ").strip()
            if not re.fullmatch(r"[0-9]+", answer):
                print_error("Please enter a valid number")
                continue
            selected = int(answer)
            if selected < 1 or selected > len(options):
                print_error(f"Number is not in {range_text}")
                continue
            return options[selected - 1]

    def ask_yes_no(self, question: str) -> bool:
        """Only an explicit ``y`` counts as yes."""
        if self.assume_yes:
            print(f"{question} (Y/n): y", flush=True)
            return True
        answer = self._read(f"{question} (Y/n): ")
        return answer.strip().lower() == "y"

    def prompt_value(self, name: str, default: Optional[str] = None) -> str:
        """
        Ask for the value of ``name``.

        Without a default the value is required and empty input is re-asked.
        Returns the trimmed answer, or the default for empty input.
        """
        hint = f" (leave empty for default '{default}')" if default is not None else ""
        while True:
            value = self._read(f"Provide {name}{hint}: ").strip()
            if value:
                return value
            if default is not None:
                return default.strip()
            print_error("Value is required")
