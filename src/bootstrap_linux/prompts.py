# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: prompts.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Interactive prompts that stay silent unless prompting is enabled.
# -----------------------------------------------------------------------------
from rich.console import Console
from rich.prompt import Prompt

from bootstrap_linux.config import RunConfig
from bootstrap_linux.logs import NordColors


class Prompter:
    """Asks the user for settings that were not passed on the command line."""

    def __init__(self, config: RunConfig, console: Console | None = None) -> None:
        self.enabled = config.prompt
        self.console = console or Console(stderr=True, no_color=not config.color)

    def ask(self, text: str, default: str = "") -> str:
        """Get input from the user, or *default* when prompting is off."""
        if not self.enabled:
            return default
        return Prompt.ask(
            f"[bold {NordColors.NORD15}]{text}[/]",
            default=default,
            show_default=bool(default),
            console=self.console,
        )
