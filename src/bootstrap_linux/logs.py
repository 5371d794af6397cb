# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: logs.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Severity model and log sink (stderr console plus optional file).
# -----------------------------------------------------------------------------
import logging
from enum import Enum
from pathlib import Path

import pyfiglet
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from bootstrap_linux.config import RunConfig

LOGGER_NAME = "bootstrap_linux"
FILE_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LINE_WIDTH = 60


class NordColors:
    """Nord theme color palette for consistent UI styling."""

    # Polar Night (dark/background)
    NORD3 = "#4C566A"

    # Snow Storm (light/text)
    NORD4 = "#D8DEE9"

    # Frost (blue accents)
    NORD8 = "#88C0D0"
    NORD9 = "#81A1C1"

    # Aurora (status indicators)
    NORD11 = "#BF616A"  # Red (errors)
    NORD12 = "#D08770"  # Orange (sudo)
    NORD13 = "#EBCB8B"  # Yellow (warnings)
    NORD14 = "#A3BE8C"  # Green (success)
    NORD15 = "#B48EAD"  # Purple (dry run)


class Severity(Enum):
    """
    Log severities and how each one is displayed.

    Each member carries its short tag, the label printed in front of the
    message, the console style and the stdlib logging level used for the file
    mirror.
    """

    LOG = ("log", "[ LOG ]", NordColors.NORD4, logging.INFO)
    SUCCESS = ("suc", "[ SUC ]", f"bold {NordColors.NORD14}", logging.INFO)
    WARNING = ("war", "[ WAR ]", f"bold {NordColors.NORD13}", logging.WARNING)
    FAILURE = ("fai", "[ FAI ]", f"bold {NordColors.NORD11}", logging.ERROR)
    DRY_RUN = ("dry", "[ DRY ]", f"bold {NordColors.NORD15}", logging.INFO)
    SECTION = ("sec", "[ SEC ]", f"bold {NordColors.NORD8}", logging.INFO)
    SUDO = ("sud", "[ SUD ]", f"bold {NordColors.NORD12}", logging.INFO)
    DEBUG = ("dbg", "[ DBG ]", NordColors.NORD3, logging.DEBUG)

    def __init__(self, tag: str, label: str, style: str, level: int) -> None:
        self.tag = tag
        self.label = label
        self.style = style
        self.level = level

    @property
    def always_shown(self) -> bool:
        """Failures reach the console even in quiet mode."""
        return self is Severity.FAILURE


# Width of a label plus the separating space; continuation lines line up here.
LOG_LEFT_MARGIN = " " * (len(Severity.LOG.label) + 1)


def multiline(header: str, block: str) -> str:
    """
    Compose a header and a block of text into one log message.

    Every non-empty line of the block becomes a ``- line`` entry under the
    header. The sink indents continuation lines to the label margin.
    """
    entries = [f"- {line}" for line in block.splitlines() if line.strip()]
    return "\n".join([header, *entries])


def _indent(message: str) -> str:
    return f"\n{LOG_LEFT_MARGIN}".join(message.splitlines() or [""])


class LogSink:
    """
    Writes log entries to stderr and, optionally, mirrors them to a file.

    Quiet mode only affects the console: every entry still reaches the file.
    Debug entries are shown on the console in verbose mode only.
    """

    def __init__(
        self,
        quiet: bool = False,
        color: bool = True,
        log_file: Path | None = None,
        append: bool = False,
        verbose: bool = False,
        console: Console | None = None,
    ) -> None:
        self.quiet = quiet
        self.verbose = verbose
        self.console = console or Console(
            stderr=True, no_color=not color, highlight=False
        )
        self.log_file = log_file
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        # Remove existing handlers to avoid duplication if re-configured
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)

        if log_file is not None:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(
                log_file, mode="a" if append else "w", encoding="utf-8"
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, FILE_DATE_FORMAT))
            self.logger.addHandler(file_handler)

    @classmethod
    def from_config(cls, config: RunConfig, console: Console | None = None) -> "LogSink":
        return cls(
            quiet=config.quiet,
            color=config.color,
            log_file=config.log_path,
            append=config.log_append,
            verbose=config.verbose,
            console=console,
        )

    def suppressed(self, severity: Severity) -> bool:
        """True when *severity* is kept off the console."""
        if severity.always_shown:
            return False
        if self.quiet:
            return True
        return severity is Severity.DEBUG and not self.verbose

    def log(self, severity: Severity, message: str) -> None:
        text = _indent(str(message))
        if self.logger.handlers:
            self.logger.log(severity.level, f"{severity.label} {text}")
        if self.suppressed(severity):
            return
        body_style = severity.style if severity is Severity.SECTION else ""
        self.console.print(
            Text.assemble((severity.label, severity.style), " ", (text, body_style)),
            soft_wrap=True,
        )

    def success(self, message: str) -> None:
        self.log(Severity.SUCCESS, message)

    def warning(self, message: str) -> None:
        self.log(Severity.WARNING, message)

    def failure(self, message: str) -> None:
        self.log(Severity.FAILURE, message)

    def dry(self, message: str) -> None:
        self.log(Severity.DRY_RUN, message)

    def section(self, message: str) -> None:
        self.log(Severity.SECTION, message)

    def sudo(self, message: str) -> None:
        self.log(Severity.SUDO, message)

    def debug(self, message: str) -> None:
        self.log(Severity.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(Severity.LOG, message)

    def line(self) -> None:
        """Print a visual separator between phases."""
        if self.quiet:
            return
        self.console.print(Text("─" * LINE_WIDTH, style=NordColors.NORD3))

    def banner(self, title: str) -> None:
        """Print a striking header using pyfiglet."""
        if self.quiet:
            return
        ascii_art = pyfiglet.figlet_format(title, font="slant")
        self.console.print(
            Panel(
                Text(ascii_art, style=f"bold {NordColors.NORD8}"),
                border_style=f"bold {NordColors.NORD9}",
                expand=False,
            )
        )

    def close(self) -> None:
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)
