# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: config.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Immutable run configuration loaded from the environment and CLI.
# -----------------------------------------------------------------------------
from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROG_NAME = "bootstrap-linux"
DEFAULT_TMP_DIR = Path("/tmp/deploy")
DEFAULT_LOG_FILE = Path(f"/var/log/{PROG_NAME}.log")


class ExecutionMode(Enum):
    """Whether mutating commands are executed or only displayed."""

    NORMAL = "normal"
    DRY_RUN = "dry_run"


class RunConfig(BaseSettings):
    """
    Process-wide settings for a bootstrap run.

    Built once at startup (environment variables prefixed with ``BOOTSTRAP_``
    give the defaults, CLI flags override them) and frozen afterwards, so the
    execution mode cannot change for the lifetime of the run.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOOTSTRAP_",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    mode: ExecutionMode = Field(
        ExecutionMode.NORMAL, description="Execute commands or only display them."
    )
    quiet: bool = Field(False, description="Only failures are written to stderr.")
    verbose: bool = Field(False, description="Show debug entries on stderr.")
    color: bool = Field(True, description="Style the console output.")
    log_to_file: bool = Field(False, description="Mirror the log to a file.")
    log_file: Path | None = Field(None, description="File the log is mirrored to.")
    log_append: bool = Field(False, description="Append to the log file.")
    tmp_dir: Path = Field(DEFAULT_TMP_DIR, description="Temporary workspace.")
    pkg_manager: str | None = Field(
        None, description="Package manager command line override."
    )
    root_ok: bool = Field(False, description="Allow running as root.")
    prompt: bool = Field(False, description="Prompt for settings not given.")

    @property
    def dry_run(self) -> bool:
        return self.mode is ExecutionMode.DRY_RUN

    @property
    def log_path(self) -> Path | None:
        """The file the log is mirrored to, or None when file logging is off."""
        # --log-file and --log-append both switch file logging on.
        if not (self.log_to_file or self.log_file or self.log_append):
            return None
        return self.log_file or DEFAULT_LOG_FILE
