# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: session.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Run context wiring the runner, folder ledger and teardown paths.
# -----------------------------------------------------------------------------
import atexit
import signal
import sys
from pathlib import Path
from types import FrameType
from typing import NoReturn

from bootstrap_linux.config import RunConfig
from bootstrap_linux.errors import FatalError
from bootstrap_linux.logs import LogSink, Severity
from bootstrap_linux.runner import CommandLike, CommandRunner
from bootstrap_linux.tracking import FolderTracker, TemporaryWorkspace

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGHUP)


class RunSession:
    """
    Everything one bootstrap run shares: config, log sink, runner and ledgers.

    Used as a context manager around the whole run. Entering installs the
    signal handlers and the atexit hook and creates the temporary workspace;
    every way out (normal exit, FatalError, any other exception, a signal,
    interpreter shutdown) goes through the same ``teardown``, which only does
    its work once.
    """

    def __init__(self, config: RunConfig, sink: LogSink | None = None) -> None:
        self.config = config
        self.sink = sink or LogSink.from_config(config)
        self.runner = CommandRunner(config, self.sink)
        self.tracker = FolderTracker(self.sink)
        self.workspace = TemporaryWorkspace(config.tmp_dir, self.sink)
        self._torn_down = False
        self._previous_handlers: dict[int, object] = {}

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run

    @property
    def tmp_dir(self) -> Path:
        return self.workspace.path

    def log(self, severity: Severity, message: str) -> None:
        self.sink.log(severity, message)

    def run(self, command: CommandLike) -> int:
        return self.runner.run(command)

    def create_folder(self, *paths: str | Path) -> None:
        self.tracker.create(*paths)

    def create_temp_dir(self) -> None:
        self.workspace.create()

    def die(self, message: str, exit_code: int = 1) -> NoReturn:
        """Abort the run; the failure is reported once, when the session exits."""
        raise FatalError(message, exit_code)

    # --- Teardown ---

    def teardown(self) -> None:
        """Prune tracked folders and delete the workspace, at most once."""
        if self._torn_down:
            return
        self._torn_down = True
        try:
            self.tracker.cleanup()
        finally:
            self.workspace.destroy()

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        sig_name = signal.Signals(signum).name
        self.sink.warning(f"Script interrupted by {sig_name}. Cleaning up.")
        self.teardown()
        # Exit with appropriate code (128 + signal number)
        sys.exit(128 + signum)

    def install_signal_handlers(self) -> None:
        for sig in HANDLED_SIGNALS:
            self._previous_handlers[sig] = signal.signal(sig, self._handle_signal)

    def restore_signal_handlers(self) -> None:
        for sig, handler in self._previous_handlers.items():
            signal.signal(sig, handler)
        self._previous_handlers.clear()

    def __enter__(self) -> "RunSession":
        self.install_signal_handlers()
        atexit.register(self.teardown)
        try:
            self.create_temp_dir()
        except BaseException:
            self.__exit__(*sys.exc_info())
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if isinstance(exc, FatalError):
            self.sink.failure(exc.message)
        self.teardown()
        self.restore_signal_handlers()
        atexit.unregister(self.teardown)
        self.sink.close()
        return False
