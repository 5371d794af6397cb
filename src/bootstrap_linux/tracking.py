# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: tracking.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Ledger of created folders and the scratch workspace teardown.
# -----------------------------------------------------------------------------
import errno
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from bootstrap_linux.errors import FatalError
from bootstrap_linux.logs import LogSink

# rmdir failures that only mean "already gone" or "something else lives here".
EXPECTED_STOP_ERRNOS = {errno.ENOENT, errno.ENOTEMPTY, errno.EEXIST, errno.EBUSY}


@dataclass
class RemovalResult:
    """Outcome of a best-effort removal: what went away and why it stopped."""

    path: Path
    removed: list[Path] = field(default_factory=list)
    error: OSError | None = None

    @property
    def ok(self) -> bool:
        """False only for failures other than a missing or non-empty directory."""
        return self.error is None or self.error.errno in EXPECTED_STOP_ERRNOS


def prune_empty(path: str | Path) -> RemovalResult:
    """
    Remove *path* and then each of its ancestors while they are empty.

    Behaves like ``rmdir -p --ignore-fail-on-non-empty``: the walk stops at the
    first directory that cannot be removed and the error is recorded instead
    of raised. Relative paths only climb through their own components.
    """
    path = Path(path)
    result = RemovalResult(path)
    for current in (path, *path.parents):
        if current == Path("."):
            break
        try:
            current.rmdir()
        except OSError as e:
            result.error = e
            break
        result.removed.append(current)
    return result


class FolderTracker:
    """Creates folders on request and remembers them for the final cleanup."""

    def __init__(self, sink: LogSink | None = None) -> None:
        self.sink = sink
        self.folders: list[Path] = []

    def create(self, *paths: str | Path) -> None:
        """Create each folder (and missing parents) and track it."""
        if not paths:
            raise FatalError('No arguments passed to "create_folder"')

        for raw in paths:
            folder = Path(raw)
            try:
                folder.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FatalError(f"Cannot create folder '{folder}': {e}") from e
            self.folders.append(folder)

    def cleanup(self) -> list[RemovalResult]:
        """
        Prune every tracked folder that is still an empty directory.

        Never raises: a folder that is not empty is the common case, and any
        other failure is only reported at debug level.
        """
        results = []
        for folder in self.folders:
            if not folder.is_dir():
                continue
            result = prune_empty(folder)
            results.append(result)
            if self.sink is None:
                continue
            for removed in result.removed:
                self.sink.debug(f"Removed empty folder '{removed}'")
            if not result.ok:
                self.sink.debug(f"Could not prune '{folder}': {result.error}")
        return results


class TemporaryWorkspace:
    """Scratch directory created at run start and deleted wholesale at the end."""

    def __init__(self, path: str | Path, sink: LogSink | None = None) -> None:
        self.path = Path(path)
        self.sink = sink

    def create(self) -> None:
        if self.sink is not None:
            self.sink.info(f"Creating temp directory '{self.path}'")
        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FatalError(f"Cannot create temp directory '{self.path}': {e}") from e

    def destroy(self) -> RemovalResult:
        """Remove the workspace and everything in it, never raising."""
        result = RemovalResult(self.path)
        try:
            if self.path.is_symlink() or self.path.is_file():
                self.path.unlink()
            elif self.path.is_dir():
                shutil.rmtree(self.path)
            else:
                return result
        except OSError as e:
            result.error = e
            if self.sink is not None:
                self.sink.debug(f"Could not delete temp directory '{self.path}': {e}")
            return result
        result.removed.append(self.path)
        return result
