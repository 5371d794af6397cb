# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: runner.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Dry-run aware command runner every mutating action goes through.
# -----------------------------------------------------------------------------
import os
import shlex
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from bootstrap_linux.config import RunConfig
from bootstrap_linux.logs import LogSink

# Exit status a shell reports for a command it cannot find.
COMMAND_NOT_FOUND = 127
# Exit status a shell reports for a file it cannot execute.
COMMAND_NOT_EXECUTABLE = 126
# Exit status a shell reports for a line it cannot parse.
COMMAND_SYNTAX_ERROR = 2


@dataclass(frozen=True)
class Command:
    """An argument vector with its working directory and environment overrides."""

    argv: tuple[str, ...]
    cwd: Path | None = None
    env: Mapping[str, str] = field(default_factory=dict)
    quiet_stdout: bool = False
    line: str | None = None

    def __post_init__(self) -> None:
        if not self.argv:
            raise ValueError("A command needs at least one argument.")
        object.__setattr__(self, "argv", tuple(str(arg) for arg in self.argv))

    @classmethod
    def parse(cls, line: str, **kwargs) -> "Command":
        """Split a command line the way a POSIX shell would."""
        return cls(tuple(shlex.split(line)), line=line, **kwargs)

    @classmethod
    def coerce(cls, command: "CommandLike") -> "Command":
        if isinstance(command, Command):
            return command
        if isinstance(command, str):
            return cls.parse(command)
        return cls(tuple(command))

    def render(self) -> str:
        """
        Form used for logs and dry runs: the caller's own line when the command
        was parsed from one, the shell-quoted argv otherwise.
        """
        text = self.line if self.line is not None else shlex.join(self.argv)
        if self.env:
            assignments = " ".join(
                f"{key}={shlex.quote(value)}" for key, value in self.env.items()
            )
            text = f"{assignments} {text}"
        if self.cwd is not None:
            text = f"cd {shlex.quote(str(self.cwd))} && {text}"
        if self.quiet_stdout:
            text = f"{text} 1> /dev/null"
        return text


CommandLike = Union[Command, str, Sequence[str]]


class CommandRunner:
    """
    The single choke point for commands that change the system.

    In normal mode commands are executed with inherited stdio and their exit
    status is returned untouched. In dry-run mode nothing is executed: the
    rendered command is logged with the dry-run severity and 0 is returned.
    Interpreting a non-zero status is always left to the caller, and no
    command, however malformed, makes the runner raise.
    """

    def __init__(self, config: RunConfig, sink: LogSink) -> None:
        self.config = config
        self.sink = sink

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run

    def _environment(self, command: Command) -> dict[str, str] | None:
        if not command.env:
            return None
        return {**os.environ, **command.env}

    def _spawn_failed(self, command: Command, error: OSError) -> int:
        if isinstance(error, PermissionError):
            self.sink.debug(f"Command not executable: {command.argv[0]} - {error}")
            return COMMAND_NOT_EXECUTABLE
        self.sink.debug(f"Command not found: {command.argv[0]} - {error}")
        return COMMAND_NOT_FOUND

    def _unparsable(self, text: str, error: ValueError) -> int:
        self.sink.failure(f"Cannot parse command '{text}': {error}")
        return COMMAND_SYNTAX_ERROR

    def run(self, command: CommandLike) -> int:
        try:
            command = Command.coerce(command)
        except ValueError as e:
            if self.dry_run:
                self.sink.dry(literal(command))
                return 0
            return self._unparsable(literal(command), e)

        if self.dry_run:
            self.sink.dry(command.render())
            return 0

        self.sink.debug(f"Running command: {command.render()}")
        try:
            process = subprocess.run(
                command.argv,
                check=False,
                cwd=command.cwd,
                env=self._environment(command),
                stdout=subprocess.DEVNULL if command.quiet_stdout else None,
            )
        except (FileNotFoundError, PermissionError) as e:
            return self._spawn_failed(command, e)
        if process.returncode != 0:
            self.sink.debug(f"Command exited {process.returncode}: {command.render()}")
        return process.returncode

    def pipe(self, producer: CommandLike, consumer: CommandLike) -> int:
        """
        Run ``producer | consumer`` without an intermediate file.

        This is the only place a pipeline is built in-process (decrypted
        archives streamed into tar). Dry runs still go through the dry-run log
        entry. The status follows ``pipefail``: the rightmost non-zero exit
        status, or 0.
        """
        try:
            producer = Command.coerce(producer)
            consumer = Command.coerce(consumer)
        except ValueError as e:
            text = f"{literal(producer)} | {literal(consumer)}"
            if self.dry_run:
                self.sink.dry(text)
                return 0
            return self._unparsable(text, e)

        if self.dry_run:
            self.sink.dry(f"{producer.render()} | {consumer.render()}")
            return 0

        self.sink.debug(f"Running pipeline: {producer.render()} | {consumer.render()}")
        try:
            first = subprocess.Popen(
                producer.argv,
                cwd=producer.cwd,
                env=self._environment(producer),
                stdout=subprocess.PIPE,
            )
        except (FileNotFoundError, PermissionError) as e:
            return self._spawn_failed(producer, e)

        try:
            second = subprocess.Popen(
                consumer.argv,
                cwd=consumer.cwd,
                env=self._environment(consumer),
                stdin=first.stdout,
                stdout=subprocess.DEVNULL if consumer.quiet_stdout else None,
            )
        except (FileNotFoundError, PermissionError) as e:
            first.kill()
            first.stdout.close()
            first.wait()
            return self._spawn_failed(consumer, e)

        # The consumer owns the read end from here on.
        first.stdout.close()
        consumer_status = second.wait()
        producer_status = first.wait()
        return consumer_status or producer_status

    def capture(self, command: CommandLike) -> subprocess.CompletedProcess:
        """
        Like ``run`` but captures stdout, for actions whose output is needed
        (``ssh-agent -s``). Dry runs log the command and return an empty,
        successful result.
        """
        try:
            parsed = Command.coerce(command)
        except ValueError as e:
            if self.dry_run:
                self.sink.dry(literal(command))
                return _result(command, 0)
            return _result(command, self._unparsable(literal(command), e), str(e))

        if self.dry_run:
            self.sink.dry(parsed.render())
            return _result(parsed.argv, 0)
        self.sink.debug(f"Running command: {parsed.render()}")
        return self._captured(parsed)

    def probe(self, command: CommandLike) -> subprocess.CompletedProcess:
        """
        Run a read-only query and capture its output, in both modes.

        Probes never change the system (``dnf repolist``, ``pgrep``, ``lspci``)
        so dry runs need their real answers to report accurately. A line that
        cannot be parsed is reported as a failure in both modes too.
        """
        try:
            parsed = Command.coerce(command)
        except ValueError as e:
            return _result(command, self._unparsable(literal(command), e), str(e))
        self.sink.debug(f"Probing: {parsed.render()}")
        return self._captured(parsed)

    def _captured(self, command: Command) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                command.argv,
                check=False,
                capture_output=True,
                text=True,
                cwd=command.cwd,
                env=self._environment(command),
            )
        except (FileNotFoundError, PermissionError) as e:
            return _result(command.argv, self._spawn_failed(command, e), str(e))


def literal(command: CommandLike) -> str:
    """The caller's text for *command*, even when it does not parse."""
    if isinstance(command, str):
        return command
    if isinstance(command, Command):
        return command.render()
    return shlex.join(str(arg) for arg in command)


def _result(args, returncode: int, stderr: str = "") -> subprocess.CompletedProcess:
    if isinstance(args, str):
        args = [args]
    return subprocess.CompletedProcess(
        args=list(args), returncode=returncode, stdout="", stderr=stderr
    )
