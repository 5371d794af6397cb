import io
import os

import pytest
from rich.console import Console

from bootstrap_linux.config import RunConfig
from bootstrap_linux.logs import LogSink
from bootstrap_linux.session import RunSession


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep BOOTSTRAP_* variables of the calling shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("BOOTSTRAP_"):
            monkeypatch.delenv(key)


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(output) -> Console:
    return Console(file=output, no_color=True, width=200, highlight=False)


@pytest.fixture
def make_sink(console):
    def factory(**kwargs) -> LogSink:
        return LogSink(console=console, **kwargs)

    return factory


@pytest.fixture
def workdir(tmp_path):
    # Pruning walks up through parents; a file here makes tmp_path the stop.
    (tmp_path / "keep").touch()
    return tmp_path


@pytest.fixture
def make_session(workdir, console):
    def factory(**overrides) -> RunSession:
        overrides.setdefault("tmp_dir", workdir / "ws")
        config = RunConfig(**overrides)
        return RunSession(config, LogSink.from_config(config, console=console))

    return factory
