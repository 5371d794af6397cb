import pytest
from typer.testing import CliRunner

from bootstrap_linux import VERSION, cli
from bootstrap_linux.cli import app


@pytest.fixture
def invoke(workdir):
    runner = CliRunner()
    workspace = workdir / "ws"

    def call(*args: str):
        return runner.invoke(app, ["--tmp-dir", str(workspace), *args])

    call.workspace = workspace
    return call


def test_exec_dry_run(invoke):
    result = invoke("--dry-run", "exec", "rm -rf /important")
    assert result.exit_code == 0
    assert "[ DRY ] rm -rf /important" in result.output
    assert not invoke.workspace.exists()


def test_exec_exits_with_first_failure(invoke, workdir):
    marker = workdir / "ran"
    result = invoke("exec", "sh -c 'exit 5'", f"touch {marker}", "sh -c 'exit 6'")
    assert result.exit_code == 5
    assert "exited 5" in result.output
    assert "exited 6" in result.output
    assert marker.exists()


def test_quiet_hides_dry_run_entries(invoke):
    result = invoke("-q", "--dry-run", "exec", "echo hi")
    assert result.exit_code == 0
    assert "[ DRY ]" not in result.output


def test_log_file_mirror(invoke, workdir):
    log_file = workdir / "bootstrap.log"
    result = invoke("--dry-run", "--log-file", str(log_file), "exec", "dnf upgrade")
    assert result.exit_code == 0
    assert "[ DRY ] dnf upgrade" in log_file.read_text()


def test_environment_selects_dry_run(invoke, monkeypatch):
    monkeypatch.setenv("BOOTSTRAP_MODE", "dry_run")
    result = invoke("exec", "rm -rf /important")
    assert result.exit_code == 0
    assert "[ DRY ] rm -rf /important" in result.output


def test_invalid_environment_exits_2(invoke, monkeypatch):
    monkeypatch.setenv("BOOTSTRAP_MODE", "sometimes")
    result = invoke("exec", "true")
    assert result.exit_code == 2


def test_prepare_refuses_root(invoke, monkeypatch):
    monkeypatch.setattr(cli, "is_root", lambda: True)
    result = invoke("--dry-run", "prepare")
    assert result.exit_code == 1
    assert "[ FAI ] Script shouldn't be run as root!" in result.output
    assert not invoke.workspace.exists()


def test_prepare_stops_on_missing_commands(invoke, monkeypatch):
    monkeypatch.setattr(cli, "is_root", lambda: False)
    monkeypatch.setattr(cli, "check_required_commands", _missing_git)
    result = invoke("--dry-run", "prepare")
    assert result.exit_code == 1
    assert "Missing required application!" in result.output


def _missing_git(session):
    session.sink.failure("'git' must be installed!")
    session.die("Missing required application! Make sure you install it!")


def test_info(invoke):
    result = invoke("--dry-run", "--no-color", "info")
    assert result.exit_code == 0
    assert "[ SEC ] Distribution Information" in result.output
    assert "[ SEC ] User Information" in result.output


def test_version():
    result = CliRunner().invoke(app, ["version"])
    assert result.exit_code == 0
    assert VERSION in result.output


def test_unwritable_log_file_is_reported(invoke, workdir):
    blocker = workdir / "blocker"
    blocker.touch()
    result = invoke("--log-file", str(blocker / "run.log"), "exec", "true")
    assert result.exit_code == 1
    assert "Cannot open log file" in result.output


@pytest.mark.parametrize("line", ["", 'echo "abc'])
def test_exec_dry_run_logs_unparsable_lines(invoke, line):
    result = invoke("--dry-run", "exec", line)
    assert result.exception is None
    assert result.exit_code == 0
    assert f"[ DRY ] {line}".rstrip() in result.output


def test_exec_unparsable_line_fails_with_status_2(invoke):
    result = invoke("exec", 'echo "abc', "true")
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert result.exit_code == 2
    assert "Cannot parse command 'echo \"abc'" in result.output
