# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: cli.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Typer command line interface for the bootstrap toolkit.
# -----------------------------------------------------------------------------
import shlex
from pathlib import Path
from typing import Callable, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from bootstrap_linux import APP_NAME, VERSION
from bootstrap_linux.config import ExecutionMode, RunConfig
from bootstrap_linux.errors import FatalError
from bootstrap_linux.helpers import (
    create_env_folders,
    default_environment,
    ensure_ssh_agent,
    install_vault,
    package_manager_command,
    use_ssh_config,
)
from bootstrap_linux.logs import LogSink
from bootstrap_linux.probes import (
    check_distro_supported,
    check_required_commands,
    display_hardware_information,
    display_os_information,
    display_user_information,
    has_sudo,
    is_root,
)
from bootstrap_linux.prompts import Prompter
from bootstrap_linux.session import RunSession

app = typer.Typer(
    help="Bootstrap a Linux install. Every change goes through a dry-run aware runner.",
    no_args_is_help=True,
)
err_console = Console(stderr=True)


def _run_session(config: RunConfig, work: Callable[[RunSession], Optional[int]]) -> None:
    """Run *work* inside a session and turn its outcome into an exit code."""
    try:
        sink = LogSink.from_config(config)
    except OSError as e:
        err_console.print(f"[bold red]Cannot open log file {config.log_path}:[/bold red] {e}")
        raise typer.Exit(1)
    try:
        with RunSession(config, sink) as session:
            code = work(session) or 0
    except FatalError as e:
        raise typer.Exit(e.exit_code)
    if code:
        raise typer.Exit(code)


@app.callback()
def main(
    ctx: typer.Context,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Display the commands the script will run."
    ),
    root_ok: bool = typer.Option(
        False, "--root-ok", help="Allow the script to run as root (container CI)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs."),
    no_color: bool = typer.Option(
        False, "--no-color", help="Remove style and colors from output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Non error logs are not output to stderr."
    ),
    log_to_file: bool = typer.Option(
        False, "--log-to-file", "-l", help="Write the log to a file."
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="File to write the log to (implies --log-to-file)."
    ),
    log_append: bool = typer.Option(
        False, "--log-append", help="Append to the log file (implies --log-to-file)."
    ),
    prompt: bool = typer.Option(
        False, "--prompt", "-p", help="Prompt for configuration not passed in CLI."
    ),
    tmp_dir: Optional[Path] = typer.Option(
        None, "--tmp-dir", help="Temporary workspace, deleted at the end of the run."
    ),
):
    """Parse the global flags once into the run configuration."""
    overrides = {
        "root_ok": root_ok,
        "verbose": verbose,
        "quiet": quiet,
        "log_to_file": log_to_file,
        "log_append": log_append,
        "prompt": prompt,
    }
    # Only flags actually given override the BOOTSTRAP_* environment.
    overrides = {key: value for key, value in overrides.items() if value}
    if dry_run:
        overrides["mode"] = ExecutionMode.DRY_RUN
    if no_color:
        overrides["color"] = False
    if log_file is not None:
        overrides["log_file"] = log_file
    if tmp_dir is not None:
        overrides["tmp_dir"] = tmp_dir

    try:
        ctx.obj = RunConfig(**overrides)
    except ValidationError as e:
        err_console.print(f"[bold red]Invalid configuration:[/bold red] {e}")
        raise typer.Exit(2)


@app.command()
def info(ctx: typer.Context):
    """Display distribution, hardware and user information."""

    def work(session: RunSession) -> None:
        session.sink.section("Distribution Information")
        display_os_information(session)
        session.sink.line()
        session.sink.section("Hardware Information")
        display_hardware_information(session)
        session.sink.line()
        session.sink.section("User Information")
        display_user_information(session)
        session.sink.line()

    _run_session(ctx.obj, work)


@app.command()
def prepare(
    ctx: typer.Context,
    ssh_vault: str = typer.Option("", "--ssh-vault", "-s", help="URL of the encrypted SSH vault."),
    gpg_vault: str = typer.Option("", "--gpg-vault", "-g", help="URL of the encrypted GPG vault."),
):
    """Check the system and set up the user environment for a bootstrap."""
    config: RunConfig = ctx.obj

    def work(session: RunSession) -> None:
        sink = session.sink
        sink.banner(APP_NAME)
        if is_root():
            if not config.root_ok:
                session.die(
                    "Script shouldn't be run as root! "
                    "It will ask for sudo privileges on the commands that need it!"
                )
            sink.warning("You are running the script as root!")

        sink.section("Preparing the base bootstrap!")
        check_required_commands(session)
        ensure_ssh_agent(session)
        sink.success("Bootstrap is ready!")
        sink.line()

        sink.section("Distribution Information")
        display_os_information(session)
        check_distro_supported(session)
        sink.line()

        sink.section("Hardware Information")
        display_hardware_information(session)
        sink.success("Hardware is supported!")
        sink.line()

        sink.section("User Information")
        display_user_information(session)
        if not has_sudo():
            session.die("User needs privileges!")
        sink.success("User has privileges!")
        sink.line()

        sink.section("Setup Environment!")
        pkg_cmd = package_manager_command(session)
        env = default_environment()
        for name, path in env.items():
            sink.info(f"{name}: {path}")
        sink.info(f"Package Manager Command: {shlex.join(pkg_cmd)}")
        create_env_folders(session, env)
        sink.line()

        prompter = Prompter(config, console=sink.console)

        sink.section("Setup SSH!")
        url = ssh_vault or prompter.ask("SSH Vault URL (empty to skip)")
        if url:
            install_vault(session, url, env["SSHHOME"], "ssh")
            use_ssh_config(session, env["SSHHOME"])
        else:
            sink.warning("SSH setup is skipped!")
        sink.line()

        sink.section("Setup GPG!")
        url = gpg_vault or prompter.ask("GPG Vault URL (empty to skip)")
        if url:
            install_vault(session, url, env["GNUPGHOME"], "gpg")
        else:
            sink.warning("GPG setup is skipped!")
        sink.line()

        sink.section("Preparation Finished!")
        sink.success("System is ready for the install steps.")

    _run_session(config, work)


@app.command("exec")
def exec_commands(
    ctx: typer.Context,
    commands: List[str] = typer.Argument(
        ..., help="Command lines to run through the runner, one per argument."
    ),
):
    """Run command lines through the dry-run aware runner."""

    def work(session: RunSession) -> int:
        first_failure = 0
        for line in commands:
            status = session.run(line)
            if status:
                session.sink.failure(f"'{line}' exited {status}")
                first_failure = first_failure or status
        return first_failure

    _run_session(ctx.obj, work)


@app.command()
def version():
    """Print the version and exit."""
    typer.echo(f"{APP_NAME} v{VERSION}")
