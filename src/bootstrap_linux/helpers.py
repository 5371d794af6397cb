# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: helpers.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Shared bootstrap actions, all routed through the command runner.
# -----------------------------------------------------------------------------
import os
import re
import shlex
from collections.abc import Mapping
from pathlib import Path

from bootstrap_linux.probes import is_debian, is_fedora, os_name, read_os_release
from bootstrap_linux.session import RunSession

FEDORA_PKG_CMD = ("sudo", "dnf", "--assumeyes", "--color=always")
DEBIAN_PKG_CMD = ("sudo", "apt-get", "--no-install-recommends", "--assume-yes")

GIT_CLONE_DEPTH = "500"
VAULT_CIPHER = (
    "enc", "-d", "-aes-256-cbc", "-md", "sha512", "-pbkdf2", "-iter", "100000",
)
AGENT_VARIABLE = re.compile(r"(SSH_AUTH_SOCK|SSH_AGENT_PID)=([^;]+);")


def package_manager_command(
    session: RunSession, info: dict[str, str] | None = None
) -> tuple[str, ...]:
    """The package manager command line, honouring the configured override."""
    if session.config.pkg_manager:
        return tuple(shlex.split(session.config.pkg_manager))
    info = read_os_release() if info is None else info
    if is_fedora(info):
        return FEDORA_PKG_CMD
    if is_debian(info):
        return DEBIAN_PKG_CMD
    session.die(f"No package manager known for '{os_name(info)}'!")


def default_environment(
    env: Mapping[str, str] | None = None, home: Path | None = None
) -> dict[str, Path]:
    """XDG and key-store locations, falling back to the usual defaults."""
    env = os.environ if env is None else env
    home = Path.home() if home is None else home

    config_home = Path(env.get("XDG_CONFIG_HOME", home / ".config"))
    projects_dir = Path(env.get("XDG_PROJECTS_DIR", home / "Projects"))
    data_home = Path(env.get("XDG_DATA_HOME", home / ".local" / "share"))
    return {
        "XDG_CONFIG_HOME": config_home,
        "XDG_PROJECTS_DIR": projects_dir,
        "XDG_DATA_HOME": data_home,
        "SSHHOME": Path(env.get("SSHHOME", data_home / "ssh")),
        "GNUPGHOME": Path(env.get("GNUPGHOME", data_home / "gnupg")),
        "DOTFILES_PROJ": projects_dir / "dotfiles",
    }


def create_env_folders(session: RunSession, env: Mapping[str, Path]) -> None:
    session.create_folder(
        env["XDG_CONFIG_HOME"],
        env["XDG_PROJECTS_DIR"],
        env["XDG_DATA_HOME"],
        env["SSHHOME"],
        env["GNUPGHOME"],
    )


def copy_as_root(
    session: RunSession, src: str | Path, dst: str | Path, mode: str = "644"
) -> bool:
    """Copy a file to a root-owned destination with the given permissions."""
    if not str(src):
        session.sink.failure("copy_as_root: Source file is an empty path!")
        return False
    if not str(dst):
        session.sink.failure("copy_as_root: Destination file is an empty path!")
        return False
    src, dst = Path(src), Path(dst)
    if not src.is_file():
        session.sink.failure(f"copy_as_root: Source file '{src}' is not a file!")
        return False

    statuses = [
        session.run(["sudo", "mkdir", "-p", str(dst.parent)]),
        session.run(["sudo", "cp", str(src), str(dst)]),
        session.run(["sudo", "chown", "root:root", str(dst)]),
        session.run(["sudo", "chmod", mode, str(dst)]),
    ]
    return not any(statuses)


def sync_git_repo(
    session: RunSession, repo: str, dst: str | Path, branch: str = "master"
) -> bool:
    """
    Make *dst* a checkout of *repo*.

    A fresh clone when *dst* is not a git repository yet; otherwise the
    ``origin`` remote is pointed at *repo* and *branch* is force checked out.
    """
    if not repo:
        session.sink.failure("sync_git_repo: Repository is an empty url!")
        return False
    if not str(dst):
        session.sink.failure("sync_git_repo: Destination is an empty path!")
        return False
    dst = Path(dst)

    if not (dst / ".git").is_dir():
        if session.run(["git", "clone", "--depth", GIT_CLONE_DEPTH, repo, str(dst)]):
            session.sink.failure(f"Failed to clone '{repo}' to '{dst}'!")
            return False
        session.sink.success(f"Repository '{repo}' cloned to '{dst}'")
        return True

    session.sink.warning(f"'{dst}' is already a git repo, modifying it to match the new repo!")
    remotes = session.runner.probe(["git", "-C", str(dst), "remote"]).stdout.split()
    if "origin" in remotes:
        session.sink.warning(f"'{dst}' already has an 'origin' remote. Changing it!")
        remote_cmd = ["git", "-C", str(dst), "remote", "set-url", "origin", repo]
    else:
        remote_cmd = ["git", "-C", str(dst), "remote", "add", "origin", repo]

    statuses = [
        session.run(remote_cmd),
        session.run(["git", "-C", str(dst), "fetch", f"--depth={GIT_CLONE_DEPTH}"]),
        session.run(["git", "-C", str(dst), "checkout", "-f", branch]),
        session.run(
            ["git", "-C", str(dst), "branch", f"--set-upstream-to=origin/{branch}", branch]
        ),
        session.run(["git", "-C", str(dst), "pull"]),
    ]
    if any(statuses):
        session.sink.failure(f"Repository '{repo}' could not be synced to '{dst}'!")
        return False
    session.sink.success(f"Repository '{repo}' initialized to '{dst}'")
    return True


def _dnf_repo_listed(
    session: RunSession, pkg_cmd: tuple[str, ...], state: str, name: str
) -> bool:
    result = session.runner.probe([*pkg_cmd, "repolist", state])
    return result.returncode == 0 and name in result.stdout


def dnf_repo_enabled(session: RunSession, pkg_cmd: tuple[str, ...], name: str) -> bool:
    return _dnf_repo_listed(session, pkg_cmd, "enabled", name)


def dnf_repo_disabled(session: RunSession, pkg_cmd: tuple[str, ...], name: str) -> bool:
    return _dnf_repo_listed(session, pkg_cmd, "disabled", name)


def ensure_ssh_agent(session: RunSession) -> str | None:
    """Reuse the user's ssh-agent or start one; returns the agent pid."""
    user = os.environ.get("USER") or os.environ.get("LOGNAME", "")
    found = session.runner.probe(["pgrep", "-u", user, "ssh-agent"])
    pids = found.stdout.split() if found.returncode == 0 else []
    if pids:
        session.sink.info(f"Using ssh-agent pid: {pids[0]}")
        return pids[0]

    session.sink.info("Creating a ssh-agent...")
    started = session.runner.capture(["ssh-agent", "-s"])
    if started.returncode != 0:
        session.sink.failure("Could not start a ssh-agent!")
        return None
    # Dry runs capture nothing, so the environment stays untouched.
    for key, value in AGENT_VARIABLE.findall(started.stdout):
        os.environ[key] = value
    return os.environ.get("SSH_AGENT_PID") if started.stdout else None


def crontab_list(session: RunSession) -> str:
    """``crontab -l`` where "no crontab for user" (status 1) is an empty list."""
    result = session.runner.probe(["crontab", "-l"])
    if result.returncode in (0, 1):
        return result.stdout if result.returncode == 0 else ""
    session.sink.failure(f"crontab -l exited {result.returncode}")
    return ""


def decrypt_vault(session: RunSession, archive: str | Path, dest: str | Path) -> int:
    """Stream an encrypted tar.gz archive through openssl into *dest*."""
    return session.runner.pipe(
        ["openssl", *VAULT_CIPHER, "-in", str(archive)],
        ["tar", "xz", "-C", str(dest)],
    )


def install_vault(session: RunSession, url: str, dest: Path, name: str) -> None:
    """
    Download, decrypt and lock down a key vault (ssh or gpg).

    The archive lands in the temporary workspace, so it never outlives the
    run. A failed download or decryption is fatal.
    """
    archive = session.tmp_dir / f"{name}.tar.gz"
    session.sink.info(f"Downloading {name.upper()} Vault from: '{url}'")
    if session.run(["curl", "-L", "--fail", url, "-o", str(archive)]):
        session.die(f"Failed to download '{url}'!")

    session.sink.info(f"Decoding {name.upper()} Vault...")
    if decrypt_vault(session, archive, dest):
        session.die(f"An Error occurred while decoding the {name.upper()} Vault!")

    user = os.environ.get("USER", "root")
    session.run(["sudo", "chown", "-R", f"{user}:{user}", str(dest)])
    session.run(["sudo", "chmod", "-R", "700", str(dest)])
    session.sink.success(f"{name.upper()} is now setup.")


def use_ssh_config(session: RunSession, ssh_home: Path) -> None:
    """Point git at the ssh config shipped in the vault, for this process."""
    value = f"/usr/bin/ssh -F {ssh_home / 'config'}"
    if session.dry_run:
        session.sink.dry(f'export GIT_SSH_COMMAND="{value}"')
        return
    os.environ["GIT_SSH_COMMAND"] = value
