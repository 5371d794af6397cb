# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: probes.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Read-only environment probes and the information sections.
# -----------------------------------------------------------------------------
import grp
import os
import platform
import shutil
import socket
from dataclasses import dataclass
from pathlib import Path

from bootstrap_linux.logs import multiline
from bootstrap_linux.runner import CommandRunner
from bootstrap_linux.session import RunSession

OS_RELEASE = Path("/etc/os-release")
CPUINFO = Path("/proc/cpuinfo")
MEMINFO = Path("/proc/meminfo")

REQUIRED_COMMANDS = ("git", "lspci", "openssl", "ssh-agent", "sudo", "tar", "uname")
SUPPORTED_DISTROS = ("Fedora",)
SUDO_GROUPS = {"wheel", "sudo", "admin"}
GPU_CLASSES = ("VGA compatible controller", "3D controller", "Display controller")


# --- Distribution ---


def read_os_release(path: Path = OS_RELEASE) -> dict[str, str]:
    """Parse an os-release file into a dict; a missing file gives {}."""
    info: dict[str, str] = {}
    try:
        with open(path) as fh:
            for line in fh:
                line = line.strip()
                if "=" in line and not line.startswith("#"):
                    key, _, val = line.partition("=")
                    info[key] = val.strip('"').strip("'")
    except FileNotFoundError:
        return {}
    return info


def is_fedora(info: dict[str, str]) -> bool:
    return info.get("ID", "").lower() == "fedora"


def is_debian(info: dict[str, str]) -> bool:
    return info.get("ID", "").lower() == "debian" or "debian" in info.get(
        "ID_LIKE", ""
    ).lower().split()


def os_name(info: dict[str, str]) -> str:
    return info.get("NAME", "Unknown")


def os_version(info: dict[str, str]) -> str:
    return info.get("VERSION_ID", "Unknown")


# --- Hardware ---


@dataclass
class CpuInfo:
    model: str = "Unknown"
    vendor: str = "Unknown"
    cores: int = 0
    threads: int = 0


def read_cpu_info(path: Path = CPUINFO) -> CpuInfo:
    cpu = CpuInfo()
    try:
        text = path.read_text()
    except OSError:
        return cpu
    for line in text.splitlines():
        key, sep, val = line.partition(":")
        if not sep:
            continue
        key, val = key.strip(), val.strip()
        if key == "processor":
            cpu.threads += 1
        elif key == "model name" and cpu.model == "Unknown":
            cpu.model = val
        elif key == "vendor_id" and cpu.vendor == "Unknown":
            cpu.vendor = val
        elif key == "cpu cores" and not cpu.cores and val.isdigit():
            cpu.cores = int(val)
    if not cpu.cores:
        cpu.cores = cpu.threads
    return cpu


def mem_total(path: Path = MEMINFO) -> str:
    """Total memory as a human readable string (``15.5 GiB``)."""
    try:
        text = path.read_text()
    except OSError:
        return "Unknown"
    for line in text.splitlines():
        if line.startswith("MemTotal:"):
            parts = line.split()
            if len(parts) >= 2 and parts[1].isdigit():
                return f"{int(parts[1]) / 1024 / 1024:.1f} GiB"
    return "Unknown"


def gpu_list(runner: CommandRunner) -> list[str]:
    """GPU descriptions reported by ``lspci``."""
    result = runner.probe(["lspci"])
    if result.returncode != 0:
        return []
    gpus = []
    for line in result.stdout.splitlines():
        for gpu_class in GPU_CLASSES:
            marker = f"{gpu_class}: "
            if marker in line:
                gpus.append(line.split(marker, 1)[1].strip())
                break
    return gpus


def gpu_is_nvidia(gpus: list[str]) -> bool:
    return any("nvidia" in gpu.lower() for gpu in gpus)


# --- User ---


def is_root() -> bool:
    return os.geteuid() == 0


def user_groups() -> set[str]:
    names = set()
    for gid in os.getgroups():
        try:
            names.add(grp.getgrgid(gid).gr_name)
        except KeyError:
            continue
    return names


def has_sudo() -> bool:
    """True for root or members of an administrative group."""
    return is_root() or bool(user_groups() & SUDO_GROUPS)


def missing_commands(names: tuple[str, ...] | list[str]) -> list[str]:
    return [name for name in names if shutil.which(name) is None]


# --- Information sections ---


def display_os_information(session: RunSession, info: dict[str, str] | None = None) -> None:
    info = read_os_release() if info is None else info
    session.sink.info(f"Distro: {os_name(info)}")
    session.sink.info(f"Distro Version: {os_version(info)}")
    session.sink.info(f"Kernel: {platform.release()}")
    session.sink.info(f"Hostname: {socket.gethostname()}")


def display_hardware_information(session: RunSession) -> list[str]:
    """Log CPU, memory and GPU details; returns the GPU list."""
    cpu = read_cpu_info()
    session.sink.info(f"CPU Model Name: {cpu.model}")
    session.sink.info(f"CPU Vendor: {cpu.vendor}")
    session.sink.info(f"CPU Cores: {cpu.cores}")
    session.sink.info(f"CPU Threads: {cpu.threads}")
    session.sink.info(f"RAM: {mem_total()}")
    gpus = gpu_list(session.runner)
    session.sink.info(multiline(f"GPU: {len(gpus)} GPU(s) found.", "\n".join(gpus)))
    return gpus


def display_user_information(session: RunSession) -> None:
    user = os.environ.get("USER", "Unknown")
    session.sink.info(f"User: {user}")
    session.sink.info(f"Home: {Path.home()}")
    session.sink.info(f"Privileged: {'yes' if has_sudo() else 'no'}")
    for var in ("XDG_CONFIG_HOME", "XDG_PROJECTS_DIR", "SSHHOME", "GNUPGHOME"):
        session.sink.info(f"{var}: {os.environ.get(var, 'Not Set!')}")


# --- Checks ---


def check_required_commands(
    session: RunSession, names: tuple[str, ...] = REQUIRED_COMMANDS
) -> None:
    session.sink.info("Checking the required applications are installed.")
    missing = missing_commands(names)
    for name in missing:
        session.sink.failure(f"'{name}' must be installed!")
    if len(missing) > 1:
        session.die("Missing required applications! Make sure you install them!")
    if len(missing) == 1:
        session.die("Missing required application! Make sure you install it!")
    session.sink.info("Required applications are installed.")


def check_distro_supported(session: RunSession, info: dict[str, str] | None = None) -> None:
    info = read_os_release() if info is None else info
    if is_fedora(info):
        session.sink.success("Distribution is supported.")
        return
    session.sink.warning(
        f"The Following distributions are supported: {', '.join(SUPPORTED_DISTROS)}."
    )
    session.die(f"The distribution '{os_name(info)}' is not supported!")
