import subprocess

import pytest

from bootstrap_linux import probes
from bootstrap_linux.errors import FatalError

FEDORA_RELEASE = """\
# comment line
NAME="Fedora Linux"
VERSION_ID=40
ID=fedora
"""

CPUINFO = """\
processor\t: 0
vendor_id\t: GenuineIntel
model name\t: Intel(R) Core(TM) i7
cpu cores\t: 2

processor\t: 1
vendor_id\t: GenuineIntel
model name\t: Intel(R) Core(TM) i7
cpu cores\t: 2
"""

LSPCI = """\
00:02.0 VGA compatible controller: Intel Corporation UHD Graphics 770
00:14.0 USB controller: Intel Corporation Alder Lake USB 3.2
01:00.0 3D controller: NVIDIA Corporation GA107M [GeForce RTX 3050]
"""


class FakeRunner:
    def __init__(self, stdout: str, returncode: int = 0) -> None:
        self.stdout = stdout
        self.returncode = returncode
        self.probed = []

    def probe(self, command):
        self.probed.append(command)
        return subprocess.CompletedProcess(command, self.returncode, self.stdout, "")


def test_read_os_release(tmp_path):
    path = tmp_path / "os-release"
    path.write_text(FEDORA_RELEASE)
    info = probes.read_os_release(path)
    assert info == {"NAME": "Fedora Linux", "VERSION_ID": "40", "ID": "fedora"}
    assert probes.is_fedora(info)
    assert not probes.is_debian(info)
    assert probes.os_name(info) == "Fedora Linux"
    assert probes.os_version(info) == "40"


def test_read_os_release_missing_file(tmp_path):
    info = probes.read_os_release(tmp_path / "missing")
    assert info == {}
    assert probes.os_name(info) == "Unknown"


def test_debian_family_is_detected_through_id_like():
    assert probes.is_debian({"ID": "ubuntu", "ID_LIKE": "ubuntu debian"})
    assert probes.is_debian({"ID": "debian"})
    assert not probes.is_debian({"ID": "arch"})


def test_read_cpu_info(tmp_path):
    path = tmp_path / "cpuinfo"
    path.write_text(CPUINFO)
    cpu = probes.read_cpu_info(path)
    assert cpu.model == "Intel(R) Core(TM) i7"
    assert cpu.vendor == "GenuineIntel"
    assert cpu.cores == 2
    assert cpu.threads == 2


def test_read_cpu_info_missing_file(tmp_path):
    assert probes.read_cpu_info(tmp_path / "missing") == probes.CpuInfo()


def test_mem_total(tmp_path):
    path = tmp_path / "meminfo"
    path.write_text("MemTotal:        8388608 kB\nMemFree:         1024 kB\n")
    assert probes.mem_total(path) == "8.0 GiB"
    assert probes.mem_total(tmp_path / "missing") == "Unknown"


def test_gpu_list():
    runner = FakeRunner(LSPCI)
    gpus = probes.gpu_list(runner)
    assert gpus == [
        "Intel Corporation UHD Graphics 770",
        "NVIDIA Corporation GA107M [GeForce RTX 3050]",
    ]
    assert probes.gpu_is_nvidia(gpus)
    assert runner.probed == [["lspci"]]


def test_gpu_list_without_lspci():
    assert probes.gpu_list(FakeRunner("", returncode=127)) == []
    assert not probes.gpu_is_nvidia([])


def test_missing_commands():
    assert probes.missing_commands(["sh", "no-such-command-for-bootstrap-tests"]) == [
        "no-such-command-for-bootstrap-tests"
    ]


def test_check_required_commands_passes(make_session, output):
    probes.check_required_commands(make_session(), ("sh",))
    assert "Required applications are installed." in output.getvalue()


def test_check_required_commands_single_missing(make_session, output):
    with pytest.raises(FatalError, match="Missing required application! "):
        probes.check_required_commands(make_session(), ("sh", "no-such-tool-a"))
    assert "[ FAI ] 'no-such-tool-a' must be installed!" in output.getvalue()


def test_check_required_commands_several_missing(make_session, output):
    with pytest.raises(FatalError, match="Missing required applications!"):
        probes.check_required_commands(make_session(), ("no-such-tool-a", "no-such-tool-b"))
    text = output.getvalue()
    assert "'no-such-tool-a' must be installed!" in text
    assert "'no-such-tool-b' must be installed!" in text


def test_check_distro_supported(make_session, output):
    session = make_session()
    probes.check_distro_supported(session, {"ID": "fedora", "NAME": "Fedora Linux"})
    assert "[ SUC ] Distribution is supported." in output.getvalue()

    with pytest.raises(FatalError, match="'Arch Linux' is not supported"):
        probes.check_distro_supported(session, {"ID": "arch", "NAME": "Arch Linux"})


def test_display_hardware_information_lists_gpus(make_session, output, monkeypatch):
    session = make_session()
    monkeypatch.setattr(session.runner, "probe", FakeRunner(LSPCI).probe)
    gpus = probes.display_hardware_information(session)
    assert len(gpus) == 2
    assert "GPU: 2 GPU(s) found." in output.getvalue()
    assert "- NVIDIA Corporation GA107M [GeForce RTX 3050]" in output.getvalue()


def test_display_os_information(make_session, output):
    probes.display_os_information(make_session(), {"NAME": "Fedora Linux", "VERSION_ID": "40"})
    text = output.getvalue()
    assert "[ LOG ] Distro: Fedora Linux" in text
    assert "[ LOG ] Distro Version: 40" in text
    assert "Kernel: " in text
