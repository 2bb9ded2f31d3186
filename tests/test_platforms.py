import pytest

import gow.platforms as platforms
from gow.config import ToolchainConfig
from gow.errors import PlatformError
from gow.locator import archive_extension


@pytest.mark.parametrize(
    "machine, expected",
    [
        ("i386", "386"),
        ("i686", "386"),
        ("x86_64", "amd64"),
        ("AMD64", "amd64"),
        ("aarch64", "arm64"),
        ("arm64", "arm64"),
        ("armv8l", "arm64"),
        ("arm", "armv6l"),
        ("armv6l", "armv6l"),
        ("armv7l", "armv6l"),
        ("ppc64le", "ppc64le"),
        ("ppc64", "ppc64le"),
    ],
)
def test_normalize_arch_table(machine, expected):
    assert platforms.normalize_arch(machine).value == expected


@pytest.mark.parametrize("machine", ["riscv64", "mips", "s390x", ""])
def test_normalize_arch_unknown_is_fatal(machine):
    with pytest.raises(PlatformError) as excinfo:
        platforms.normalize_arch(machine)
    assert "GOARCH" in str(excinfo.value)


def test_normalize_os_variants():
    assert platforms.normalize_os("CYGWIN_NT-10.0") == "windows"
    assert platforms.normalize_os("MINGW64_NT-10.0-19045") == "windows"
    assert platforms.normalize_os("MSYS_NT-10.0") == "windows"
    assert platforms.normalize_os("Windows") == "windows"
    assert platforms.normalize_os("Darwin") == "darwin"
    assert platforms.normalize_os("Linux") == "linux"
    assert platforms.normalize_os("FreeBSD") == "freebsd"


def test_cygwin_on_x86_64_resolves_to_windows_amd64_zip():
    target = platforms.resolve_platform(
        ToolchainConfig(), system="CYGWIN_NT-10.0", machine="x86_64"
    )
    assert target == platforms.Platform("windows", "amd64")
    assert archive_extension(target) == ".zip"


def test_overrides_are_used_verbatim():
    config = ToolchainConfig(arch="riscv64", os_name="Plan9")
    target = platforms.resolve_platform(config, system="Linux", machine="mips")
    assert (target.os_name, target.arch) == ("Plan9", "riscv64")


def test_resolve_platform_reads_running_system(monkeypatch):
    monkeypatch.setattr(platforms.platform, "system", lambda: "Linux")
    monkeypatch.setattr(platforms.platform, "machine", lambda: "aarch64")
    assert str(platforms.resolve_platform(ToolchainConfig())) == "linux/arm64"


def test_resolve_os_does_not_need_a_known_arch(monkeypatch):
    monkeypatch.setattr(platforms.platform, "machine", lambda: "mips")
    assert platforms.resolve_os(ToolchainConfig(), system="Darwin") == "darwin"


def test_exe_suffix():
    assert platforms.exe_suffix("windows") == ".exe"
    assert platforms.exe_suffix("linux") == ""
