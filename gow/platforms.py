"""Operating system and architecture resolution."""

from __future__ import annotations

import platform
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Pattern, Tuple

from .config import ToolchainConfig
from .errors import PlatformError


class Architecture(str, Enum):
    X86 = "386"
    AMD64 = "amd64"
    ARM64 = "arm64"
    ARMV6L = "armv6l"
    PPC64LE = "ppc64le"


WINDOWS = "windows"

# Hardware identifiers as reported by uname -m / platform.machine().
ARCH_TABLE: Tuple[Tuple[Pattern[str], Architecture], ...] = (
    (re.compile(r"i.86"), Architecture.X86),
    (re.compile(r"amd64|x86_64"), Architecture.AMD64),
    (re.compile(r"aarch64|arm64|armv8.*"), Architecture.ARM64),
    (re.compile(r"arm|armv6l|armv7l"), Architecture.ARMV6L),
    (re.compile(r"ppc.*"), Architecture.PPC64LE),
)

_WINDOWS_PATTERN = re.compile(r"cygwin|mingw|msys|windows")


@dataclass(frozen=True)
class Platform:
    os_name: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os_name == WINDOWS

    def __str__(self) -> str:
        return f"{self.os_name}/{self.arch}"


def normalize_arch(machine: str) -> Architecture:
    value = (machine or "").strip().lower()
    for pattern, arch in ARCH_TABLE:
        if pattern.fullmatch(value):
            return arch
    raise PlatformError("cannot determine architecture. Please set GOARCH and run again")


def normalize_os(system: str) -> str:
    value = (system or "").strip().lower()
    if _WINDOWS_PATTERN.search(value):
        return WINDOWS
    return value


def resolve_platform(
    config: ToolchainConfig,
    *,
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> Platform:
    """Resolve the target platform; configured overrides are used verbatim."""
    if config.arch:
        arch = config.arch
    else:
        arch = normalize_arch(machine if machine is not None else platform.machine()).value
    return Platform(resolve_os(config, system=system), arch)


def resolve_os(config: ToolchainConfig, *, system: Optional[str] = None) -> str:
    if config.os_name:
        return config.os_name
    return normalize_os(system if system is not None else platform.system())


def exe_suffix(os_name: str) -> str:
    return ".exe" if os_name == WINDOWS else ""
