"""Archive addressing and install-root layout."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

from .config import ToolchainConfig
from .constants import (
    BINARY_NAME,
    CHECKSUM_SUFFIX,
    DEFAULT_BASE_URL,
    SDK_DIR_NAME,
    TAR_GZ_EXTENSION,
    UNPACKED_OKAY,
    ZIP_EXTENSION,
)
from .platforms import Platform, exe_suffix


@dataclass(frozen=True)
class ArchiveDescriptor:
    url: str
    extension: str
    filename: str
    content_length: Optional[int] = None

    @property
    def checksum_url(self) -> str:
        return f"{self.url}{CHECKSUM_SUFFIX}"

    def local_path(self, root: Path) -> Path:
        return root / self.filename


def archive_extension(target: Platform) -> str:
    return ZIP_EXTENSION if target.is_windows else TAR_GZ_EXTENSION


def archive_url(version: str, target: Platform, base_url: str = DEFAULT_BASE_URL) -> str:
    base = (base_url or DEFAULT_BASE_URL).rstrip("/")
    return f"{base}/{version}.{target.os_name}-{target.arch}{archive_extension(target)}"


def archive_filename(url: str) -> str:
    return posixpath.basename(urlsplit(url).path)


def describe_archive(version: str, target: Platform, config: ToolchainConfig) -> ArchiveDescriptor:
    url = archive_url(version, target, config.base_url)
    return ArchiveDescriptor(
        url=url,
        extension=archive_extension(target),
        filename=archive_filename(url),
    )


def install_root(version: str, config: ToolchainConfig, *, home: Optional[Path] = None) -> Path:
    if config.root is not None:
        return config.root
    return (home or Path.home()) / SDK_DIR_NAME / version


def sentinel_path(root: Path) -> Path:
    return root / UNPACKED_OKAY


def is_installed(root: Path) -> bool:
    return sentinel_path(root).is_file()


def go_binary(root: Path, os_name: str) -> Path:
    return root / "bin" / f"{BINARY_NAME}{exe_suffix(os_name)}"
