"""Install pipeline: download, verify, unpack, mark."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .constants import PACKAGE_NAME
from .context import AppContext
from .download import fetch_archive, probe_archive
from .errors import CLIError
from .locator import describe_archive, install_root, is_installed, sentinel_path
from .platforms import Platform
from .unpack import unpack_archive
from .verify import fetch_expected_sha256, verify_sha256


class InstallState(str, Enum):
    NOT_INSTALLED = "not-installed"
    DOWNLOADING = "downloading"
    SIZE_VERIFIED = "size-verified"
    CHECKSUM_VERIFIED = "checksum-verified"
    UNPACKED = "unpacked"
    INSTALLED = "installed"


@dataclass(frozen=True)
class InstallResult:
    state: InstallState
    message: str
    installed_now: bool = False

    @property
    def ok(self) -> bool:
        return self.state is InstallState.INSTALLED


class InstallCoordinator:
    """
    Drives one version from NOT_INSTALLED to INSTALLED.

    Each step either advances the state or raises a CLIError; the first error
    stops the run and its message is returned unchanged. The sentinel file is
    written only after the archive has been unpacked, so a root without it is
    never treated as installed.
    """

    def __init__(self, ctx: AppContext, version: str, target: Platform, root: Path) -> None:
        self.ctx = ctx
        self.version = version
        self.target = target
        self.root = root
        self.state = InstallState.NOT_INSTALLED

    def _advance(self, state: InstallState) -> None:
        self.state = state

    def install(self) -> InstallResult:
        if is_installed(self.root):
            self._advance(InstallState.INSTALLED)
            return InstallResult(
                self.state, f"{self.version}: already downloaded in {self.root}"
            )
        try:
            self._run_steps()
        except CLIError as exc:
            return InstallResult(self.state, str(exc))
        return InstallResult(
            self.state,
            f"Success. You may now run '{PACKAGE_NAME} {self.version}'",
            installed_now=True,
        )

    def _run_steps(self) -> None:
        descriptor = describe_archive(self.version, self.target, self.ctx.config)
        self._advance(InstallState.DOWNLOADING)
        with self.ctx.new_http_client() as client:
            descriptor = probe_archive(client, self.version, self.target, descriptor)
            archive = fetch_archive(self.ctx, descriptor, self.root)
            self._advance(InstallState.SIZE_VERIFIED)

            expected = fetch_expected_sha256(client, descriptor, archive)
        verify_sha256(archive, expected)
        self._advance(InstallState.CHECKSUM_VERIFIED)

        unpack_archive(self.root, archive)
        self._advance(InstallState.UNPACKED)

        marker = sentinel_path(self.root)
        try:
            marker.touch()
        except OSError as exc:
            raise CLIError(f"failed to write {marker}: {exc}") from exc
        self._advance(InstallState.INSTALLED)


def install(ctx: AppContext, version: str, target: Platform, root: Optional[Path] = None) -> InstallResult:
    resolved = root if root is not None else install_root(version, ctx.config)
    return InstallCoordinator(ctx, version, target, resolved).install()
