"""Delegation to an installed toolchain binary."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from .constants import BANNER_ARGS, DOWNLOAD_COMMAND, PACKAGE_NAME, ROOT_ENV_VAR
from .errors import CLIError, NotInstalledError
from .locator import go_binary, is_installed
from .utils import format_cli_command


def toolchain_environment(root: Path, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    env = dict(os.environ if base is None else base)
    env[ROOT_ENV_VAR] = str(root)
    return env


def run_binary(binary: Path, args: Sequence[str], env: Mapping[str, str]) -> int:
    """Run binary to completion and return its exit status."""
    cmd = [str(binary), *args]
    try:
        proc = subprocess.Popen(cmd, env=dict(env))
    except OSError as exc:
        raise CLIError(f"failed to run {format_cli_command(cmd)}: {exc}") from exc
    try:
        returncode = proc.wait()
    except KeyboardInterrupt:
        # The child shares our process group and received the same signal.
        proc.wait()
        raise
    if returncode < 0:
        return 128 - returncode
    return returncode


def dispatch(version: str, root: Path, os_name: str, args: Sequence[str]) -> int:
    if not is_installed(root):
        raise NotInstalledError(
            f"{version}: not downloaded. Run '{PACKAGE_NAME} {version} {DOWNLOAD_COMMAND}' "
            f"to install to {root}"
        )
    return run_binary(go_binary(root, os_name), args, toolchain_environment(root))


def run_banner(root: Path, os_name: str) -> int:
    return run_binary(go_binary(root, os_name), BANNER_ARGS, toolchain_environment(root))
