#!/usr/bin/env python3
"""gow CLI entry point."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, Sequence

import pooch
import typer

from .config import ToolchainConfig, resolve_config
from .console import configure_console, log, log_error, reset_console
from .constants import (
    DEFAULT_VERSION,
    DOWNLOAD_COMMAND,
    EXIT_CODE_FAILURE,
    EXIT_CODE_INTERRUPT,
    EXIT_CODE_OK,
    PACKAGE_NAME,
)
from .context import AppContext
from .dispatch import dispatch, run_banner
from .errors import CLIError
from .installer import InstallCoordinator
from .locator import install_root
from .platforms import resolve_os, resolve_platform
from .version import cli_version

app = typer.Typer(
    help="Install and run pinned Go toolchain versions.",
    add_completion=False,
)


def normalize_version(token: str) -> str:
    return Path(token or DEFAULT_VERSION).name or DEFAULT_VERSION


def handle_download(ctx: AppContext, version: str) -> int:
    try:
        target = resolve_platform(ctx.config)
    except CLIError as exc:
        log_error(f"{version}: {exc}")
        return EXIT_CODE_FAILURE
    root = install_root(version, ctx.config)
    result = InstallCoordinator(ctx, version, target, root).install()
    if not result.ok:
        log_error(f"{version}: download failed: {result.message}")
        return EXIT_CODE_FAILURE
    log(result.message)
    if not result.installed_now:
        return EXIT_CODE_OK

    try:
        rc = run_banner(root, target.os_name)
    except CLIError as exc:
        log_error(f"{version}: {exc}")
        return EXIT_CODE_FAILURE
    if rc != 0:
        log_error(f"{version}: installed toolchain failed its banner check (exit {rc})")
        return EXIT_CODE_FAILURE
    return EXIT_CODE_OK


def handle_dispatch(ctx: AppContext, version: str, args: Sequence[str]) -> int:
    root = install_root(version, ctx.config)
    try:
        return dispatch(version, root, resolve_os(ctx.config), args)
    except CLIError as exc:
        log_error(str(exc))
        return EXIT_CODE_FAILURE


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{PACKAGE_NAME} {cli_version()}")
        raise typer.Exit()


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    },
    help=(
        f"Run VERSION of the go tool, or install it with '{PACKAGE_NAME} VERSION "
        f"{DOWNLOAD_COMMAND}'. Arguments after VERSION are passed through unchanged."
    ),
)
def run(
    ctx: typer.Context,
    version: str = typer.Argument(DEFAULT_VERSION, help="toolchain version, e.g. go1.22.3"),
    arch: Optional[str] = typer.Option(None, "--arch", help="target architecture (default: GOARCH or detected)"),
    os_name: Optional[str] = typer.Option(None, "--os", help="target operating system (default: GOOS or detected)"),
    root: Optional[str] = typer.Option(None, "--root", help="install root (default: GOROOT or ~/sdk/VERSION)"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="archive mirror base URL (default: GOBASEURL)"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="path to config.toml"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="suppress progress messages"),
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="show the gow version and exit",
    ),
) -> None:
    _ = show_version
    extra: List[str] = list(ctx.args)
    resolved_version = normalize_version(version)
    if quiet:
        configure_console(quiet=True)

    try:
        config: ToolchainConfig = resolve_config(
            arch=arch,
            os_name=os_name,
            root=root,
            base_url=base_url,
            config_path=config_path,
        )
    except CLIError as exc:
        log_error(f"error: {exc}")
        raise typer.Exit(code=EXIT_CODE_FAILURE) from exc

    app_ctx = AppContext(config=config)
    try:
        if extra == [DOWNLOAD_COMMAND]:
            rc = handle_download(app_ctx, resolved_version)
        else:
            # Keep stdout for the go binary.
            configure_console(stderr=True)
            rc = handle_dispatch(app_ctx, resolved_version, extra)
    except KeyboardInterrupt as exc:
        log_error("interrupted")
        raise typer.Exit(code=EXIT_CODE_INTERRUPT) from exc
    raise typer.Exit(code=rc)


def main(argv: Optional[Sequence[str]] = None) -> int:
    pooch.get_logger().setLevel("WARNING")
    command = typer.main.get_command(app)
    try:
        command.main(
            args=list(argv) if argv is not None else None,
            prog_name=PACKAGE_NAME,
        )
    except SystemExit as exc:
        return int(exc.code or 0)
    except (KeyboardInterrupt, typer.Abort):
        log_error("interrupted")
        return EXIT_CODE_INTERRUPT
    finally:
        reset_console()
    return EXIT_CODE_OK


if __name__ == "__main__":
    sys.exit(main())
