"""Console helpers for gow."""

from __future__ import annotations

import sys

_LOG_TO_STDERR = False
_LOG_SILENCED = False


def configure_console(*, quiet: bool = False, stderr: bool = False) -> None:
    global _LOG_TO_STDERR, _LOG_SILENCED
    if stderr:
        _LOG_TO_STDERR = True
    if quiet:
        _LOG_SILENCED = True


def reset_console() -> None:
    global _LOG_TO_STDERR, _LOG_SILENCED
    _LOG_TO_STDERR = False
    _LOG_SILENCED = False


def log(message: str) -> None:
    if _LOG_SILENCED:
        return
    stream = sys.stderr if _LOG_TO_STDERR else sys.stdout
    print(f"[gow] {message}", file=stream)


def log_warning(message: str) -> None:
    print(f"[gow] warning: {message}", file=sys.stderr)


def log_error(message: str) -> None:
    print(f"[gow] {message}", file=sys.stderr)
