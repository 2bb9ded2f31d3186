"""SHA-256 verification against the published companion digest."""

from __future__ import annotations

import hashlib
from pathlib import Path

import httpx

from .errors import ChecksumFetchError, ChecksumMismatchError, CLIError
from .http import describe_http_error
from .locator import ArchiveDescriptor


def fetch_expected_sha256(client: httpx.Client, descriptor: ArchiveDescriptor, archive: Path) -> str:
    """Download `<archive url>.sha256` and return its text."""
    try:
        response = client.get(descriptor.checksum_url)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise ChecksumFetchError(
            f"error downloading SHA256 of {archive}: {describe_http_error(exc)}"
        ) from exc
    return response.text.strip()


def sha256_digest(path: Path) -> str:
    hasher = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def verify_sha256(path: Path, expected: str) -> None:
    try:
        digest = sha256_digest(path)
    except OSError as exc:
        raise CLIError(f"error verifying SHA256 of {path}: {exc}") from exc
    # Exact, case-sensitive comparison with the published hex digest.
    if digest != expected:
        raise ChecksumMismatchError(
            f"error verifying SHA256 of {path}: "
            f"{path} corrupt? does not have expected SHA-256 of {expected}"
        )
