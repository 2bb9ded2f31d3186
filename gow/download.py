"""Archive size probe and conditional transfer."""

from __future__ import annotations

import dataclasses
import os
import sys
import time
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pooch

from .console import log, log_warning
from .context import AppContext, HttpClientFactory, default_http_client_factory
from .errors import ArchiveNotFoundError, DownloadError, SizeMismatchError
from .http import describe_http_error, download_hint, http_timeout
from .locator import ArchiveDescriptor
from .platforms import Platform
from .utils import format_bytes, safe_int


class HTTPXDownloader:
    """Pooch downloader that streams a single transfer through httpx."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        *,
        client_factory: Optional[HttpClientFactory] = None,
    ) -> None:
        self.timeout = timeout
        self.client_factory = client_factory or default_http_client_factory

    def __call__(
        self,
        url: str,
        output_file: str,
        pooch_obj: Optional[pooch.Pooch],
        progressbar: bool = False,
        **_: Any,
    ) -> None:
        _ = pooch_obj
        output_path = Path(output_file)
        tmp_path = Path(f"{output_file}.part")
        progress = _DownloadProgress(
            output_path.name, enabled=bool(progressbar and sys.stderr.isatty())
        )
        try:
            with self.client_factory(http_timeout(self.timeout)) as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    progress.total = safe_int(response.headers.get("Content-Length"))
                    with tmp_path.open("wb") as fh:
                        for chunk in response.iter_bytes(chunk_size=1024 * 64):
                            fh.write(chunk)
                            progress.advance(len(chunk))
            progress.finish()
            os.replace(tmp_path, output_path)
        except httpx.HTTPError as exc:
            progress.finish()
            tmp_path.unlink(missing_ok=True)
            hint = download_hint(exc)
            extra = f" (hint: {hint})" if hint else ""
            raise DownloadError(
                f"download failed for {url}: {describe_http_error(exc)}{extra}"
            ) from exc
        except OSError as exc:
            progress.finish()
            raise DownloadError(f"failed to write download file {output_path}: {exc}") from exc


class _DownloadProgress:
    """Single-line transfer counter on stderr, redrawn at most ten times a second."""

    def __init__(self, label: str, *, enabled: bool) -> None:
        self.label = label
        self.enabled = enabled
        self.total: Optional[int] = None
        self.received = 0
        self._started = time.monotonic()
        self._drawn_at = 0.0

    def advance(self, size: int) -> None:
        self.received += size
        now = time.monotonic()
        if now - self._drawn_at >= 0.1:
            self._drawn_at = now
            self._draw(now)

    def finish(self) -> None:
        if self.enabled:
            self._draw(time.monotonic())
            sys.stderr.write("\n")
            sys.stderr.flush()

    def _draw(self, now: float) -> None:
        if not self.enabled:
            return
        rate = format_bytes(self.received / max(now - self._started, 0.001))
        if self.total:
            percent = min(100, self.received * 100 // self.total)
            counts = f"{format_bytes(self.received)}/{format_bytes(self.total)} {percent:3d}%"
        else:
            counts = format_bytes(self.received)
        # Trailing spaces clear what a longer previous line left behind.
        sys.stderr.write(f"\r{self.label} {counts} {rate}/s   ")
        sys.stderr.flush()


def probe_archive(
    client: httpx.Client,
    version: str,
    target: Platform,
    descriptor: ArchiveDescriptor,
) -> ArchiveDescriptor:
    """Issue a HEAD request and record the advertised archive size."""
    try:
        response = client.head(descriptor.url)
    except httpx.HTTPError as exc:
        raise DownloadError(describe_http_error(exc)) from exc

    if response.status_code == 404:
        raise ArchiveNotFoundError(
            f"no binary release of {version} for {target} at {descriptor.url}"
        )
    if response.status_code != 200:
        log_warning(f"server returned {response.status_code} checking size of {descriptor.url}")

    length = safe_int(response.headers.get("content-length"))
    return dataclasses.replace(descriptor, content_length=length)


def local_size(path: Path) -> Optional[int]:
    try:
        return path.stat().st_size if path.is_file() else None
    except OSError:
        return None


def needs_download(path: Path, expected_length: Optional[int]) -> bool:
    if expected_length is None:
        return True
    return local_size(path) != expected_length


def fetch_archive(
    ctx: AppContext,
    descriptor: ArchiveDescriptor,
    root: Path,
    *,
    downloader: Optional[Callable[..., Any]] = None,
) -> Path:
    """Make sure the archive exists under root with the advertised size."""
    archive = descriptor.local_path(root)
    expected = descriptor.content_length
    if not needs_download(archive, expected):
        log(f"{archive.name} already downloaded ({format_bytes(expected or 0)})")
        return archive

    try:
        root.mkdir(parents=True, exist_ok=True)
        archive.unlink(missing_ok=True)
    except OSError as exc:
        raise DownloadError(f"failed to prepare {root}: {exc}") from exc

    fetch = downloader or HTTPXDownloader(
        ctx.config.http_timeout, client_factory=ctx.http_client_factory
    )
    log(f"Downloading {descriptor.url} ...")
    pooch.retrieve(
        url=descriptor.url,
        known_hash=None,
        fname=archive.name,
        path=root,
        downloader=partial(fetch, progressbar=True),
    )

    size = local_size(archive)
    if expected is None:
        log_warning(f"server did not advertise a size for {descriptor.url}; skipping size check")
        return archive
    if size != expected:
        raise SizeMismatchError(
            f"downloaded file {archive} size {size if size is not None else 0} "
            f"doesn't match server size {expected}"
        )
    return archive
