"""Shared HTTP helpers for gow."""

from __future__ import annotations

from typing import Dict, Optional

import httpx

from .version import USER_AGENT


def http_timeout(seconds: Optional[float] = None) -> httpx.Timeout:
    # None disables every httpx timeout; requests then block until the peer answers.
    return httpx.Timeout(seconds, connect=seconds)


def request_headers() -> Dict[str, str]:
    return {
        "Accept": "*/*",
        "User-Agent": USER_AGENT,
    }


_TRANSPORT_PREFIXES = (
    (httpx.TimeoutException, "request timed out"),
    (httpx.ConnectError, "failed to connect"),
    (httpx.ProxyError, "proxy error"),
    (httpx.RequestError, "network error"),
)


def describe_http_error(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        return f"server returned {response.status_code} {response.reason_phrase}".strip()

    request = None
    try:
        request = exc.request
    except RuntimeError:
        pass
    target = ""
    if request is not None:
        target = f"{request.method} {request.url}".strip()

    message = str(exc).strip()
    summary = message or exc.__class__.__name__
    for exc_type, prefix in _TRANSPORT_PREFIXES:
        if isinstance(exc, exc_type):
            summary = f"{prefix}: {message}" if message else prefix
            break

    if target and target not in summary:
        summary = f"{summary} ({target})"
    return summary


def download_hint(exc: httpx.HTTPError) -> Optional[str]:
    if isinstance(exc, httpx.ProxyError):
        return "check HTTP_PROXY/HTTPS_PROXY/NO_PROXY environment variables"
    if isinstance(exc, httpx.TimeoutException):
        return "network timeout; try again or use a more reliable connection"
    if isinstance(exc, httpx.ConnectError):
        return "could not connect; check your internet/VPN/firewall"
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if status == 429:
            return "rate limited; wait a bit and retry"
        if status >= 500:
            return "server error; try again later"
        if status == 404:
            return "resource not found; check the version and GOBASEURL"
    return None
