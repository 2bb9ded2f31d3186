"""Application context for injectable dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

import httpx

from .config import ToolchainConfig
from .http import http_timeout, request_headers


HttpClientFactory = Callable[[httpx.Timeout], httpx.Client]


def default_http_client_factory(timeout: httpx.Timeout) -> httpx.Client:
    return httpx.Client(timeout=timeout, follow_redirects=True, headers=request_headers())


@dataclass(frozen=True)
class AppContext:
    """Shared dependencies for one invocation (resolved config, HTTP)."""

    config: ToolchainConfig = field(default_factory=ToolchainConfig)
    http_client_factory: HttpClientFactory = default_http_client_factory

    def new_http_client(self, timeout: Optional[httpx.Timeout] = None) -> httpx.Client:
        return self.http_client_factory(timeout or http_timeout(self.config.http_timeout))
