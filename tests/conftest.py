from __future__ import annotations

import hashlib
import io
import tarfile
import zipfile
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional, Tuple

import httpx
import pytest

from gow.config import ToolchainConfig
from gow.context import AppContext

BASE_URL = "https://dl.example.test/golang"

GO_TREE: Dict[str, bytes] = {
    "VERSION": b"go1.22.3\n",
    "bin/go": b"#!/bin/sh\necho go\n",
    "src/fmt/print.go": b"package fmt\n",
}


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path_factory):
    for name in ("GOARCH", "GOOS", "GOROOT", "GOBASEURL", "GOW_HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    config_dir = tmp_path_factory.mktemp("config")
    monkeypatch.setenv("GOW_CONFIG", str(config_dir / "missing.toml"))
    yield


def build_tar_gz(files: Dict[str, bytes] = GO_TREE, prefix: str = "go") -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tf:
        dir_info = tarfile.TarInfo(name=f"{prefix}/")
        dir_info.type = tarfile.DIRTYPE
        dir_info.mode = 0o755
        tf.addfile(dir_info)
        for name, data in files.items():
            info = tarfile.TarInfo(name=f"{prefix}/{name}")
            info.size = len(data)
            info.mode = 0o755 if name.startswith("bin/") else 0o644
            tf.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def build_zip(files: Dict[str, bytes] = GO_TREE, prefix: str = "go") -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr(f"{prefix}/", b"")
        for name, data in files.items():
            zf.writestr(f"{prefix}/{name}", data)
        zf.writestr("README-outside-wrapper.txt", b"ignored")
    return buffer.getvalue()


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class FakeRelease:
    """Serves one archive plus its .sha256 companion through httpx.MockTransport."""

    def __init__(
        self,
        filename: str,
        payload: bytes,
        *,
        base_url: str = BASE_URL,
        head_status: int = 200,
        content_length: Optional[int] = None,
        advertise_length: bool = True,
        get_payload: Optional[bytes] = None,
        checksum: Optional[str] = None,
        checksum_status: int = 200,
    ) -> None:
        self.url = f"{base_url}/{filename}"
        self.payload = payload
        self.head_status = head_status
        self.content_length = len(payload) if content_length is None else content_length
        self.advertise_length = advertise_length
        self.get_payload = payload if get_payload is None else get_payload
        self.checksum = sha256_hex(payload) if checksum is None else checksum
        self.checksum_status = checksum_status
        self.calls: List[Tuple[str, str]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append((request.method, url))
        if url == self.url and request.method == "HEAD":
            headers = {"Content-Length": str(self.content_length)} if self.advertise_length else {}
            return httpx.Response(self.head_status, headers=headers, request=request)
        if url == self.url and request.method == "GET":
            return httpx.Response(200, content=self.get_payload, request=request)
        if url == f"{self.url}.sha256" and request.method == "GET":
            return httpx.Response(
                self.checksum_status, text=f"{self.checksum}\n", request=request
            )
        return httpx.Response(404, content=b"not found", request=request)

    def client_factory(self):
        transport = httpx.MockTransport(self.handler)
        return lambda timeout: httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    def context(self, config: ToolchainConfig) -> AppContext:
        return AppContext(config=config, http_client_factory=self.client_factory())

    def requests(self, method: str) -> List[str]:
        return [url for seen, url in self.calls if seen == method]


@pytest.fixture
def fake_release() -> type[FakeRelease]:
    return FakeRelease


@pytest.fixture
def linux_config(tmp_path: Path) -> ToolchainConfig:
    return ToolchainConfig(
        arch="amd64",
        os_name="linux",
        root=tmp_path / "sdk" / "go1.22.3",
        base_url=BASE_URL,
    )


@pytest.fixture
def windows_config(tmp_path: Path) -> ToolchainConfig:
    return ToolchainConfig(
        arch="amd64",
        os_name="windows",
        root=tmp_path / "sdk" / "go1.22.3",
        base_url=BASE_URL,
    )


@pytest.fixture
def archives() -> SimpleNamespace:
    return SimpleNamespace(tar_gz=build_tar_gz, zip=build_zip, sha256=sha256_hex, tree=GO_TREE)
