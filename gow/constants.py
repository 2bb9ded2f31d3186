"""Shared constants for gow."""

from __future__ import annotations

PACKAGE_NAME = "gow"
DEFAULT_CONFIG_DIR_NAME = "gow"

DEFAULT_VERSION = "gotip"
DEFAULT_BASE_URL = "https://storage.googleapis.com/golang"
DOWNLOAD_COMMAND = "download"

ARCH_ENV_VAR = "GOARCH"
OS_ENV_VAR = "GOOS"
ROOT_ENV_VAR = "GOROOT"
BASE_URL_ENV_VAR = "GOBASEURL"
HTTP_TIMEOUT_ENV_VAR = "GOW_HTTP_TIMEOUT"
CONFIG_ENV_VAR = "GOW_CONFIG"

# Zero-byte file marking a root as fully downloaded, verified and unpacked.
UNPACKED_OKAY = ".unpacked-success"
SDK_DIR_NAME = "sdk"
ZIP_WRAPPER_DIR = "go"
BINARY_NAME = "go"
BANNER_ARGS = ("tool", "dist", "banner")

TAR_GZ_EXTENSION = ".tar.gz"
ZIP_EXTENSION = ".zip"
CHECKSUM_SUFFIX = ".sha256"

EXIT_CODE_OK = 0
EXIT_CODE_FAILURE = 1
EXIT_CODE_USAGE = 2
EXIT_CODE_INTERRUPT = 130
