"""Configuration resolution for gow."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from platformdirs import PlatformDirs

from .constants import (
    ARCH_ENV_VAR,
    BASE_URL_ENV_VAR,
    CONFIG_ENV_VAR,
    DEFAULT_BASE_URL,
    DEFAULT_CONFIG_DIR_NAME,
    HTTP_TIMEOUT_ENV_VAR,
    OS_ENV_VAR,
    ROOT_ENV_VAR,
)
from .errors import ConfigError

try:
    import tomllib  # py311+
except ModuleNotFoundError:  # pragma: no cover (py<311)
    import tomli as tomllib


@dataclass(frozen=True)
class ConfigFile:
    arch: Optional[str] = None
    os_name: Optional[str] = None
    root: Optional[str] = None
    base_url: Optional[str] = None
    http_timeout: Optional[float] = None


@dataclass(frozen=True)
class ToolchainConfig:
    """Overrides resolved once per invocation and passed to every component."""

    arch: Optional[str] = None
    os_name: Optional[str] = None
    root: Optional[Path] = None
    base_url: str = DEFAULT_BASE_URL
    http_timeout: Optional[float] = None
    config_path: Optional[Path] = None


def default_config_path() -> Path:
    dirs = PlatformDirs(appname=DEFAULT_CONFIG_DIR_NAME, appauthor=False, roaming=True)
    return Path(dirs.user_config_path) / "config.toml"


def resolve_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    env_value = (env.get(CONFIG_ENV_VAR) or "").strip()
    if env_value:
        return Path(env_value).expanduser()
    return default_config_path()


def _safe_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        normalized = value.strip()
        return normalized or None
    return str(value).strip() or None


def _safe_timeout(value: Any, source: str) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigError(f"invalid HTTP timeout in {source}: {value!r}")
    try:
        parsed = float(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"invalid HTTP timeout in {source}: {value!r}") from exc
    if parsed <= 0:
        raise ConfigError(f"HTTP timeout in {source} must be positive, got {parsed}")
    return parsed


def load_config(path: Path) -> ConfigFile:
    if not path.exists():
        return ConfigFile()
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"failed to read config file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"failed to parse config file {path}: {exc}") from exc
    return ConfigFile(
        arch=_safe_str(data.get("arch")),
        os_name=_safe_str(data.get("os")),
        root=_safe_str(data.get("root")),
        base_url=_safe_str(data.get("base_url") or data.get("baseUrl")),
        http_timeout=_safe_timeout(data.get("http_timeout"), str(path)),
    )


def resolve_config(
    *,
    arch: Optional[str] = None,
    os_name: Optional[str] = None,
    root: Optional[str] = None,
    base_url: Optional[str] = None,
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ToolchainConfig:
    """
    Merge overrides into a single ToolchainConfig.

    Precedence per field: explicit argument, environment variable, config file,
    built-in default. Empty strings count as unset.
    """
    env = os.environ if environ is None else environ
    path = config_path or resolve_config_path(env)
    file_config = load_config(path)

    def pick(explicit: Optional[str], env_var: str, from_file: Optional[str]) -> Optional[str]:
        return _safe_str(explicit) or _safe_str(env.get(env_var)) or from_file

    resolved_root = pick(root, ROOT_ENV_VAR, file_config.root)
    resolved_base = pick(base_url, BASE_URL_ENV_VAR, file_config.base_url) or DEFAULT_BASE_URL
    env_timeout = _safe_timeout(env.get(HTTP_TIMEOUT_ENV_VAR), HTTP_TIMEOUT_ENV_VAR)
    return ToolchainConfig(
        arch=pick(arch, ARCH_ENV_VAR, file_config.arch),
        os_name=pick(os_name, OS_ENV_VAR, file_config.os_name),
        root=Path(resolved_root).expanduser() if resolved_root else None,
        base_url=resolved_base.rstrip("/"),
        http_timeout=env_timeout if env_timeout is not None else file_config.http_timeout,
        config_path=path,
    )
