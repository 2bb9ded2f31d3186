from pathlib import Path

import pytest

import gow.config as config
from gow.constants import DEFAULT_BASE_URL
from gow.errors import ConfigError


def test_defaults_without_overrides(tmp_path):
    resolved = config.resolve_config(config_path=tmp_path / "missing.toml", environ={})
    assert resolved.arch is None
    assert resolved.os_name is None
    assert resolved.root is None
    assert resolved.base_url == DEFAULT_BASE_URL
    assert resolved.http_timeout is None


def test_environment_overrides(tmp_path):
    env = {
        "GOARCH": "arm64",
        "GOOS": "darwin",
        "GOROOT": str(tmp_path / "goroot"),
        "GOBASEURL": "https://mirror.local/go/",
        "GOW_HTTP_TIMEOUT": "12.5",
    }
    resolved = config.resolve_config(config_path=tmp_path / "missing.toml", environ=env)
    assert resolved.arch == "arm64"
    assert resolved.os_name == "darwin"
    assert resolved.root == tmp_path / "goroot"
    assert resolved.base_url == "https://mirror.local/go"
    assert resolved.http_timeout == 12.5


def test_empty_environment_values_are_unset(tmp_path):
    env = {"GOARCH": "", "GOOS": "  ", "GOROOT": ""}
    resolved = config.resolve_config(config_path=tmp_path / "missing.toml", environ=env)
    assert resolved.arch is None
    assert resolved.os_name is None
    assert resolved.root is None


def test_precedence_option_env_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        'arch = "386"\nos = "freebsd"\nroot = "/from/file"\nbase_url = "https://file.local"\nhttp_timeout = 3\n',
        encoding="utf-8",
    )
    env = {"GOOS": "openbsd", "GOBASEURL": "https://env.local"}
    resolved = config.resolve_config(base_url="https://flag.local", config_path=path, environ=env)
    assert resolved.arch == "386"
    assert resolved.os_name == "openbsd"
    assert resolved.root == Path("/from/file")
    assert resolved.base_url == "https://flag.local"
    assert resolved.http_timeout == 3.0
    assert resolved.config_path == path


def test_config_path_from_environment(tmp_path):
    path = tmp_path / "custom.toml"
    path.write_text('os = "netbsd"\n', encoding="utf-8")
    resolved = config.resolve_config(environ={"GOW_CONFIG": str(path)})
    assert resolved.os_name == "netbsd"


def test_invalid_toml_is_a_config_error(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("arch = [unterminated\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        config.load_config(path)


@pytest.mark.parametrize("value", ["abc", "0", "-1"])
def test_invalid_timeout_rejected(tmp_path, value):
    with pytest.raises(ConfigError):
        config.resolve_config(
            config_path=tmp_path / "missing.toml", environ={"GOW_HTTP_TIMEOUT": value}
        )


def test_default_config_path_uses_platformdirs():
    path = config.default_config_path()
    assert path.name == "config.toml"
    assert "gow" in path.parts
