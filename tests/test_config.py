from __future__ import annotations

from pathlib import Path

import pytest

from preload_resources.config import (
    DEFAULT_MAX_HEADER_SIZE,
    PreloadConfig,
    load_config,
    load_runtime_env,
    override_runtime_env,
)
from preload_resources.dependencies import DependencyKind
from preload_resources.errors import ConfigurationError


def test_defaults() -> None:
    config = load_config({})

    assert config.max_header_size == DEFAULT_MAX_HEADER_SIZE == 3072
    assert config.use_buffering is True
    assert config.flush_hook == "head"
    assert config.base_url == ""
    assert config.content_url == ""
    assert config.default_version is None
    assert config.log_level is None
    assert config.handles_filter(DependencyKind.STYLE) is None
    assert config.loader_src(DependencyKind.SCRIPT) is None


def test_values_are_read_from_env_mapping() -> None:
    config = load_config(
        {
            "PRELOAD_MAX_HEADER_SIZE": "4096",
            "PRELOAD_USE_BUFFERING": "false",
            "PRELOAD_FLUSH_HOOK": " footer ",
            "PRELOAD_BASE_URL": "https://example.com",
            "PRELOAD_CONTENT_URL": "https://example.com/content",
            "PRELOAD_DEFAULT_VERSION": "6.4",
            "PRELOAD_LOG_LEVEL": "debug",
        }
    )

    assert config.max_header_size == 4096
    assert config.use_buffering is False
    assert config.flush_hook == "footer"
    assert config.base_url == "https://example.com"
    assert config.content_url == "https://example.com/content"
    assert config.default_version == "6.4"
    assert config.log_level == "debug"


def test_runtime_env_is_used_without_explicit_mapping() -> None:
    override_runtime_env({"PRELOAD_MAX_HEADER_SIZE": "512", "PRELOAD_USE_BUFFERING": "0"})

    config = load_config()

    assert config.max_header_size == 512
    assert config.use_buffering is False


def test_env_file_values_are_overridden_by_environment(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# preload\nPRELOAD_FLUSH_HOOK='footer'\nPRELOAD_BASE_URL=https://file.example\n",
        encoding="utf-8",
    )

    env = load_runtime_env(env_file=env_file, base_env={"PRELOAD_BASE_URL": "https://env.example"})

    assert env["PRELOAD_FLUSH_HOOK"] == "footer"
    assert env["PRELOAD_BASE_URL"] == "https://env.example"


def test_hooks_are_passed_through() -> None:
    def handles(items: list[str], registry: object) -> list[str]:
        return items

    def rewrite(src: str, handle: str) -> str:
        return src

    config = load_config({}, style_handles=handles, script_loader_src=rewrite)

    assert config.handles_filter(DependencyKind.STYLE) is handles
    assert config.handles_filter(DependencyKind.SCRIPT) is None
    assert config.loader_src(DependencyKind.SCRIPT) is rewrite
    assert config.loader_src(DependencyKind.STYLE) is None


def test_with_hooks_returns_updated_copy() -> None:
    base = PreloadConfig(max_header_size=1000)

    def rewrite(src: str, handle: str) -> str:
        return src

    updated = base.with_hooks(style_loader_src=rewrite)

    assert base.style_loader_src is None
    assert updated.style_loader_src is rewrite
    assert updated.max_header_size == 1000


def test_invalid_integer_raises_configuration_error() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        load_config({"PRELOAD_MAX_HEADER_SIZE": "three kilobytes"})

    assert excinfo.value.setting == "PRELOAD_MAX_HEADER_SIZE"
    assert excinfo.value.meta == {
        "setting": "PRELOAD_MAX_HEADER_SIZE",
        "value": "three kilobytes",
    }


@pytest.mark.parametrize("size", (0, -1))
def test_non_positive_size_is_rejected(size: int) -> None:
    with pytest.raises(ConfigurationError):
        PreloadConfig(max_header_size=size)


def test_blank_flush_hook_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        load_config({"PRELOAD_FLUSH_HOOK": "   "})
