"""Runtime configuration for preload header emission."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from preload_resources.dependencies import DependencyKind
from preload_resources.errors import ConfigurationError

if TYPE_CHECKING:
    from preload_resources.dependencies import DependencyRegistry

HandlesFilter = Callable[[list[str], "DependencyRegistry"], Sequence[str]]
LoaderSrcFilter = Callable[[str, str], str]

DEFAULT_MAX_HEADER_SIZE = 3 * 1024
DEFAULT_FLUSH_HOOK = "head"

_RUNTIME_ENV_CACHE: dict[str, str] | None = None


def _load_env_file(path: Path) -> dict[str, str]:
    try:
        contents = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    env_values: dict[str, str] = {}
    for line in contents.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, sep, value = stripped.partition("=")
        if not sep:
            continue
        env_values[key.strip()] = value.strip().strip('"').strip("'")
    return env_values


def load_runtime_env(
    *,
    env_file: str | os.PathLike[str] | None = None,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Load runtime environment values applying .env before explicit environment."""

    env: dict[str, str] = {}
    source = dict(base_env or os.environ)

    path = Path(env_file) if env_file is not None else Path(".env")
    if path.exists() and path.is_file():
        env.update(_load_env_file(path))

    env.update({key: str(value) for key, value in source.items() if value is not None})
    return env


def get_runtime_env() -> Mapping[str, str]:
    """Return the cached runtime environment mapping."""

    global _RUNTIME_ENV_CACHE
    if _RUNTIME_ENV_CACHE is None:
        _RUNTIME_ENV_CACHE = load_runtime_env()
    return _RUNTIME_ENV_CACHE


def override_runtime_env(runtime_env: Mapping[str, str] | None) -> None:
    """Override the cached runtime environment (primarily for testing)."""

    global _RUNTIME_ENV_CACHE
    if runtime_env is None:
        _RUNTIME_ENV_CACHE = None
    else:
        _RUNTIME_ENV_CACHE = dict(runtime_env)


def get_env(name: str, default: str | None = None) -> str | None:
    """Return an environment variable honoring ENV > .env > defaults."""

    env = get_runtime_env()
    return env.get(name, default)


def _as_bool(value: str | None, *, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(value: str | None, *, default: int, setting: str) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"{setting} must be an integer", setting=setting, value=value
        ) from exc


def _as_optional_str(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(slots=True, frozen=True)
class PreloadConfig:
    """Settings that shape which preload hints are emitted and when.

    ``style_handles``/``script_handles`` replace the candidate handle list of
    a pass and receive the registry's done handles plus the registry.
    ``style_loader_src``/``script_loader_src`` rewrite a resolved source URL
    before it is shortened and receive the URL and the handle.
    """

    max_header_size: int = DEFAULT_MAX_HEADER_SIZE
    use_buffering: bool = True
    flush_hook: str = DEFAULT_FLUSH_HOOK
    base_url: str = ""
    content_url: str = ""
    default_version: str | None = None
    log_level: str | None = None
    style_handles: HandlesFilter | None = field(default=None, compare=False)
    script_handles: HandlesFilter | None = field(default=None, compare=False)
    style_loader_src: LoaderSrcFilter | None = field(default=None, compare=False)
    script_loader_src: LoaderSrcFilter | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.max_header_size <= 0:
            raise ConfigurationError(
                "max_header_size must be a positive number of bytes",
                setting="max_header_size",
                value=self.max_header_size,
            )
        if not self.flush_hook.strip():
            raise ConfigurationError(
                "flush_hook must name a render phase",
                setting="flush_hook",
                value=self.flush_hook,
            )

    def handles_filter(self, kind: DependencyKind) -> HandlesFilter | None:
        if kind is DependencyKind.STYLE:
            return self.style_handles
        return self.script_handles

    def loader_src(self, kind: DependencyKind) -> LoaderSrcFilter | None:
        if kind is DependencyKind.STYLE:
            return self.style_loader_src
        return self.script_loader_src

    def with_hooks(self, **hooks: Any) -> PreloadConfig:
        """Return a copy with the given hook callables installed."""

        return replace(self, **hooks)


def load_config(env: Mapping[str, Any] | None = None, **hooks: Any) -> PreloadConfig:
    """Build a :class:`PreloadConfig` from environment style settings."""

    if env is None:
        lookup: Callable[[str], str | None] = get_env
    else:
        env_map = {key: str(value) for key, value in env.items() if value is not None}
        lookup = env_map.get

    flush_hook = lookup("PRELOAD_FLUSH_HOOK")
    return PreloadConfig(
        max_header_size=_as_int(
            lookup("PRELOAD_MAX_HEADER_SIZE"),
            default=DEFAULT_MAX_HEADER_SIZE,
            setting="PRELOAD_MAX_HEADER_SIZE",
        ),
        use_buffering=_as_bool(lookup("PRELOAD_USE_BUFFERING"), default=True),
        flush_hook=DEFAULT_FLUSH_HOOK if flush_hook is None else flush_hook.strip(),
        base_url=(lookup("PRELOAD_BASE_URL") or "").strip(),
        content_url=(lookup("PRELOAD_CONTENT_URL") or "").strip(),
        default_version=_as_optional_str(lookup("PRELOAD_DEFAULT_VERSION")),
        log_level=_as_optional_str(lookup("PRELOAD_LOG_LEVEL")),
        **hooks,
    )


__all__ = [
    "DEFAULT_FLUSH_HOOK",
    "DEFAULT_MAX_HEADER_SIZE",
    "HandlesFilter",
    "LoaderSrcFilter",
    "PreloadConfig",
    "get_env",
    "get_runtime_env",
    "load_config",
    "load_runtime_env",
    "override_runtime_env",
]
