"""Source URL resolution for registered dependencies.

Two halves: :func:`build_source_url` reproduces how a registry turns a
descriptor into the URL it prints in markup, and :func:`shorten_source_url`
reduces that URL to the shortest form a browser on the current page resolves
to the same resource. :func:`resolve_source` chains both for preload hints.
"""

from __future__ import annotations

import re
from typing import Final
from urllib.parse import quote

from preload_resources.config import LoaderSrcFilter
from preload_resources.dependencies import DependencyDescriptor, DependencyRegistry

_ABSOLUTE_URL: Final[re.Pattern[str]] = re.compile(r"^(https?:)?//")
# Literal join inherited from the markup URL builder; not a query separator.
_EXTRA_ARG_JOIN: Final[str] = "&amp;"
_VERSION_SAFE_CHARS: Final[str] = "&;="
_HEADER_URL_SAFE_CHARS: Final[str] = "!#$%&'()*+,/:;=?@[]~"


def effective_version(descriptor: DependencyDescriptor, registry: DependencyRegistry) -> str:
    if descriptor.ver is None:
        version = ""
    elif descriptor.ver is True:
        version = "1"
    elif descriptor.ver:
        version = str(descriptor.ver)
    else:
        version = registry.default_version or ""

    extra_arg = registry.args.get(descriptor.handle)
    if extra_arg:
        version = f"{version}{_EXTRA_ARG_JOIN}{extra_arg}" if version else extra_arg
    return version


def _with_version(url: str, version: str) -> str:
    base, hash_mark, fragment = url.partition("#")
    path, _, query = base.partition("?")
    pairs = [pair for pair in query.split("&") if pair and pair.split("=", 1)[0] != "ver"]
    pairs.append(f"ver={quote(version, safe=_VERSION_SAFE_CHARS)}")
    return f"{path}?{'&'.join(pairs)}{hash_mark}{fragment}"


def build_source_url(
    descriptor: DependencyDescriptor,
    registry: DependencyRegistry,
    *,
    loader_src: LoaderSrcFilter | None = None,
) -> str | None:
    """Return the full URL the registry would print for ``descriptor``."""

    if not descriptor.src:
        return None

    version = effective_version(descriptor, registry)
    src = descriptor.src

    in_content_dir = bool(registry.content_url) and src.startswith(registry.content_url)
    if not _ABSOLUTE_URL.match(src) and not in_content_dir:
        src = registry.base_url + src

    if version:
        src = _with_version(src, version)

    if loader_src is not None:
        src = loader_src(src, descriptor.handle)
    return src


def shorten_source_url(url: str, base_url: str, *, secure: bool) -> str:
    """Drop the site base URL and the scheme the current page already uses."""

    if base_url and url.startswith(base_url):
        url = url[len(base_url) :]

    if secure:
        return url.replace("https://", "//")
    return url.replace("http://", "//")


def resolve_source(
    descriptor: DependencyDescriptor,
    registry: DependencyRegistry,
    *,
    secure: bool,
    loader_src: LoaderSrcFilter | None = None,
) -> str | None:
    url = build_source_url(descriptor, registry, loader_src=loader_src)
    if not url:
        return None
    return shorten_source_url(url, registry.base_url, secure=secure)


def escape_header_url(url: str) -> str:
    """Percent-encode characters that cannot appear inside ``Link: <...>``."""

    return quote(url, safe=_HEADER_URL_SAFE_CHARS)


__all__ = [
    "build_source_url",
    "effective_version",
    "escape_header_url",
    "resolve_source",
    "shorten_source_url",
]
