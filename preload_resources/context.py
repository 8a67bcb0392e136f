"""Per-request state shared by views, templates and the preload middleware."""

from __future__ import annotations

from html import escape

from preload_resources.config import PreloadConfig
from preload_resources.dependencies import (
    DependencyDescriptor,
    DependencyRegistry,
    script_registry,
    style_registry,
)
from preload_resources.resolver import build_source_url

HEAD_PHASE = "head"


def _wrap_conditional(descriptor: DependencyDescriptor, tag: str) -> str:
    condition = descriptor.conditional
    if condition is None:
        return tag
    return f"<!--[if {condition}]>\n{tag}<![endif]-->\n"


class PreloadContext:
    """Style and script registries for one response plus reached render phases."""

    def __init__(
        self,
        styles: DependencyRegistry,
        scripts: DependencyRegistry,
        *,
        secure: bool = False,
        config: PreloadConfig | None = None,
    ) -> None:
        self.styles = styles
        self.scripts = scripts
        self.secure = secure
        self._config = config or PreloadConfig()
        self._phases: list[str] = []

    @classmethod
    def from_config(cls, config: PreloadConfig, *, secure: bool = False) -> PreloadContext:
        settings = {
            "base_url": config.base_url,
            "content_url": config.content_url,
            "default_version": config.default_version,
        }
        return cls(
            style_registry(**settings),
            script_registry(**settings),
            secure=secure,
            config=config,
        )

    @property
    def phases(self) -> tuple[str, ...]:
        return tuple(self._phases)

    def fire(self, phase: str) -> None:
        if phase not in self._phases:
            self._phases.append(phase)

    def reached(self, phase: str) -> bool:
        return phase in self._phases

    def print_styles(self) -> str:
        registry = self.styles
        loader_src = self._config.loader_src(registry.kind)
        tags: list[str] = []
        for handle in registry.do_items():
            descriptor = registry.registered[handle]
            href = build_source_url(descriptor, registry, loader_src=loader_src)
            if not href:
                continue
            media = descriptor.args or "all"
            tag = (
                f"<link rel='stylesheet' id='{escape(handle)}-css' "
                f"href='{escape(href)}' media='{escape(media)}' />\n"
            )
            tags.append(_wrap_conditional(descriptor, tag))
        return "".join(tags)

    def print_scripts(self) -> str:
        registry = self.scripts
        loader_src = self._config.loader_src(registry.kind)
        tags: list[str] = []
        for handle in registry.do_items():
            descriptor = registry.registered[handle]
            src = build_source_url(descriptor, registry, loader_src=loader_src)
            if not src:
                continue
            tag = f"<script src='{escape(src)}' id='{escape(handle)}-js'></script>\n"
            tags.append(_wrap_conditional(descriptor, tag))
        return "".join(tags)

    def head(self) -> str:
        """Print queued styles then scripts and mark the head phase reached."""

        markup = self.print_styles() + self.print_scripts()
        self.fire(HEAD_PHASE)
        return markup


__all__ = ["HEAD_PHASE", "PreloadContext"]
