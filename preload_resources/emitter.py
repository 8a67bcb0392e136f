"""Turn queued dependencies into ``Link: rel=preload`` response headers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.datastructures import MutableHeaders

from preload_resources.budget import HeaderBudget
from preload_resources.config import PreloadConfig
from preload_resources.dependencies import DependencyRegistry
from preload_resources.logging import get_logger
from preload_resources.logging_events import log_event
from preload_resources.resolver import escape_header_url, resolve_source

if TYPE_CHECKING:
    from preload_resources.context import PreloadContext

LINK_HEADER = "Link"

_logger = get_logger(__name__)


def format_link_value(url: str, kind: str) -> str:
    return f"<{escape_header_url(url)}>; rel=preload; as={kind}"


class PreloadEmitter:
    """Append preload hints for a registry while the header budget allows."""

    def __init__(self, config: PreloadConfig, budget: HeaderBudget | None = None) -> None:
        self._config = config
        self._budget = budget or HeaderBudget(max_bytes=config.max_header_size)

    @property
    def budget(self) -> HeaderBudget:
        return self._budget

    def candidate_handles(self, registry: DependencyRegistry) -> list[str]:
        handles = list(registry.done)
        handles_filter = self._config.handles_filter(registry.kind)
        if handles_filter is not None:
            handles = list(handles_filter(handles, registry))
        return handles

    def emit(
        self,
        registry: DependencyRegistry,
        headers: MutableHeaders,
        *,
        secure: bool,
    ) -> list[str]:
        """Append one ``Link`` header per eligible handle, in order.

        Handles without a source or flagged ``conditional`` are skipped. The
        pass stops at the first handle that no longer fits the budget;
        later, smaller handles are not considered.
        """

        kind = registry.kind
        loader_src = self._config.loader_src(kind)
        candidates = self.candidate_handles(registry)
        emitted: list[str] = []
        emitted_handles: list[str] = []
        abandoned: list[str] = []

        for position, handle in enumerate(candidates):
            descriptor = registry.query(handle)
            if descriptor is None or not descriptor.src:
                continue

            if descriptor.conditional is not None:
                continue

            if not self._budget.is_allowed(headers.raw):
                abandoned = candidates[position:]
                break

            url = resolve_source(descriptor, registry, secure=secure, loader_src=loader_src)
            if not url:
                continue

            value = format_link_value(url, kind.value)
            if not self._budget.is_allowed(headers.raw, (LINK_HEADER, value)):
                abandoned = candidates[position:]
                break

            headers.append(LINK_HEADER, value)
            emitted.append(value)
            emitted_handles.append(handle)

        log_event(
            _logger,
            "preload.emit",
            status="budget_exhausted" if abandoned else "ok",
            kind=kind.value,
            count=len(emitted),
            meta={"emitted": emitted_handles, "abandoned": abandoned},
        )
        return emitted

    def emit_all(self, context: PreloadContext, headers: MutableHeaders) -> list[str]:
        """Run the style pass, then the script pass, over one header set."""

        emitted = self.emit(context.styles, headers, secure=context.secure)
        emitted.extend(self.emit(context.scripts, headers, secure=context.secure))
        return emitted


__all__ = ["LINK_HEADER", "PreloadEmitter", "format_link_value"]
