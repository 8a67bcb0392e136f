"""Registries of styles and scripts queued for output on a response."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DependencyKind(str, Enum):
    """Resource kind, used verbatim as the ``as=`` preload attribute."""

    STYLE = "style"
    SCRIPT = "script"


@dataclass(slots=True)
class DependencyDescriptor:
    """A single registered resource.

    ``ver`` follows the registration convention: ``None`` disables the
    version query argument, ``False`` or an empty string falls back to the
    registry's default version, ``True`` means version ``"1"`` and any other
    value is used as given.
    """

    handle: str
    src: str = ""
    deps: tuple[str, ...] = ()
    ver: str | bool | None = False
    args: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def conditional(self) -> str | None:
        value = self.extra.get("conditional")
        return None if value is None else str(value)


@dataclass(slots=True)
class DependencyRegistry:
    """Ordered collection of descriptors plus URL resolution settings."""

    kind: DependencyKind
    base_url: str = ""
    content_url: str = ""
    default_version: str | None = None
    args: dict[str, str] = field(default_factory=dict)
    registered: dict[str, DependencyDescriptor] = field(default_factory=dict)
    queue: list[str] = field(default_factory=list)
    done: list[str] = field(default_factory=list)

    def register(
        self,
        handle: str,
        src: str = "",
        deps: Iterable[str] = (),
        ver: str | bool | None = False,
        args: str | None = None,
    ) -> bool:
        if handle in self.registered:
            return False
        self.registered[handle] = DependencyDescriptor(
            handle=handle,
            src=src or "",
            deps=tuple(deps),
            ver=ver,
            args=args,
        )
        return True

    def add_data(self, handle: str, key: str, value: Any) -> bool:
        descriptor = self.registered.get(handle)
        if descriptor is None:
            return False
        descriptor.extra[key] = value
        return True

    def query(self, handle: str) -> DependencyDescriptor | None:
        return self.registered.get(handle)

    def enqueue(self, handle: str) -> None:
        if handle not in self.queue:
            self.queue.append(handle)

    def dequeue(self, handle: str) -> None:
        if handle in self.queue:
            self.queue.remove(handle)

    def is_done(self, handle: str) -> bool:
        return handle in self.done

    def mark_done(self, handle: str) -> None:
        if handle not in self.done:
            self.done.append(handle)

    def do_items(self) -> list[str]:
        """Mark queued handles as output, in queue order, and return them.

        Handles that were never registered are dropped. Dependencies are not
        expanded; callers enqueue in the order resources should appear.
        """

        printed: list[str] = []
        for handle in self.queue:
            if handle in self.done or handle not in self.registered:
                continue
            self.done.append(handle)
            printed.append(handle)
        return printed


def style_registry(**settings: Any) -> DependencyRegistry:
    return DependencyRegistry(kind=DependencyKind.STYLE, **settings)


def script_registry(**settings: Any) -> DependencyRegistry:
    return DependencyRegistry(kind=DependencyKind.SCRIPT, **settings)


__all__ = [
    "DependencyDescriptor",
    "DependencyKind",
    "DependencyRegistry",
    "script_registry",
    "style_registry",
]
