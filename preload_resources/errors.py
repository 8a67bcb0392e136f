"""Exceptions raised by the preload package."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class PreloadError(Exception):
    """Base exception for preload specific failures."""

    __slots__ = ("message", "meta")

    def __init__(self, message: str, *, meta: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.meta = meta


class ConfigurationError(PreloadError):
    """Raised when preload settings cannot be loaded or are out of range."""

    def __init__(
        self,
        message: str,
        *,
        setting: str | None = None,
        value: Any = None,
    ) -> None:
        meta: dict[str, Any] | None = None
        if setting is not None:
            meta = {"setting": setting, "value": value}
        super().__init__(message, meta=meta)
        self.setting = setting


__all__ = ["ConfigurationError", "PreloadError"]
