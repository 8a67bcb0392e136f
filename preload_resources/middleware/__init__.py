"""Middleware registration helpers."""

from __future__ import annotations

from fastapi import FastAPI

from preload_resources.config import PreloadConfig, load_config
from preload_resources.logging import configure_logging

from .preload import PreloadMiddleware, PrepareContext, is_secure_scope


def install_preload(
    app: FastAPI,
    config: PreloadConfig | None = None,
    *,
    prepare: PrepareContext | None = None,
) -> PreloadConfig:
    """Install the preload middleware on the provided application."""

    resolved = config or load_config()
    if resolved.log_level:
        configure_logging(resolved.log_level)
    app.state.preload_config = resolved
    app.add_middleware(PreloadMiddleware, config=resolved, prepare=prepare)
    return resolved


__all__ = ["PreloadMiddleware", "install_preload", "is_secure_scope"]
