"""Emit ``Link: rel=preload`` headers for a page's queued styles and scripts."""

from __future__ import annotations

from preload_resources.budget import HeaderBudget
from preload_resources.config import PreloadConfig, load_config
from preload_resources.context import PreloadContext
from preload_resources.dependencies import (
    DependencyDescriptor,
    DependencyKind,
    DependencyRegistry,
    script_registry,
    style_registry,
)
from preload_resources.emitter import PreloadEmitter
from preload_resources.errors import ConfigurationError, PreloadError
from preload_resources.middleware import PreloadMiddleware, install_preload
from preload_resources.resolver import resolve_source

__all__ = [
    "ConfigurationError",
    "DependencyDescriptor",
    "DependencyKind",
    "DependencyRegistry",
    "HeaderBudget",
    "PreloadConfig",
    "PreloadContext",
    "PreloadEmitter",
    "PreloadError",
    "PreloadMiddleware",
    "install_preload",
    "load_config",
    "resolve_source",
    "script_registry",
    "style_registry",
]
