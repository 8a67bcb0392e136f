"""Structured log events emitted by the preload middleware."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

COMPONENT = "preload"

_FLAT_TYPES = (str, int, float, bool, type(None))


def _check_meta(value: Any, path: str) -> None:
    if isinstance(value, _FLAT_TYPES):
        return
    if isinstance(value, Mapping):
        for key, nested in value.items():
            if not isinstance(key, str):
                raise TypeError(f"Keys in '{path}' must be strings")
            _check_meta(nested, f"{path}.{key}")
        return
    if isinstance(value, (list, tuple)):
        for index, nested in enumerate(value):
            _check_meta(nested, f"{path}[{index}]")
        return
    raise TypeError(f"Unsupported value in '{path}': {type(value).__name__}")


def log_event(
    logger: Any,
    event: str,
    /,
    *,
    status: str = "ok",
    meta: Mapping[str, Any] | None = None,
    **fields: Any,
) -> None:
    """Log ``event`` with ``component``, ``status`` and ``fields`` as record attributes.

    Top level fields must be flat JSON values so log shippers can index them.
    Handle lists and other nested data go into ``meta``.
    """

    if not isinstance(event, str) or not event.strip():
        raise ValueError("event must be a non-empty string")

    extra: dict[str, Any] = {
        "event": event,
        "component": fields.pop("component", COMPONENT),
        "status": status,
    }
    for name, value in fields.items():
        if not isinstance(value, _FLAT_TYPES):
            raise TypeError(f"Field '{name}' must be a flat JSON-compatible value")
        extra[name] = value

    if meta is not None:
        if not isinstance(meta, Mapping):
            raise TypeError("meta must be a mapping if provided")
        payload = dict(meta)
        _check_meta(payload, "meta")
        extra["meta"] = payload

    logger.info(event, extra=extra)


__all__ = ["COMPONENT", "log_event"]
