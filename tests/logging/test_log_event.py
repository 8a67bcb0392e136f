from __future__ import annotations

from unittest.mock import Mock

import pytest

from preload_resources.logging_events import COMPONENT, log_event


def test_log_event_emits_expected_extra_fields() -> None:
    logger = Mock()

    log_event(
        logger,
        "preload.emit",
        status="budget_exhausted",
        kind="style",
        count=1,
        meta={"emitted": ["theme"], "abandoned": ["print", "fonts"]},
    )

    logger.info.assert_called_once()
    args, kwargs = logger.info.call_args
    assert args == ("preload.emit",)
    assert kwargs["extra"] == {
        "event": "preload.emit",
        "component": COMPONENT,
        "status": "budget_exhausted",
        "kind": "style",
        "count": 1,
        "meta": {"emitted": ["theme"], "abandoned": ["print", "fonts"]},
    }


def test_log_event_defaults_component_and_status() -> None:
    logger = Mock()

    log_event(logger, "preload.deferred", flush_hook="head")

    _, kwargs = logger.info.call_args
    assert kwargs["extra"] == {
        "event": "preload.deferred",
        "component": "preload",
        "status": "ok",
        "flush_hook": "head",
    }


def test_log_event_accepts_component_override() -> None:
    logger = Mock()

    log_event(logger, "preload.emit", component="middleware.preload")

    _, kwargs = logger.info.call_args
    assert kwargs["extra"]["component"] == "middleware.preload"


def test_log_event_rejects_empty_event() -> None:
    logger = Mock()

    with pytest.raises(ValueError):
        log_event(logger, "  ")


def test_log_event_rejects_nested_top_level_field() -> None:
    logger = Mock()

    with pytest.raises(TypeError):
        log_event(logger, "preload.emit", handles=["theme"])


def test_log_event_rejects_invalid_meta_type() -> None:
    logger = Mock()

    with pytest.raises(TypeError):
        log_event(logger, "preload.emit", meta="oops")


def test_log_event_rejects_non_string_meta_keys() -> None:
    logger = Mock()

    with pytest.raises(TypeError):
        log_event(logger, "preload.emit", meta={"handles": {1: "theme"}})


def test_log_event_rejects_unsupported_meta_values() -> None:
    logger = Mock()

    with pytest.raises(TypeError):
        log_event(logger, "preload.emit", meta={"handles": [object()]})
    logger.info.assert_not_called()
