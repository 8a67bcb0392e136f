"""ASGI middleware that attaches preload hints to responses.

Pure ASGI rather than ``BaseHTTPMiddleware`` because deferred emission has to
hold the response start message while streamed body chunks are buffered.
"""

from __future__ import annotations

from collections.abc import Callable

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from preload_resources.config import PreloadConfig, load_config
from preload_resources.context import PreloadContext
from preload_resources.emitter import PreloadEmitter
from preload_resources.logging import get_logger
from preload_resources.logging_events import log_event

PrepareContext = Callable[[PreloadContext], None]

STATE_KEY = "preload"

_logger = get_logger(__name__)


def is_secure_scope(scope: Scope) -> bool:
    if scope.get("scheme") == "https":
        return True
    server = scope.get("server")
    return bool(server) and server[1] == 443


class PreloadMiddleware:
    """Emit ``Link: rel=preload`` headers for the request's styles and scripts.

    Without buffering the hints are computed when the application starts the
    response. With buffering the start message and body are held until the
    configured render phase is reached (or the body ends), so resources
    printed while rendering the page head are included.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        config: PreloadConfig | None = None,
        prepare: PrepareContext | None = None,
    ) -> None:
        self.app = app
        self._config = config or load_config()
        self._emitter = PreloadEmitter(self._config)
        self._prepare = prepare

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        context = PreloadContext.from_config(self._config, secure=is_secure_scope(scope))
        scope.setdefault("state", {})[STATE_KEY] = context
        if self._prepare is not None:
            self._prepare(context)

        if self._config.use_buffering:
            response = _BufferedResponse(self, context, send)
            await self.app(scope, receive, response.send)
            await response.finish()
        else:
            await self.app(scope, receive, self._immediate_sender(context, send))

    def emit_into(self, context: PreloadContext, message: Message) -> None:
        message["headers"] = list(message.get("headers", []))
        self._emitter.emit_all(context, MutableHeaders(raw=message["headers"]))

    def _immediate_sender(self, context: PreloadContext, send: Send) -> Send:
        async def send_with_preload(message: Message) -> None:
            if message["type"] == "http.response.start":
                self.emit_into(context, message)
            await send(message)

        return send_with_preload

    @property
    def flush_hook(self) -> str:
        return self._config.flush_hook


class _BufferedResponse:
    """Holds the start message and body chunks until the flush phase."""

    def __init__(self, middleware: PreloadMiddleware, context: PreloadContext, send: Send) -> None:
        self._middleware = middleware
        self._context = context
        self._send = send
        self._start: Message | None = None
        self._buffered: list[Message] = []
        self._flushed = False

    async def _flush(self) -> None:
        start = self._start
        if start is None:
            return
        self._flushed = True
        flush_hook = self._middleware.flush_hook
        log_event(
            _logger,
            "preload.deferred",
            flush_hook=flush_hook,
            phase_reached=self._context.reached(flush_hook),
        )
        self._middleware.emit_into(self._context, start)
        await self._send(start)
        for message in self._buffered:
            await self._send(message)
        self._buffered.clear()

    async def send(self, message: Message) -> None:
        if self._flushed:
            await self._send(message)
            return

        message_type = message["type"]
        if message_type == "http.response.start":
            self._start = message
            return

        if self._start is None:
            await self._send(message)
            return

        if message_type == "http.response.body":
            self._buffered.append(message)
            if self._context.reached(self._middleware.flush_hook) or not message.get(
                "more_body", False
            ):
                await self._flush()
            return

        await self._flush()
        await self._send(message)

    async def finish(self) -> None:
        """Send a start message the application left without a final body."""

        if not self._flushed:
            await self._flush()


__all__ = ["PreloadMiddleware", "STATE_KEY", "is_secure_scope"]
