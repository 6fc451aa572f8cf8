"""ASGI application for the MCP servers over HTTP/SSE.

All paths are dispatched by a short chain of exact (method, path) checks
inside one ASGI app. The SSE transport manages the full ASGI response
lifecycle itself, so it cannot sit behind a framework route that would send
a second response.

Routes:
    OPTIONS /mcp, /mcp/messages  – CORS preflight
    GET     /healthz             – liveness
    GET     /                    – service descriptor
    GET     /mcp                 – open an SSE session
    POST    /mcp/messages        – deliver one JSON-RPC message to a session
"""

import logging

import anyio
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.types import Message, Receive, Scope, Send

from .. import __version__
from ..config import Variant
from .server import SERVER_NAMES, ServerFactory
from .sessions import SessionRegistry
from .tools import NEXT_BEST_STEP
from .transport import SseSessionTransport

logger = logging.getLogger(__name__)

SSE_PATH = "/mcp"
POST_PATH = "/mcp/messages"
HEALTH_PATH = "/healthz"

SSE_CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}
POST_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "content-type",
}
PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "content-type",
}


class ResponseTracker:
    """Wraps ``send`` to add headers to the response and record that it started."""

    def __init__(self, send: Send, headers: dict[str, str]):
        self._send = send
        self._headers = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()]
        self.started = False

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.started = True
            headers = list(message.get("headers", []))
            present = {bytes(k).lower() for k, _ in headers}
            headers.extend((k, v) for k, v in self._headers if k not in present)
            message = {**message, "headers": headers}
        await self._send(message)


class MCPApp:
    """Combined ASGI app for one server variant."""

    def __init__(
        self,
        variant: Variant,
        server_factory: ServerFactory,
        registry: SessionRegistry | None = None,
    ):
        self.variant = variant
        self.server_factory = server_factory
        self.registry = registry if registry is not None else SessionRegistry()

    @staticmethod
    def _local_path(scope: Scope) -> str:
        """Return the path relative to this app's mount point."""
        path = scope.get("path", "")
        root = scope.get("root_path", "")
        if root and path.startswith(root):
            path = path[len(root) :]
        return path or "/"

    def descriptor(self) -> dict:
        return {
            "name": SERVER_NAMES[self.variant],
            "version": __version__,
            "tool": NEXT_BEST_STEP,
            "endpoints": {
                "sse": SSE_PATH,
                "messages": POST_PATH,
                "health": HEALTH_PATH,
            },
        }

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        method = scope["method"]
        path = self._local_path(scope)

        if method == "OPTIONS" and path in (SSE_PATH, POST_PATH):
            response = Response(status_code=204, headers=PREFLIGHT_HEADERS)
            await response(scope, receive, send)
        elif method == "GET" and path == HEALTH_PATH:
            await PlainTextResponse("OK")(scope, receive, send)
        elif method == "GET" and path == "/":
            await JSONResponse(self.descriptor())(scope, receive, send)
        elif method == "GET" and path == SSE_PATH:
            await self.handle_sse(scope, receive, send)
        elif method == "POST" and path == POST_PATH:
            await self.handle_post_message(scope, receive, send)
        else:
            await PlainTextResponse("Not Found", status_code=404)(scope, receive, send)

    async def handle_sse(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Open a session: register it, run its server until the stream closes."""
        tracked = ResponseTracker(send, SSE_CORS_HEADERS)
        server = self.server_factory()
        endpoint = scope.get("root_path", "").rstrip("/") + POST_PATH
        transport = SseSessionTransport(endpoint)
        session_id = transport.session_id

        # Registered before the handshake so an early POST can find the session.
        self.registry.create(server, transport)

        def on_close() -> None:
            self.registry.remove(session_id)

        def on_error(error: Exception) -> None:
            logger.error("SSE transport error in session %s", session_id, exc_info=error)

        transport.on_close = on_close
        transport.on_error = on_error

        try:
            options = server.create_initialization_options()
            async with transport.connect(scope, receive, tracked) as (read_stream, write_stream):
                async with anyio.create_task_group() as tg:
                    tg.start_soon(server.run, read_stream, write_stream, options)
                    # The SSE response is held back until the server is attached.
                    await transport.attach()
        except Exception:
            self.registry.remove(session_id)
            logger.exception("Failed to start SSE session %s", session_id)
            if not tracked.started:
                response = PlainTextResponse("Failed to establish SSE connection", status_code=500)
                await response(scope, receive, tracked)

    async def handle_post_message(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Route a client message to its session's transport."""
        tracked = ResponseTracker(send, POST_CORS_HEADERS)
        session_id = Request(scope).query_params.get("sessionId")

        if not session_id:
            response = PlainTextResponse("Missing sessionId query parameter", status_code=400)
            await response(scope, receive, tracked)
            return

        record = self.registry.lookup(session_id)
        if record is None:
            await PlainTextResponse("Unknown session", status_code=404)(scope, receive, tracked)
            return

        try:
            await record.transport.handle_post_message(scope, receive, tracked)
        except Exception:
            logger.exception("Failed to process message for session %s", session_id)
            if not tracked.started:
                response = PlainTextResponse("Failed to process message", status_code=500)
                await response(scope, receive, tracked)

    @staticmethod
    async def _lifespan(receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
