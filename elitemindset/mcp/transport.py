"""Per-session SSE transport for MCP.

One transport instance serves exactly one SSE stream. On connect it announces
the message endpoint (``<post path>?sessionId=<id>``) as the first SSE event,
then forwards every server message as a ``message`` event. Client messages
arrive through ``handle_post_message`` and are fed to the server's read stream.

The owner is told about the end of the stream through ``on_close`` and about
failures through ``on_error``; errors alone never close the session.
"""

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from urllib.parse import quote
from uuid import uuid4

import anyio
from anyio.streams.memory import MemoryObjectSendStream
from mcp.shared.message import SessionMessage
from mcp.types import JSONRPCMessage
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

ATTACH_POLL_INTERVAL = 0.01


class SseSessionTransport:
    """SSE stream plus POST endpoint for a single MCP session."""

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        self.session_id = uuid4().hex
        self.on_close: Callable[[], None] | None = None
        self.on_error: Callable[[Exception], None] | None = None
        self._read_stream_writer: MemoryObjectSendStream[SessionMessage] | None = None
        self._attached: anyio.Event | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def endpoint_uri(self) -> str:
        return f"{quote(self.endpoint)}?sessionId={self.session_id}"

    @asynccontextmanager
    async def connect(self, scope: Scope, receive: Receive, send: Send):
        """Open the SSE response and yield the server's (read, write) streams."""
        if scope["type"] != "http":
            raise ValueError("connect() can only handle HTTP requests")
        if self._read_stream_writer is not None:
            raise RuntimeError(f"Transport {self.session_id} is already connected")

        read_stream_writer, read_stream = anyio.create_memory_object_stream(0)
        write_stream, write_stream_reader = anyio.create_memory_object_stream(0)
        sse_stream_writer, sse_stream_reader = anyio.create_memory_object_stream(0)
        self._read_stream_writer = read_stream_writer
        attached = self._attached = anyio.Event()

        async def gated_send(message: Message) -> None:
            if message["type"] == "http.response.start":
                await attached.wait()
            await send(message)

        async def sse_writer():
            async with sse_stream_writer, write_stream_reader:
                await sse_stream_writer.send({"event": "endpoint", "data": self.endpoint_uri})
                async for session_message in write_stream_reader:
                    await sse_stream_writer.send(
                        {
                            "event": "message",
                            "data": session_message.message.model_dump_json(
                                by_alias=True, exclude_none=True
                            ),
                        }
                    )

        async with anyio.create_task_group() as tg:

            async def stream_response():
                try:
                    response = EventSourceResponse(
                        content=sse_stream_reader, data_sender_callable=sse_writer
                    )
                    await response(scope, receive, gated_send)
                except Exception as e:
                    self._report_error(e)
                    raise
                finally:
                    with anyio.CancelScope(shield=True):
                        await read_stream_writer.aclose()
                        await write_stream_reader.aclose()
                        self.close()

            tg.start_soon(stream_response)
            yield read_stream, write_stream

    async def attach(self) -> None:
        """Wait until the server is reading the session's stream, then open the SSE response.

        Until this returns nothing has been sent to the client, so a server that
        fails to start can still be answered with an error status.
        """
        writer, attached = self._read_stream_writer, self._attached
        if writer is None or attached is None:
            raise RuntimeError(f"Transport {self.session_id} is not connected")

        while writer.statistics().tasks_waiting_receive == 0:
            if self._closed:
                return
            await anyio.sleep(ATTACH_POLL_INTERVAL)
        attached.set()

    async def handle_post_message(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Accept one JSON-RPC message from the client and hand it to the server."""
        writer = self._read_stream_writer
        if writer is None or self._closed:
            raise RuntimeError(f"Transport {self.session_id} is not connected")

        request = Request(scope, receive)
        body = await request.body()

        try:
            message = JSONRPCMessage.model_validate_json(body)
        except ValidationError as err:
            self._report_error(err)
            response = Response("Could not parse message", status_code=400)
            await response(scope, receive, send)
            return

        response = Response("Accepted", status_code=202)
        await response(scope, receive, send)
        await writer.send(SessionMessage(message))

    def close(self) -> None:
        """Mark the transport closed and notify the owner once."""
        if self._closed:
            return
        self._closed = True
        if self.on_close is not None:
            self.on_close()

    def _report_error(self, error: Exception) -> None:
        if self.on_error is not None:
            self.on_error(error)
        else:
            logger.error("Transport error in session %s", self.session_id, exc_info=error)
