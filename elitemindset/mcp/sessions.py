"""In-memory directory of live SSE sessions.

A session is created when an SSE stream opens and removed when its transport
signals close. The registry exclusively owns each record's server and
transport while the session is live.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from mcp.server import Server

from .transport import SseSessionTransport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionRecord:
    session_id: str
    server: Server
    transport: SseSessionTransport


class SessionRegistry:
    """Maps session ids to their live server/transport pair."""

    def __init__(self):
        self._sessions: dict[str, SessionRecord] = {}

    def create(self, server: Server, transport: SseSessionTransport) -> SessionRecord:
        """Register a session under the transport's id."""
        record = SessionRecord(session_id=transport.session_id, server=server, transport=transport)
        self._sessions[record.session_id] = record
        logger.info("Session opened: %s (active: %d)", record.session_id, len(self._sessions))
        return record

    def lookup(self, session_id: str) -> SessionRecord | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> SessionRecord | None:
        """Drop a session. Safe to call more than once for the same id."""
        record = self._sessions.pop(session_id, None)
        if record is not None:
            logger.info("Session closed: %s (active: %d)", session_id, len(self._sessions))
        return record

    def session_ids(self) -> Iterator[str]:
        return iter(list(self._sessions))

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
