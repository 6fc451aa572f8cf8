"""Logging setup and structured usage logging for HTTP requests.

Usage lines are Elasticsearch-compatible JSON (ECS - Elastic Common Schema).
The middleware is plain ASGI rather than ``BaseHTTPMiddleware`` so long-lived
SSE responses stream through untouched; the entry for an SSE request is
written when the stream ends.
"""

import json
import logging
import sys
import time
from datetime import UTC, datetime
from pathlib import Path

from starlette.types import ASGIApp, Message, Receive, Scope, Send

# Configure usage logger
usage_logger = logging.getLogger("elitemindset.usage")

SKIP_PATHS = ("/healthz",)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging to stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class UsageLoggingMiddleware:
    """Logs each HTTP request as one ECS JSON line."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path") in SKIP_PATHS:
            await self.app(scope, receive, send)
            return

        start_time = datetime.now(UTC)
        started = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            duration_ns = int((time.perf_counter() - started) * 1_000_000_000)
            entry = self._entry(scope, start_time, status_code, duration_ns)
            usage_logger.info(json.dumps(entry, default=str))

    @staticmethod
    def _entry(scope: Scope, start_time: datetime, status_code: int, duration_ns: int) -> dict:
        headers = dict(scope.get("headers") or [])
        query = scope.get("query_string", b"").decode("latin-1")
        client = scope.get("client")

        return {
            "@timestamp": start_time.isoformat(),
            "event": {
                "category": "web",
                "action": scope["method"].lower(),
                "duration": duration_ns,
                "outcome": "success" if status_code < 400 else "failure",
            },
            "http": {
                "request": {"method": scope["method"]},
                "response": {"status_code": status_code},
            },
            "url": {
                "path": scope.get("path"),
                "query": query or None,
            },
            "client": {
                "ip": client[0] if client else None,
            },
            "user_agent": {
                "original": headers.get(b"user-agent", b"").decode("latin-1") or None,
            },
        }


def configure_usage_logging(destination: str = "stdout", file_path: str | None = None) -> None:
    """Configure the usage logger based on settings.

    Args:
        destination: Where to log - "stdout", "file", or "external"
        file_path: Path to log file (required if destination is "file")
    """
    logger = logging.getLogger("elitemindset.usage")
    logger.setLevel(logging.INFO)

    # Remove existing handlers
    logger.handlers.clear()

    # Prevent propagation to root logger
    logger.propagate = False

    if destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    elif destination == "file" and file_path:
        log_path = Path(file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(file_path)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    # "external" means no local handler - logs go to external service via separate config
