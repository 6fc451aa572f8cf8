"""MCP (Model Context Protocol) wiring for the coaching servers.

Tool and resource definitions, tool-call handlers, the per-session SSE
transport, the session registry and the HTTP router that ties them together.
"""

from .routes import MCPApp
from .server import create_mcp_server, server_factory
from .sessions import SessionRegistry

__all__ = ["MCPApp", "SessionRegistry", "create_mcp_server", "server_factory"]
