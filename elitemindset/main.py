"""EliteMindset - MCP coaching servers for ChatGPT apps."""

import uvicorn
from starlette.types import ASGIApp

from .config import Settings, Variant, get_settings
from .logging_middleware import UsageLoggingMiddleware, configure_logging, configure_usage_logging
from .mcp.resources import load_widget_html
from .mcp.routes import POST_PATH, SSE_PATH, MCPApp
from .mcp.server import server_factory
from .mcp.sessions import SessionRegistry

BANNERS = {
    Variant.COACH: "EliteMindset coach",
    Variant.ELITE_MINDSET: "EliteMindset",
}


def create_app(variant: Variant, settings: Settings | None = None) -> ASGIApp:
    """Build the ASGI app for a variant.

    The elite-mindset widget is loaded here, so a missing asset raises
    ``WidgetAssetsError`` before any listener is bound.
    """
    settings = settings or get_settings()

    widget_html = None
    if variant == Variant.ELITE_MINDSET:
        widget_html = load_widget_html(settings.assets_dir)

    app = MCPApp(variant, server_factory(variant, widget_html), SessionRegistry())
    return UsageLoggingMiddleware(app)


def run(variant: Variant) -> None:
    """Configure logging, build the app and serve it with uvicorn."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    configure_usage_logging(
        destination=settings.USAGE_LOG_DESTINATION,
        file_path=settings.USAGE_LOG_FILE_PATH,
    )

    app = create_app(variant, settings)
    port = settings.resolve_port(variant)

    print(f"{BANNERS[variant]} MCP server listening on http://localhost:{port}")
    print(f"  SSE stream: GET http://localhost:{port}{SSE_PATH}")
    print(f"  Message post endpoint: POST http://localhost:{port}{POST_PATH}?sessionId=...")

    uvicorn.run(app, host=settings.HOST, port=port, log_level=settings.LOG_LEVEL.lower())


def run_elite_mindset() -> None:
    run(Variant.ELITE_MINDSET)


def run_coach() -> None:
    run(Variant.COACH)


if __name__ == "__main__":
    run(get_settings().VARIANT)
