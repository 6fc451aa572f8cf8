"""MCP Resource definitions for the elite-mindset widget.

The widget HTML is built ahead of time into the assets directory. It is read
once at startup and served unchanged for the lifetime of the process.
"""

from pathlib import Path

from mcp.types import Resource, ResourceTemplate, TextResourceContents

from .tools import TEMPLATE_URI, WIDGET_MIME_TYPE, widget_descriptor_meta

WIDGET_NAME = "kitchen-sink-lite"


class WidgetAssetsError(RuntimeError):
    """Raised at startup when the widget HTML cannot be located."""


def load_widget_html(assets_dir: Path) -> str:
    """Read the widget HTML from the assets directory.

    Prefers ``kitchen-sink-lite.html``; otherwise falls back to the
    lexicographically last ``kitchen-sink-lite-*.html`` (hashed build output).
    """
    if not assets_dir.is_dir():
        raise WidgetAssetsError(
            f"Widget assets not found. Expected directory {assets_dir}. "
            "Build the widget assets before starting the server."
        )

    direct_path = assets_dir / f"{WIDGET_NAME}.html"
    if direct_path.is_file():
        html = direct_path.read_text(encoding="utf-8")
    else:
        candidates = sorted(
            p.name
            for p in assets_dir.iterdir()
            if p.name.startswith(f"{WIDGET_NAME}-") and p.name.endswith(".html")
        )
        html = (assets_dir / candidates[-1]).read_text(encoding="utf-8") if candidates else ""

    if not html:
        raise WidgetAssetsError(
            f'Widget HTML for "{WIDGET_NAME}" not found in {assets_dir}. '
            "Build the widget assets before starting the server."
        )

    return html


def widget_resources() -> list[Resource]:
    return [
        Resource(
            name="Kitchen sink widget",
            uri=TEMPLATE_URI,
            description="Kitchen sink lite widget markup",
            mimeType=WIDGET_MIME_TYPE,
            _meta=widget_descriptor_meta(),
        )
    ]


def widget_resource_templates() -> list[ResourceTemplate]:
    return [
        ResourceTemplate(
            name="Kitchen sink widget template",
            uriTemplate=TEMPLATE_URI,
            description="Kitchen sink lite widget markup",
            mimeType=WIDGET_MIME_TYPE,
            _meta=widget_descriptor_meta(),
        )
    ]


def widget_contents(html: str) -> TextResourceContents:
    """Contents returned for a ``resources/read`` of the widget URI."""
    return TextResourceContents(
        uri=TEMPLATE_URI,
        mimeType=WIDGET_MIME_TYPE,
        text=html,
        _meta=widget_descriptor_meta(),
    )
