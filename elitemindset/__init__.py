"""EliteMindset - MCP coaching servers for ChatGPT apps."""

__version__ = "0.1.0"
