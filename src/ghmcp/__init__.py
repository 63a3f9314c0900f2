"""Build and run the GitHub MCP server inside Apple containers."""

__version__ = "0.1.0"
