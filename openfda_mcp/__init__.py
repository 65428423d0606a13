"""openFDA Drug Label MCP Server - drug label lookup tools for AI agents."""

__version__ = "0.1.0"
