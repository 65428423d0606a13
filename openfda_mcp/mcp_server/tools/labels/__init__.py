"""Drug label tools for the openFDA MCP server.

This package contains the search and lookup tools:
- Free-form search (raw records or truncated summaries)
- Field counts
- Lookups by set_id, NDC and drug name
"""

from .tools import LabelTools

__all__ = ["LabelTools"]
