"""Connectivity probe tool for the openFDA MCP server."""

from .tools import HealthTools

__all__ = ["HealthTools"]
