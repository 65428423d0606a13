"""
MCP Server Tools Package

Tool implementations organized by category:
    labels: drug label search and lookup tools
    health: openFDA connectivity probe
"""

from .labels import LabelTools
from .health import HealthTools

__all__ = ["LabelTools", "HealthTools"]
