"""
JSON Serialization Utilities

Tool results are always pretty-printed JSON text; these helpers make sure a
payload can always be rendered, even when it contains values the standard
encoder does not know about.
"""

import json
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any


class MCPJSONEncoder(json.JSONEncoder):
    """Custom JSON encoder that handles datetime, Decimal, Enum and pydantic objects."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        elif isinstance(obj, Decimal):
            return float(obj)
        elif isinstance(obj, Enum):
            return obj.value
        elif hasattr(obj, "model_dump"):
            return obj.model_dump()
        return super().default(obj)


def safe_json_dumps(obj: Any, indent: int = 2) -> str:
    """
    Serialize an object to pretty-printed JSON, never raising.

    Args:
        obj: Object to serialize to JSON
        indent: Indentation width

    Returns:
        JSON string representation of the object

    Example:
        >>> safe_json_dumps({"results_count": 0})
        '{\\n  "results_count": 0\\n}'
    """
    try:
        return json.dumps(obj, cls=MCPJSONEncoder, ensure_ascii=False, indent=indent)
    except Exception as e:
        return json.dumps(
            {"error": f"Serialization failed: {str(e)}", "data": str(obj)},
            indent=indent,
        )
