"""
Tool Definitions Configuration

Schema definitions and metadata for all MCP server tools. This is the single
source of truth for the tool catalog returned by ``list_tools``; the argument
validators in ``mcp_server.validation`` enforce the same constraints.

Descriptions are written for LLM tool selection: each one says when to use the
tool and how it relates to the others.
"""

from typing import Dict, Any

QUERY_GRAMMAR_URL = "https://open.fda.gov/apis/drug/label/"

# Pagination bounds shared by the label search tools
LIMIT_MIN = 1
LIMIT_MAX = 100
LIMIT_DEFAULT = 10
COUNT_LIMIT_MAX = 1000
COUNT_LIMIT_DEFAULT = 50

SET_ID_PATTERN = r"^[A-Za-z0-9-]+$"
NDC_PATTERN = r"^[A-Za-z0-9-]+$"


def _limit_property(maximum: int = LIMIT_MAX, default: int = LIMIT_DEFAULT) -> Dict[str, Any]:
    return {
        "type": "integer",
        "description": "Maximum number of labels to return",
        "minimum": LIMIT_MIN,
        "maximum": maximum,
        "default": default,
    }


SKIP_PROPERTY: Dict[str, Any] = {
    "type": "integer",
    "description": "Number of matching labels to skip (pagination offset)",
    "minimum": 0,
    "default": 0,
}

TOOL_SELECTION_GUIDANCE = {
    "workflow_patterns": {
        "find_a_drug": [
            "get_label_by_drug_name (summaries with set_id) → get_label_by_set_id (full label sections)"
        ],
        "product_code": [
            "get_label_by_ndc (labels for a package or product NDC) → get_label_by_set_id (one label in full)"
        ],
        "exploration": [
            "count_labels (how values are distributed) → search_labels_summary (skim matches) → search_labels (raw records, selected fields)"
        ],
        "troubleshooting": [
            "health (is openFDA reachable?)"
        ],
    },
    "common_mistakes": {
        "summaries_are_truncated": "Summary tools cut long label sections; fetch the full text with get_label_by_set_id",
        "query_grammar": f"search_labels takes raw openFDA query syntax ({QUERY_GRAMMAR_URL}); use get_label_by_drug_name for plain names",
    },
}

# Label search tools
SEARCH_TOOLS_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "search_labels": {
        "name": "search_labels",
        "description": f"Search openFDA drug labels using an arbitrary query and return the raw label records. When to use: the question needs fields or filters the dedicated lookup tools do not cover. Query grammar: {QUERY_GRAMMAR_URL}",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": 'openFDA search query, e.g. "openfda.brand_name:ibuprofen"',
                    "minLength": 1,
                },
                "limit": _limit_property(),
                "skip": SKIP_PROPERTY,
                "fields": {
                    "type": "string",
                    "description": "Comma-separated fields to return",
                },
                "sort": {
                    "type": "string",
                    "description": "Sort expression, e.g. 'effective_time:desc'",
                },
            },
            "required": ["query"],
        },
    },
    "search_labels_summary": {
        "name": "search_labels_summary",
        "description": "Search openFDA drug labels with an arbitrary query and return compact summaries (names, manufacturer, set_id and truncated key sections). When to use: skimming many matches without flooding the context; follow up with get_label_by_set_id for full text.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": 'openFDA search query, e.g. "indications_and_usage:migraine"',
                    "minLength": 1,
                },
                "limit": _limit_property(),
                "skip": SKIP_PROPERTY,
                "sort": {
                    "type": "string",
                    "description": "Sort expression, e.g. 'effective_time:desc'",
                },
            },
            "required": ["query"],
        },
    },
    "count_labels": {
        "name": "count_labels",
        "description": "Count drug labels grouped by the values of one field (openFDA count query). When to use: finding the most common manufacturers, routes or product types among labels matching an optional query.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "field": {
                    "type": "string",
                    "description": 'Field to count by, e.g. "openfda.manufacturer_name.exact"',
                    "minLength": 1,
                },
                "query": {
                    "type": "string",
                    "description": "Optional openFDA search query restricting the labels counted",
                },
                "limit": {
                    **_limit_property(COUNT_LIMIT_MAX, COUNT_LIMIT_DEFAULT),
                    "description": "Maximum number of count buckets to return",
                },
            },
            "required": ["field"],
        },
    },
}

# Lookup tools
LOOKUP_TOOLS_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "get_label_by_set_id": {
        "name": "get_label_by_set_id",
        "description": "Get one label document by set_id with full, untruncated label sections. When to use: after a summary tool returned a set_id, or when the caller already knows it. Returns a not-found payload (not an error) when no label matches.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "set_id": {
                    "type": "string",
                    "description": "Label set_id (UUID)",
                    "minLength": 1,
                    "pattern": SET_ID_PATTERN,
                },
                "fields": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Optional list of label fields to return instead of the default sections, e.g. [\"boxed_warning\", \"openfda.route\"]",
                },
            },
            "required": ["set_id"],
        },
    },
    "get_label_by_ndc": {
        "name": "get_label_by_ndc",
        "description": "Get labels by NDC, matching it as either a package code or a product code. When to use: the caller has a National Drug Code from packaging or a prescription.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "ndc": {
                    "type": "string",
                    "description": "NDC product or package code, e.g. \"0363-0218\"",
                    "minLength": 1,
                    "pattern": NDC_PATTERN,
                },
                "limit": _limit_property(),
                "skip": SKIP_PROPERTY,
            },
            "required": ["ndc"],
        },
    },
    "get_label_by_drug_name": {
        "name": "get_label_by_drug_name",
        "description": "Get label summaries matching a brand or generic name (optionally the substance name too). When to use: the first step for any question about a named drug; follow up with get_label_by_set_id for the full label.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Brand or generic name",
                    "minLength": 1,
                },
                "limit": _limit_property(),
                "skip": SKIP_PROPERTY,
                "include_substance_name": {
                    "type": "boolean",
                    "description": "Also match the active substance name",
                    "default": False,
                },
            },
            "required": ["name"],
        },
    },
}

# Diagnostic tools
DIAGNOSTIC_TOOLS_SCHEMAS: Dict[str, Dict[str, Any]] = {
    "health": {
        "name": "health",
        "description": "Check connectivity with openFDA. Returns 'ok' or 'error: <message>' and never fails.",
        "inputSchema": {"type": "object", "properties": {}},
    },
}

ALL_TOOL_SCHEMAS: Dict[str, Dict[str, Any]] = {
    **SEARCH_TOOLS_SCHEMAS,
    **LOOKUP_TOOLS_SCHEMAS,
    **DIAGNOSTIC_TOOLS_SCHEMAS,
}

TOOL_CATEGORIES = {
    "search_tools": list(SEARCH_TOOLS_SCHEMAS.keys()),
    "lookup_tools": list(LOOKUP_TOOLS_SCHEMAS.keys()),
    "diagnostic_tools": list(DIAGNOSTIC_TOOLS_SCHEMAS.keys()),
}


def validate_tool_definitions() -> bool:
    """
    Validate that tool definitions are consistent and complete.

    Returns:
        True if all definitions are valid
    """
    for category, tools in TOOL_CATEGORIES.items():
        for tool_name in tools:
            if tool_name not in ALL_TOOL_SCHEMAS:
                return False

            schema = ALL_TOOL_SCHEMAS[tool_name]
            if "name" not in schema or "description" not in schema:
                return False
            if schema["name"] != tool_name:
                return False

            input_schema = schema.get("inputSchema", {})
            properties = input_schema.get("properties", {})
            for required in input_schema.get("required", []):
                if required not in properties:
                    return False

    return True
