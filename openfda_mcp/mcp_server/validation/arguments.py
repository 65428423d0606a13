"""Argument validation for MCP tool calls.

Each tool has a pydantic model mirroring its ``inputSchema`` in
``config.tool_definitions``. Validation rejects out-of-range values instead of
clamping them, and fills in declared defaults. Integers and booleans must
arrive as JSON integers and booleans; strings and bools are not coerced.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, Field, ValidationError

from ..config.tool_definitions import (
    COUNT_LIMIT_DEFAULT,
    COUNT_LIMIT_MAX,
    LIMIT_DEFAULT,
    LIMIT_MAX,
    LIMIT_MIN,
    NDC_PATTERN,
    SET_ID_PATTERN,
)

logger = logging.getLogger(__name__)


class ToolValidationError(ValueError):
    """Base class for tool calls rejected before reaching openFDA."""


class UnknownToolError(ToolValidationError):
    """Raised when a tool name is not in the catalog."""

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class ArgumentParseError(ToolValidationError):
    """Raised when string-encoded arguments are not a JSON object."""


class ToolArgumentError(ToolValidationError):
    """Raised when arguments violate a tool's declared shape.

    Attributes:
        tool_name: Tool whose arguments were rejected
        field_errors: List of ``{"field": ..., "message": ...}`` dicts
    """

    def __init__(self, tool_name: str, field_errors: List[Dict[str, str]]):
        details = "; ".join(f"{e['field']}: {e['message']}" for e in field_errors)
        super().__init__(f"Invalid arguments for tool '{tool_name}': {details}")
        self.tool_name = tool_name
        self.field_errors = field_errors


class PaginatedArgs(BaseModel):
    limit: int = Field(LIMIT_DEFAULT, ge=LIMIT_MIN, le=LIMIT_MAX, strict=True)
    skip: int = Field(0, ge=0, strict=True)


class SearchLabelsArgs(PaginatedArgs):
    query: str = Field(..., min_length=1)
    fields: Optional[str] = None
    sort: Optional[str] = None


class SearchLabelsSummaryArgs(PaginatedArgs):
    query: str = Field(..., min_length=1)
    sort: Optional[str] = None


class CountLabelsArgs(BaseModel):
    field: str = Field(..., min_length=1)
    query: Optional[str] = None
    limit: int = Field(COUNT_LIMIT_DEFAULT, ge=LIMIT_MIN, le=COUNT_LIMIT_MAX, strict=True)


class SetIdLookupArgs(BaseModel):
    set_id: str = Field(..., min_length=1, pattern=SET_ID_PATTERN)
    fields: Optional[List[str]] = None


class NdcLookupArgs(PaginatedArgs):
    ndc: str = Field(..., min_length=1, pattern=NDC_PATTERN)


class DrugNameLookupArgs(PaginatedArgs):
    name: str = Field(..., min_length=1)
    include_substance_name: bool = Field(False, strict=True)


class HealthArgs(BaseModel):
    pass


ARGUMENT_MODELS: Dict[str, Type[BaseModel]] = {
    "search_labels": SearchLabelsArgs,
    "search_labels_summary": SearchLabelsSummaryArgs,
    "count_labels": CountLabelsArgs,
    "get_label_by_set_id": SetIdLookupArgs,
    "get_label_by_ndc": NdcLookupArgs,
    "get_label_by_drug_name": DrugNameLookupArgs,
    "health": HealthArgs,
}


def parse_arguments(arguments: Union[str, bytes, Dict[str, Any], None]) -> Dict[str, Any]:
    """
    Normalize raw tool arguments to a dict.

    Args:
        arguments: Argument mapping, a JSON-encoded object, or None

    Returns:
        Dict of arguments

    Raises:
        ArgumentParseError: If a string payload is not valid JSON or not an object
    """
    if arguments is None:
        return {}

    if isinstance(arguments, (str, bytes)):
        if not arguments.strip():
            return {}
        try:
            parsed = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise ArgumentParseError(f"Tool arguments are not valid JSON: {e}") from e
    else:
        parsed = arguments

    if not isinstance(parsed, dict):
        raise ArgumentParseError(
            f"Tool arguments must be a JSON object, got {type(parsed).__name__}"
        )

    return parsed


def validate_tool_arguments(
    tool_name: str, arguments: Union[str, bytes, Dict[str, Any], None]
) -> Dict[str, Any]:
    """
    Validate raw arguments against a tool's declared shape.

    Args:
        tool_name: Name of the tool being invoked
        arguments: Raw arguments (dict or JSON-encoded string)

    Returns:
        Dict of validated arguments with defaults applied

    Raises:
        UnknownToolError: If the tool is not in the catalog
        ArgumentParseError: If string arguments cannot be decoded
        ToolArgumentError: If the arguments fail validation
    """
    model = ARGUMENT_MODELS.get(tool_name)
    if model is None:
        raise UnknownToolError(tool_name)

    raw = parse_arguments(arguments)

    try:
        validated = model.model_validate(raw)
    except ValidationError as e:
        field_errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]) or "arguments",
                "message": error["msg"],
            }
            for error in e.errors()
        ]
        logger.debug(f"Rejected arguments for {tool_name}: {field_errors}")
        raise ToolArgumentError(tool_name, field_errors) from e

    return validated.model_dump()
