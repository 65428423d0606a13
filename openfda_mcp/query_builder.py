"""Query construction for the openFDA drug label endpoint.

Maps a tool's validated arguments to an :class:`ExternalQuery`. Construction
is a pure function of its input: no I/O happens here, and the only failure
mode is asking for a tool that has no construction rule.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
DEFAULT_SKIP = 0
COUNT_DEFAULT_LIMIT = 50
MAX_QUERY_LIMIT = 1000

# openFDA query grammar characters that must reach the API unencoded.
# "+" is the grammar's term separator, so it is never escaped as %2B.
QUERY_SAFE_CHARS = '+:()"[],*'

BRAND_NAME_FIELD = "openfda.brand_name"
GENERIC_NAME_FIELD = "openfda.generic_name"
SUBSTANCE_NAME_FIELD = "openfda.substance_name"
PACKAGE_NDC_FIELD = "openfda.package_ndc"
PRODUCT_NDC_FIELD = "openfda.product_ndc"
SET_ID_FIELD = "set_id"


class ExternalQuery(BaseModel):
    """One request against the openFDA label endpoint.

    Fields left as ``None`` are omitted from the serialized query string.
    """

    model_config = ConfigDict(frozen=True)

    search: Optional[str] = Field(None, description="openFDA search expression")
    count: Optional[str] = Field(None, description="Field to aggregate counts by")
    skip: Optional[int] = Field(None, ge=0, description="Number of records to skip")
    limit: Optional[int] = Field(None, ge=1, le=MAX_QUERY_LIMIT, description="Maximum records to return")
    fields: Optional[str] = Field(None, description="Comma-separated list of fields to return")
    sort: Optional[str] = Field(None, description="Sort expression, e.g. effective_time:desc")
    api_key: Optional[str] = Field(None, description="openFDA API key")

    def to_params(self) -> List[Tuple[str, str]]:
        """Ordered query parameters, api_key always last."""
        ordered = [
            ("search", self.search),
            ("count", self.count),
            ("limit", self.limit),
            ("skip", self.skip),
            ("fields", self.fields),
            ("sort", self.sort),
            ("api_key", self.api_key),
        ]
        return [(key, str(value)) for key, value in ordered if value is not None]

    def to_query_string(self) -> str:
        return "&".join(
            f"{key}={quote(value, safe=QUERY_SAFE_CHARS)}"
            for key, value in self.to_params()
        )


def escape_quotes(value: str) -> str:
    """Escape embedded double quotes for use inside a quoted search term."""
    return value.replace('"', '\\"')


def field_clause(field: str, value: str) -> str:
    return f'({field}:"{value}")'


def name_search_expression(name: str, include_substance_name: bool = False) -> str:
    """Brand OR generic (OR substance) name disjunction."""
    escaped = escape_quotes(name)
    fields = [BRAND_NAME_FIELD, GENERIC_NAME_FIELD]
    if include_substance_name:
        fields.append(SUBSTANCE_NAME_FIELD)
    return "+".join(field_clause(field, escaped) for field in fields)


def ndc_search_expression(ndc: str) -> str:
    """Match an NDC as either a package code or a product code."""
    return "+".join(
        field_clause(field, ndc) for field in (PACKAGE_NDC_FIELD, PRODUCT_NDC_FIELD)
    )


def _optional_text(args: Mapping[str, Any], key: str) -> Optional[str]:
    value = args.get(key)
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


class QueryBuilder:
    """Builds openFDA queries for each tool in the catalog."""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize the builder.

        Args:
            api_key: Optional openFDA API key attached to every query
        """
        self.api_key = api_key
        self._builders: Dict[str, Callable[[Mapping[str, Any]], ExternalQuery]] = {
            "search_labels": self._build_search,
            "search_labels_summary": self._build_search_summary,
            "count_labels": self._build_count,
            "get_label_by_set_id": self._build_set_id_lookup,
            "get_label_by_ndc": self._build_ndc_lookup,
            "get_label_by_drug_name": self._build_name_lookup,
            "health": self._build_health_probe,
        }

    def supported_tools(self) -> List[str]:
        return list(self._builders.keys())

    def build(self, tool_name: str, args: Mapping[str, Any]) -> ExternalQuery:
        """
        Build the external query for a tool invocation.

        Args:
            tool_name: Name of the tool being invoked
            args: Validated arguments for the tool

        Returns:
            ExternalQuery: Query ready to be serialized

        Raises:
            ValueError: If the tool has no query construction rule
        """
        builder = self._builders.get(tool_name)
        if builder is None:
            raise ValueError(f"No query construction rule for tool: {tool_name}")

        query = builder(args)
        logger.debug(f"Built query for {tool_name}: {query.model_dump(exclude={'api_key'}, exclude_none=True)}")
        return query

    def _query(self, **kwargs) -> ExternalQuery:
        return ExternalQuery(api_key=self.api_key, **kwargs)

    def _paging(self, args: Mapping[str, Any], default_limit: int = DEFAULT_LIMIT) -> Dict[str, int]:
        limit = args.get("limit")
        skip = args.get("skip")
        return {
            "limit": default_limit if limit is None else int(limit),
            "skip": DEFAULT_SKIP if skip is None else int(skip),
        }

    def _build_search(self, args: Mapping[str, Any]) -> ExternalQuery:
        return self._query(
            search=args["query"],
            fields=_optional_text(args, "fields"),
            sort=_optional_text(args, "sort"),
            **self._paging(args),
        )

    def _build_search_summary(self, args: Mapping[str, Any]) -> ExternalQuery:
        return self._query(
            search=args["query"],
            sort=_optional_text(args, "sort"),
            **self._paging(args),
        )

    def _build_count(self, args: Mapping[str, Any]) -> ExternalQuery:
        limit = args.get("limit")
        return self._query(
            search=_optional_text(args, "query"),
            count=args["field"],
            limit=COUNT_DEFAULT_LIMIT if limit is None else int(limit),
        )

    def _build_set_id_lookup(self, args: Mapping[str, Any]) -> ExternalQuery:
        # Only one document can carry a given set_id
        return self._query(search=f"{SET_ID_FIELD}:{args['set_id']}", limit=1)

    def _build_ndc_lookup(self, args: Mapping[str, Any]) -> ExternalQuery:
        return self._query(search=ndc_search_expression(args["ndc"]), **self._paging(args))

    def _build_name_lookup(self, args: Mapping[str, Any]) -> ExternalQuery:
        search = name_search_expression(
            args["name"], bool(args.get("include_substance_name", False))
        )
        return self._query(search=search, **self._paging(args))

    def _build_health_probe(self, args: Mapping[str, Any]) -> ExternalQuery:
        return self._query(limit=1)
