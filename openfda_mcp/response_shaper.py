"""Shaping of raw openFDA label responses into tool payloads.

Label records are schemaless: every field is read through :func:`get_field`
or :func:`get_first` and falls back to a default when absent, so shaping never
fails on a missing or malformed sub-field.

Three modes are supported:

- passthrough: ``{meta, results_count, results}`` as returned upstream
- summarized: identifying fields plus label sections cut to a per-field maximum
- detail: one record in full, or an allow-listed subset of its fields
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

TRUNCATION_MARKER = "... [truncated]"
UNKNOWN = "Unknown"

# Section name -> maximum characters kept in summaries
SUMMARY_FIELD_LIMITS: Dict[str, int] = {
    "indications_and_usage": 400,
    "boxed_warning": 300,
    "warnings": 300,
    "dosage_and_administration": 300,
    "adverse_reactions": 300,
    "contraindications": 200,
    "drug_interactions": 200,
}

DETAIL_SECTIONS: List[str] = [
    "indications_and_usage",
    "dosage_and_administration",
    "dosage_forms_and_strengths",
    "contraindications",
    "boxed_warning",
    "warnings_and_cautions",
    "warnings",
    "precautions",
    "adverse_reactions",
    "drug_interactions",
    "use_in_specific_populations",
    "overdosage",
    "description",
    "clinical_pharmacology",
    "how_supplied",
]

_MISSING = object()


def get_field(record: Any, path: str, default: Any = None) -> Any:
    """Return the raw value at a dotted path, or ``default`` if any segment is missing."""
    current = record
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return default
        current = current[segment]
    return current


def get_first(record: Any, path: str, fallback: Any = UNKNOWN) -> Any:
    """Return the first element of the value at ``path``.

    openFDA stores most values as arrays; scalars are returned unchanged.
    Missing paths, empty arrays and empty strings yield ``fallback``.
    """
    value = get_field(record, path)
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None or value == "":
        return fallback
    return value


def join_text(value: Any) -> str:
    """Collapse a label section (string or list of strings) into one string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return " ".join(str(part) for part in value if part is not None)
    return str(value)


def truncate_text(value: Any, max_length: int) -> str:
    """Join ``value`` and cut it to ``max_length`` characters plus the marker.

    Text of at most ``max_length`` characters is returned unchanged.
    """
    text = join_text(value)
    if len(text) > max_length:
        return text[:max_length] + TRUNCATION_MARKER
    return text


def total_results(raw: Any) -> int:
    """Total number of matches reported in ``meta.results.total`` (0 if absent)."""
    total = get_field(raw, "meta.results.total", 0)
    if isinstance(total, bool) or not isinstance(total, int):
        return 0
    return total


def get_results(raw: Any) -> List[Any]:
    results = get_field(raw, "results", [])
    return results if isinstance(results, list) else []


def summarize_record(record: Any) -> Dict[str, Any]:
    """Identifying fields and truncated sections for one label record."""
    summary: Dict[str, Any] = {
        "set_id": get_first(record, "set_id", None),
        "id": get_first(record, "id", None),
        "effective_time": get_first(record, "effective_time", None),
        "brand_name": get_first(record, "openfda.brand_name"),
        "generic_name": get_first(record, "openfda.generic_name"),
        "manufacturer": get_first(record, "openfda.manufacturer_name"),
    }
    for section, max_length in SUMMARY_FIELD_LIMITS.items():
        summary[section] = truncate_text(get_field(record, section), max_length)
    return summary


def shape_passthrough(raw: Any) -> Dict[str, Any]:
    results = get_results(raw)
    return {
        "meta": get_field(raw, "meta", {}),
        "results_count": len(results),
        "results": results,
    }


def shape_summary(raw: Any, skip: Optional[int] = None, limit: Optional[int] = None) -> Dict[str, Any]:
    results = get_results(raw)
    return {
        "total": total_results(raw),
        "skip": get_field(raw, "meta.results.skip", skip),
        "limit": get_field(raw, "meta.results.limit", limit),
        "results_count": len(results),
        "results": [summarize_record(record) for record in results],
    }


def shape_detail(raw: Any, set_id: str, fields: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """Full detail for a set_id lookup.

    Zero results is not an error: the payload is marked ``found: false`` and
    echoes the requested identifier.
    """
    results = get_results(raw)
    if not results:
        return {
            "found": False,
            "set_id": set_id,
            "error": f"No label found for set_id '{set_id}'",
        }

    record = results[0] if isinstance(results[0], Mapping) else {}
    record_set_id = get_first(record, "set_id", set_id)

    if fields:
        selected = {}
        for name in fields:
            value = get_field(record, name, _MISSING)
            if value is not _MISSING:
                selected[name] = value
        return {"found": True, "set_id": record_set_id, "fields": selected}

    return {
        "found": True,
        "set_id": record_set_id,
        "id": get_first(record, "id", None),
        "version": get_first(record, "version", None),
        "effective_time": get_first(record, "effective_time", None),
        "brand_name": get_first(record, "openfda.brand_name"),
        "generic_name": get_first(record, "openfda.generic_name"),
        "manufacturer": get_first(record, "openfda.manufacturer_name"),
        "sections": {section: get_field(record, section, []) for section in DETAIL_SECTIONS},
    }


def shape_count(raw: Any, field: str, query: Optional[str] = None) -> Dict[str, Any]:
    results = get_results(raw)
    return {
        "count_field": field,
        "search": query,
        "results_count": len(results),
        "results": [
            {"term": get_field(bucket, "term"), "count": get_field(bucket, "count", 0)}
            for bucket in results
        ],
    }


_SHAPERS: Dict[str, Callable[[Any, Mapping[str, Any]], Any]] = {
    "search_labels": lambda raw, args: shape_passthrough(raw),
    "get_label_by_ndc": lambda raw, args: shape_passthrough(raw),
    "search_labels_summary": lambda raw, args: shape_summary(raw, args.get("skip"), args.get("limit")),
    "get_label_by_drug_name": lambda raw, args: shape_summary(raw, args.get("skip"), args.get("limit")),
    "get_label_by_set_id": lambda raw, args: shape_detail(raw, args["set_id"], args.get("fields")),
    "count_labels": lambda raw, args: shape_count(raw, args["field"], args.get("query")),
    "health": lambda raw, args: "ok",
}


def shape(tool_name: str, raw: Any, args: Optional[Mapping[str, Any]] = None) -> Any:
    """
    Transform a raw openFDA response into the payload a tool returns.

    Args:
        tool_name: Tool whose output contract applies
        raw: Parsed JSON response
        args: Validated tool arguments

    Returns:
        JSON-serializable payload (a dict, or a plain string for the health probe)

    Raises:
        ValueError: If the tool has no shaping rule
    """
    shaper = _SHAPERS.get(tool_name)
    if shaper is None:
        raise ValueError(f"No response shaping rule for tool: {tool_name}")
    return shaper(raw, args or {})
