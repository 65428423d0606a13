"""Tests for shaping openFDA label responses."""

import pytest

from openfda_mcp.response_shaper import (
    DETAIL_SECTIONS,
    SUMMARY_FIELD_LIMITS,
    TRUNCATION_MARKER,
    get_field,
    get_first,
    join_text,
    shape,
    shape_count,
    shape_detail,
    shape_passthrough,
    shape_summary,
    summarize_record,
    total_results,
    truncate_text,
)


class TestFieldAccess:
    """Test cases for tolerant field access."""

    def test_get_field_nested(self, sample_label_record):
        assert get_field(sample_label_record, "openfda.route") == ["ORAL"]

    def test_get_field_missing(self, sample_label_record):
        assert get_field(sample_label_record, "openfda.pharm_class_epc") is None
        assert get_field(sample_label_record, "nope.deeper", "x") == "x"

    def test_get_field_through_non_mapping(self):
        assert get_field({"openfda": ["not", "a", "dict"]}, "openfda.brand_name", 1) == 1

    def test_get_first(self, sample_label_record):
        assert get_first(sample_label_record, "openfda.brand_name") == "Advil"

    @pytest.mark.parametrize("record", [
        {},
        {"openfda": {}},
        {"openfda": {"brand_name": []}},
        {"openfda": {"brand_name": [""]}},
        {"openfda": None},
    ])
    def test_get_first_fallback(self, record):
        assert get_first(record, "openfda.brand_name") == "Unknown"

    def test_get_first_scalar(self):
        assert get_first({"version": "3"}, "version") == "3"


class TestTruncation:
    """Test cases for text joining and truncation."""

    def test_join_text(self):
        assert join_text(None) == ""
        assert join_text("abc") == "abc"
        assert join_text(["a", "b", None]) == "a b"

    def test_at_limit_unchanged(self):
        assert truncate_text("a" * 300, 300) == "a" * 300

    def test_over_limit_truncated(self):
        assert truncate_text("a" * 301, 300) == "a" * 300 + TRUNCATION_MARKER

    def test_list_joined_before_truncation(self):
        assert truncate_text(["abc", "def"], 5) == "abc d" + TRUNCATION_MARKER

    def test_short_text_is_stable(self):
        once = truncate_text("short", 200)
        assert truncate_text(once, 200) == once


class TestSummaries:
    """Test cases for summarized output."""

    def test_summarize_record(self, sample_label_record):
        summary = summarize_record(sample_label_record)

        assert summary["set_id"] == sample_label_record["set_id"]
        assert summary["brand_name"] == "Advil"
        assert summary["generic_name"] == "IBUPROFEN"
        assert summary["manufacturer"] == "Haleon US Holdings LLC"
        assert summary["warnings"].startswith("Allergy alert")
        assert summary["boxed_warning"] == ""
        assert set(SUMMARY_FIELD_LIMITS) <= set(summary)

    def test_summarize_empty_record(self):
        summary = summarize_record({})

        assert summary["brand_name"] == "Unknown"
        assert summary["manufacturer"] == "Unknown"
        assert summary["set_id"] is None

    @pytest.mark.parametrize("section,limit", sorted(SUMMARY_FIELD_LIMITS.items()))
    def test_section_limits(self, section, limit):
        summary = summarize_record({section: ["x" * (limit + 1)]})

        assert summary[section] == "x" * limit + TRUNCATION_MARKER

    def test_indications_limit_is_400(self):
        assert SUMMARY_FIELD_LIMITS["indications_and_usage"] == 400

    def test_shape_summary(self, sample_label_response):
        payload = shape_summary(sample_label_response, skip=0, limit=3)

        assert payload["total"] == 1
        assert payload["skip"] == 0
        assert payload["limit"] == 3
        assert payload["results_count"] == 1
        assert payload["results"][0]["brand_name"] == "Advil"

    def test_shape_summary_without_meta(self):
        payload = shape_summary({"results": []}, skip=20, limit=5)

        assert payload == {"total": 0, "skip": 20, "limit": 5, "results_count": 0, "results": []}

    @pytest.mark.parametrize("raw", [{}, {"meta": {"results": {"total": "12"}}}, {"meta": {"results": {"total": True}}}])
    def test_total_results_defaults_to_zero(self, raw):
        assert total_results(raw) == 0


class TestPassthrough:
    def test_shape_passthrough(self, sample_label_response):
        payload = shape_passthrough(sample_label_response)

        assert payload["meta"] == sample_label_response["meta"]
        assert payload["results_count"] == 1
        assert payload["results"] == sample_label_response["results"]

    def test_shape_passthrough_empty(self):
        assert shape_passthrough({}) == {"meta": {}, "results_count": 0, "results": []}


class TestDetail:
    """Test cases for set_id detail output."""

    def test_not_found(self):
        payload = shape_detail({"results": []}, "missing-id")

        assert payload["found"] is False
        assert payload["set_id"] == "missing-id"
        assert "missing-id" in payload["error"]

    def test_full_record(self, sample_label_response, sample_label_record):
        payload = shape_detail(sample_label_response, sample_label_record["set_id"])

        assert payload["found"] is True
        assert payload["version"] == "7"
        assert payload["brand_name"] == "Advil"
        assert list(payload["sections"]) == DETAIL_SECTIONS
        assert payload["sections"]["warnings"] == sample_label_record["warnings"]
        assert payload["sections"]["boxed_warning"] == []

    def test_sections_are_not_truncated(self, sample_label_record):
        sample_label_record["warnings"] = ["w" * 5000]

        payload = shape_detail({"results": [sample_label_record]}, "id")

        assert payload["sections"]["warnings"] == ["w" * 5000]

    def test_allow_list(self, sample_label_response):
        payload = shape_detail(
            sample_label_response, "id", fields=["warnings", "openfda.route", "boxed_warning"]
        )

        assert payload["found"] is True
        assert payload["fields"] == {
            "warnings": ["Allergy alert: Ibuprofen may cause a severe allergic reaction."],
            "openfda.route": ["ORAL"],
        }


class TestCount:
    def test_shape_count(self):
        raw = {"results": [{"term": "ORAL", "count": 120}, {"term": "TOPICAL", "count": 7}]}

        payload = shape_count(raw, "openfda.route.exact", "openfda.brand_name:advil")

        assert payload == {
            "count_field": "openfda.route.exact",
            "search": "openfda.brand_name:advil",
            "results_count": 2,
            "results": [{"term": "ORAL", "count": 120}, {"term": "TOPICAL", "count": 7}],
        }


class TestShapeDispatch:
    def test_health_is_ok(self):
        assert shape("health", {"results": []}) == "ok"

    def test_drug_name_uses_summary(self, sample_label_response):
        payload = shape("get_label_by_drug_name", sample_label_response, {"skip": 0, "limit": 3})

        assert "total" in payload
        assert payload["results"][0]["manufacturer"] == "Haleon US Holdings LLC"

    def test_ndc_uses_passthrough(self, sample_label_response):
        payload = shape("get_label_by_ndc", sample_label_response, {})

        assert payload["results"] == sample_label_response["results"]

    def test_unknown_tool(self):
        with pytest.raises(ValueError, match="No response shaping rule"):
            shape("nope", {})
