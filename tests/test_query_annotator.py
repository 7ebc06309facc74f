"""Tests for appending position comments to queries."""

from dataclasses import dataclass

import pytest

from models.query import QueryConfig
from services.query_annotator import annotate, build_comment


class TestBuildComment:
    def test_with_position(self):
        assert build_comment("app.ts:5:10") == "/* file=app.ts:5:10 */"

    def test_without_position(self):
        assert build_comment(None) == "/* file=unknown */"

    def test_position_cannot_close_the_comment(self):
        comment = build_comment("evil*/ DROP TABLE users; /*.ts:1:1")
        assert comment.count("*/") == 1
        assert comment.endswith(" */")

    def test_newlines_are_removed(self):
        assert "\n" not in build_comment("a\nb.ts:1:1")


class TestStringQueries:
    def test_terminated_query(self):
        assert annotate("SELECT NOW();", "app.js:7:3") == "SELECT NOW() /* file=app.js:7:3 */;"

    def test_unterminated_query(self):
        assert annotate("SELECT 1", "app.js:7:3") == "SELECT 1 /* file=app.js:7:3 */"

    def test_trailing_whitespace_is_trimmed(self):
        assert annotate("SELECT 1  \n", None) == "SELECT 1 /* file=unknown */"

    @pytest.mark.parametrize(
        "query",
        ["SELECT 1;", "SELECT 1;;", "SELECT 1 ;  \n", "SELECT 1;\n\n", "SELECT ';' AS x;"],
    )
    def test_terminated_queries_keep_exactly_one_terminator(self, query):
        comment = build_comment("app.ts:5:10")

        annotated = annotate(query, "app.ts:5:10")

        assert annotated.endswith(f"{comment};")
        assert not annotated.endswith(";;")
        assert annotated.count(comment) == 1

    def test_string_literal_is_untouched(self):
        assert annotate("SELECT ';' AS x;", None) == "SELECT ';' AS x /* file=unknown */;"

    def test_already_annotated_string_is_unchanged(self):
        once = annotate("SELECT 1;", "app.ts:5:10")
        assert annotate(once, "app.ts:5:10") == once


class TestStructuredQueries:
    def test_unterminated_text_is_terminated(self):
        query = QueryConfig(text="SELECT 1")

        result = annotate(query, None)

        assert result is query
        assert query.text == "SELECT 1 /* file=unknown */;"

    def test_other_fields_pass_through_by_reference(self):
        values = [1, 2]
        query = QueryConfig(text="SELECT $1, $2;", values=values, name="pair")

        annotate(query, "app.ts:5:10")

        assert query.values is values
        assert query.name == "pair"
        assert query.text == "SELECT $1, $2 /* file=app.ts:5:10 */;"

    def test_reannotation_is_idempotent(self):
        query = QueryConfig(text="SELECT 1")

        once = annotate(query, "app.ts:5:10").text
        twice = annotate(query, "app.ts:5:10").text

        assert once == twice

    def test_mapping_form(self):
        query = {"text": "SELECT 1", "values": None}

        result = annotate(query, "app.ts:5:10")

        assert result is query
        assert query["text"] == "SELECT 1 /* file=app.ts:5:10 */;"

    def test_mapping_without_text_is_unchanged(self):
        query = {"sql": "SELECT 1"}
        assert annotate(query, None) == {"sql": "SELECT 1"}

    def test_empty_text_is_unchanged(self):
        query = QueryConfig(text="")
        assert annotate(query, None).text == ""

    def test_read_only_object_is_returned_unchanged(self):
        @dataclass(frozen=True)
        class Frozen:
            text: str

        query = Frozen(text="SELECT 1")

        assert annotate(query, None) is query
        assert query.text == "SELECT 1"


@pytest.mark.parametrize("payload", [None, 42, b"SELECT 1", ["SELECT 1"]])
def test_unrecognised_payloads_are_returned_unchanged(payload):
    assert annotate(payload, "app.ts:5:10") is payload
