"""
Tests for csv_codec.py — escaping, row layout, strict vs lossy decoding.
"""

import pytest

from tutorlog.csv_codec import (
    CSV_HEADERS, escape_field, encode_row, encode_document, header_line,
    decode_document, split_lines_lossy, row_to_record,
)
from tutorlog.records import InteractionRecord


def _record(**overrides):
    fields = dict(timestamp="2024-01-01T00:00:00Z", session_id="s1")
    fields.update(overrides)
    return InteractionRecord(**fields)


# ─── Escaping ─────────────────────────────────────────────────────────────────

class TestEscapeField:
    def test_plain_value_unquoted(self):
        assert escape_field("algebra") == "algebra"

    def test_comma_quoted(self):
        assert escape_field("math, science") == '"math, science"'

    def test_quotes_doubled(self):
        assert escape_field('say "hi"') == '"say ""hi"""'

    @pytest.mark.parametrize("value", ["line1\nline2", "line1\rline2", "a\r\nb"])
    def test_line_breaks_quoted(self, value):
        assert escape_field(value) == f'"{value}"'

    def test_none_is_empty(self):
        assert escape_field(None) == ""

    def test_numbers_stringified(self):
        assert escape_field(12) == "12"
        assert escape_field(0) == "0"

    def test_booleans_lowercase(self):
        assert escape_field(True) == "true"
        assert escape_field(False) == "false"


# ─── Row Layout ───────────────────────────────────────────────────────────────

class TestEncodeRow:
    def test_header(self):
        assert header_line() == ",".join(CSV_HEADERS) + "\n"
        assert len(CSV_HEADERS) == 13

    def test_minimal_record(self):
        line = encode_row(_record(interaction_type="question", category="algebra"))
        assert line == "2024-01-01T00:00:00Z,s1,Anonymous,Not specified,,question,,,algebra,,,,{}\n"

    def test_analysis_columns_and_blob(self):
        analysis = {"riskLevel": "high", "flags": ["a", "b"], "wordCount": 12}
        line = encode_row(_record(analysis=analysis))
        expected_tail = 'high,a; b,12,"{""riskLevel"":""high"",""flags"":[""a"",""b""],""wordCount"":12}"\n'
        assert line.endswith(expected_tail)

    def test_single_trailing_newline(self):
        line = encode_row(_record(question="multi\nline"))
        assert line.endswith("}\n")
        assert not line.endswith("\n\n")

    def test_response_limit_only_touches_response(self):
        record = _record(question="q" * 300, response="x" * 300)
        row = decode_document(header_line() + encode_row(record, response_limit=200))[0]
        assert row[7] == "x" * 200
        assert row[6] == "q" * 300

    def test_no_limit_keeps_full_response(self):
        row = decode_document(header_line() + encode_row(_record(response="x" * 300)))[0]
        assert row[7] == "x" * 300


# ─── Decoding ─────────────────────────────────────────────────────────────────

class TestDecode:
    def test_header_only_document(self):
        assert decode_document(header_line()) == []
        assert split_lines_lossy(header_line()) == []

    def test_blank_lines_skipped(self):
        doc = encode_document([_record()]) + "\n\n"
        assert len(decode_document(doc)) == 1
        assert len(split_lines_lossy(doc)) == 1

    def test_strict_decode_round_trips_embedded_comma(self):
        doc = encode_document([_record(category="math, science")])
        row = decode_document(doc)[0]
        assert len(row) == 13
        assert row[8] == "math, science"

    def test_lossy_decode_breaks_on_embedded_comma(self):
        doc = encode_document([_record(category="math, science")])
        row = split_lines_lossy(doc)[0]
        # The quoted comma is split like any other: one extra column, category mangled
        assert row[8] == '"math'
        assert row[9] == ' science"'
        assert row[8] != "math, science"

    def test_lossy_decode_splits_embedded_newline(self):
        doc = encode_document([_record(question="first\nsecond")])
        assert len(decode_document(doc)) == 1
        assert len(split_lines_lossy(doc)) == 2

    def test_row_to_record_round_trip(self):
        record = _record(
            student_name="Priya",
            student_class="8A",
            question_number=4,
            interaction_type="response",
            question='He said "why, though?"',
            response="Because\nreasons",
            category="math, science",
            analysis={"riskLevel": "medium", "flags": ["x", "y"], "wordCount": 2},
        )
        rows = decode_document(encode_document([record]))
        assert row_to_record(rows[0]) == record

    def test_row_to_record_falls_back_to_columns(self):
        fields = ["t", "s", "Priya", "8A", "", "question", "", "", "algebra", "high", "a; b", "5", "not json"]
        record = row_to_record(fields)
        assert record.analysis == {"riskLevel": "high", "flags": ["a", "b"], "wordCount": 5}

    def test_row_to_record_pads_short_rows(self):
        record = row_to_record(["t", "s", "Priya"])
        assert record.category == ""
        assert record.analysis == {}


# ─── Large Fields ─────────────────────────────────────────────────────────────

class TestLargeFields:
    def test_field_over_csv_module_default_limit(self):
        # The csv module's default per-field limit is 131072 characters
        record = _record(response="x" * 200_000)
        rows = decode_document(encode_document([record]))
        assert rows[0][7] == "x" * 200_000
        assert row_to_record(rows[0]) == record
