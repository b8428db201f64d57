"""
Student Interaction Log — CSV Codec

Encoding is RFC 4180 style: a field containing a comma, a double quote or a
line break is wrapped in double quotes, with internal quotes doubled.

Two decoders:
- decode_document: real CSV parser. Exact inverse of encode_row.
- split_lines_lossy: raw newline + comma split, as older deployments did it.
  Does NOT undo quoting. A quoted comma shifts every later column and a
  quoted newline splits one record into two lines.
"""

import csv
import io
import json
import logging
import sys
from typing import Any, Iterable, Optional

from tutorlog.records import InteractionRecord

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Timestamp",
    "Session_ID",
    "Student_Name",
    "Class",
    "Question_Number",
    "Interaction_Type",
    "Question",
    "AI_Response_Preview",
    "Category",
    "Risk_Level",
    "Flags",
    "Word_Count",
    "Analysis_Details",
]

FLAG_SEPARATOR = "; "
_NEEDS_QUOTING = (",", '"', "\n", "\r")

# Stored responses are never truncated, so lift the 128 KiB per-field default.
# 2**31 - 1 is the largest value every platform's C long accepts.
csv.field_size_limit(min(sys.maxsize, 2**31 - 1))


# ─── Encode ──────────────────────────────────────────────────────────────────

def escape_field(value: Any) -> str:
    if value is None:
        text = ""
    elif isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, str):
        text = value
    else:
        text = str(value)

    if any(ch in text for ch in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def serialize_analysis(analysis: dict) -> str:
    """Compact JSON, same shape JavaScript's JSON.stringify produces."""
    return json.dumps(analysis or {}, separators=(",", ":"), ensure_ascii=False)


def _truncate(text: str, limit: Optional[int]) -> str:
    if limit and len(text) > limit:
        return text[:limit]
    return text


def header_line() -> str:
    return ",".join(CSV_HEADERS) + "\n"


def encode_row(record: InteractionRecord, response_limit: Optional[int] = None) -> str:
    """One CSV line for one record, newline-terminated. response_limit only touches the response column."""
    row = [
        record.timestamp,
        record.session_id,
        record.student_name,
        record.student_class,
        record.question_number,
        record.interaction_type,
        record.question,
        _truncate(record.response, response_limit),
        record.category,
        record.risk_level,
        FLAG_SEPARATOR.join(record.flags),
        record.word_count,
        serialize_analysis(record.analysis),
    ]
    return ",".join(escape_field(value) for value in row) + "\n"


def encode_document(records: Iterable[InteractionRecord], response_limit: Optional[int] = None) -> str:
    return header_line() + "".join(encode_row(r, response_limit) for r in records)


# ─── Decode ──────────────────────────────────────────────────────────────────

def decode_document(text: str) -> list[list[str]]:
    """Parse a stored CSV document. Header row and blank rows are dropped."""
    rows = list(csv.reader(io.StringIO(text, newline="")))
    return [row for row in rows[1:] if any(cell.strip() for cell in row)]


def split_lines_lossy(text: str) -> list[list[str]]:
    """Legacy decoder: split on newlines, then on every comma. Quotes are left in place."""
    lines = [line for line in text.split("\n") if line.strip()]
    return [line.rstrip("\r").split(",") for line in lines[1:]]


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _analysis_from_columns(risk_level: str, flags: str, word_count: str) -> dict:
    analysis: dict = {}
    if risk_level:
        analysis["riskLevel"] = risk_level
    if flags:
        analysis["flags"] = flags.split(FLAG_SEPARATOR)
    if word_count:
        analysis["wordCount"] = _parse_int(word_count)
    return analysis


def row_to_record(fields: list[str]) -> InteractionRecord:
    """Rebuild a record from one strictly decoded row."""
    fields = list(fields) + [""] * (len(CSV_HEADERS) - len(fields))
    (timestamp, session_id, name, class_name, question_number, interaction_type,
     question, response, category, risk_level, flags, word_count, details) = fields[:len(CSV_HEADERS)]

    try:
        analysis = json.loads(details) if details else {}
    except json.JSONDecodeError:
        analysis = None
    if not isinstance(analysis, dict):
        logger.warning(f"Unreadable Analysis_Details for session {session_id}, using columns")
        analysis = _analysis_from_columns(risk_level, flags, word_count)

    return InteractionRecord(
        timestamp=timestamp,
        session_id=session_id,
        student_name=name,
        student_class=class_name,
        question_number=_parse_int(question_number),
        interaction_type=interaction_type,
        question=question,
        response=response,
        category=category,
        analysis=analysis,
    )
