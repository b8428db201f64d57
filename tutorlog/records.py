"""
Student Interaction Log — Interaction Record + Normalizer

Every stored event is ONE InteractionRecord. Both backends write and read it.

Normalization Rules:
- sessionId, timestamp: required. Missing, null or "" → ValidationError. Never defaulted.
- student.name / student.class: trimmed; blank defaults to "Anonymous" / "Not specified".
- questionNumber, analysis.wordCount: null when absent. Never coerced to 0.
- analysis.flags: empty list when absent.
- analysis: kept in full (extra keys included). {} when absent.
- analysis.riskLevel: a scalar. Objects and lists are rejected.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from tutorlog.config import DEFAULT_STUDENT_NAME, DEFAULT_STUDENT_CLASS
from tutorlog.errors import ValidationError

REQUIRED_FIELDS = ("sessionId", "timestamp")


@dataclass(frozen=True)
class InteractionRecord:
    """Canonical, immutable interaction event."""
    # ─── Identity ────────────────────────────────────────────────────────────
    timestamp: str
    session_id: str

    # ─── Student ─────────────────────────────────────────────────────────────
    student_name: str = DEFAULT_STUDENT_NAME
    student_class: str = DEFAULT_STUDENT_CLASS

    # ─── Content ─────────────────────────────────────────────────────────────
    question_number: Optional[int] = None
    interaction_type: str = ""
    question: str = ""
    response: str = ""
    category: str = ""

    # ─── Analysis blob — riskLevel / flags / wordCount live inside ──────────
    analysis: dict = field(default_factory=dict)

    @property
    def risk_level(self) -> Optional[str]:
        value = self.analysis.get("riskLevel")
        if value is None:
            return None
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    @property
    def flags(self) -> list:
        return list(self.analysis.get("flags") or [])

    @property
    def word_count(self) -> Optional[int]:
        return self.analysis.get("wordCount")

    def to_payload(self) -> dict:
        """Render back into the camelCase shape clients submit."""
        return {
            "timestamp": self.timestamp,
            "sessionId": self.session_id,
            "student": {"name": self.student_name, "class": self.student_class},
            "questionNumber": self.question_number,
            "type": self.interaction_type,
            "question": self.question,
            "response": self.response,
            "category": self.category,
            "analysis": dict(self.analysis),
        }


# ─── Field Helpers ───────────────────────────────────────────────────────────

def _text(value: Any, default: str = "") -> str:
    if value is None or value == "":
        return default
    return value if isinstance(value, str) else str(value)


def _student_text(value: Any, default: str) -> str:
    """Names and classes are trimmed; blank means not given."""
    return _text(value).strip() or default


def _optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{field_name} must be an integer")


def _object(value: Any, field_name: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"{field_name} must be an object")
    return value


def _flags(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise ValidationError("analysis.flags must be a list of strings")
    return [_text(flag) for flag in value]


# ─── Normalizer ──────────────────────────────────────────────────────────────

def normalize(payload: Any) -> InteractionRecord:
    """
    Map a raw JSON payload onto an InteractionRecord.

    Raises ValidationError for a non-object payload, a missing required field,
    or an optional field with an unusable shape.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    missing = [name for name in REQUIRED_FIELDS if payload.get(name) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    student = _object(payload.get("student"), "student")
    analysis = dict(_object(payload.get("analysis"), "analysis"))

    # Canonicalize the extracted analysis fields inside the blob itself,
    # so separate columns and Analysis_Details never disagree.
    if "flags" in analysis:
        analysis["flags"] = _flags(analysis["flags"])
    if isinstance(analysis.get("riskLevel"), (dict, list)):
        raise ValidationError("analysis.riskLevel must be a string")
    if "wordCount" in analysis:
        analysis["wordCount"] = _optional_int(analysis["wordCount"], "analysis.wordCount")

    return InteractionRecord(
        timestamp=_text(payload["timestamp"]),
        session_id=_text(payload["sessionId"]),
        student_name=_student_text(student.get("name"), DEFAULT_STUDENT_NAME),
        student_class=_student_text(student.get("class"), DEFAULT_STUDENT_CLASS),
        question_number=_optional_int(payload.get("questionNumber"), "questionNumber"),
        interaction_type=_text(payload.get("type")),
        question=_text(payload.get("question")),
        response=_text(payload.get("response")),
        category=_text(payload.get("category")),
        analysis=analysis,
    )
