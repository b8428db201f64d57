"""
Student Interaction Log — ORM Models
One wide, append-only table. One row per logged interaction.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Integer, Text, DateTime, JSON, Index
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from tutorlog.config import INTERACTIONS_TABLE
from tutorlog.database import Base


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _now() -> datetime:
    return datetime.now(timezone.utc)


# Native array / JSONB on PostgreSQL, plain JSON everywhere else (SQLite)
FlagList = JSON().with_variant(ARRAY(Text), "postgresql")
AnalysisBlob = JSON().with_variant(JSONB(), "postgresql")


# ─── Interactions ────────────────────────────────────────────────────────────

class Interaction(Base):
    __tablename__ = INTERACTIONS_TABLE

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Kept as the client's ISO-8601 string; ISO strings sort chronologically
    timestamp: Mapped[str] = mapped_column(Text)
    session_id: Mapped[str] = mapped_column(Text)
    student_name: Mapped[str] = mapped_column(Text)
    student_class: Mapped[str] = mapped_column(Text)
    question_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    interaction_type: Mapped[str] = mapped_column(Text, default="")
    question: Mapped[str] = mapped_column(Text, default="")
    response: Mapped[str] = mapped_column(Text, default="")
    category: Mapped[str] = mapped_column(Text, default="")

    # Denormalized from analysis for querying
    risk_level: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    flags: Mapped[list] = mapped_column(FlagList, default=list)
    word_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    analysis: Mapped[dict] = mapped_column(AnalysisBlob, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (
        Index("ix_interactions_session_id", "session_id"),
        Index("ix_interactions_timestamp", "timestamp"),
        Index("ix_interactions_student_name", "student_name"),
    )
