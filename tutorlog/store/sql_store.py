"""
Student Interaction Log — Relational Store
One row per interaction in the student_interactions table (SQLAlchemy ORM).
Every call opens its own session and closes it before returning.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from tutorlog.config import INTERACTIONS_TABLE, PLACEHOLDER_STUDENT_NAMES
from tutorlog.database import init_db, check_connection, make_session_factory
from tutorlog.errors import StorageError
from tutorlog.models import Interaction
from tutorlog.records import InteractionRecord
from tutorlog.stats import InteractionStats
from tutorlog.store.base import InteractionStore

logger = logging.getLogger(__name__)


def _to_row(record: InteractionRecord) -> Interaction:
    return Interaction(
        timestamp=record.timestamp,
        session_id=record.session_id,
        student_name=record.student_name,
        student_class=record.student_class,
        question_number=record.question_number,
        interaction_type=record.interaction_type,
        question=record.question,
        response=record.response,
        category=record.category,
        risk_level=record.risk_level,
        flags=record.flags,
        word_count=record.word_count,
        analysis=dict(record.analysis),
    )


def _to_record(row: Interaction) -> InteractionRecord:
    # analysis is the source of truth; risk_level/flags/word_count are copies of it
    return InteractionRecord(
        timestamp=row.timestamp,
        session_id=row.session_id,
        student_name=row.student_name,
        student_class=row.student_class,
        question_number=row.question_number,
        interaction_type=row.interaction_type or "",
        question=row.question or "",
        response=row.response or "",
        category=row.category or "",
        analysis=dict(row.analysis or {}),
    )


class SqlInteractionStore(InteractionStore):
    backend = "database"

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = make_session_factory(engine)

    def initialize(self) -> None:
        try:
            init_db(self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Error initializing database: {e}")
            raise StorageError("Failed to initialize database") from e
        logger.info(f"Database table '{INTERACTIONS_TABLE}' ready")

    # ─── Write ───────────────────────────────────────────────────────────────

    def append(self, record: InteractionRecord) -> Optional[int]:
        db = self.SessionLocal()
        try:
            row = _to_row(record)
            db.add(row)
            db.commit()
            return row.id
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error logging to database: {e}")
            raise StorageError("Failed to log interaction") from e
        finally:
            db.close()

    # ─── Read ────────────────────────────────────────────────────────────────

    def _select(self, *criteria) -> list[InteractionRecord]:
        stmt = select(Interaction).where(*criteria).order_by(Interaction.timestamp, Interaction.id)
        db = self.SessionLocal()
        try:
            return [_to_record(row) for row in db.scalars(stmt)]
        except SQLAlchemyError as e:
            logger.error(f"Error reading interactions: {e}")
            raise StorageError("Failed to read interactions") from e
        finally:
            db.close()

    def read_all(self) -> list[InteractionRecord]:
        return self._select()

    def read_by_student(self, name: str) -> list[InteractionRecord]:
        return self._select(Interaction.student_name == name)

    def read_by_class(self, class_name: str) -> list[InteractionRecord]:
        return self._select(Interaction.student_class == class_name)

    # ─── Stats / Health ──────────────────────────────────────────────────────

    def aggregate(self) -> InteractionStats:
        db = self.SessionLocal()
        try:
            total = db.scalar(select(func.count(Interaction.id)))
            sessions = db.scalar(select(func.count(func.distinct(Interaction.session_id))))
            students = db.scalars(
                select(Interaction.student_name)
                .where(
                    Interaction.student_name.is_not(None),
                    Interaction.student_name != "",
                    Interaction.student_name.not_in(sorted(PLACEHOLDER_STUDENT_NAMES)),
                )
                .distinct()
                .order_by(Interaction.student_name)
            ).all()
            categories = db.execute(
                select(Interaction.category, func.count(Interaction.id))
                .where(Interaction.category.is_not(None), Interaction.category != "")
                .group_by(Interaction.category)
                .order_by(Interaction.category)
            ).all()
        except SQLAlchemyError as e:
            logger.error(f"Error getting stats: {e}")
            raise StorageError("Failed to get statistics") from e
        finally:
            db.close()

        return InteractionStats(
            total_interactions=total or 0,
            sessions=sessions or 0,
            students=sorted(students),
            categories=dict(sorted((category, count) for category, count in categories)),
        )

    def ping(self) -> bool:
        try:
            check_connection(self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return False
        return True

    def describe(self) -> dict:
        return {
            "backend": self.backend,
            "database": self.engine.dialect.name,
            "table": INTERACTIONS_TABLE,
        }
