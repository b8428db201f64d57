"""
Student Interaction Log — CSV Export
Builds the full export document (header + every record, oldest first).
Preview and download differ only in how much of the AI response they keep.
"""

from datetime import datetime, timezone
from typing import Optional

from tutorlog.config import EXPORT_FILENAME_PREFIX
from tutorlog.csv_codec import encode_document
from tutorlog.store.base import InteractionStore


def export_csv(store: InteractionStore, response_limit: Optional[int] = None) -> str:
    return encode_document(store.read_all(), response_limit=response_limit)


def download_filename(now: Optional[datetime] = None) -> str:
    """e.g. student_interactions_2024-01-31.csv (UTC date)"""
    now = now or datetime.now(timezone.utc)
    return f"{EXPORT_FILENAME_PREFIX}_{now.date().isoformat()}.csv"
