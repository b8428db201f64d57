"""
Student Interaction Log — CSV File Store
One append-only CSV document. Each write opens the file in append mode,
writes one line and closes it. No locking: concurrent writers rely on the
OS appending each write call atomically.
"""

import csv
import logging
import os
from pathlib import Path
from typing import Optional

from tutorlog.csv_codec import (
    encode_row, header_line, decode_document, split_lines_lossy, row_to_record,
)
from tutorlog.errors import NotFoundError, StorageError
from tutorlog.records import InteractionRecord
from tutorlog.stats import InteractionStats, aggregate_rows
from tutorlog.store.base import InteractionStore

logger = logging.getLogger(__name__)

STATS_PARSERS = {
    "strict": decode_document,
    "legacy": split_lines_lossy,
}


class CsvInteractionStore(InteractionStore):
    backend = "csv"

    def __init__(self, path: Path, stats_parser: str = "strict"):
        if stats_parser not in STATS_PARSERS:
            raise ValueError(f"Unknown CSV stats parser: {stats_parser!r}")
        self.path = Path(path)
        self.stats_parser = stats_parser

    # ─── Write ───────────────────────────────────────────────────────────────

    def _append_text(self, text: str) -> bool:
        """Append text, writing the header first into a missing or empty file. True if it wrote the header."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8", newline="") as f:
            # Append mode opens at end of file, so position 0 means the file is empty
            needs_header = f.tell() == 0
            if needs_header:
                f.write(header_line())
            f.write(text)
        return needs_header

    def initialize(self) -> None:
        try:
            created = self._append_text("")
        except OSError as e:
            logger.error(f"Failed to create CSV file {self.path}: {e}")
            raise StorageError("Failed to initialize CSV file") from e
        if created:
            logger.info(f"Created new CSV file: {self.path}")
        else:
            logger.info(f"Using existing CSV file: {self.path}")

    def append(self, record: InteractionRecord) -> Optional[int]:
        line = encode_row(record)
        try:
            self._append_text(line)
        except OSError as e:
            logger.error(f"Error logging to CSV: {e}")
            raise StorageError("Failed to log interaction") from e
        return None

    # ─── Read ────────────────────────────────────────────────────────────────

    def _read_text(self) -> str:
        if not self.path.exists():
            raise NotFoundError("CSV file not found")
        try:
            with open(self.path, encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as e:
            logger.error(f"Error reading CSV: {e}")
            raise StorageError("Failed to read CSV file") from e

    def _decode(self, parser) -> list[list[str]]:
        try:
            return parser(self._read_text())
        except csv.Error as e:
            logger.error(f"Malformed CSV file {self.path}: {e}")
            raise StorageError("Failed to parse CSV file") from e

    def read_all(self) -> list[InteractionRecord]:
        records = [row_to_record(row) for row in self._decode(decode_document)]
        # Stable sort: same-timestamp records keep file (insertion) order
        return sorted(records, key=lambda r: r.timestamp)

    def read_by_student(self, name: str) -> list[InteractionRecord]:
        return [r for r in self._read_or_empty() if r.student_name == name]

    def read_by_class(self, class_name: str) -> list[InteractionRecord]:
        return [r for r in self._read_or_empty() if r.student_class == class_name]

    def _read_or_empty(self) -> list[InteractionRecord]:
        try:
            return self.read_all()
        except NotFoundError:
            return []

    # ─── Stats / Health ──────────────────────────────────────────────────────

    def aggregate(self) -> InteractionStats:
        if not self.path.exists():
            return InteractionStats()
        rows = self._decode(STATS_PARSERS[self.stats_parser])
        return aggregate_rows(rows, quoted=self.stats_parser == "legacy")

    def ping(self) -> bool:
        target = self.path if self.path.exists() else self.path.parent
        return target.exists() and os.access(target, os.W_OK)

    def describe(self) -> dict:
        return {
            "backend": self.backend,
            "csvFile": str(self.path),
            "statsParser": self.stats_parser,
        }
