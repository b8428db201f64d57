"""
Student Interaction Log — Statistics Aggregator
Counts are re-derived from stored data on every call. Nothing is cached or stored.
"""

from pydantic import BaseModel, ConfigDict, Field

from tutorlog.config import PLACEHOLDER_STUDENT_NAMES

# Column positions in a decoded CSV row
SESSION_COL = 1
STUDENT_COL = 2
CATEGORY_COL = 8
MIN_STATS_COLUMNS = CATEGORY_COL + 1


class InteractionStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_interactions: int = Field(0, alias="totalInteractions")
    sessions: int = 0
    students: list[str] = Field(default_factory=list)
    categories: dict[str, int] = Field(default_factory=dict)


def is_placeholder_name(name: str) -> bool:
    """Empty, "Anonymous" or "N/A". The SQL store filters on exactly the same set."""
    return name == "" or name in PLACEHOLDER_STUDENT_NAMES


def _unquote(value: str) -> str:
    """Undo CSV quoting on a whole field, as left in place by split_lines_lossy."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1].replace('""', '"')
    return value


def aggregate_rows(rows: list[list[str]], quoted: bool = False) -> InteractionStats:
    """
    Aggregate decoded CSV rows.

    Every row counts toward the total. Rows with fewer than 9 columns
    (truncated lines) are not used for sessions, students or categories.
    quoted=True is for rows from the lossy decoder: placeholder and blank
    checks then look through the quoting it leaves on.
    """
    sessions = set()
    students = set()
    categories: dict[str, int] = {}

    for row in rows:
        if len(row) < MIN_STATS_COLUMNS:
            continue
        sessions.add(row[SESSION_COL])

        name = row[STUDENT_COL]
        if not is_placeholder_name(_unquote(name) if quoted else name):
            students.add(name)

        category = row[CATEGORY_COL]
        if (_unquote(category) if quoted else category) != "":
            categories[category] = categories.get(category, 0) + 1

    return InteractionStats(
        total_interactions=len(rows),
        sessions=len(sessions),
        students=sorted(students),
        categories=dict(sorted(categories.items())),
    )
