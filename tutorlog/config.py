"""
Student Interaction Log — Configuration
All environment variables and constants. Single source of truth.
No other file reads os.environ directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# ─── Paths ───────────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent
WEB_DIR = BASE_DIR / "web"

# Load .env file if present (real environment wins)
load_dotenv(BASE_DIR / ".env")

# ─── Storage Backend ─────────────────────────────────────────────────────────
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "csv").lower()
# Options: csv (append-only file) | database (SQLAlchemy table)
SUPPORTED_BACKENDS = ("csv", "database")

# ─── CSV File Backend ────────────────────────────────────────────────────────
CSV_FILE = Path(os.getenv("CSV_FILE", str(BASE_DIR / "student_interactions.csv")))
CSV_STATS_PARSER = os.getenv("CSV_STATS_PARSER", "strict").lower()
# Options: strict (RFC 4180 parser) | legacy (raw comma split, breaks on quoted commas)

# ─── Database Backend ────────────────────────────────────────────────────────
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite:///{BASE_DIR / 'interactions.db'}"
)
# Heroku/Railway style URLs use "postgres://", SQLAlchemy wants "postgresql://"
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)
INTERACTIONS_TABLE = "student_interactions"

# ─── Export ──────────────────────────────────────────────────────────────────
# Max characters of the AI response kept per row. 0 = no truncation.
CSV_PREVIEW_RESPONSE_CHARS = int(os.getenv("CSV_PREVIEW_RESPONSE_CHARS", "200"))
CSV_DOWNLOAD_RESPONSE_CHARS = int(os.getenv("CSV_DOWNLOAD_RESPONSE_CHARS", "500"))
EXPORT_FILENAME_PREFIX = "student_interactions"

# ─── Record Defaults ─────────────────────────────────────────────────────────
DEFAULT_STUDENT_NAME = "Anonymous"
DEFAULT_STUDENT_CLASS = "Not specified"
# Names that mean "no student given". "N/A" is what older CSV files contain.
PLACEHOLDER_STUDENT_NAMES = frozenset({DEFAULT_STUDENT_NAME, "N/A"})

# ─── Server ──────────────────────────────────────────────────────────────────
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

# ─── CORS ────────────────────────────────────────────────────────────────────
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

# ─── Logging ─────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
