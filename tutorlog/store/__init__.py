"""
Student Interaction Log — Store Package

One contract (InteractionStore), two backends. The backend is picked once
at startup from STORAGE_BACKEND.
"""
from tutorlog.store.base import InteractionStore
from tutorlog.store.csv_store import CsvInteractionStore
from tutorlog.store.sql_store import SqlInteractionStore

__all__ = ["InteractionStore", "CsvInteractionStore", "SqlInteractionStore", "build_store"]


def build_store(backend: str = None) -> InteractionStore:
    from tutorlog import config

    backend = (backend or config.STORAGE_BACKEND).lower()
    if backend == "csv":
        return CsvInteractionStore(config.CSV_FILE, stats_parser=config.CSV_STATS_PARSER)
    if backend == "database":
        from tutorlog.database import engine
        return SqlInteractionStore(engine)
    raise ValueError(
        f"Unknown STORAGE_BACKEND {backend!r}, expected one of {config.SUPPORTED_BACKENDS}"
    )
