"""
Student Interaction Log — Interactions Router
Log ingestion, CSV export, statistics and per-student / per-class lookups.

Domain errors (ValidationError, StorageError, NotFoundError) are raised as is
and turned into JSON error bodies by the handlers registered in main.py.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel

from tutorlog.config import CSV_PREVIEW_RESPONSE_CHARS, CSV_DOWNLOAD_RESPONSE_CHARS
from tutorlog.export import export_csv, download_filename
from tutorlog.records import normalize
from tutorlog.stats import InteractionStats
from tutorlog.store.base import InteractionStore

logger = logging.getLogger(__name__)
router = APIRouter(tags=["interactions"])


def get_store(request: Request) -> InteractionStore:
    """FastAPI dependency: the store created at startup."""
    return request.app.state.store


# ─── Request/Response Models ─────────────────────────────────────────────────

class LogResponse(BaseModel):
    success: bool
    message: str
    id: Optional[int] = None

class StudentInteractionsResponse(BaseModel):
    student: str
    count: int
    interactions: list[dict]


# ─── Ingestion ───────────────────────────────────────────────────────────────

@router.post("/log", response_model=LogResponse, response_model_exclude_none=True)
def log_interaction(
    payload: Any = Body(None),
    store: InteractionStore = Depends(get_store),
):
    record = normalize(payload)
    record_id = store.append(record)
    logger.info(
        f"Logged: {record.interaction_type or 'N/A'} - {record.student_name} - {record.category or 'N/A'}"
    )
    return LogResponse(success=True, message="Logged successfully", id=record_id)


# ─── Export ──────────────────────────────────────────────────────────────────

@router.get("/csv", response_class=PlainTextResponse)
def view_csv(store: InteractionStore = Depends(get_store)):
    content = export_csv(store, response_limit=CSV_PREVIEW_RESPONSE_CHARS)
    return PlainTextResponse(content, media_type="text/plain")


@router.get("/csv/download")
def download_csv(store: InteractionStore = Depends(get_store)):
    content = export_csv(store, response_limit=CSV_DOWNLOAD_RESPONSE_CHARS)
    return Response(
        content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{download_filename()}"'},
    )


# ─── Statistics ──────────────────────────────────────────────────────────────

@router.get("/stats", response_model=InteractionStats)
def get_stats(store: InteractionStore = Depends(get_store)):
    return store.aggregate()


# ─── Lookups ─────────────────────────────────────────────────────────────────

@router.get("/student/{name}", response_model=StudentInteractionsResponse)
def interactions_by_student(name: str, store: InteractionStore = Depends(get_store)):
    records = store.read_by_student(name)
    return StudentInteractionsResponse(
        student=name,
        count=len(records),
        interactions=[r.to_payload() for r in records],
    )


@router.get("/class/{class_name}")
def interactions_by_class(class_name: str, store: InteractionStore = Depends(get_store)):
    records = store.read_by_class(class_name)
    # "class" is a keyword, so no response model here
    return {
        "class": class_name,
        "count": len(records),
        "interactions": [r.to_payload() for r in records],
    }
