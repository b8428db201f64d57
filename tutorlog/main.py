"""
Student Interaction Log — Main Application
FastAPI app. Mounts the interactions router, CORS, serves the web page.
Storage backend is built and initialized on startup.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from tutorlog.config import CORS_ORIGINS, LOG_LEVEL, WEB_DIR, HOST, PORT
from tutorlog.errors import InteractionLogError
from tutorlog.routers import interactions
from tutorlog.routers.interactions import get_store
from tutorlog.store import build_store
from tutorlog.store.base import InteractionStore

logger = logging.getLogger("tutorlog")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ─── Lifespan (startup/shutdown) ─────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: build + initialize the store. Shutdown: nothing to release."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    store = build_store()
    store.initialize()
    app.state.store = store

    logger.info("Student AI Assistant log server started")
    for key, value in store.describe().items():
        logger.info(f"  {key}: {value}")
    logger.info(f"  listening on http://{HOST}:{PORT}")
    yield
    logger.info("Shutting down")


# ─── App ─────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="Student Interaction Log",
    description="Logs student / AI tutor interactions and exports them as CSV",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(interactions.router)


# ─── Error Handling ──────────────────────────────────────────────────────────

@app.exception_handler(InteractionLogError)
async def interaction_log_error_handler(request: Request, exc: InteractionLogError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Server error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ─── Status / Health ─────────────────────────────────────────────────────────

@app.get("/status")
def status(store: InteractionStore = Depends(get_store)):
    return {"status": "online", "timestamp": _utc_now_iso(), **store.describe()}


@app.get("/health")
def health(store: InteractionStore = Depends(get_store)):
    if store.ping():
        return {"status": "healthy", "storage": "connected", "timestamp": _utc_now_iso()}
    return JSONResponse(
        status_code=503,
        content={"status": "unhealthy", "storage": "disconnected", "timestamp": _utc_now_iso()},
    )


# ─── Web UI ──────────────────────────────────────────────────────────────────

@app.get("/")
async def serve_index():
    index = WEB_DIR / "index.html"
    if not index.exists():
        return JSONResponse(status_code=404, content={"error": "index.html not found"})
    return FileResponse(str(index))


def run():
    import uvicorn
    uvicorn.run("tutorlog.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    run()
