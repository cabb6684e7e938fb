"""FastAPI server for the Support Triage agent.

Run with:
    uvicorn support_triage.server:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from support_triage.agent import create_triage_agent
from support_triage.api.routes import router
from support_triage.config import CORS_ORIGINS, SERVER_HOST, SERVER_PORT

# ── Logging ──────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

UI_PATH = Path(__file__).resolve().parent / "static" / "index.html"


# ── Lifespan: initialise / tear-down shared resources ────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Start-up: compile the LangGraph agent once and store it in app state."""
    logger.info("Compiling triage graph…")
    application.state.agent = create_triage_agent()
    logger.info("Agent ready.")
    yield


# ── FastAPI application ──────────────────────────────────────────────
app = FastAPI(
    title="Agentic Support Triage API",
    description=(
        "API for an agentic support triage workflow built with LangGraph "
        "and a conceptual DSPy optimization step."
    ),
    version="1.0.0",
    openapi_url="/api/openapi",
    docs_url="/docs",
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request-ID middleware ────────────────────────────────────────────
@app.middleware("http")
async def add_request_id(request: Request, call_next) -> Response:
    """Attach a unique request ID to every request for log correlation.

    The ID is echoed in the ``X-Request-ID`` response header.
    """
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    request.state.request_id = request_id
    logger.info(
        "[%s] %s %s", request_id, request.method, request.url.path,
    )
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ── Error bodies ─────────────────────────────────────────────────────
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report bad request bodies as 400 with an ``error`` message.

    A body that is missing, unparseable, or not an object is treated the
    same as a missing ``ticketText``.
    """
    errors = exc.errors()
    ticket_text_problem = any(
        tuple(err.get("loc", ())) == ("body",)
        or err.get("type") == "json_invalid"
        or "ticketText" in err.get("loc", ())
        for err in errors
    )
    request_id = getattr(request.state, "request_id", "?")
    logger.info("[%s] Rejected request body: %d error(s)", request_id, len(errors))

    if ticket_text_problem:
        return JSONResponse(status_code=400, content={"error": "ticketText is required"})
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(errors)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as ``{"error": ...}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


# ── Register routes ──────────────────────────────────────────────────
app.include_router(router, prefix="/api")


@app.get("/", include_in_schema=False)
async def index():
    """Serve the browser UI that replays the workflow step by step."""
    return FileResponse(UI_PATH, media_type="text/html")


# ── CLI entry point ──────────────────────────────────────────────────

if __name__ == "__main__":
    logger.info("Starting Support Triage API server on %s:%d", SERVER_HOST, SERVER_PORT)
    uvicorn.run(
        "support_triage.server:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True,
    )
