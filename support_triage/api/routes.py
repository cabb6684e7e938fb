"""FastAPI route definitions for the triage agent API."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request

from support_triage.agent import run_triage
from support_triage.api.schemas import (
    ErrorResponse,
    HealthResponse,
    StepSchema,
    TriageRequest,
    TriageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

TRIAGE_ERROR = "Internal server error in /api/triage"


def _get_agent(request: Request):
    """Retrieve the compiled triage graph from app state.

    The graph is compiled once during the FastAPI lifespan (see
    ``server.py``).
    """
    agent = getattr(request.app.state, "agent", None)
    if agent is None:
        raise HTTPException(
            status_code=503,
            detail="The agent is still starting up. Please try again in a moment.",
        )
    return agent


# ── Endpoints ────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse()


@router.post(
    "/triage",
    response_model=TriageResponse,
    summary="Run triage agent on a support ticket",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input (e.g. missing ticketText)."},
        500: {"model": ErrorResponse, "description": "Internal server error."},
        503: {"model": ErrorResponse, "description": "Agent not ready yet."},
    },
)
async def triage(request: TriageRequest, http_request: Request):
    """Classify a ticket, retrieve KB context, draft an answer, optionally
    apply the DSPy-style optimization, and decide whether a human review is
    required.

    The graph is synchronous, so it runs in the default thread-pool to keep
    the event loop free.
    """
    agent = _get_agent(http_request)
    request_id = getattr(http_request.state, "request_id", "?")

    try:
        result = await asyncio.to_thread(
            run_triage,
            agent,
            request.ticket_text,
            ticket_id=request.ticket_id,
            mode=request.mode,
        )
    except Exception as e:
        # Full traceback stays in the server log; the client gets a generic message.
        logger.exception("[%s] Error in /api/triage", request_id)
        raise HTTPException(status_code=500, detail=TRIAGE_ERROR) from e

    logger.info(
        "[%s] Ticket %s triaged as %s (%s mode, %d ms)",
        request_id, result["ticket_id"], result["classification"],
        result["mode"], result["total_duration_ms"],
    )
    return TriageResponse(
        ticket_id=result["ticket_id"],
        classification=result["classification"],
        answer=result["answer"],
        requires_human=result["requires_human"],
        mode=result["mode"],
        steps=[StepSchema(**step) for step in result["steps"]],
        total_duration_ms=result["total_duration_ms"],
    )
