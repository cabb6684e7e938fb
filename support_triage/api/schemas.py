"""Pydantic schemas for the FastAPI endpoints.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from support_triage.agent import normalize_mode
from support_triage.config import DEFAULT_TICKET_ID


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TriageRequest(_CamelModel):
    """A support ticket submitted for triage."""

    ticket_id: str = Field(
        DEFAULT_TICKET_ID,
        alias="ticketId",
        examples=["T-12345"],
        description="Optional ticket identifier. If omitted, a default will be used.",
    )
    ticket_text: str = Field(
        ...,
        alias="ticketText",
        min_length=1,
        examples=["I need to update my credit card for billing, the old one expired."],
        description="Full text of the support ticket.",
    )
    mode: Literal["base", "optimized"] = Field(
        "base",
        description=(
            "`base` runs only the LangGraph flow; `optimized` includes the "
            "DSPy-style optimization step. Unknown values fall back to `base`."
        ),
    )

    @field_validator("ticket_id", mode="before")
    @classmethod
    def _default_ticket_id(cls, value: Any) -> Any:
        return DEFAULT_TICKET_ID if value is None else value

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> str:
        return normalize_mode(value)


class StepSchema(_CamelModel):
    """One node of the execution trace."""

    name: str = Field(..., examples=["Classify ticket"])
    kind: Literal["langgraph", "dspy"] = Field(..., examples=["langgraph"])
    detail: str = Field(..., examples=["Classified as: billing"])
    duration_ms: int | None = Field(
        None, alias="durationMs", description="How long this node took, in milliseconds.",
    )


class TriageResponse(_CamelModel):
    """Outcome of a triage run."""

    ticket_id: str = Field(..., alias="ticketId", examples=["T-12345"])
    classification: str | None = Field(
        None,
        description="Label inferred by the agent: billing / bug / how_to / other.",
        examples=["billing"],
    )
    answer: str = Field(
        ...,
        description="Draft answer, possibly refined by the DSPy-style optimization step.",
    )
    requires_human: bool | None = Field(
        None,
        alias="requiresHuman",
        description="Whether this ticket should be escalated to a human agent.",
    )
    mode: Literal["base", "optimized"]
    steps: list[StepSchema] = Field(
        default_factory=list,
        description="Execution trace of the agentic workflow, one entry per graph node.",
    )
    total_duration_ms: int = Field(..., alias="totalDurationMs")


class ErrorResponse(BaseModel):
    """Error body returned for 4xx / 5xx responses."""

    error: str
    details: list[dict[str, Any]] | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    service: str = "support-triage-agent"
