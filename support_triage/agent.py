"""LangGraph-based triage agent for support tickets.

Architecture:
  The agent is a linear LangGraph StateGraph with six nodes, one per step
  of the support SOP:

    1. **classify**:  keyword classifier (billing / bug / how_to / other)
    2. **retrieve**:  keyword lookup in the static knowledge base
    3. **draft**:     mock "LLM" renders a draft answer from ticket + KB
    4. **optimize**:  conceptual DSPy module; restructures the draft in
                       ``optimized`` mode, passes it through in ``base`` mode
    5. **decide**:    bug / other tickets go to a human
    6. **finalize**:  marks the state as ready for the caller

  Routing:
    START → classify → retrieve → draft → optimize → decide → finalize → END

  State:
    Each node returns only the fields it changes plus a one-element
    ``steps`` list. Every field is last-write-wins except ``steps``, whose
    ``operator.add`` reducer appends, so the final state carries the full
    execution trace in node order.
"""

from __future__ import annotations

import json
import logging
import operator
import time
from typing import Annotated, Any, Literal

from langchain_core.runnables import Runnable, RunnableLambda
from langgraph.graph import END, START, StateGraph
from typing_extensions import TypedDict

from support_triage.answers import AgentMode, mock_draft_answer, optimize_answer
from support_triage.config import DEFAULT_TICKET_ID
from support_triage.services.metrics import metrics
from support_triage.tools.kb import KBArticle, retrieve_kb

logger = logging.getLogger(__name__)

AgentStepKind = Literal["langgraph", "dspy"]

HUMAN_REVIEW_CLASSES = frozenset({"bug", "other"})


# ── State schema ─────────────────────────────────────────────────────


class AgentStep(TypedDict):
    """One entry of the execution trace."""

    name: str
    kind: AgentStepKind
    detail: str
    duration_ms: int


class TicketState(TypedDict, total=False):
    """The state that flows through the graph."""

    ticket_id: str
    ticket_text: str
    classification: str
    kb_results: list[KBArticle]
    draft_answer: str
    requires_human: bool
    mode: AgentMode
    steps: Annotated[list[AgentStep], operator.add]


class TriageResult(TypedDict):
    """What a triage run hands back to its caller."""

    ticket_id: str
    classification: str | None
    answer: str
    requires_human: bool | None
    mode: AgentMode
    steps: list[AgentStep]
    total_duration_ms: int


# ── SOP helpers ──────────────────────────────────────────────────────


def classify_ticket(text: str) -> str:
    """Classify a ticket by keyword; the first matching rule wins."""
    lower = text.lower()
    if "invoice" in lower or "card" in lower:
        return "billing"
    if "error" in lower or "bug" in lower:
        return "bug"
    if "how do i" in lower or "how to" in lower:
        return "how_to"
    return "other"


def normalize_mode(value: Any) -> AgentMode:
    """Anything other than the exact string ``optimized`` runs in base mode."""
    return "optimized" if value == "optimized" else "base"


def _elapsed_ms(t0: float) -> float:
    return (time.perf_counter() - t0) * 1000


def _finish_step(name: str, kind: AgentStepKind, detail: str, t0: float) -> AgentStep:
    """Close out a node: record its latency and build its trace entry."""
    elapsed = _elapsed_ms(t0)
    metrics.record_step(name, kind, latency_ms=elapsed)
    return {"name": name, "kind": kind, "detail": detail, "duration_ms": int(elapsed)}


# ── Mock model ───────────────────────────────────────────────────────


def _mock_model(inputs: dict[str, Any]) -> str:
    return mock_draft_answer(inputs["ticket_text"], inputs.get("kb_results") or [])


def _build_drafter() -> Runnable:
    """Build the drafting "model".

    The demo uses a deterministic template wrapped as a runnable; any
    LangChain chat chain that accepts ``{"ticket_text", "kb_results"}`` and
    returns a string can be dropped in here instead.
    """
    return RunnableLambda(_mock_model, name="mock_drafter")


# ── Nodes ────────────────────────────────────────────────────────────


def classify_node(state: TicketState) -> dict:
    """Label the ticket."""
    t0 = time.perf_counter()
    classification = classify_ticket(state["ticket_text"])
    step = _finish_step(
        "Classify ticket", "langgraph", f"Classified as: {classification}", t0,
    )
    return {"classification": classification, "steps": [step]}


def retrieve_node(state: TicketState) -> dict:
    """Pull the matching KB articles."""
    t0 = time.perf_counter()
    kb_results = retrieve_kb(state["ticket_text"])
    step = _finish_step(
        "Retrieve KB", "langgraph",
        f"Found {len(kb_results)} relevant KB article(s).", t0,
    )
    return {"kb_results": kb_results, "steps": [step]}


def _make_draft_node():
    """Create the draft node.

    The drafter is captured in the closure so the graph builds it once
    rather than on every request.
    """
    drafter = _build_drafter()

    def draft_node(state: TicketState) -> dict:
        """Render the initial answer from the ticket and its KB context."""
        t0 = time.perf_counter()
        draft_answer = drafter.invoke(
            {
                "ticket_text": state["ticket_text"],
                "kb_results": state.get("kb_results") or [],
            }
        )
        step = _finish_step(
            "Draft answer (LLM)", "langgraph",
            "Generated an initial answer using the mock model.", t0,
        )
        return {"draft_answer": draft_answer, "steps": [step]}

    return draft_node


def optimize_node(state: TicketState) -> dict:
    """Conceptual DSPy step: restructure the draft in optimized mode."""
    t0 = time.perf_counter()
    mode = state.get("mode", "base")
    optimized = optimize_answer(state.get("draft_answer"), mode)
    detail = (
        "Applied DSPy-optimized module to restructure and harden the answer."
        if mode == "optimized"
        else "Skipped optimization (base mode)."
    )
    step = _finish_step("DSPy optimization", "dspy", detail, t0)
    return {"draft_answer": optimized, "steps": [step]}


def decide_node(state: TicketState) -> dict:
    """Send bugs and unclassified tickets to a human."""
    t0 = time.perf_counter()
    classification = state.get("classification") or "other"
    requires_human = classification in HUMAN_REVIEW_CLASSES
    detail = (
        "Ticket requires human-in-the-loop."
        if requires_human
        else "Safe to auto-resolve (demo logic)."
    )
    step = _finish_step("Decide auto vs human", "langgraph", detail, t0)
    return {"requires_human": requires_human, "steps": [step]}


def finalize_node(state: TicketState) -> dict:
    """Last node; contributes only its trace entry."""
    t0 = time.perf_counter()
    step = _finish_step(
        "Finalize", "langgraph", "Final state ready to return to the caller.", t0,
    )
    return {"steps": [step]}


# ── Graph assembly ───────────────────────────────────────────────────

NODE_ORDER = ("classify", "retrieve", "draft", "optimize", "decide", "finalize")


def create_triage_agent():
    """Build and compile the triage LangGraph agent.

    Returns a compiled graph that can be invoked with:
        graph.invoke({"ticket_id": "T-1", "ticket_text": "...",
                      "mode": "base", "steps": []})
    """
    graph = StateGraph(TicketState)

    graph.add_node("classify", classify_node)
    graph.add_node("retrieve", retrieve_node)
    graph.add_node("draft", _make_draft_node())
    graph.add_node("optimize", optimize_node)
    graph.add_node("decide", decide_node)
    graph.add_node("finalize", finalize_node)

    graph.add_edge(START, NODE_ORDER[0])
    for current, nxt in zip(NODE_ORDER, NODE_ORDER[1:]):
        graph.add_edge(current, nxt)
    graph.add_edge(NODE_ORDER[-1], END)

    compiled = graph.compile()
    logger.debug("Triage agent compiled, nodes: %s", " → ".join(NODE_ORDER))
    return compiled


# ── Running a ticket through the graph ──────────────────────────────


def run_triage(
    agent,
    ticket_text: str,
    ticket_id: str = DEFAULT_TICKET_ID,
    mode: AgentMode = "base",
) -> TriageResult:
    """Run one ticket through ``agent`` and time the whole run.

    Emits a single ``triage_completed`` log line with a JSON payload and
    records run metrics. Exceptions from the graph are recorded as failures
    and re-raised.
    """
    mode = normalize_mode(mode)
    initial_state: TicketState = {
        "ticket_id": ticket_id,
        "ticket_text": ticket_text,
        "mode": mode,
        "steps": [],
    }

    t0 = time.perf_counter()
    try:
        result = agent.invoke(initial_state)
    except Exception as exc:
        metrics.record_failure(
            "triage", error_type=type(exc).__name__, latency_ms=_elapsed_ms(t0),
        )
        raise
    total_duration_ms = int(_elapsed_ms(t0))

    classification = result.get("classification")
    requires_human = result.get("requires_human")
    steps = list(result.get("steps") or [])

    summary = {
        "event": "triage_completed",
        "ticketId": ticket_id,
        "mode": mode,
        "classification": classification,
        "requiresHuman": requires_human,
        "totalDurationMs": total_duration_ms,
        "stepSummary": [
            {"name": s["name"], "kind": s["kind"], "durationMs": s.get("duration_ms")}
            for s in steps
        ],
    }
    logger.info("triage_completed %s", json.dumps(summary))
    metrics.record_run(
        mode, classification or "other", bool(requires_human), latency_ms=total_duration_ms,
    )

    return {
        "ticket_id": ticket_id,
        "classification": classification,
        "answer": result.get("draft_answer") or "",
        "requires_human": requires_human,
        "mode": mode,
        "steps": steps,
        "total_duration_ms": total_duration_ms,
    }
