"""Support Triage Agent: an agentic support-ticket triage demo.

Architecture Overview
=====================

A **LangGraph** ``StateGraph`` runs every ticket through a fixed, linear
SOP:

1. **classify**: keyword rules label the ticket billing / bug / how_to / other.
2. **retrieve**: keyword lookup in a two-article static knowledge base.
3. **draft**: a mock model renders a draft answer from the ticket and KB.
4. **optimize**: a conceptual DSPy module rewrites the draft into a
   structured answer (``optimized`` mode only; recorded as skipped otherwise).
5. **decide**: bug and unclassified tickets are flagged for a human.
6. **finalize**: closes the trace.

Each node returns only the fields it changes; the ``steps`` channel appends,
so the final state carries a timed execution trace that the browser UI
replays one node at a time.

Nothing here calls an external model or service, and nothing is persisted.

Package Structure
-----------------
- ``support_triage/agent.py``: LangGraph StateGraph, nodes, and ``run_triage``
- ``support_triage/answers.py``: mock draft and optimized answer templates
- ``support_triage/config.py``: configuration from environment variables
- ``support_triage/server.py``: FastAPI application and browser UI
- ``support_triage/main.py``: CLI runner
- ``support_triage/services/``: CloudWatch metrics
- ``support_triage/tools/``: static knowledge base
- ``support_triage/api/``: FastAPI routes and Pydantic schemas
"""
