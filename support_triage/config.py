"""Centralized configuration for the Support Triage agent.

Every value comes from an environment variable (or a local ``.env`` file)
and falls back to a sensible default. The demo needs no secrets.

Metrics settings (``METRICS_ENABLED``, ``METRICS_NAMESPACE``) are read by
``support_triage.services.metrics`` when its client is constructed.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# ── Triage ──────────────────────────────────────────────────────────
DEFAULT_TICKET_ID: str = os.getenv("DEFAULT_TICKET_ID", "T-demo")

# ── Server ──────────────────────────────────────────────────────────
SERVER_HOST: str = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("SERVER_PORT", "8000"))
CORS_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173",
    ).split(",")
    if origin.strip()
]
