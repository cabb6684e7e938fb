"""Shared test fixtures for the Support Triage test suite."""

from __future__ import annotations

import os

import pytest


def pytest_configure(config):
    """Set test environment variables BEFORE collection starts.

    Keeps the metrics singleton local-only so no test talks to CloudWatch.
    """
    os.environ["METRICS_ENABLED"] = "false"
    os.environ.setdefault("DEFAULT_TICKET_ID", "T-demo")


@pytest.fixture
def agent():
    """A freshly compiled triage graph."""
    from support_triage.agent import create_triage_agent

    return create_triage_agent()
