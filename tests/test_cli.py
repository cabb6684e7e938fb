"""Tests for the terminal runner."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from support_triage.main import main


class TestSingleTicket:
    def test_prints_timeline_and_answer(self, capsys):
        main(["--ticket-id", "T-77", "My invoice is wrong"])
        out = capsys.readouterr().out
        assert "Ticket:          T-77" in out
        assert "Classification:  billing" in out
        assert "Human review:    no (auto-resolve)" in out
        assert "4. DSPy optimization [DSPy]" in out
        assert "Skipped optimization (base mode)." in out
        assert "This is a demo draft answer from a mock model." in out

    def test_optimized_mode(self, capsys):
        main(["--mode", "optimized", "forgot my password"])
        out = capsys.readouterr().out
        assert "Mode:            optimized" in out
        assert "DSPy-Optimized Answer — Password / Login" in out

    def test_rejects_unknown_mode(self):
        with pytest.raises(SystemExit):
            main(["--mode", "turbo", "hello"])


class TestInteractive:
    def test_mode_toggle_then_quit(self, capsys):
        with patch("builtins.input", side_effect=["", "mode", "card expired", "quit"]):
            main([])
        out = capsys.readouterr().out
        assert ">> Mode is now: optimized" in out
        assert "DSPy-Optimized Answer — Billing / Credit Card" in out
        assert "Goodbye!" in out

    def test_eof_exits_cleanly(self, capsys):
        with patch("builtins.input", side_effect=EOFError):
            main([])
        assert "Goodbye!" in capsys.readouterr().out
