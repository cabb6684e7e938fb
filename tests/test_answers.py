"""Tests for the mock draft and the optimized answer templates."""

from __future__ import annotations

import pytest

from support_triage.answers import (
    BILLING_ANSWER,
    GENERAL_ANSWER,
    NO_KB_FALLBACK,
    PASSWORD_ANSWER,
    mock_draft_answer,
    optimize_answer,
)
from support_triage.tools.kb import KB


class TestMockDraftAnswer:
    def test_draft_layout(self):
        draft = mock_draft_answer("Help me", [KB[0]])
        assert draft.split("\n") == [
            "This is a demo draft answer from a mock model.",
            "",
            "Ticket:",
            "Help me",
            "",
            "Relevant knowledge:",
            f"• {KB[0]['title']}: {KB[0]['content']}",
        ]

    def test_draft_lists_every_article(self):
        draft = mock_draft_answer("x", list(KB))
        assert draft.endswith(
            f"• {KB[0]['title']}: {KB[0]['content']}\n• {KB[1]['title']}: {KB[1]['content']}"
        )

    def test_draft_without_articles_uses_fallback(self):
        draft = mock_draft_answer("Something odd", [])
        assert draft.endswith("Relevant knowledge:\n" + NO_KB_FALLBACK)


class TestOptimizeAnswer:
    @pytest.mark.parametrize("draft", ["", None])
    def test_empty_draft_returns_empty_string(self, draft):
        assert optimize_answer(draft, "optimized") == ""

    def test_base_mode_passes_draft_through(self):
        assert optimize_answer("my billing draft", "base") == "my billing draft"

    @pytest.mark.parametrize("word", ["billing", "Credit Card", "payment"])
    def test_billing_intent(self, word):
        assert optimize_answer(f"about {word}", "optimized") == BILLING_ANSWER

    @pytest.mark.parametrize("word", ["password", "LOGIN", "reset"])
    def test_password_intent(self, word):
        assert optimize_answer(f"about {word}", "optimized") == PASSWORD_ANSWER

    def test_billing_wins_over_password(self):
        assert optimize_answer("payment failed after password reset", "optimized") == BILLING_ANSWER

    def test_general_fallback(self):
        assert optimize_answer("the export is slow", "optimized") == GENERAL_ANSWER

    def test_templates_have_headlines(self):
        assert BILLING_ANSWER.startswith("✅ DSPy-Optimized Answer — Billing / Credit Card")
        assert PASSWORD_ANSWER.startswith("✅ DSPy-Optimized Answer — Password / Login")
        assert GENERAL_ANSWER.startswith("✅ DSPy-Optimized Answer — General Support Request")

    def test_billing_template_full_text(self):
        expected = (
            "✅ DSPy-Optimized Answer — Billing / Credit Card\n"
            "\n"
            "1. Summary\n"
            "You can update your credit card from the Billing section in your account settings.\n"
            "\n"
            "2. Steps to Resolve\n"
            "1) Open the app or web portal and sign in to your account.\n"
            "2) Go to **Settings** (usually under your profile or account menu).\n"
            "3) Open **Billing** or **Payment Method**.\n"
            "4) Click **Edit** or **Update card**.\n"
            "5) Enter your new card details and save the changes.\n"
            "\n"
            "3. What to Check\n"
            "- Make sure there are no error messages after you save.\n"
            "- Confirm that your next invoice shows the updated card.\n"
            "\n"
            "4. When to Contact Support\n"
            "- You don’t see a Billing or Payment Method section.\n"
            "- The card is declined or you get repeated errors when saving.\n"
            "- The account is managed by an admin or a billing contact."
        )
        assert BILLING_ANSWER == expected

    def test_general_template_full_text(self):
        expected = (
            "✅ DSPy-Optimized Answer — General Support Request\n"
            "\n"
            "1. Summary\n"
            "Here is a concise, structured response based on your request and our internal guidance.\n"
            "\n"
            "2. Next Steps\n"
            "- Follow the instructions provided above.\n"
            "- If anything doesn’t match what you see on screen, capture a screenshot if possible.\n"
            "\n"
            "3. When to Contact Support\n"
            "- You tried the recommended steps and the issue persists.\n"
            "- The impact is high (e.g., you can’t access the product or data is at risk)."
        )
        assert GENERAL_ANSWER == expected
