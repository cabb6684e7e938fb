"""Answer text for the triage agent: the mock draft and the optimized rewrites.

Nothing here calls a model. The "draft" is a fixed template around the
ticket and the retrieved KB articles, and the "DSPy-optimized" rewrite picks
one of three structured templates by keyword.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from support_triage.tools.kb import KBArticle

AgentMode = Literal["base", "optimized"]

NO_KB_FALLBACK = "(no matching articles, so this is mostly generic guidance.)"

DRAFT_TEMPLATE = """This is a demo draft answer from a mock model.

Ticket:
{ticket_text}

Relevant knowledge:
{kb_text}"""

# ── Optimized templates ─────────────────────────────────────────────

BILLING_ANSWER = "\n".join([
    "✅ DSPy-Optimized Answer — Billing / Credit Card",
    "",
    "1. Summary",
    "You can update your credit card from the Billing section in your account settings.",
    "",
    "2. Steps to Resolve",
    "1) Open the app or web portal and sign in to your account.",
    "2) Go to **Settings** (usually under your profile or account menu).",
    "3) Open **Billing** or **Payment Method**.",
    "4) Click **Edit** or **Update card**.",
    "5) Enter your new card details and save the changes.",
    "",
    "3. What to Check",
    "- Make sure there are no error messages after you save.",
    "- Confirm that your next invoice shows the updated card.",
    "",
    "4. When to Contact Support",
    "- You don’t see a Billing or Payment Method section.",
    "- The card is declined or you get repeated errors when saving.",
    "- The account is managed by an admin or a billing contact.",
])

PASSWORD_ANSWER = "\n".join([
    "✅ DSPy-Optimized Answer — Password / Login",
    "",
    "1. Summary",
    "You can reset your password using the 'Forgot password' link on the login screen.",
    "",
    "2. Steps to Resolve",
    "1) Go to the login page.",
    "2) Click **Forgot password**.",
    "3) Enter the email address associated with your account.",
    "4) Open the reset email and click the link.",
    "5) Choose a new password and confirm.",
    "",
    "3. What to Check",
    "- The reset email may take a few minutes to arrive.",
    "- Check your spam/junk folder if you don’t see it.",
    "",
    "4. When to Contact Support",
    "- You no longer have access to the email on the account.",
    "- The reset link is expired or doesn’t work.",
])

GENERAL_ANSWER = "\n".join([
    "✅ DSPy-Optimized Answer — General Support Request",
    "",
    "1. Summary",
    "Here is a concise, structured response based on your request and our internal guidance.",
    "",
    "2. Next Steps",
    "- Follow the instructions provided above.",
    "- If anything doesn’t match what you see on screen, capture a screenshot if possible.",
    "",
    "3. When to Contact Support",
    "- You tried the recommended steps and the issue persists.",
    "- The impact is high (e.g., you can’t access the product or data is at risk).",
])

_BILLING_WORDS = ("billing", "credit card", "payment")
_PASSWORD_WORDS = ("password", "login", "reset")


def mock_draft_answer(ticket_text: str, kb: Sequence[KBArticle]) -> str:
    """Render the mock model's draft for a ticket and its KB context."""
    kb_text = "\n".join(f"• {article['title']}: {article['content']}" for article in kb)
    return DRAFT_TEMPLATE.format(
        ticket_text=ticket_text,
        kb_text=kb_text or NO_KB_FALLBACK,
    )


def optimize_answer(draft: str | None, mode: AgentMode) -> str:
    """Rewrite ``draft`` into a structured answer when ``mode`` is optimized.

    Intent is read from the draft itself, which embeds both the ticket and the
    KB articles, so billing wins over password when both are present.
    """
    if not draft:
        return ""
    if mode == "base":
        return draft

    lower = draft.lower()
    if any(word in lower for word in _BILLING_WORDS):
        return BILLING_ANSWER
    if any(word in lower for word in _PASSWORD_WORDS):
        return PASSWORD_ANSWER
    return GENERAL_ANSWER
