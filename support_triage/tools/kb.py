"""Static knowledge base for the triage agent.

The KB is two hard-coded help-centre articles. Retrieval is plain keyword
matching on the lower-cased ticket text, which keeps the demo deterministic
and free of any embedding or vector-store dependency.
"""

from __future__ import annotations

import logging

from typing_extensions import TypedDict

logger = logging.getLogger(__name__)


class KBArticle(TypedDict):
    """A single knowledge-base article."""

    id: int
    title: str
    content: str


KB: tuple[KBArticle, ...] = (
    {
        "id": 1,
        "title": "Updating billing information",
        "content": (
            "To update your billing information, go to Settings > Billing > "
            "Payment Method and click 'Edit'."
        ),
    },
    {
        "id": 2,
        "title": "Resetting your password",
        "content": (
            "Click 'Forgot password' on the login page and follow the "
            "instructions in the email."
        ),
    },
)

# article id → keywords that pull it into the results
_KEYWORDS: dict[int, tuple[str, ...]] = {
    1: ("billing", "card", "invoice"),
    2: ("password", "login"),
}


def retrieve_kb(ticket_text: str) -> list[KBArticle]:
    """Return the KB articles relevant to ``ticket_text``, in KB order.

    Matching is substring containment, so "cardboard" still matches the
    billing article.
    """
    lower = ticket_text.lower()
    matches = [
        article
        for article in KB
        if any(word in lower for word in _KEYWORDS[article["id"]])
    ]
    logger.debug("KB retrieval matched ids=%s", [a["id"] for a in matches])
    return matches
