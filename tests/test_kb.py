"""Tests for the static knowledge base."""

from __future__ import annotations

from support_triage.tools.kb import KB, retrieve_kb


class TestKnowledgeBase:
    def test_kb_has_two_articles(self):
        assert [a["id"] for a in KB] == [1, 2]


class TestRetrieveKb:
    def test_billing_keywords_match_billing_article(self):
        for text in ("Billing question", "new CARD please", "wrong invoice"):
            results = retrieve_kb(text)
            assert [a["id"] for a in results] == [1], text

    def test_password_keywords_match_password_article(self):
        assert [a["id"] for a in retrieve_kb("I forgot my password")] == [2]
        assert [a["id"] for a in retrieve_kb("Login keeps failing")] == [2]

    def test_both_articles_in_kb_order(self):
        results = retrieve_kb("Can't login to update my card")
        assert [a["id"] for a in results] == [1, 2]

    def test_no_match_returns_empty_list(self):
        assert retrieve_kb("The export button does nothing") == []

    def test_matching_is_substring_based(self):
        # "cardboard" contains "card"
        assert [a["id"] for a in retrieve_kb("my cardboard box arrived")] == [1]
