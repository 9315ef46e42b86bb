"""Unit tests for the peer-agreement critique pass."""

from __future__ import annotations

import pytest

from src.reconciliation.critique import CritiqueConfig, apply_critique, extract_keywords
from src.reconciliation.models import ParticipantName
from tests.unit.reconciliation.fake_participant import make_response


# =============================================================================
# Test Constants
# =============================================================================

_TEST_TOTAL_PROPOSAL = (
    "```python\ndef compute_total(items):\n    return sum(item.price for item in items)\n```"
)
_TEST_SQL_PROPOSAL = "```sql\nSELECT name FROM users\n```"


class TestExtractKeywords:
    """Keyword extraction from code."""

    def test_keeps_long_tokens_lowercased_in_order(self) -> None:
        response = make_response(ParticipantName.CHATGPT, _TEST_TOTAL_PROPOSAL)

        assert extract_keywords(response) == ["compute", "total", "items", "return", "item", "price"]

    def test_ignores_prose(self) -> None:
        response = make_response(ParticipantName.CHATGPT, "Plenty of explanatory words here")

        assert extract_keywords(response) == []

    def test_caps_keyword_count(self) -> None:
        code = " ".join(f"word{i:03d}" for i in range(60))
        response = make_response(ParticipantName.CHATGPT, f"```text\n{code}\n```")

        keywords = extract_keywords(response)

        assert len(keywords) == 50
        assert keywords[0] == "word000"

    def test_custom_cap(self) -> None:
        response = make_response(ParticipantName.CHATGPT, _TEST_TOTAL_PROPOSAL)

        assert extract_keywords(response, CritiqueConfig(max_keywords=2)) == ["compute", "total"]


class TestApplyCritique:
    """Confidence adjustment."""

    def test_full_agreement_adds_max_boost(self) -> None:
        responses = [
            make_response(ParticipantName.CHATGPT, _TEST_TOTAL_PROPOSAL, 0.5),
            make_response(ParticipantName.CLAUDE, _TEST_TOTAL_PROPOSAL, 0.6),
        ]

        critiqued = apply_critique(responses)

        assert critiqued[0].confidence == pytest.approx(0.65)
        assert critiqued[1].confidence == pytest.approx(0.75)

    def test_partial_agreement_is_proportional(self) -> None:
        responses = [
            make_response(ParticipantName.CHATGPT, _TEST_TOTAL_PROPOSAL, 0.5),
            make_response(ParticipantName.CLAUDE, _TEST_TOTAL_PROPOSAL, 0.5),
            make_response(ParticipantName.QWEN, _TEST_SQL_PROPOSAL, 0.5),
        ]

        critiqued = apply_critique(responses)

        assert critiqued[0].confidence == pytest.approx(0.575)
        assert critiqued[1].confidence == pytest.approx(0.575)
        assert critiqued[2].confidence == pytest.approx(0.5)

    def test_confidence_clamped_to_one(self) -> None:
        responses = [
            make_response(ParticipantName.CHATGPT, _TEST_TOTAL_PROPOSAL, 0.95),
            make_response(ParticipantName.CLAUDE, _TEST_TOTAL_PROPOSAL, 0.95),
        ]

        critiqued = apply_critique(responses)

        assert all(response.confidence == 1.0 for response in critiqued)

    def test_never_decreases_drops_or_reorders(self) -> None:
        responses = [
            make_response(ParticipantName.KIMI, _TEST_SQL_PROPOSAL, 0.8),
            make_response(ParticipantName.GEMINI, _TEST_TOTAL_PROPOSAL, 0.3),
            make_response(ParticipantName.DEEPSEEK, "No code at all", 0.1),
        ]

        critiqued = apply_critique(responses)

        assert [r.participant for r in critiqued] == [r.participant for r in responses]
        for before, after in zip(responses, critiqued):
            assert after.confidence >= before.confidence

    def test_returns_new_records(self) -> None:
        responses = [
            make_response(ParticipantName.CHATGPT, _TEST_TOTAL_PROPOSAL, 0.5),
            make_response(ParticipantName.CLAUDE, _TEST_TOTAL_PROPOSAL, 0.5),
        ]

        critiqued = apply_critique(responses)

        assert critiqued[0] is not responses[0]
        assert responses[0].confidence == 0.5
        assert critiqued[0].proposal_text == responses[0].proposal_text

    def test_single_response_unchanged(self) -> None:
        response = make_response(ParticipantName.CHATGPT, _TEST_TOTAL_PROPOSAL, 0.5)

        assert apply_critique([response]) == [response]

    def test_response_without_keywords_never_agrees(self) -> None:
        responses = [
            make_response(ParticipantName.CHATGPT, "prose only", 0.5),
            make_response(ParticipantName.CLAUDE, "more prose", 0.5),
        ]

        critiqued = apply_critique(responses)

        assert [r.confidence for r in critiqued] == [0.5, 0.5]
