"""Unit tests for reconciliation data models."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from src.reconciliation.models import (
    ALL_PARTICIPANTS,
    CodeSegment,
    ConsensusResult,
    Edit,
    EditAction,
    MergeStrategy,
    ModelResponse,
    ParticipantName,
    ScoreBreakdown,
    TextRange,
)


class TestParticipantName:
    """Closed participant set."""

    def test_all_participants(self) -> None:
        assert [name.value for name in ALL_PARTICIPANTS] == [
            "chatgpt",
            "claude",
            "gemini",
            "deepseek",
            "qwen",
            "kimi",
        ]

    def test_unknown_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            ParticipantName("copilot")


class TestModelResponse:
    """ModelResponse validation and immutability."""

    def test_is_frozen(self) -> None:
        response = ModelResponse(participant=ParticipantName.CHATGPT, proposal_text="hi")

        with pytest.raises(FrozenInstanceError):
            response.confidence = 0.9  # type: ignore[misc]

    @pytest.mark.parametrize("confidence", [-0.1, 1.1])
    def test_confidence_out_of_range_rejected(self, confidence: float) -> None:
        with pytest.raises(ValueError, match="confidence"):
            ModelResponse(participant=ParticipantName.CHATGPT, proposal_text="", confidence=confidence)

    def test_negative_latency_rejected(self) -> None:
        with pytest.raises(ValueError, match="latency_ms"):
            ModelResponse(participant=ParticipantName.CHATGPT, proposal_text="", latency_ms=-1)

    def test_to_dict(self) -> None:
        response = ModelResponse(
            participant=ParticipantName.QWEN,
            proposal_text="text",
            code_segments=(CodeSegment(language="python", code="x = 1"),),
            confidence=0.9,
        )

        data = response.to_dict()

        assert data["participant"] == "qwen"
        assert data["code_segments"][0]["language"] == "python"
        assert data["error"] is None


class TestTextRange:
    """Range validation."""

    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(ValueError):
            TextRange(start_line=5, start_char=0, end_line=4, end_char=0)

    def test_negative_position_rejected(self) -> None:
        with pytest.raises(ValueError):
            TextRange(start_line=-1, start_char=0, end_line=0, end_char=0)

    def test_single_line_range_allowed(self) -> None:
        assert TextRange(start_line=3, start_char=8, end_line=3, end_char=2).end_line == 3


class TestEdit:
    """Edit well-formedness."""

    def test_empty_file_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            Edit(file="", new_text="x", action=EditAction.FULL)

    def test_replace_requires_range(self) -> None:
        with pytest.raises(ValueError):
            Edit(file="a.py", new_text="x", action=EditAction.REPLACE)

    @pytest.mark.parametrize("action", [EditAction.CREATE, EditAction.FULL])
    def test_other_actions_reject_range(self, action: EditAction) -> None:
        with pytest.raises(ValueError):
            Edit(
                file="a.py",
                new_text="x",
                action=action,
                range=TextRange(start_line=0, start_char=0, end_line=1, end_char=0),
            )

    def test_to_dict(self) -> None:
        edit = Edit(
            file="a.py",
            new_text="x",
            action=EditAction.REPLACE,
            range=TextRange(start_line=0, start_char=0, end_line=1, end_char=0),
        )

        assert edit.to_dict() == {
            "file": "a.py",
            "range": {"start_line": 0, "start_char": 0, "end_line": 1, "end_char": 0},
            "new_text": "x",
            "action": "replace",
        }


class TestConsensusResult:
    """ConsensusResult serialization."""

    def test_to_dict(self) -> None:
        score = ScoreBreakdown(
            correctness=8.0,
            completeness=7.0,
            safety=10.0,
            style=6.0,
            performance=10.0,
            total=8.05,
        )
        result = ConsensusResult(
            winner_participant=ParticipantName.CLAUDE,
            merge_strategy=MergeStrategy.MERGED,
            scores={ParticipantName.CLAUDE: score},
            final_proposal_text="text",
            participants_used=(ParticipantName.CLAUDE,),
            consensus_score=0.805,
            confidence=0.9,
        )

        data = result.to_dict()

        assert data["winner_participant"] == "claude"
        assert data["merge_strategy"] == "merged"
        assert data["scores"]["claude"]["total"] == 8.05
        assert data["participants_used"] == ["claude"]
        assert data["edits"] == []
