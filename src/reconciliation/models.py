"""Data models for the reconciliation pipeline.

Everything here is an immutable value: participants produce
``ModelResponse`` records, the consensus engine reads them and returns a
``ConsensusResult`` that owns its own edits. Nothing is retained between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# =============================================================================
# Enumerations
# =============================================================================


class ParticipantName(str, Enum):
    """Closed set of participants the bridge knows how to address."""

    CHATGPT = "chatgpt"
    CLAUDE = "claude"
    GEMINI = "gemini"
    DEEPSEEK = "deepseek"
    QWEN = "qwen"
    KIMI = "kimi"


ALL_PARTICIPANTS: tuple[ParticipantName, ...] = tuple(ParticipantName)


class EditAction(str, Enum):
    """How an edit is applied to its file."""

    CREATE = "create"
    REPLACE = "replace"
    FULL = "full"


class MergeStrategy(str, Enum):
    """How the final proposal was chosen."""

    CLEAR_WINNER = "clear_winner"
    MERGED = "merged"
    JUDGE_FALLBACK = "judge_fallback"


# =============================================================================
# Parsed proposal content
# =============================================================================


@dataclass(frozen=True, slots=True)
class CodeSegment:
    """A fenced code block pulled out of a proposal.

    Attributes:
        language: Fence language tag, or an inferred language
        code: Block body with trailing whitespace removed
        filename: Filename from a ``lang:path`` fence tag, if any
        is_diff: Whether the body is a unified diff
    """

    language: str
    code: str
    filename: str | None = None
    is_diff: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "language": self.language,
            "code": self.code,
            "filename": self.filename,
            "is_diff": self.is_diff,
        }


@dataclass(frozen=True, slots=True)
class ModelResponse:
    """One participant's proposal.

    Attributes:
        participant: Which participant produced the proposal
        proposal_text: Raw markdown returned by the model
        code_segments: Segments parsed out of ``proposal_text``
        confidence: Self-reported confidence in [0, 1]
        latency_ms: Wall-clock time the proposal took
        error: Set when the participant produced an error instead of a proposal
    """

    participant: ParticipantName
    proposal_text: str
    code_segments: tuple[CodeSegment, ...] = ()
    confidence: float = 0.5
    latency_ms: int = 0
    error: str | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"confidence must be within [0, 1], got {self.confidence}"
            )
        if self.latency_ms < 0:
            raise ValueError(f"latency_ms must be non-negative, got {self.latency_ms}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "participant": self.participant.value,
            "proposal_text": self.proposal_text,
            "code_segments": [segment.to_dict() for segment in self.code_segments],
            "confidence": self.confidence,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    """Heuristic quality score of one proposal, every value in [0, 10]."""

    correctness: float
    completeness: float
    safety: float
    style: float
    performance: float
    total: float

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for serialization."""
        return {
            "correctness": self.correctness,
            "completeness": self.completeness,
            "safety": self.safety,
            "style": self.style,
            "performance": self.performance,
            "total": self.total,
        }


# =============================================================================
# Edits
# =============================================================================


@dataclass(frozen=True, slots=True)
class TextRange:
    """Zero-indexed, end-exclusive span of a document."""

    start_line: int
    start_char: int
    end_line: int
    end_char: int

    def __post_init__(self) -> None:
        if self.start_line < 0 or self.start_char < 0 or self.end_char < 0:
            raise ValueError("range positions must be non-negative")
        if self.end_line < self.start_line:
            raise ValueError(
                f"end_line {self.end_line} precedes start_line {self.start_line}"
            )

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary for serialization."""
        return {
            "start_line": self.start_line,
            "start_char": self.start_char,
            "end_line": self.end_line,
            "end_char": self.end_char,
        }


@dataclass(frozen=True, slots=True)
class Edit:
    """A concrete change to apply to one file.

    ``range`` is present exactly when ``action`` is ``replace``.
    """

    file: str
    new_text: str
    action: EditAction
    range: TextRange | None = None

    def __post_init__(self) -> None:
        if not self.file:
            raise ValueError("edit file must be non-empty")
        if (self.action is EditAction.REPLACE) != (self.range is not None):
            raise ValueError(
                f"'{self.action.value}' edit must "
                f"{'have' if self.action is EditAction.REPLACE else 'not have'} a range"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "file": self.file,
            "range": self.range.to_dict() if self.range else None,
            "new_text": self.new_text,
            "action": self.action.value,
        }


# =============================================================================
# ConsensusResult
# =============================================================================


@dataclass(frozen=True, slots=True)
class ConsensusResult:
    """Outcome of reconciling a set of proposals.

    Attributes:
        winner_participant: Participant whose proposal was selected
        merge_strategy: How the final proposal was chosen
        scores: Score of every input response, keyed by participant
        final_proposal_text: Selected (possibly merged) proposal text
        edits: Edits built from the final proposal
        participants_used: Participants that responded, in dispatch order
        consensus_score: Mean normalised total of the top half of responses
        confidence: Confidence of the top-ranked response
    """

    winner_participant: ParticipantName
    merge_strategy: MergeStrategy
    scores: dict[ParticipantName, ScoreBreakdown]
    final_proposal_text: str
    edits: tuple[Edit, ...] = ()
    participants_used: tuple[ParticipantName, ...] = field(default_factory=tuple)
    consensus_score: float = 0.0
    confidence: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "winner_participant": self.winner_participant.value,
            "merge_strategy": self.merge_strategy.value,
            "scores": {name.value: score.to_dict() for name, score in self.scores.items()},
            "final_proposal_text": self.final_proposal_text,
            "edits": [edit.to_dict() for edit in self.edits],
            "participants_used": [name.value for name in self.participants_used],
            "consensus_score": self.consensus_score,
            "confidence": self.confidence,
        }
