"""Heuristic proposal scoring.

Every proposal is scored on five axes in [0, 10] and combined into a
weighted total. The weights, thresholds and pattern lists live in a
``ScoringPolicy`` so alternative policies can be swapped in and tested
without touching dispatch or merge logic. ``score_proposal`` is a pure
function of the response and the policy.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from src.reconciliation.models import ModelResponse, ScoreBreakdown


# =============================================================================
# Module Constants
# =============================================================================

_CONST_MAX_SCORE = 10.0
_CONST_MIN_SCORE = 0.0

DEFAULT_DANGER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"rm\s+-rf", re.IGNORECASE),
    re.compile(r"\beval\s*\(", re.IGNORECASE),
    re.compile(r"\bexec\s*\(", re.IGNORECASE),
    re.compile(r"process\.exit", re.IGNORECASE),
    re.compile(r"DROP\s+TABLE", re.IGNORECASE),
    re.compile(r"DELETE\s+FROM", re.IGNORECASE),
)

DEFAULT_COMMENT_MARKERS: tuple[str, ...] = ("//", "/*", "#")


# =============================================================================
# Policy
# =============================================================================


@dataclass(frozen=True, slots=True)
class ScoreWeights:
    """Weights of the five sub-scores; they must sum to 1.0."""

    correctness: float = 0.30
    completeness: float = 0.25
    safety: float = 0.20
    style: float = 0.15
    performance: float = 0.10

    def __post_init__(self) -> None:
        total = (
            self.correctness
            + self.completeness
            + self.safety
            + self.style
            + self.performance
        )
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"score weights must sum to 1.0, got {total}")


@dataclass(frozen=True, slots=True)
class ScoringPolicy:
    """Named, overridable constants of the scoring heuristics.

    Attributes:
        weights: Sub-score weights for the total
        danger_patterns: Patterns that each cost ``danger_penalty`` safety points
        comment_markers: Substrings that count as a code comment
        explanation_min_chars: Prose length above which a proposal counts as explained
        proposal_length_divisor: Characters of proposal per completeness point (max 3)
        code_length_divisor: Characters of code per lost performance point
        danger_penalty: Safety points lost per matched pattern
    """

    weights: ScoreWeights = field(default_factory=ScoreWeights)
    danger_patterns: tuple[re.Pattern[str], ...] = DEFAULT_DANGER_PATTERNS
    comment_markers: tuple[str, ...] = DEFAULT_COMMENT_MARKERS
    explanation_min_chars: int = 50
    proposal_length_divisor: float = 500.0
    code_length_divisor: float = 2000.0
    danger_penalty: float = 3.0


DEFAULT_SCORING_POLICY = ScoringPolicy()


# =============================================================================
# score_proposal
# =============================================================================


def score_proposal(
    response: ModelResponse,
    policy: ScoringPolicy | None = None,
) -> ScoreBreakdown:
    """Score one proposal.

    Args:
        response: Proposal to score
        policy: Scoring constants (defaults to DEFAULT_SCORING_POLICY)

    Returns:
        ScoreBreakdown with every sub-score and the total in [0, 10]
    """
    policy = policy or DEFAULT_SCORING_POLICY
    segments = response.code_segments
    has_code = len(segments) > 0
    code_length = sum(len(segment.code) for segment in segments)

    correctness = _cap((5.0 if has_code else 0.0) + 5.0 * response.confidence)

    explanation_length = len(response.proposal_text) - code_length
    completeness = _cap(
        (4.0 if has_code else 0.0)
        + (3.0 if explanation_length > policy.explanation_min_chars else 0.0)
        + min(3.0, len(response.proposal_text) / policy.proposal_length_divisor)
    )

    matched = sum(
        1
        for pattern in policy.danger_patterns
        if any(pattern.search(segment.code) for segment in segments)
    )
    safety = max(_CONST_MIN_SCORE, _CONST_MAX_SCORE - policy.danger_penalty * matched)

    has_comment = any(
        marker in segment.code
        for segment in segments
        for marker in policy.comment_markers
    )
    style = _cap(
        (4.0 if has_comment else 2.0)
        + (3.0 if has_code else 0.0)
        + min(3.0, 3.0 * response.confidence)
    )

    if code_length == 0:
        performance = 5.0
    else:
        performance = _cap(
            max(3.0, _CONST_MAX_SCORE - math.floor(code_length / policy.code_length_divisor))
        )

    weights = policy.weights
    total = (
        correctness * weights.correctness
        + completeness * weights.completeness
        + safety * weights.safety
        + style * weights.style
        + performance * weights.performance
    )

    return ScoreBreakdown(
        correctness=correctness,
        completeness=completeness,
        safety=safety,
        style=style,
        performance=performance,
        total=_clamp(total),
    )


def _cap(value: float) -> float:
    return min(_CONST_MAX_SCORE, value)


def _clamp(value: float) -> float:
    return max(_CONST_MIN_SCORE, min(_CONST_MAX_SCORE, value))
