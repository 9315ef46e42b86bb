"""Consensus engine: pick or merge a final proposal from scored responses.

Responses are ranked by total score. The gap between the top two decides
the merge strategy:

- gap above ``clear_winner_gap``: the top proposal is used verbatim
- gap within [0, ``clear_winner_gap``]: the top proposal is merged with the
  runner-up's explanation when the runner-up explains noticeably more
- negative gap: only possible if ranking and scoring disagree; the
  configured reference participant (or the top response) is used verbatim

The final proposal is re-parsed into segments and handed to the patch
engine.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from functools import partial

from src.core.exceptions import ConsensusInputError
from src.reconciliation.models import (
    ConsensusResult,
    MergeStrategy,
    ModelResponse,
    ParticipantName,
    ScoreBreakdown,
    TextRange,
)
from src.reconciliation.parser import extract_code_segments, extract_explanation
from src.reconciliation.patch_engine import build_edits
from src.reconciliation.scoring import DEFAULT_SCORING_POLICY, ScoringPolicy, score_proposal


# =============================================================================
# Module Constants
# =============================================================================

_CONST_DEFAULT_CLEAR_WINNER_GAP = 1.5
_CONST_DEFAULT_INSIGHT_RATIO = 1.5
_CONST_INSIGHTS_HEADER = "<!-- Additional insights from {participant} -->"

logger = logging.getLogger(__name__)

Scorer = Callable[[ModelResponse], ScoreBreakdown]


# =============================================================================
# ConsensusConfig
# =============================================================================


@dataclass(frozen=True, slots=True)
class ConsensusConfig:
    """Configuration for consensus decisions.

    Attributes:
        clear_winner_gap: Score gap above which the top response wins outright
        insight_length_ratio: How much longer the runner-up's explanation must
            be before it is appended to the merged proposal
        reference_participant: Participant preferred by the judge fallback
        scoring_policy: Policy used when no explicit scorer is given
    """

    clear_winner_gap: float = _CONST_DEFAULT_CLEAR_WINNER_GAP
    insight_length_ratio: float = _CONST_DEFAULT_INSIGHT_RATIO
    reference_participant: ParticipantName = ParticipantName.CHATGPT
    scoring_policy: ScoringPolicy = field(default_factory=lambda: DEFAULT_SCORING_POLICY)


# =============================================================================
# Strategy
# =============================================================================


def determine_merge_strategy(gap: float, config: ConsensusConfig | None = None) -> MergeStrategy:
    """Map the score gap between the top two responses to a strategy.

    A negative gap means the ranking is inconsistent with the scores; it is
    answered with ``judge_fallback`` instead of raising.
    """
    config = config or ConsensusConfig()
    if gap > config.clear_winner_gap:
        return MergeStrategy.CLEAR_WINNER
    if gap >= 0:
        return MergeStrategy.MERGED
    return MergeStrategy.JUDGE_FALLBACK


def merge_proposals(
    primary: ModelResponse,
    secondary: ModelResponse,
    insight_length_ratio: float = _CONST_DEFAULT_INSIGHT_RATIO,
) -> str:
    """Merge the runner-up's explanation into the primary proposal.

    Returns the primary's text unchanged unless the secondary's prose is
    more than ``insight_length_ratio`` times as long as the primary's.
    """
    primary_explanation = extract_explanation(primary.proposal_text)
    secondary_explanation = extract_explanation(secondary.proposal_text)

    if len(secondary_explanation) <= insight_length_ratio * len(primary_explanation):
        return primary.proposal_text

    header = _CONST_INSIGHTS_HEADER.format(participant=secondary.participant.value)
    return f"{primary.proposal_text}\n\n{header}\n{secondary_explanation}"


# =============================================================================
# run_consensus
# =============================================================================


def run_consensus(
    responses: Sequence[ModelResponse],
    current_file: str,
    selection_range: TextRange | None = None,
    config: ConsensusConfig | None = None,
    scorer: Scorer | None = None,
) -> ConsensusResult:
    """Reconcile a set of responses into one result with edits.

    Args:
        responses: Collected responses, in dispatch order
        current_file: File the request was made from
        selection_range: Editor selection, if any
        config: Consensus configuration
        scorer: Override for score_proposal (defaults to the config's policy)

    Returns:
        ConsensusResult

    Raises:
        ConsensusInputError: If responses is empty or names a participant twice
    """
    if not responses:
        raise ConsensusInputError("Consensus requires at least one response")
    names = [response.participant for response in responses]
    duplicates = sorted({name.value for name in names if names.count(name) > 1})
    if duplicates:
        raise ConsensusInputError(
            "Consensus requires one response per participant, got duplicates: "
            + ", ".join(duplicates)
        )

    config = config or ConsensusConfig()
    score = scorer or partial(score_proposal, policy=config.scoring_policy)

    scored = [(response, score(response)) for response in responses]
    scores = {response.participant: score for response, score in scored}

    # sorted() is stable: equal totals keep dispatch order.
    ranked = sorted(scored, key=lambda pair: pair[1].total, reverse=True)
    top = ranked[0][0]

    if len(ranked) == 1:
        strategy = MergeStrategy.CLEAR_WINNER
        winner = top
        final_text = top.proposal_text
    else:
        gap = ranked[0][1].total - ranked[1][1].total
        strategy = determine_merge_strategy(gap, config)
        winner, final_text = _resolve_final(strategy, ranked, config)
        logger.info(
            "Consensus strategy %s (gap=%.2f, winner=%s)",
            strategy.value,
            gap,
            winner.participant.value,
        )

    segments = extract_code_segments(final_text) or list(top.code_segments)
    edits = build_edits(segments, current_file, selection_range)

    top_half = ranked[: math.ceil(len(ranked) / 2)]
    mean_total = sum(score.total for _, score in top_half) / len(top_half)

    return ConsensusResult(
        winner_participant=winner.participant,
        merge_strategy=strategy,
        scores=scores,
        final_proposal_text=final_text,
        edits=tuple(edits),
        participants_used=tuple(response.participant for response in responses),
        consensus_score=_clamp_unit(mean_total / 10.0),
        confidence=_clamp_unit(top.confidence),
    )


# =============================================================================
# Helpers
# =============================================================================


def _resolve_final(
    strategy: MergeStrategy,
    ranked: list[tuple[ModelResponse, ScoreBreakdown]],
    config: ConsensusConfig,
) -> tuple[ModelResponse, str]:
    top, second = ranked[0][0], ranked[1][0]

    if strategy is MergeStrategy.CLEAR_WINNER:
        return top, top.proposal_text
    if strategy is MergeStrategy.MERGED:
        return top, merge_proposals(top, second, config.insight_length_ratio)

    logger.warning(
        "Ranking inconsistent with scores, falling back to reference participant %s",
        config.reference_participant.value,
    )
    reference = next(
        (
            response
            for response, _ in ranked
            if response.participant == config.reference_participant
        ),
        top,
    )
    return reference, reference.proposal_text


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))
