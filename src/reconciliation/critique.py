"""Peer-agreement critique pass.

A cheap stand-in for a real review round: two proposals "agree" when the
keywords of their code overlap enough. Each response's confidence is raised
in proportion to how many of its peers agree with it. Confidence is never
lowered, and responses are neither dropped nor reordered.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, replace

from src.reconciliation.models import ModelResponse


# =============================================================================
# Module Constants
# =============================================================================

_CONST_TOKEN_SPLITTER = re.compile(r"[^A-Za-z0-9]+")

logger = logging.getLogger(__name__)


# =============================================================================
# CritiqueConfig
# =============================================================================


@dataclass(frozen=True, slots=True)
class CritiqueConfig:
    """Configuration for the critique pass.

    Attributes:
        min_token_length: Shortest token kept as a keyword
        max_keywords: Keywords kept per response
        agreement_overlap: Fraction of a response's keywords a peer must share
        max_boost: Confidence added when every peer agrees
    """

    min_token_length: int = 4
    max_keywords: int = 50
    agreement_overlap: float = 0.30
    max_boost: float = 0.15


# =============================================================================
# Public API
# =============================================================================


def extract_keywords(response: ModelResponse, config: CritiqueConfig | None = None) -> list[str]:
    """Keywords of a response's code, lowercased and de-duplicated in order."""
    config = config or CritiqueConfig()
    text = "\n".join(segment.code for segment in response.code_segments)

    keywords: list[str] = []
    seen: set[str] = set()
    for token in _CONST_TOKEN_SPLITTER.split(text.lower()):
        if len(token) < config.min_token_length or token in seen:
            continue
        seen.add(token)
        keywords.append(token)
        if len(keywords) >= config.max_keywords:
            break
    return keywords


def apply_critique(
    responses: Sequence[ModelResponse],
    config: CritiqueConfig | None = None,
) -> list[ModelResponse]:
    """Raise each response's confidence by its peers' agreement.

    Args:
        responses: Collected responses
        config: Critique configuration

    Returns:
        New response records in the same order; a single response comes
        back unchanged
    """
    config = config or CritiqueConfig()
    if len(responses) < 2:
        return list(responses)

    keyword_sets = [set(extract_keywords(response, config)) for response in responses]
    peers = len(responses) - 1

    critiqued: list[ModelResponse] = []
    for index, response in enumerate(responses):
        own = keyword_sets[index]
        agreements = sum(
            1
            for other_index, other in enumerate(keyword_sets)
            if other_index != index
            and len(own & other) > config.agreement_overlap * len(own)
        )
        ratio = agreements / peers
        confidence = min(1.0, response.confidence + ratio * config.max_boost)
        if agreements:
            logger.debug(
                "%s agreed with %d/%d peers, confidence %.2f -> %.2f",
                response.participant.value,
                agreements,
                peers,
                response.confidence,
                confidence,
            )
        critiqued.append(replace(response, confidence=max(confidence, response.confidence)))
    return critiqued
