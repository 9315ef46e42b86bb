"""Reconciliation pipeline: parallel proposals to one set of edits.

Components:
    - parser: fenced code segments, explanations, filename hints
    - patch_engine: segments and unified diffs to range-addressed edits
    - scoring: heuristic proposal scores under an overridable policy
    - consensus: ranking, merge strategy, final proposal and edits
    - critique: peer-agreement confidence adjustment
    - orchestrator: participant registry and concurrent dispatch
    - prompts: proposal, critique and judge prompt builders
"""

from src.reconciliation.consensus import (
    ConsensusConfig,
    determine_merge_strategy,
    merge_proposals,
    run_consensus,
)
from src.reconciliation.critique import CritiqueConfig, apply_critique, extract_keywords
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
from src.reconciliation.orchestrator import OrchestratorConfig, ReconciliationOrchestrator
from src.reconciliation.parser import (
    extract_code_segments,
    extract_explanation,
    extract_filename_hint,
)
from src.reconciliation.patch_engine import build_edits, parse_unified_diff
from src.reconciliation.prompts import (
    PromptInput,
    build_critique_prompt,
    build_judge_prompt,
    build_proposal_prompt,
)
from src.reconciliation.protocols import ParticipantProtocol
from src.reconciliation.scoring import ScoreWeights, ScoringPolicy, score_proposal


__all__ = [
    # Models
    "ALL_PARTICIPANTS",
    "CodeSegment",
    "ConsensusResult",
    "Edit",
    "EditAction",
    "MergeStrategy",
    "ModelResponse",
    "ParticipantName",
    "ScoreBreakdown",
    "TextRange",
    # Protocols
    "ParticipantProtocol",
    # Parser
    "extract_code_segments",
    "extract_explanation",
    "extract_filename_hint",
    # Patch engine
    "build_edits",
    "parse_unified_diff",
    # Scoring
    "ScoreWeights",
    "ScoringPolicy",
    "score_proposal",
    # Consensus
    "ConsensusConfig",
    "determine_merge_strategy",
    "merge_proposals",
    "run_consensus",
    # Critique
    "CritiqueConfig",
    "apply_critique",
    "extract_keywords",
    # Orchestrator
    "OrchestratorConfig",
    "ReconciliationOrchestrator",
    # Prompts
    "PromptInput",
    "build_critique_prompt",
    "build_judge_prompt",
    "build_proposal_prompt",
]
