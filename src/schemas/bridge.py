"""Wire schemas for editor requests and responses.

The editor speaks camelCase JSON; models accept both camelCase and
snake_case on input and serialize with camelCase aliases.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.reconciliation.models import (
    ConsensusResult,
    Edit,
    EditAction,
    MergeStrategy,
    ParticipantName,
    TextRange,
)


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestType(str, Enum):
    """Kinds of editor request."""

    ASK = "ask"
    EDIT = "edit"
    CREATE = "create"
    PING = "ping"


# =============================================================================
# Request
# =============================================================================

class SelectionRangeSchema(_WireModel):
    """Zero-indexed editor selection."""

    start_line: int = Field(..., ge=0)
    start_char: int = Field(..., ge=0)
    end_line: int = Field(..., ge=0)
    end_char: int = Field(..., ge=0)

    def to_range(self) -> TextRange:
        """Convert to the pipeline's range type."""
        return TextRange(
            start_line=self.start_line,
            start_char=self.start_char,
            end_line=self.end_line,
            end_char=self.end_char,
        )


class RequestContext(_WireModel):
    """Editor context sent with a request."""

    selected_text: str | None = None
    selection_range: SelectionRangeSchema | None = None
    open_files: list[str] = Field(default_factory=list)
    project_tree: str | None = None


class BridgeRequest(_WireModel):
    """A request from the editor.

    Attributes:
        id: Request id, echoed in the response
        type: Request kind
        instruction: What the user asked for
        code: Current file content
        filename: Current file path
        context: Selection, open files and project tree
        enabled_participants: Participants to use; empty means all
    """

    id: str = Field(..., min_length=1)
    type: RequestType
    instruction: str = ""
    code: str | None = None
    filename: str | None = None
    context: RequestContext | None = None
    enabled_participants: list[ParticipantName] | None = None


# =============================================================================
# Response
# =============================================================================

class EditSchema(_WireModel):
    """One edit to apply in the editor."""

    file: str
    range: SelectionRangeSchema | None = None
    new_text: str
    action: EditAction

    @classmethod
    def from_edit(cls, edit: Edit) -> EditSchema:
        return cls(
            file=edit.file,
            range=SelectionRangeSchema(**edit.range.to_dict()) if edit.range else None,
            new_text=edit.new_text,
            action=edit.action,
        )


class ScoreSchema(_WireModel):
    """Score breakdown of one participant's proposal."""

    correctness: float
    completeness: float
    safety: float
    style: float
    performance: float
    total: float


class ConsensusSummary(_WireModel):
    """How the response was reconciled."""

    participants_used: list[ParticipantName]
    winner_participant: ParticipantName
    consensus_score: float = Field(..., ge=0.0, le=1.0)
    confidence: float = Field(..., ge=0.0, le=1.0)
    merge_strategy: MergeStrategy
    scores: dict[str, ScoreSchema]

    @classmethod
    def from_result(cls, result: ConsensusResult) -> ConsensusSummary:
        return cls(
            participants_used=list(result.participants_used),
            winner_participant=result.winner_participant,
            consensus_score=result.consensus_score,
            confidence=result.confidence,
            merge_strategy=result.merge_strategy,
            scores={
                name.value: ScoreSchema(**score.to_dict())
                for name, score in result.scores.items()
            },
        )


class BridgeResponse(_WireModel):
    """Response to an editor request; ``id`` echoes the request's."""

    id: str
    success: bool
    edits: list[EditSchema] | None = None
    explanation: str | None = None
    consensus: ConsensusSummary | None = None
    error: str | None = None
