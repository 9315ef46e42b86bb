"""Pydantic wire schemas."""

from src.schemas.bridge import (
    BridgeRequest,
    BridgeResponse,
    ConsensusSummary,
    EditSchema,
    RequestContext,
    RequestType,
    ScoreSchema,
    SelectionRangeSchema,
)


__all__ = [
    "BridgeRequest",
    "BridgeResponse",
    "ConsensusSummary",
    "EditSchema",
    "RequestContext",
    "RequestType",
    "ScoreSchema",
    "SelectionRangeSchema",
]
