"""
Pydantic schemas for the community analysis API.

Re-exports all schemas for convenient importing.
"""

from __future__ import annotations

from .community import (
    AnalysisResponse,
    BarcodeOut,
    CommunityRequest,
    DecompositionRequest,
    DecompositionResponse,
    FiltrationResponse,
    MemberInput,
    MemberNode,
    PriorityEntry,
    RelationshipEdge,
    TimeSlotOut,
)

__all__ = [
    "AnalysisResponse",
    "BarcodeOut",
    "CommunityRequest",
    "DecompositionRequest",
    "DecompositionResponse",
    "FiltrationResponse",
    "MemberInput",
    "MemberNode",
    "PriorityEntry",
    "RelationshipEdge",
    "TimeSlotOut",
]
