"""
Community Router - Endpoints for community structure analysis.

Each request carries the full roster. The graph is built, analyzed and
discarded within the request; nothing is stored between calls.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException

from reslife.analysis import (
    CommunityAnalysis,
    CommunityAnalyzer,
    DecompositionResult,
    FiltrationResult,
    format_analysis,
)
from reslife.config import ConfigError, ConfigLoader
from reslife.graph import CommunityGraph, CommunityGraphError, UnknownMemberError
from reslife.models import Member

from ..schemas import (
    AnalysisResponse,
    BarcodeOut,
    CommunityRequest,
    DecompositionRequest,
    DecompositionResponse,
    FiltrationResponse,
    MemberNode,
    PriorityEntry,
    RelationshipEdge,
    TimeSlotOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/community", tags=["community"])


# ========================================
# Conversion helpers
# ========================================


def build_graph(request: CommunityRequest) -> CommunityGraph:
    graph = CommunityGraph(request.community_id)
    graph.add_members(Member.model_validate(m.model_dump()) for m in request.members)
    return graph


def make_analyzer(request: CommunityRequest) -> CommunityAnalyzer:
    analyzer = CommunityAnalyzer(ConfigLoader.get_instance())
    if request.min_strength is not None:
        analyzer.min_strength = request.min_strength
    return analyzer


def graph_nodes(graph: CommunityGraph) -> list[MemberNode]:
    return [
        MemberNode(
            id=m.id,
            name=m.name,
            room=m.room,
            subgroups=sorted(m.subgroups),
            centrality=m.centrality,
            boundary_score=m.boundary_score,
            is_bridge=m.is_bridge,
            component_id=m.component_id,
        )
        for m in graph.members
    ]


def graph_edges(graph: CommunityGraph) -> list[RelationshipEdge]:
    return [
        RelationshipEdge(
            id=rel.id,
            source=rel.source,
            target=rel.target,
            type=rel.type.value,
            strength=rel.strength,
            is_bridge_edge=rel.is_bridge_edge,
            shared_subgroups=sorted(rel.shared_subgroups),
        )
        for rel in graph.relationships
    ]


def decomposition_response(result: DecompositionResult, graph: CommunityGraph) -> DecompositionResponse:
    return DecompositionResponse(
        subgroup_a=result.subgroup_a,
        subgroup_b=result.subgroup_b,
        components_a=result.components_a,
        cycles_a=result.cycles_a,
        components_b=result.components_b,
        cycles_b=result.cycles_b,
        overlap_size=result.overlap_size,
        components_overlap=result.components_overlap,
        cycles_overlap=result.cycles_overlap,
        member_count=result.member_count,
        relationship_count=result.relationship_count,
        components=result.components,
        cycles=result.cycles,
        kernel_i0=result.kernel_i0,
        cokernel_i1=result.cokernel_i1,
        is_cohesive=result.is_cohesive,
        health=result.health,
        health_strategy=result.health_strategy.value,
        isolation_risk=result.isolation_risk,
        bridge_members=result.bridge_members,
        holes=result.holes,
        introductions=result.introductions,
        diagnosis=result.diagnosis,
        members=graph_nodes(graph),
        relationships=graph_edges(graph),
    )


def filtration_response(result: FiltrationResult) -> FiltrationResponse:
    return FiltrationResponse(
        max_strength=result.max_strength,
        threshold=result.threshold,
        barcodes=[
            BarcodeOut(
                dimension=b.dimension,
                birth=b.birth,
                death=b.death,
                persistence=b.persistence,
                members=b.members,
            )
            for b in result.barcodes
        ],
        stable_groups=result.stable_groups,
        fragile_groups=result.fragile_groups,
        unclassified_groups=result.unclassified_groups,
    )


def analysis_response(analysis: CommunityAnalysis, graph: CommunityGraph) -> AnalysisResponse:
    return AnalysisResponse(
        community_id=analysis.community_id,
        health_score=analysis.health_score,
        isolation_count=analysis.isolation_count,
        bridge_count=analysis.bridge_count,
        hole_count=analysis.hole_count,
        decomposition=decomposition_response(analysis.decomposition, graph),
        filtration=filtration_response(analysis.filtration),
        event_times=[
            TimeSlotOut(
                day=s.slot.day,
                start_min=s.slot.start_min,
                end_min=s.slot.end_min,
                label=s.label(),
                available_members=s.available_members,
                coverage=s.coverage,
                topology_score=s.topology_score,
                combined_score=s.combined_score,
            )
            for s in analysis.event_times
        ],
        priorities=[PriorityEntry(member_id=member_id, priority=p) for member_id, p in analysis.priorities],
        report=format_analysis(analysis),
    )


# ========================================
# Endpoints
# ========================================


@router.post("/analyze")
async def analyze_community(request: CommunityRequest) -> AnalysisResponse:
    """Full analysis: whole-graph health, group stability, event times and check-in priority."""
    logger.info(f"Analyzing community '{request.community_id}' with {len(request.members)} members")
    try:
        graph = build_graph(request)
        analyzer = make_analyzer(request)
        analysis = await asyncio.to_thread(analyzer.analyze, graph)
        return analysis_response(analysis, graph)
    except UnknownMemberError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (CommunityGraphError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConfigError as e:
        logger.error(f"Configuration error during analysis: {e}")
        raise HTTPException(status_code=500, detail=f"Configuration error: {e}")


@router.post("/decomposition")
async def decompose_community(request: DecompositionRequest) -> DecompositionResponse:
    """Decompose the community over two subgroups."""
    logger.info(
        f"Decomposing community '{request.community_id}' over "
        f"{request.subgroup_a}/{request.subgroup_b} ({len(request.members)} members)"
    )
    try:
        graph = build_graph(request)
        analyzer = make_analyzer(request)
        result = await asyncio.to_thread(analyzer.decompose, graph, request.subgroup_a, request.subgroup_b)
        return decomposition_response(result, graph)
    except UnknownMemberError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (CommunityGraphError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConfigError as e:
        logger.error(f"Configuration error during decomposition: {e}")
        raise HTTPException(status_code=500, detail=f"Configuration error: {e}")


@router.post("/filtration")
async def filtrate_community(request: CommunityRequest) -> FiltrationResponse:
    """Stable and fragile groups from the strength filtration."""
    try:
        graph = build_graph(request)
        analyzer = make_analyzer(request)
        await asyncio.to_thread(graph.recompute, analyzer.min_strength)
        result = await asyncio.to_thread(analyzer.filtrate, graph)
        return filtration_response(result)
    except UnknownMemberError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (CommunityGraphError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConfigError as e:
        logger.error(f"Configuration error during filtration: {e}")
        raise HTTPException(status_code=500, detail=f"Configuration error: {e}")
