"""
Full community analysis pipeline.

One call rebuilds the graph, runs the whole-graph decomposition, the strength
filtration, the event-time search and the check-in prioritization, reading
every tunable from ConfigLoader.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from reslife.config import ConfigLoader
from reslife.graph import CommunityGraph

from .decomposition import DecompositionEngine, DecompositionResult
from .filtration import FiltrationEngine, FiltrationResult
from .priority import compute_priority_order
from .scheduling import SchedulingOptimizer, TimeSlotScore

logger = logging.getLogger(__name__)


@dataclass
class CommunityAnalysis:
    community_id: str
    decomposition: DecompositionResult
    filtration: FiltrationResult
    event_times: list[TimeSlotScore] = field(default_factory=list)
    priorities: list[tuple[int, float]] = field(default_factory=list)

    @property
    def health_score(self) -> float:
        return self.decomposition.health

    @property
    def isolation_count(self) -> int:
        return len(self.decomposition.isolation_risk)

    @property
    def bridge_count(self) -> int:
        return len(self.decomposition.bridge_members)

    @property
    def hole_count(self) -> int:
        return len(self.decomposition.holes)


class CommunityAnalyzer:
    def __init__(self, config: ConfigLoader | None = None):
        if config is None:
            config = ConfigLoader.get_instance()
        self.config = config

        self.min_strength = config.get_float("graph.min_strength")
        isolation_threshold = config.get_float("graph.isolation_threshold")

        self.decomposition_engine = DecompositionEngine(
            isolation_threshold=isolation_threshold,
            max_intro_boundary=config.get_float("introductions.max_boundary_score"),
        )
        self.filtration_engine = FiltrationEngine()
        self.scheduler = SchedulingOptimizer(
            min_attendance=config.get_int("scheduling.min_attendance"),
            isolation_threshold=isolation_threshold,
        )

    def analyze(self, graph: CommunityGraph) -> CommunityAnalysis:
        decomposition = self.decomposition_engine.compute_full(graph, self.min_strength)
        filtration = self.filtrate(graph)
        event_times = self.scheduler.find_optimal_event_times(graph, top_n=self.config.get_int("scheduling.top_n"))
        priorities = compute_priority_order(graph, decomposition, filtration)

        analysis = CommunityAnalysis(
            community_id=graph.community_id,
            decomposition=decomposition,
            filtration=filtration,
            event_times=event_times,
            priorities=priorities,
        )
        logger.info(
            f"Community '{graph.community_id}': health {analysis.health_score:.1f}, "
            f"{analysis.isolation_count} isolated, {analysis.bridge_count} bridges, {analysis.hole_count} holes"
        )
        return analysis

    def decompose(self, graph: CommunityGraph, subgroup_a: str, subgroup_b: str) -> DecompositionResult:
        """Recompute the graph, then decompose it over two subgroups"""
        graph.recompute(self.min_strength)
        return self.decomposition_engine.compute(graph, subgroup_a, subgroup_b)

    def filtrate(self, graph: CommunityGraph) -> FiltrationResult:
        """Strength filtration over the graph's current relationships"""
        return self.filtration_engine.compute(
            graph,
            min_strength=self.config.get_float("filtration.min_strength"),
            max_strength=self.config.get_float("filtration.max_strength"),
            steps=self.config.get_int("filtration.steps"),
        )
