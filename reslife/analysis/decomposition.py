"""
Two-subgroup decomposition of a community graph.

For subgroups A and B the engine reports connectivity invariants of A, B and
their overlap, then two labelled approximations in the spirit of an exact
sequence:

    kernel_i0   ~ overlap components that end up merged through A or B
    cokernel_i1 ~ cycles of A and B not accounted for by the overlap

Both are heuristic estimates, not exact homology. The cycle count of the full
graph is computed directly. See reslife.graph.sparse_matrix for exact Betti
numbers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from reslife.graph import CommunityGraph, OverlapGraph
from reslife.graph.community_graph import DEFAULT_ISOLATION_THRESHOLD, DEFAULT_MIN_STRENGTH

from .health import HealthStrategy

logger = logging.getLogger(__name__)

DEFAULT_MAX_INTRO_BOUNDARY = 0.5
MIN_HOLE_SIZE = 3
MIN_HOLE_CONTACTS = 2


@dataclass
class DecompositionResult:
    """Invariants, estimates and recommendations from one decomposition pass.

    For a whole-graph pass the per-subgroup and overlap fields stay at zero and
    subgroup_a/subgroup_b are empty.
    """

    subgroup_a: str = ""
    subgroup_b: str = ""

    components_a: int = 0
    cycles_a: int = 0
    components_b: int = 0
    cycles_b: int = 0
    overlap_size: int = 0
    components_overlap: int = 0
    cycles_overlap: int = 0

    member_count: int = 0
    relationship_count: int = 0
    components: int = 0
    cycles: int = 0

    kernel_i0: int = 0
    cokernel_i1: int = 0

    is_cohesive: bool = True
    health: float = 0.0
    health_strategy: HealthStrategy = HealthStrategy.DECOMPOSITION

    isolation_risk: list[int] = field(default_factory=list)
    bridge_members: list[int] = field(default_factory=list)
    holes: list[list[int]] = field(default_factory=list)
    introductions: list[tuple[int, int]] = field(default_factory=list)

    diagnosis: str = ""

    @property
    def is_whole_graph(self) -> bool:
        return self.health_strategy is HealthStrategy.WHOLE_GRAPH


def estimate_kernel_i0(components_a: int, components_b: int, components_overlap: int) -> int:
    """Overlap components beyond what A or B alone would keep separate"""
    if components_overlap <= 1:
        return 0
    return max(0, components_overlap - max(components_a, components_b))


def estimate_cokernel_i1(cycles_a: int, cycles_b: int, cycles_overlap: int) -> int:
    return cycles_a + cycles_b - min(cycles_overlap, cycles_a + cycles_b)


class DecompositionEngine:
    def __init__(
        self,
        isolation_threshold: float = DEFAULT_ISOLATION_THRESHOLD,
        max_intro_boundary: float = DEFAULT_MAX_INTRO_BOUNDARY,
    ):
        self.isolation_threshold = isolation_threshold
        self.max_intro_boundary = max_intro_boundary

    def compute(self, graph: CommunityGraph, subgroup_a: str, subgroup_b: str) -> DecompositionResult:
        """Decompose over two subgroups using the graph's current edges and scores.

        Call graph.recompute() first; this method does not synthesize edges.
        Unknown subgroup labels behave as empty subgroups.
        """
        graph_a = graph.subgroup_graph(subgroup_a)
        graph_b = graph.subgroup_graph(subgroup_b)
        overlap = OverlapGraph.compute(graph, subgroup_a, subgroup_b)

        r = DecompositionResult(subgroup_a=subgroup_a, subgroup_b=subgroup_b)
        r.components_a = graph_a.component_count()
        r.cycles_a = graph_a.cycle_count()
        r.components_b = graph_b.component_count()
        r.cycles_b = graph_b.cycle_count()
        r.overlap_size = len(overlap.members)
        r.components_overlap = overlap.component_count()
        r.cycles_overlap = overlap.cycle_count()

        r.kernel_i0 = estimate_kernel_i0(r.components_a, r.components_b, r.components_overlap)
        r.cokernel_i1 = estimate_cokernel_i1(r.cycles_a, r.cycles_b, r.cycles_overlap)

        self._fill_whole_graph(graph, r)
        # One cycle is tolerated: some closed structure is healthy
        r.is_cohesive = r.cycles <= 1

        r.health_strategy = HealthStrategy.DECOMPOSITION
        r.health = r.health_strategy.score(
            components=r.components,
            cycles=r.cycles,
            isolation_count=len(r.isolation_risk),
            bridge_count=len(r.bridge_members),
        )
        r.diagnosis = self.build_diagnosis(r)

        logger.info(
            f"Decomposed '{graph.community_id}' over {subgroup_a}/{subgroup_b}: "
            f"{r.components} components, {r.cycles} cycles, health {r.health:.1f}"
        )
        return r

    def compute_full(self, graph: CommunityGraph, min_strength: float = DEFAULT_MIN_STRENGTH) -> DecompositionResult:
        """Recompute the graph, then report whole-community invariants only"""
        graph.recompute(min_strength)

        r = DecompositionResult()
        self._fill_whole_graph(graph, r)
        r.is_cohesive = r.cycles <= len(graph.members) // 10

        r.health_strategy = HealthStrategy.WHOLE_GRAPH
        r.health = r.health_strategy.score(
            components=r.components,
            cycles=r.cycles,
            isolation_count=len(r.isolation_risk),
            member_count=r.member_count,
        )
        r.diagnosis = self.build_summary(r)

        logger.info(
            f"Analyzed '{graph.community_id}': {r.member_count} members, "
            f"{r.relationship_count} relationships, health {r.health:.1f}"
        )
        return r

    def _fill_whole_graph(self, graph: CommunityGraph, r: DecompositionResult) -> None:
        r.member_count = len(graph.members)
        r.relationship_count = len(graph.relationships)
        r.components = graph.component_count()
        r.cycles = graph.cycle_count()
        r.isolation_risk = graph.boundary_members(self.isolation_threshold)
        r.bridge_members = graph.bridge_members()
        r.holes = graph.find_cycles()
        r.introductions = self.suggest_introductions(graph, r.holes, r.isolation_risk)

    def suggest_introductions(
        self,
        graph: CommunityGraph,
        holes: list[list[int]],
        isolated: list[int],
    ) -> list[tuple[int, int]]:
        """Pairs of members who should meet.

        First, each isolated member is paired with the first well-connected
        member sharing a course or an interest. Then each hole of three or more
        members gets one outsider who shares a course with at least two of its
        members, paired with the last such hole member.
        """
        intros: list[tuple[int, int]] = []

        for iso_id in isolated:
            iso = graph.member(iso_id)
            iso_courses = set(iso.courses)
            for candidate in graph.members:
                if candidate.id == iso_id or candidate.boundary_score > self.max_intro_boundary:
                    continue
                if iso_courses.intersection(candidate.courses) or iso.interests & candidate.interests:
                    intros.append((iso_id, candidate.id))
                    break

        for hole in holes:
            if len(hole) < MIN_HOLE_SIZE:
                continue
            in_hole = set(hole)
            for candidate in graph.members:
                if candidate.id in in_hole:
                    continue
                candidate_courses = set(candidate.courses)
                contacts = [hm for hm in hole if candidate_courses.intersection(graph.member(hm).courses)]
                if len(contacts) >= MIN_HOLE_CONTACTS:
                    intros.append((candidate.id, contacts[-1]))
                    break

        logger.debug(f"Suggested {len(intros)} introductions ({len(isolated)} isolated, {len(holes)} holes)")
        return intros

    @staticmethod
    def build_diagnosis(r: DecompositionResult) -> str:
        lines = [
            f"Decomposition over {r.subgroup_a} and {r.subgroup_b}",
            f"  {r.subgroup_a}: {r.components_a} components, {r.cycles_a} cycles",
            f"  {r.subgroup_b}: {r.components_b} components, {r.cycles_b} cycles",
            f"  Overlap: {r.overlap_size} members, {r.components_overlap} components, {r.cycles_overlap} cycles",
            "",
            "Estimates (approximate):",
            f"  ker(i0) = {r.kernel_i0} (overlap components merged through either subgroup)",
            f"  coker(i1) = {r.cokernel_i1} (subgroup cycles not explained by the overlap)",
            f"  Cycles in full community: {r.cycles}",
            "",
        ]
        if r.cycles > 0:
            lines.append(f"Structural holes detected: {len(r.introductions)} introductions recommended")
        else:
            lines.append("Community is simply connected: no structural holes")
        lines.append(f"{len(r.isolation_risk)} members at isolation risk")
        lines.append(f"{len(r.bridge_members)} bridge members")
        return "\n".join(lines) + "\n"

    @staticmethod
    def build_summary(r: DecompositionResult) -> str:
        lines = [
            f"Community: {r.member_count} members, {r.relationship_count} relationships",
            f"Components: {r.components}",
            f"Structural holes: {r.cycles}",
            f"Isolation risk: {len(r.isolation_risk)} members",
            f"Bridge members: {len(r.bridge_members)}",
            f"Health score: {r.health:.1f}/100",
        ]
        return "\n".join(lines) + "\n"
