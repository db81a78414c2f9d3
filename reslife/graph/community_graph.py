"""
Community graph: residents as vertices, synthesized relationships as edges.

Edges are rebuilt from scratch from member attributes (courses, free time,
interests, rooms, subgroups). Connectivity invariants are graph analogues of
Betti numbers: components (beta_0) and independent cycles (beta_1).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any

import networkx as nx

from reslife.models import ConnectionType, Member, Relationship

from .errors import DuplicateMemberError, UnknownMemberError
from .union_find import UnionFind

logger = logging.getLogger(__name__)

# Edge scoring weights
SHARED_COURSE_WEIGHT = 2.0
SCHEDULE_OVERLAP_DIVISOR = 5.0
SCHEDULE_OVERLAP_CAP = 2.0
MIN_OVERLAP_HOURS = 2
SHARED_INTEREST_WEIGHT = 1.5
ROOMMATE_WEIGHT = 5.0
FLOOR_PROXIMITY_WEIGHT = 1.0
FLOOR_PROXIMITY_MAX_DISTANCE = 5
SHARED_SUBGROUP_WEIGHT = 0.5

STRONG_TIE_THRESHOLD = 2.0
DEFAULT_MIN_STRENGTH = 0.5
DEFAULT_ISOLATION_THRESHOLD = 0.7

_ROOM_NUMBER = re.compile(r"\s*([+-]?\d+)")


def parse_room_number(room: str) -> int | None:
    """Leading number of the first three characters of a room id, or None"""
    match = _ROOM_NUMBER.match(room[:3])
    if match is None:
        return None
    return int(match.group(1))


def are_neighbors(room1: str, room2: str) -> bool:
    """Different rooms within a few doors of each other.

    A room id without a leading number is never adjacent to anything.
    """
    if room1 == room2:
        return False
    r1 = parse_room_number(room1)
    r2 = parse_room_number(room2)
    if r1 is None or r2 is None:
        return False
    return abs(r1 - r2) <= FLOOR_PROXIMITY_MAX_DISTANCE


def count_shared_courses(m1: Member, m2: Member) -> int:
    return sum(1 for c1 in m1.courses for c2 in m2.courses if c1 == c2)


def schedule_overlap_hours(m1: Member, m2: Member) -> int:
    total_minutes = sum(b1.overlap_minutes(b2) for b1 in m1.free_blocks for b2 in m2.free_blocks)
    return total_minutes // 60


def count_shared_interests(m1: Member, m2: Member) -> int:
    return len(m1.interests & m2.interests)


class CommunityGraph:
    """Owns the members and relationships of one population"""

    def __init__(self, community_id: str = ""):
        self.community_id = community_id
        self.members: list[Member] = []
        self.relationships: list[Relationship] = []

        # Adjacency: every edge, and edges with strength >= STRONG_TIE_THRESHOLD
        self.graph = nx.Graph()
        self.strong_graph = nx.Graph()

        self.subgroup_members: dict[str, list[int]] = {}
        self._positions: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self.members)

    def __contains__(self, member_id: object) -> bool:
        return member_id in self._positions

    # ========================================
    # Construction
    # ========================================

    def add_member(self, member: Member) -> None:
        if member.id in self._positions:
            raise DuplicateMemberError(f"Member id {member.id} already in community '{self.community_id}'")
        self._positions[member.id] = len(self.members)
        self.members.append(member)
        self.graph.add_node(member.id)
        self.strong_graph.add_node(member.id)
        for label in sorted(member.subgroups):
            self.subgroup_members.setdefault(label, []).append(member.id)

    def add_members(self, members: Iterable[Member]) -> None:
        for member in members:
            self.add_member(member)

    @property
    def subgroup_labels(self) -> list[str]:
        return sorted(self.subgroup_members)

    def member(self, member_id: int) -> Member:
        """Validated lookup by member id"""
        position = self._positions.get(member_id)
        if position is None:
            raise UnknownMemberError(member_id)
        return self.members[position]

    def position(self, member_id: int) -> int:
        position = self._positions.get(member_id)
        if position is None:
            raise UnknownMemberError(member_id)
        return position

    def neighbors(self, member_id: int) -> list[int]:
        if member_id not in self._positions:
            raise UnknownMemberError(member_id)
        return list(self.graph.neighbors(member_id))

    def add_relationship(self, relationship: Relationship) -> None:
        """Append an already-built relationship and index it in the adjacency mappings"""
        source = self.member(relationship.source)
        target = self.member(relationship.target)
        if relationship.strength < 0:
            raise ValueError(f"Relationship {relationship.id} has negative strength {relationship.strength}")
        if not relationship.shared_subgroups <= (source.subgroups & target.subgroups):
            raise ValueError(f"Relationship {relationship.id} shares subgroups its endpoints do not both have")

        self.relationships.append(relationship)
        self.graph.add_edge(
            relationship.source,
            relationship.target,
            relationship_id=relationship.id,
            weight=relationship.strength,
            edge_type=relationship.type.value,
        )
        if relationship.strength >= STRONG_TIE_THRESHOLD:
            self.strong_graph.add_edge(relationship.source, relationship.target, weight=relationship.strength)

    def _clear_edges(self) -> None:
        self.relationships = []
        self.graph = nx.Graph()
        self.strong_graph = nx.Graph()
        for m in self.members:
            self.graph.add_node(m.id)
            self.strong_graph.add_node(m.id)
            m.reset_derived()

    def synthesize_edges(self, min_strength: float = DEFAULT_MIN_STRENGTH) -> list[Relationship]:
        """Rebuild every relationship from member attributes.

        Each unordered pair accumulates strength from independently gated
        factors. Shared subgroups add strength but never create an edge on
        their own. Derived member scores are reset and must be recomputed.
        """
        self._clear_edges()
        edge_id = 0

        for i, m1 in enumerate(self.members):
            for m2 in self.members[i + 1 :]:
                total_strength = 0.0
                types: list[ConnectionType] = []

                shared_courses = count_shared_courses(m1, m2)
                if shared_courses > 0:
                    total_strength += shared_courses * SHARED_COURSE_WEIGHT
                    types.append(ConnectionType.SHARED_COURSE)

                overlap_hours = schedule_overlap_hours(m1, m2)
                if overlap_hours >= MIN_OVERLAP_HOURS:
                    total_strength += min(overlap_hours / SCHEDULE_OVERLAP_DIVISOR, SCHEDULE_OVERLAP_CAP)
                    types.append(ConnectionType.SCHEDULE_OVERLAP)

                shared_interests = count_shared_interests(m1, m2)
                if shared_interests > 0:
                    total_strength += shared_interests * SHARED_INTEREST_WEIGHT
                    types.append(ConnectionType.SHARED_INTEREST)

                if m1.room and m1.room == m2.room:
                    total_strength += ROOMMATE_WEIGHT
                    types.append(ConnectionType.ROOMMATE)

                if are_neighbors(m1.room, m2.room):
                    total_strength += FLOOR_PROXIMITY_WEIGHT
                    types.append(ConnectionType.FLOOR_PROXIMITY)

                shared_subgroups = frozenset(m1.subgroups & m2.subgroups)
                total_strength += len(shared_subgroups) * SHARED_SUBGROUP_WEIGHT

                if not types or total_strength < min_strength:
                    continue

                self.add_relationship(
                    Relationship(
                        id=edge_id,
                        source=m1.id,
                        target=m2.id,
                        type=types[0],
                        strength=total_strength,
                        is_bridge_edge=(
                            len(shared_subgroups) < len(m1.subgroups) or len(shared_subgroups) < len(m2.subgroups)
                        ),
                        shared_subgroups=shared_subgroups,
                    )
                )
                edge_id += 1

        logger.debug(
            f"Synthesized {len(self.relationships)} relationships "
            f"({self.strong_graph.number_of_edges()} strong) for {len(self.members)} members"
        )
        return self.relationships

    # ========================================
    # Invariants
    # ========================================

    def _union_find(self) -> UnionFind:
        uf = UnionFind(len(self.members))
        for rel in self.relationships:
            uf.union(self._positions[rel.source], self._positions[rel.target])
        return uf

    def component_count(self) -> int:
        """Number of connected components (beta_0). Zero for an empty graph."""
        if not self.members:
            return 0
        return self._union_find().count_sets()

    def cycle_count(self) -> int:
        """Number of independent cycles (beta_1 = E - V + beta_0)"""
        return len(self.relationships) - len(self.members) + self.component_count()

    def label_components(self) -> int:
        """Assign component_id 0..k-1 in order of first appearance; returns k"""
        uf = self._union_find()
        labels: dict[int, int] = {}
        for position, m in enumerate(self.members):
            root = uf.find(position)
            m.component_id = labels.setdefault(root, len(labels))
        return len(labels)

    def find_cycles(self) -> list[list[int]]:
        """One cycle per DFS back edge.

        Walks members in insertion order with an explicit stack. A visited,
        non-parent neighbour at shallower depth closes a cycle, read off the
        parent chain from the deeper endpoint up to (and ending with) that
        ancestor. Cycles can overlap and can outnumber cycle_count(): they are
        representative structural holes, not a cycle basis.
        """
        cycles: list[list[int]] = []
        parent: dict[int, int | None] = {}
        depth: dict[int, int] = {}

        for start in self.members:
            if start.id in depth:
                continue
            parent[start.id] = None
            depth[start.id] = 0
            stack = [(start.id, iter(self.graph.neighbors(start.id)))]

            while stack:
                v, pending = stack[-1]
                u = next(pending, None)
                if u is None:
                    stack.pop()
                    continue
                if u == parent[v]:
                    continue
                if u in depth:
                    if depth[u] < depth[v]:
                        cycle = []
                        current: int | None = v
                        while current is not None and current != u:
                            cycle.append(current)
                            current = parent[current]
                        cycle.append(u)
                        cycles.append(cycle)
                    continue
                parent[u] = v
                depth[u] = depth[v] + 1
                stack.append((u, iter(self.graph.neighbors(u))))

        return cycles

    # ========================================
    # Boundary and bridge scoring
    # ========================================

    def compute_boundary_scores(self) -> None:
        """Degree centrality normalized by the maximum degree; boundary = 1 - centrality.

        With no edges at all there is nothing to normalize against, so every
        member keeps centrality 0 and boundary score 0.
        """
        if not self.members:
            return

        degree = {m.id: self.graph.degree(m.id) for m in self.members}
        max_degree = max(degree.values())

        for m in self.members:
            if max_degree == 0:
                m.centrality = 0.0
                m.boundary_score = 0.0
            else:
                m.centrality = degree[m.id] / max_degree
                m.boundary_score = 1.0 - m.centrality

    def compute_bridges(self) -> None:
        """Flag members in 2+ subgroups whose neighbours span 2+ subgroups.

        A membership-diversity heuristic, not an articulation-point test.
        """
        for m in self.members:
            if len(m.subgroups) < 2:
                m.is_bridge = False
                continue
            connected: set[str] = set()
            for neighbor_id in self.neighbors(m.id):
                connected |= self.member(neighbor_id).subgroups
            m.is_bridge = len(connected) >= 2

    def recompute(self, min_strength: float = DEFAULT_MIN_STRENGTH) -> None:
        """Full recomputation sequence: edges, boundary scores, bridges, component labels"""
        self.synthesize_edges(min_strength)
        self.compute_boundary_scores()
        self.compute_bridges()
        self.label_components()

    def boundary_members(self, threshold: float = DEFAULT_ISOLATION_THRESHOLD) -> list[int]:
        return [m.id for m in self.members if m.boundary_score >= threshold]

    def bridge_members(self) -> list[int]:
        return [m.id for m in self.members if m.is_bridge]

    # ========================================
    # Derived graphs
    # ========================================

    def subgraph(self, member_ids: Iterable[int], community_id: str = "") -> CommunityGraph:
        """Vertex-induced copy over member_ids (edges renumbered, member ids kept)"""
        wanted = set(member_ids)
        for member_id in wanted:
            if member_id not in self._positions:
                raise UnknownMemberError(member_id)

        sub = CommunityGraph(community_id)
        for m in self.members:
            if m.id in wanted:
                sub.add_member(m.model_copy(deep=True))

        identity = {member_id: member_id for member_id in wanted}
        edge_id = 0
        for rel in self.relationships:
            if rel.source in wanted and rel.target in wanted:
                sub.add_relationship(rel.reindexed(edge_id, identity))
                edge_id += 1
        return sub

    def subgroup_graph(self, label: str) -> CommunityGraph:
        return self.subgraph(self.subgroup_members.get(label, []), community_id=label)

    def to_networkx(self) -> nx.Graph:
        """Export members and relationships with their attributes"""
        export = nx.Graph(community_id=self.community_id)
        for m in self.members:
            export.add_node(
                m.id,
                name=m.name,
                room=m.room,
                subgroups=sorted(m.subgroups),
                centrality=m.centrality,
                boundary_score=m.boundary_score,
                is_bridge=m.is_bridge,
                component_id=m.component_id,
            )
        for rel in self.relationships:
            export.add_edge(
                rel.source,
                rel.target,
                relationship_id=rel.id,
                weight=rel.strength,
                edge_type=rel.type.value,
                is_bridge_edge=rel.is_bridge_edge,
                shared_subgroups=sorted(rel.shared_subgroups),
            )
        return export

    def get_graph_metrics(self) -> dict[str, Any]:
        """Summary counts for logs and API responses"""
        return {
            "member_count": len(self.members),
            "relationship_count": len(self.relationships),
            "strong_relationship_count": self.strong_graph.number_of_edges(),
            "components": self.component_count(),
            "cycles": self.cycle_count(),
            "subgroup_count": len(self.subgroup_members),
        }
