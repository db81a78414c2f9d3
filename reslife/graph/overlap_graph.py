"""
Overlap graph: the members belonging to two named subgroups at once.

Members are copied and re-indexed to 0..k-1 through an explicit old -> new id
map; relationships with both endpoints inside are copied and renumbered. The
result is rebuilt per query and never stored on the parent graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reslife.models import Member, Relationship

from .community_graph import CommunityGraph
from .union_find import UnionFind


@dataclass
class OverlapGraph:
    subgroup_a: str
    subgroup_b: str
    members: list[Member] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)
    id_map: dict[int, int] = field(default_factory=dict)  # original id -> overlap id

    @classmethod
    def compute(cls, graph: CommunityGraph, subgroup_a: str, subgroup_b: str) -> OverlapGraph:
        in_a = set(graph.subgroup_members.get(subgroup_a, []))
        in_b = set(graph.subgroup_members.get(subgroup_b, []))
        in_both = in_a & in_b

        overlap = cls(subgroup_a=subgroup_a, subgroup_b=subgroup_b)
        for m in graph.members:
            if m.id not in in_both:
                continue
            new_id = len(overlap.members)
            overlap.members.append(m.model_copy(update={"id": new_id}, deep=True))
            overlap.id_map[m.id] = new_id

        for rel in graph.relationships:
            if rel.source in in_both and rel.target in in_both:
                overlap.relationships.append(rel.reindexed(len(overlap.relationships), overlap.id_map))

        return overlap

    @property
    def original_ids(self) -> list[int]:
        """Original member ids, indexed by overlap id"""
        return list(self.id_map)

    def component_count(self) -> int:
        if not self.members:
            return 0
        uf = UnionFind(len(self.members))
        for rel in self.relationships:
            uf.union(rel.source, rel.target)
        return uf.count_sets()

    def cycle_count(self) -> int:
        return len(self.relationships) - len(self.members) + self.component_count()
