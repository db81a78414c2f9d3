"""
Community health scores on a 0-100 scale.

Two formulas coexist and are never blended:

- DECOMPOSITION (used by a two-subgroup decomposition): starts at 100 and
  subtracts for fragmentation, for cycles beyond two and for each isolated
  member, adding a little back for each bridge member.
- WHOLE_GRAPH (used by the single-pass whole-community analysis): a weighted
  mix of connectivity (30%), cohesion (30%) and the share of members who are
  not isolated (40%).
"""

from __future__ import annotations

from enum import Enum


class HealthStrategy(str, Enum):
    DECOMPOSITION = "decomposition"
    WHOLE_GRAPH = "whole_graph"

    def score(
        self,
        components: int,
        cycles: int,
        isolation_count: int,
        bridge_count: int = 0,
        member_count: int = 0,
    ) -> float:
        if self is HealthStrategy.DECOMPOSITION:
            return decomposition_health(components, cycles, isolation_count, bridge_count)
        return whole_graph_health(components, cycles, isolation_count, member_count)


def decomposition_health(components: int, cycles: int, isolation_count: int, bridge_count: int) -> float:
    # An empty graph has 0 components; it is not penalized for it
    component_penalty = max(0, components - 1) * 15.0
    hole_penalty = max(0.0, (cycles - 2) * 5.0)
    isolation_penalty = isolation_count * 3.0
    bridge_bonus = bridge_count * 2.0

    score = 100.0 - component_penalty - hole_penalty - isolation_penalty + bridge_bonus
    return max(0.0, min(100.0, score))


def whole_graph_health(components: int, cycles: int, isolation_count: int, member_count: int) -> float:
    connectivity = max(0.0, 100.0 - max(0, components - 1) * 20.0)
    cohesion = max(0.0, 100.0 - cycles * 5.0)
    if member_count == 0:
        isolation = 100.0
    else:
        isolation = max(0.0, 100.0 - isolation_count / member_count * 100.0)

    return connectivity * 0.3 + cohesion * 0.3 + isolation * 0.4
