"""Check-in priority ordering for residence staff."""

from __future__ import annotations

from reslife.graph import CommunityGraph

from .decomposition import DecompositionResult
from .filtration import FiltrationResult

BASE_PRIORITY = 50.0
ISOLATION_BONUS = 30.0
FRAGILE_GROUP_BONUS = 20.0
LOW_RATING_BONUS = 25.0
LOW_RATING_MAX = 2
FOLLOW_UP_BONUS = 15.0
BRIDGE_BONUS = 5.0
STABLE_GROUP_DISCOUNT = 10.0


def member_priority(
    member_id: int,
    last_rating: int,
    follow_up_needed: bool,
    isolated: set[int],
    fragile: set[int],
    bridges: set[int],
    stable: set[int],
) -> float:
    priority = BASE_PRIORITY
    if member_id in isolated:
        priority += ISOLATION_BONUS
    if member_id in fragile:
        priority += FRAGILE_GROUP_BONUS
    # A rating of 0 means no check-in yet, not a bad one
    if 0 < last_rating <= LOW_RATING_MAX:
        priority += LOW_RATING_BONUS
    if follow_up_needed:
        priority += FOLLOW_UP_BONUS
    if member_id in bridges:
        priority += BRIDGE_BONUS
    if member_id in stable:
        priority -= STABLE_GROUP_DISCOUNT
    return priority


def compute_priority_order(
    graph: CommunityGraph,
    decomposition: DecompositionResult,
    filtration: FiltrationResult,
) -> list[tuple[int, float]]:
    """(member id, priority) for every member, most urgent first.

    Equal priorities keep member insertion order.
    """
    isolated = set(decomposition.isolation_risk)
    bridges = set(decomposition.bridge_members)
    fragile = filtration.fragile_member_ids()
    stable = filtration.stable_member_ids()

    priorities = [
        (
            m.id,
            member_priority(m.id, m.last_rating, m.follow_up_needed, isolated, fragile, bridges, stable),
        )
        for m in graph.members
    ]
    priorities.sort(key=lambda item: item[1], reverse=True)
    return priorities
