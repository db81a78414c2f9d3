"""
Weekly event-time search.

Every hourly slot from 08:00 to 22:00 on each day is scored by how much of
the community is free, plus a bonus for isolated and bridge members who could
attend.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from reslife.graph import CommunityGraph
from reslife.graph.community_graph import DEFAULT_ISOLATION_THRESHOLD
from reslife.models import TimeBlock

logger = logging.getLogger(__name__)

FIRST_HOUR = 8
LAST_HOUR = 22  # exclusive
DAYS_PER_WEEK = 7

DEFAULT_TOP_N = 5
DEFAULT_MIN_ATTENDANCE = 5

ISOLATED_BONUS = 2.0
BRIDGE_BONUS = 1.5

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


@dataclass
class TimeSlotScore:
    slot: TimeBlock
    available_members: list[int] = field(default_factory=list)
    coverage: float = 0.0
    topology_score: float = 0.0

    @property
    def available_count(self) -> int:
        return len(self.available_members)

    @property
    def combined_score(self) -> float:
        return self.coverage * 100 + self.topology_score

    def label(self) -> str:
        return f"{DAY_NAMES[self.slot.day]} {self.slot.start_min // 60:02d}:00-{self.slot.end_min // 60:02d}:00"


def candidate_slots() -> list[TimeBlock]:
    return [
        TimeBlock(day=day, start_min=hour * 60, end_min=(hour + 1) * 60)
        for day in range(DAYS_PER_WEEK)
        for hour in range(FIRST_HOUR, LAST_HOUR)
    ]


class SchedulingOptimizer:
    def __init__(
        self,
        min_attendance: int = DEFAULT_MIN_ATTENDANCE,
        isolation_threshold: float = DEFAULT_ISOLATION_THRESHOLD,
    ):
        self.min_attendance = min_attendance
        self.isolation_threshold = isolation_threshold

    def find_optimal_event_times(self, graph: CommunityGraph, top_n: int = DEFAULT_TOP_N) -> list[TimeSlotScore]:
        """Best slots by coverage * 100 + topology bonus, highest first.

        Uses the members' current boundary scores and bridge flags. Slots with
        fewer than min_attendance free members are skipped; ties keep
        chronological order.
        """
        if not graph.members:
            return []

        scores: list[TimeSlotScore] = []
        for slot in candidate_slots():
            available = [m for m in graph.members if any(block.overlaps(slot) for block in m.free_blocks)]
            if len(available) < self.min_attendance:
                continue

            bonus = 0.0
            for m in available:
                if m.boundary_score > self.isolation_threshold:
                    bonus += ISOLATED_BONUS
                if m.is_bridge:
                    bonus += BRIDGE_BONUS

            scores.append(
                TimeSlotScore(
                    slot=slot,
                    available_members=[m.id for m in available],
                    coverage=len(available) / len(graph.members),
                    topology_score=bonus,
                )
            )

        scores.sort(key=lambda s: s.combined_score, reverse=True)
        logger.debug(f"Scored {len(scores)} viable event slots for '{graph.community_id}'")
        return scores[:top_n]
