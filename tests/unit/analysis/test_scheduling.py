"""Tests for the weekly event-time search."""

from __future__ import annotations

import pytest
from conftest import block, make_graph, make_member

from reslife.analysis import SchedulingOptimizer
from reslife.analysis.scheduling import candidate_slots
from reslife.graph import CommunityGraph


@pytest.fixture
def monday_graph() -> CommunityGraph:
    """Members 1-5 free Monday 10-12; member 6 free Monday 11-12 and isolated."""
    members = [make_member(i, free_blocks=[block(0, 10, 12)]) for i in range(1, 6)]
    members.append(make_member(6, free_blocks=[block(0, 11, 12)], boundary_score=0.9))
    return make_graph(*members)


class TestSchedulingOptimizer:
    def test_candidate_slots_cover_the_week(self):
        slots = candidate_slots()
        assert len(slots) == 7 * 14
        assert (slots[0].day, slots[0].start_min, slots[0].end_min) == (0, 8 * 60, 9 * 60)
        assert (slots[-1].day, slots[-1].start_min) == (6, 21 * 60)

    def test_ranks_by_coverage_and_topology(self, monday_graph):
        slots = SchedulingOptimizer().find_optimal_event_times(monday_graph)

        assert [(s.slot.day, s.slot.start_min) for s in slots] == [(0, 11 * 60), (0, 10 * 60)]
        best = slots[0]
        assert best.available_members == [1, 2, 3, 4, 5, 6]
        assert best.coverage == pytest.approx(1.0)
        assert best.topology_score == pytest.approx(2.0)
        assert best.combined_score == pytest.approx(102.0)
        assert best.label() == "Monday 11:00-12:00"

        assert slots[1].available_count == 5
        assert slots[1].coverage == pytest.approx(5 / 6)

    def test_min_attendance(self, monday_graph):
        slots = SchedulingOptimizer(min_attendance=6).find_optimal_event_times(monday_graph)
        assert len(slots) == 1

    def test_top_n(self, monday_graph):
        assert len(SchedulingOptimizer().find_optimal_event_times(monday_graph, top_n=1)) == 1

    def test_bridge_bonus(self):
        members = [make_member(i, free_blocks=[block(2, 18, 19)]) for i in range(1, 5)]
        members.append(make_member(5, free_blocks=[block(2, 18, 19)], is_bridge=True))
        slots = SchedulingOptimizer().find_optimal_event_times(make_graph(*members))
        assert slots[0].topology_score == pytest.approx(1.5)
        assert slots[0].label() == "Wednesday 18:00-19:00"

    def test_block_ending_at_slot_start_does_not_count(self):
        members = [make_member(i, free_blocks=[block(0, 10, 11)]) for i in range(1, 6)]
        slots = SchedulingOptimizer().find_optimal_event_times(make_graph(*members))
        assert [s.slot.start_min for s in slots] == [10 * 60]

    def test_equal_scores_keep_chronological_order(self):
        members = [make_member(i, free_blocks=[block(1, 9, 11), block(3, 9, 10)]) for i in range(1, 6)]
        slots = SchedulingOptimizer().find_optimal_event_times(make_graph(*members))
        assert [(s.slot.day, s.slot.start_min) for s in slots] == [(1, 540), (1, 600), (3, 540)]

    def test_empty_graph(self):
        assert SchedulingOptimizer(min_attendance=0).find_optimal_event_times(CommunityGraph()) == []
