"""
Root test configuration and fixtures for the reslife project.

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from reslife.graph import CommunityGraph  # noqa: E402
from reslife.models import Member, TimeBlock  # noqa: E402


def make_member(member_id: int, **kwargs: Any) -> Member:
    """Member with a default name; any field can be overridden."""
    kwargs.setdefault("name", f"Resident {member_id}")
    return Member(id=member_id, **kwargs)


def make_graph(*members: Member, community_id: str = "test-hall") -> CommunityGraph:
    graph = CommunityGraph(community_id)
    graph.add_members(members)
    return graph


def block(day: int, start_hour: int, end_hour: int) -> TimeBlock:
    return TimeBlock(day=day, start_min=start_hour * 60, end_min=end_hour * 60)


# =============================================================================
# Roster fixtures
# =============================================================================

# Three roommates in 101, a loner in 150, and two course-mates in 220/240.
# Expected: 4 relationships, 3 components, 1 independent cycle.
SIX_MEMBER_ROSTER: list[dict[str, Any]] = [
    {"id": 1, "name": "Avery", "room": "101"},
    {"id": 2, "name": "Blake", "room": "101"},
    {"id": 3, "name": "Casey", "room": "101"},
    {"id": 4, "name": "Devon", "room": "150"},
    {"id": 5, "name": "Emery", "room": "220", "courses": ["MATH101"]},
    {"id": 6, "name": "Finley", "room": "240", "courses": ["MATH101"]},
]

# floor2 = {1, 2, 3}, chess = {3, 4, 5}; member 3 belongs to both.
# Relationships: 1-2, 1-3, 2-3 (proximity), 3-4 (shared course), 4-5 (proximity).
TWO_SUBGROUP_ROSTER: list[dict[str, Any]] = [
    {"id": 1, "room": "201", "subgroups": ["floor2"]},
    {"id": 2, "room": "203", "subgroups": ["floor2"]},
    {"id": 3, "room": "205", "subgroups": ["floor2", "chess"], "courses": ["CS101"]},
    {"id": 4, "room": "310", "subgroups": ["chess"], "courses": ["CS101"]},
    {"id": 5, "room": "312", "subgroups": ["chess"]},
]


@pytest.fixture
def six_member_graph() -> CommunityGraph:
    return make_graph(*(Member.model_validate(record) for record in SIX_MEMBER_ROSTER), community_id="six")


@pytest.fixture
def two_subgroup_graph() -> CommunityGraph:
    return make_graph(*(Member.model_validate(record) for record in TWO_SUBGROUP_ROSTER), community_id="two")


@pytest.fixture(autouse=True)
def reset_config_singleton(monkeypatch):
    """Isolate tests from CONFIG_* variables and reset the ConfigLoader singleton."""
    import os

    for key in list(os.environ):
        if key.startswith("CONFIG_") or key == "RESLIFE_CONFIG_FILE":
            monkeypatch.delenv(key, raising=False)

    yield

    from reslife.config import ConfigLoader

    ConfigLoader.reset()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """configure_logging replaces root handlers; put the originals back."""
    import logging

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
