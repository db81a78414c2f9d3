"""
Roster loading: already-structured JSON into a CommunityGraph.

Accepted shapes:
    {"community_id": "north-hall", "members": [{...}, ...]}
    [{...}, ...]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from reslife.graph import CommunityGraph
from reslife.models import Member

logger = logging.getLogger(__name__)


class RosterError(ValueError):
    """Raised when a roster file cannot be read or has the wrong shape."""

    pass


def graph_from_records(records: list[dict[str, Any]], community_id: str = "") -> CommunityGraph:
    """Validate each record as a Member and add it in order (duplicate ids raise)."""
    graph = CommunityGraph(community_id)
    graph.add_members(Member.model_validate(record) for record in records)
    return graph


def load_roster(path: str | Path) -> CommunityGraph:
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise RosterError(f"Cannot read roster {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise RosterError(f"Roster {path} is not valid JSON: {e}") from e

    if isinstance(data, list):
        community_id, records = path.stem, data
    elif isinstance(data, dict) and isinstance(data.get("members"), list):
        community_id, records = str(data.get("community_id") or path.stem), data["members"]
    else:
        raise RosterError(f"Roster {path} must be a list of members or an object with a 'members' list")

    graph = graph_from_records(records, community_id)
    logger.info(f"Loaded {len(graph)} members for '{community_id}' from {path}")
    return graph
