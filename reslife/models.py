from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field, ValidationInfo, field_validator

MINUTES_PER_DAY = 1440


class ConnectionType(Enum):
    """Relationship types, listed in primary-type precedence order."""

    SHARED_COURSE = "shared_course"
    SCHEDULE_OVERLAP = "schedule_overlap"
    SHARED_INTEREST = "shared_interest"
    ROOMMATE = "roommate"
    FLOOR_PROXIMITY = "floor_proximity"
    STAFF_INTRODUCED = "staff_introduced"
    MENTIONED_IN_CHECKIN = "mentioned_in_checkin"
    SHARED_SUBGROUP = "shared_subgroup"


class TimeBlock(BaseModel):
    """A weekly recurring interval. Day 0 is Monday, minutes count from midnight."""

    day: int = Field(ge=0, le=6)
    start_min: int = Field(ge=0, le=MINUTES_PER_DAY)
    end_min: int = Field(ge=0, le=MINUTES_PER_DAY)

    @field_validator("end_min")
    @classmethod
    def validate_end(cls, v: int, info: ValidationInfo) -> int:
        start = info.data.get("start_min")
        if start is not None and v < start:
            raise ValueError("end_min must not be before start_min")
        return v

    def overlaps(self, other: TimeBlock) -> bool:
        if self.day != other.day:
            return False
        return not (self.end_min <= other.start_min or self.start_min >= other.end_min)

    def overlap_minutes(self, other: TimeBlock) -> int:
        if not self.overlaps(other):
            return 0
        return min(self.end_min, other.end_min) - max(self.start_min, other.start_min)


class Member(BaseModel):
    """A resident of the community (a vertex of the community graph).

    The trailing fields are derived by CommunityGraph's recomputation
    sequence and are reset every time edges are synthesized.
    """

    id: int
    name: str = ""
    room: str = ""
    email: str = ""
    phone: str = ""

    subgroups: set[str] = Field(default_factory=set)

    courses: list[str] = Field(default_factory=list)
    class_schedule: list[TimeBlock] = Field(default_factory=list)
    free_blocks: list[TimeBlock] = Field(default_factory=list)

    interests: set[str] = Field(default_factory=set)

    last_rating: int = Field(default=0, ge=0, le=5)  # 0 = no check-in yet
    concerns: set[str] = Field(default_factory=set)
    follow_up_needed: bool = False

    centrality: float = 0.0
    boundary_score: float = 0.0
    is_bridge: bool = False
    component_id: int = -1

    def reset_derived(self) -> None:
        self.centrality = 0.0
        self.boundary_score = 0.0
        self.is_bridge = False
        self.component_id = -1


@dataclass
class Relationship:
    """An undirected edge between two members"""

    id: int
    source: int
    target: int
    type: ConnectionType
    strength: float
    is_bridge_edge: bool = False
    shared_subgroups: frozenset[str] = field(default_factory=frozenset)

    def endpoints(self) -> tuple[int, int]:
        return self.source, self.target

    def reindexed(self, new_id: int, id_map: dict[int, int]) -> Relationship:
        """Copy with a new edge id and endpoints translated through id_map"""
        return Relationship(
            id=new_id,
            source=id_map[self.source],
            target=id_map[self.target],
            type=self.type,
            strength=self.strength,
            is_bridge_edge=self.is_bridge_edge,
            shared_subgroups=self.shared_subgroups,
        )


@dataclass
class Barcode:
    """Durability record of a merging group in the strength filtration"""

    dimension: int
    birth: float
    death: float
    members: list[int] = field(default_factory=list)

    @property
    def persistence(self) -> float:
        return self.death - self.birth
