"""
Pydantic schemas for community analysis endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from reslife.models import TimeBlock


class MemberInput(BaseModel):
    """A resident as submitted by the caller (derived scores are computed server-side)"""

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
    last_rating: int = Field(default=0, ge=0, le=5)
    concerns: set[str] = Field(default_factory=set)
    follow_up_needed: bool = False


class CommunityRequest(BaseModel):
    community_id: str = ""
    members: list[MemberInput]
    min_strength: float | None = Field(default=None, ge=0.0, description="Overrides graph.min_strength")


class DecompositionRequest(CommunityRequest):
    subgroup_a: str
    subgroup_b: str


class MemberNode(BaseModel):
    """Member with derived scores"""

    id: int
    name: str
    room: str
    subgroups: list[str]
    centrality: float
    boundary_score: float
    is_bridge: bool
    component_id: int


class RelationshipEdge(BaseModel):
    id: int
    source: int
    target: int
    type: str  # primary connection type
    strength: float
    is_bridge_edge: bool
    shared_subgroups: list[str] = []


class DecompositionResponse(BaseModel):
    subgroup_a: str = ""
    subgroup_b: str = ""
    components_a: int = 0
    cycles_a: int = 0
    components_b: int = 0
    cycles_b: int = 0
    overlap_size: int = 0
    components_overlap: int = 0
    cycles_overlap: int = 0
    member_count: int
    relationship_count: int
    components: int
    cycles: int
    kernel_i0: int = 0  # approximate
    cokernel_i1: int = 0  # approximate
    is_cohesive: bool
    health: float
    health_strategy: str
    isolation_risk: list[int] = []
    bridge_members: list[int] = []
    holes: list[list[int]] = []
    introductions: list[tuple[int, int]] = []
    diagnosis: str = ""
    members: list[MemberNode] = []
    relationships: list[RelationshipEdge] = []


class BarcodeOut(BaseModel):
    dimension: int
    birth: float
    death: float
    persistence: float
    members: list[int]


class FiltrationResponse(BaseModel):
    max_strength: float
    threshold: float
    barcodes: list[BarcodeOut] = []
    stable_groups: list[list[int]] = []
    fragile_groups: list[list[int]] = []
    unclassified_groups: list[list[int]] = []


class TimeSlotOut(BaseModel):
    day: int
    start_min: int
    end_min: int
    label: str
    available_members: list[int]
    coverage: float
    topology_score: float
    combined_score: float


class PriorityEntry(BaseModel):
    member_id: int
    priority: float


class AnalysisResponse(BaseModel):
    """Complete community analysis"""

    community_id: str
    health_score: float
    isolation_count: int
    bridge_count: int
    hole_count: int
    decomposition: DecompositionResponse
    filtration: FiltrationResponse
    event_times: list[TimeSlotOut] = []
    priorities: list[PriorityEntry] = []
    report: str = ""
