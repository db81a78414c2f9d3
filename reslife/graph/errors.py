"""Community graph error classes."""

from __future__ import annotations


class CommunityGraphError(Exception):
    """Base exception for community graph errors."""

    pass


class UnknownMemberError(CommunityGraphError, KeyError):
    """Raised when a member id is not present in the owning graph."""

    def __init__(self, member_id: int):
        self.member_id = member_id
        super().__init__(f"Unknown member id: {member_id}")

    def __str__(self) -> str:
        return f"Unknown member id: {self.member_id}"


class DuplicateMemberError(CommunityGraphError):
    """Raised when a member id is added to a graph twice."""

    pass
