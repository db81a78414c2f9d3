"""
Graph components for community topology analysis
"""

from .community_graph import CommunityGraph
from .errors import CommunityGraphError, DuplicateMemberError, UnknownMemberError
from .overlap_graph import OverlapGraph
from .sparse_matrix import SparseMatrix, boundary_operator, exact_betti_numbers
from .union_find import UnionFind

__all__ = [
    "CommunityGraph",
    "CommunityGraphError",
    "DuplicateMemberError",
    "OverlapGraph",
    "SparseMatrix",
    "UnionFind",
    "UnknownMemberError",
    "boundary_operator",
    "exact_betti_numbers",
]
