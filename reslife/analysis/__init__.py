"""
Community analysis built on the community graph
"""

from .analyzer import CommunityAnalysis, CommunityAnalyzer
from .decomposition import DecompositionEngine, DecompositionResult
from .filtration import FiltrationEngine, FiltrationResult
from .health import HealthStrategy
from .priority import compute_priority_order
from .report import format_analysis, format_decomposition
from .scheduling import SchedulingOptimizer, TimeSlotScore

__all__ = [
    "CommunityAnalysis",
    "CommunityAnalyzer",
    "DecompositionEngine",
    "DecompositionResult",
    "FiltrationEngine",
    "FiltrationResult",
    "HealthStrategy",
    "SchedulingOptimizer",
    "TimeSlotScore",
    "compute_priority_order",
    "format_analysis",
    "format_decomposition",
]
