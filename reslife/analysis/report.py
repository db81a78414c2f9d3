"""Plain-text reports for staff and for the CLI."""

from __future__ import annotations

from .analyzer import CommunityAnalysis
from .decomposition import DecompositionResult

PRIORITY_LIST_LIMIT = 10


def format_decomposition(result: DecompositionResult) -> str:
    lines = [
        "=== COMMUNITY STRUCTURE ===",
        f"Health Score: {result.health:.1f}/100 ({result.health_strategy.value})",
        f"Cohesive: {'YES' if result.is_cohesive else 'NO'}",
        "",
        "Invariants:",
        f"  Components: {result.components}",
        f"  Independent cycles: {result.cycles}",
        "",
        "Risk Assessment:",
        f"  Isolation risk: {len(result.isolation_risk)} members",
        f"  Bridge members: {len(result.bridge_members)}",
        f"  Structural holes: {len(result.holes)}",
        "",
        f"Suggested Introductions: {len(result.introductions)}",
    ]
    for a, b in result.introductions:
        lines.append(f"  {a} <-> {b}")
    lines.append("")
    lines.append(result.diagnosis.rstrip("\n"))
    return "\n".join(lines) + "\n"


def format_analysis(analysis: CommunityAnalysis, priority_limit: int = PRIORITY_LIST_LIMIT) -> str:
    title = f"Community analysis: {analysis.community_id}" if analysis.community_id else "Community analysis"
    lines = [title, "", format_decomposition(analysis.decomposition).rstrip("\n"), ""]

    filtration = analysis.filtration
    lines.append("=== GROUP STABILITY ===")
    lines.append(f"Barcodes: {len(filtration.barcodes)} (threshold {filtration.threshold:.2f})")
    for name, groups in (
        ("Stable", filtration.stable_groups),
        ("Fragile", filtration.fragile_groups),
        ("Unclassified", filtration.unclassified_groups),
    ):
        lines.append(f"  {name} groups: {len(groups)}")
        for group in groups:
            lines.append(f"    {', '.join(str(member_id) for member_id in group)}")
    lines.append("")

    lines.append("=== EVENT TIMES ===")
    if not analysis.event_times:
        lines.append("  No slot has enough members free")
    for slot in analysis.event_times:
        lines.append(
            f"  {slot.label()}: {slot.available_count} free ({slot.coverage:.0%}), "
            f"topology bonus {slot.topology_score:.1f}"
        )
    lines.append("")

    lines.append("=== CHECK-IN PRIORITY ===")
    for member_id, priority in analysis.priorities[:priority_limit]:
        lines.append(f"  {member_id}: {priority:.0f}")
    remaining = len(analysis.priorities) - priority_limit
    if remaining > 0:
        lines.append(f"  ... {remaining} more")

    return "\n".join(lines) + "\n"
