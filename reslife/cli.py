"""
Command-line analysis of a residence-hall roster.

Examples:
    reslife-analyze roster.json
    reslife-analyze roster.json --subgroups floor-2 chess-club
    LOG_LEVEL=DEBUG reslife-analyze roster.json --min-strength 1.0
"""

from __future__ import annotations

import argparse
import sys

from pydantic import ValidationError as MemberValidationError

from reslife.analysis import CommunityAnalyzer, format_analysis, format_decomposition
from reslife.config import ConfigError, ConfigLoader
from reslife.graph import CommunityGraphError
from reslife.logging_config import configure_logging, get_logger
from reslife.roster import RosterError, load_roster

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze the social structure of a residence-hall community")
    parser.add_argument("roster", help="JSON roster: a list of members or {'community_id', 'members'}")
    parser.add_argument(
        "--subgroups",
        nargs=2,
        metavar=("A", "B"),
        help="Decompose over two subgroup labels instead of running the full analysis",
    )
    parser.add_argument("--min-strength", type=float, help="Override graph.min_strength")
    parser.add_argument("--config", help="JSON file of analysis config overrides")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    # Report goes to stdout, logs to stderr
    configure_logging(source="cli", debug=args.debug, stream=sys.stderr)

    overrides = {}
    if args.min_strength is not None:
        overrides["graph.min_strength"] = args.min_strength

    try:
        config = ConfigLoader(overrides=overrides, config_file=args.config)
        with ConfigLoader.use(config):
            graph = load_roster(args.roster)
            analyzer = CommunityAnalyzer(config)

            if args.subgroups:
                subgroup_a, subgroup_b = args.subgroups
                for label in args.subgroups:
                    if label not in graph.subgroup_members:
                        logger.warning(f"Subgroup '{label}' has no members in this roster")
                report = format_decomposition(analyzer.decompose(graph, subgroup_a, subgroup_b))
            else:
                report = format_analysis(analyzer.analyze(graph))
    except (ConfigError, RosterError, CommunityGraphError, MemberValidationError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(report, end="")
    return 0
