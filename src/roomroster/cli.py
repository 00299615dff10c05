"""Command-line interface for the therapist room roster tool."""

import argparse
import sys
from typing import Optional

from roomroster.errors import RosterError
from roomroster.loader import RosterConfig, default_config, load_config, load_grid, save_grid
from roomroster.output.pdf_generator import PDFGenerator
from roomroster.output.text_report import RosterReport
from roomroster.scheduling.fairness import compute_fairness
from roomroster.scheduling.scheduler import RosterScheduler
from roomroster.utils.logger import configure_logging
from roomroster.validation.validator import RosterValidator, ValidationResult


def print_stats(stats: dict) -> None:
    """Print the generation summary."""
    print(f"  Filled: {stats['filled_cells']}/{stats['total_cells']} cells")
    print(f"  Next cursor: {stats['next_cursor']}")

    print("\nFilled by day:")
    for day, filled in stats["filled_by_day"].items():
        print(f"  {day}: {filled}")

    metrics = stats["fairness_metrics"]
    print("\nFairness Metrics:")
    print(f"  Avg Assignments: {metrics.average:.1f}")
    print(f"  Std Dev: {metrics.std_dev:.2f}")
    print(f"  Range: {metrics.minimum} - {metrics.maximum}")
    print(f"  Fairness Score: {metrics.fairness_score:.1f}/100")

    if stats["unassigned_people"]:
        print(f"\nNo assignments for: {', '.join(stats['unassigned_people'])}")


def print_validation(result: ValidationResult) -> None:
    """Print validation errors and warnings, truncated."""
    if result.is_valid:
        print("\nValidation: PASSED")
    else:
        print(f"\nValidation: FAILED ({len(result.errors)} errors)")
        for error in result.errors[:5]:
            print(f"    - {error}")
        if len(result.errors) > 5:
            print(f"    ... and {len(result.errors) - 5} more errors")

    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings[:3]:
            print(f"    - {warning}")


def run_generate(
    roster_config: RosterConfig,
    cursor: int = 0,
    output_path: Optional[str] = None,
    pdf_path: Optional[str] = None,
) -> int:
    """Generate a roster, print it and optionally save JSON and PDF output."""
    print(
        f"Generating roster for {len(roster_config.people)} people, "
        f"{len(roster_config.shape.rooms)} rooms, {len(roster_config.shape.days)} days..."
    )

    scheduler = RosterScheduler(roster_config)
    result, stats = scheduler.generate_roster_with_stats(start_cursor=cursor)

    report = RosterReport()
    print()
    print("\n".join(report.grid_lines(result.grid)))
    print_stats(stats)

    validator = RosterValidator()
    validation = validator.validate(
        result.grid,
        roster_config.rule_set,
        roster_config.room_constraints,
        roster_config.people,
    )
    print_validation(validation)

    if output_path:
        save_grid(result.grid, output_path)
        print(f"\nGrid saved: {output_path}")

    if pdf_path:
        print(f"\nGenerating PDF: {pdf_path}")
        PDFGenerator().generate(
            result.grid,
            roster_config.people,
            pdf_path,
            result.counters,
            room_constraints=roster_config.room_constraints,
        )
        print("  PDF created successfully!")

    return 0


def run_validate(roster_config: RosterConfig, grid_path: str) -> int:
    """Validate a stored grid against the configuration's rules."""
    grid = load_grid(grid_path, roster_config.shape)

    report = RosterReport()
    counters = compute_fairness(grid, roster_config.people)
    print("\n".join(report.grid_lines(grid)))
    print()
    print("\n".join(report.fairness_lines(grid, counters)))

    validator = RosterValidator()
    result = validator.validate(
        grid,
        roster_config.rule_set,
        roster_config.room_constraints,
        roster_config.people,
    )
    print_validation(result)
    return 0 if result.is_valid else 1


def build_parser() -> argparse.ArgumentParser:
    # Shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: ROOMROSTER_LOG_LEVEL or INFO)",
    )

    parser = argparse.ArgumentParser(
        description="Room Roster - Therapist Room Allocation Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                                  Generate with the built-in setup
  %(prog)s generate --config roster.json         Generate from a configuration file
  %(prog)s generate -c roster.json --cursor 3    Start the rotation at person 3
  %(prog)s generate -c roster.json -o grid.json --pdf roster.pdf
  %(prog)s validate -c roster.json --grid grid.json
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    demo_parser = subparsers.add_parser("demo", parents=[common], help="Generate a roster with the built-in setup")
    demo_parser.add_argument(
        "--pdf",
        type=str,
        help="Output PDF file path",
    )

    generate_parser = subparsers.add_parser("generate", parents=[common], help="Generate a roster from a configuration")
    generate_parser.add_argument(
        "--config", "-c",
        type=str,
        required=True,
        help="Roster configuration JSON file",
    )
    generate_parser.add_argument(
        "--cursor",
        type=int,
        default=0,
        help="Starting round-robin cursor (default: 0)",
    )
    generate_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write the grid blob to this JSON file",
    )
    generate_parser.add_argument(
        "--pdf",
        type=str,
        help="Output PDF file path",
    )

    validate_parser = subparsers.add_parser("validate", parents=[common], help="Validate a stored grid")
    validate_parser.add_argument(
        "--config", "-c",
        type=str,
        required=True,
        help="Roster configuration JSON file",
    )
    validate_parser.add_argument(
        "--grid", "-g",
        type=str,
        required=True,
        help="Grid blob JSON file",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = getattr(args, "log_level", None)
    configure_logging(log_level, force=log_level is not None)

    try:
        if args.command == "demo":
            return run_generate(default_config(), pdf_path=args.pdf)
        elif args.command == "generate":
            return run_generate(
                load_config(args.config),
                cursor=args.cursor,
                output_path=args.output,
                pdf_path=args.pdf,
            )
        elif args.command == "validate":
            return run_validate(load_config(args.config), args.grid)
        else:
            parser.print_help()
            return 1
    except RosterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
