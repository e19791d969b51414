# =============================================================================
# BOM READINESS ENGINE - MAIN ENTRY POINT
# =============================================================================
# Command-line interface for running the readiness and cost engines over
# snapshot files (YAML or JSON).
#
# Usage:
#   python main.py readiness --input samples/readiness_summary.yaml
#   python main.py cost --input samples/bom_details.yaml --base-currency CAD
#   python main.py validate --input samples/readiness_summary.yaml
# =============================================================================

import argparse
import json
import sys
from pathlib import Path

import yaml

from readiness.cost import compute_estimated_bom_cost_summary
from readiness.events import configure_logging
from readiness.parts import load_production_summary, validate_production_summary
from readiness.report import get_production_readiness_report
from readiness.settings import load_settings
from readiness.validation_report import format_checks, validate_readiness_report
from reporting.report_data import flatten_readiness_metadata, parts_frame


def load_snapshot(path: Path):
    """Load a YAML or JSON snapshot file (JSON parses as YAML)."""
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def run_readiness(input_path: Path, settings, as_json: bool = False) -> int:
    """Build and print the readiness report."""
    raw = load_snapshot(input_path)
    report = get_production_readiness_report(raw, epsilon=settings.epsilon)

    if report is None:
        print("Readiness input must be a list of part summaries.")
        return 1

    if as_json:
        print(json.dumps(report.to_dict(), indent=2))
        return 0

    meta = flatten_readiness_metadata(report)
    print("\nPRODUCTION READINESS")
    print("-" * 40)
    print(f"  Status:            {'READY' if meta['readiness_status'] else 'NOT READY'}")
    print(f"  Max producible:    {meta['readiness_max_units']:,}")
    print(f"  Shortages:         {meta['readiness_shortage_count']}")
    print(f"  Bottlenecks:       {meta['readiness_bottleneck_count']}")
    print(f"  Stock health:      {meta['readiness_stock_health_summary']}")
    print(f"  Generated at:      {meta['readiness_generated_at']}")

    frame = parts_frame(report)
    if not frame.empty:
        print("\nPARTS:")
        print(frame.to_string(index=False))
    return 0


def run_cost(input_path: Path, settings, base_currency=None) -> int:
    """Compute and print the estimated cost summary."""
    raw = load_snapshot(input_path) or {}
    summary = compute_estimated_bom_cost_summary(
        raw,
        base_currency=base_currency or settings.base_currency,
        places=settings.cost_places,
    )
    print(json.dumps(summary.to_dict(), indent=2))
    return 0


def run_validation(input_path: Path, settings) -> int:
    """Run advisory input validation and report consistency checks."""
    print("\n" + "=" * 60)
    print("RUNNING VALIDATION")
    print("=" * 60)

    raw = load_snapshot(input_path)
    parts = load_production_summary(raw)
    if parts is None:
        print("\nFAILED - input is not a list of part summaries")
        return 1

    input_errors = validate_production_summary(parts)
    if input_errors:
        print("\nINPUT WARNINGS:")
        for error in input_errors:
            print(f"  - {error}")

    report = get_production_readiness_report(parts, epsilon=settings.epsilon)
    results = validate_readiness_report(report, parts, epsilon=settings.epsilon)
    print()
    print(format_checks(results))
    return 0 if all(r.passed for r in results) else 1


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="BOM Production Readiness Engine")
    parser.add_argument("--config", "-c", help="Engine settings YAML file")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    ready_parser = subparsers.add_parser("readiness", help="Build readiness report")
    ready_parser.add_argument("--input", "-i", required=True, help="Production summary file")
    ready_parser.add_argument("--json", action="store_true", help="Print report as JSON")

    cost_parser = subparsers.add_parser("cost", help="Estimate BOM cost")
    cost_parser.add_argument("--input", "-i", required=True, help="BOM details file")
    cost_parser.add_argument("--base-currency", "-b", help="Override base currency")

    val_parser = subparsers.add_parser("validate", help="Run consistency checks")
    val_parser.add_argument("--input", "-i", required=True, help="Production summary file")

    args = parser.parse_args(argv)

    try:
        settings = load_settings(Path(args.config) if args.config else None)
    except ValueError as exc:
        print(str(exc))
        return 2
    configure_logging(settings.log_level)

    if args.command == "readiness":
        return run_readiness(Path(args.input), settings, as_json=args.json)
    elif args.command == "cost":
        return run_cost(Path(args.input), settings, base_currency=args.base_currency)
    elif args.command == "validate":
        return run_validation(Path(args.input), settings)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
