# =============================================================================
# BOM READINESS ENGINE - CONSISTENCY CHECKS
# =============================================================================
# Re-derives key figures from the source data and checks them against a
# built readiness report or cost summary.
# =============================================================================

from dataclasses import dataclass
from typing import List

from .bottleneck import MIN_REQUIRED_QTY, calculate_max_manufacturable_units
from .cost import COST_DECIMAL_PLACES, CostSummary, calculate_line_cost, load_bom_details
from .normalize import round_to, to_number
from .parts import PartSummary
from .report import ProductionReadinessReport


@dataclass
class CheckResult:
    """Result of a single consistency check."""
    name: str
    passed: bool
    message: str = ""


def _check(name: str, passed: bool, message: str) -> CheckResult:
    return CheckResult(name, passed, "" if passed else message)


def validate_readiness_report(
    report: ProductionReadinessReport,
    source: List[PartSummary],
    epsilon: float = MIN_REQUIRED_QTY,
) -> List[CheckResult]:
    """Check a readiness report against the summary it was built from."""
    results = []
    tolerance = 1e-6

    expected_max = calculate_max_manufacturable_units(source, epsilon)
    results.append(_check(
        "global_minimum", report.max_producible_units == expected_max,
        f"maxProducibleUnits {report.max_producible_units} != {expected_max}"
    ))

    attached_min = min((p.max_producible_units for p in report.summary), default=None)
    expected_ids = [
        i for i, part in enumerate(report.summary)
        if part.max_producible_units == attached_min
    ]
    marked_ids = [i for i, part in enumerate(report.summary) if part.is_bottleneck]
    results.append(_check(
        "bottleneck_ties", expected_ids == marked_ids
        and len(report.bottleneck_parts) == len(marked_ids),
        f"Bottleneck marking {marked_ids} does not match parts at minimum {expected_ids}"
    ))

    batch_total = sum(
        to_number(batch.available_quantity)
        for part in source
        for batch in part.material_batches
    )
    results.append(_check(
        "stock_conservation",
        abs(report.stock_health.total - batch_total) <= tolerance,
        f"usable + inactive {report.stock_health.total} != batch total {batch_total}"
    ))

    expected_shortages = sum(
        1 for part in source
        if part.is_shortage or part.total_available_quantity < part.required_qty_per_unit
    )
    results.append(_check(
        "shortage_count", len(report.shortage_parts) == expected_shortages,
        f"{len(report.shortage_parts)} shortage parts, expected {expected_shortages}"
    ))

    results.append(_check(
        "readiness_flag",
        report.is_ready_for_production == (len(report.shortage_parts) == 0),
        "isReadyForProduction disagrees with shortage parts"
    ))

    return results


def validate_cost_summary(
    summary: CostSummary,
    structured_result,
    places: int = COST_DECIMAL_PLACES,
) -> List[CheckResult]:
    """Check the cost total was rounded once from the exact line sum."""
    items = load_bom_details(structured_result)
    exact = sum(calculate_line_cost(item, summary.currency) for item in items)
    expected = round_to(exact, places)

    return [
        _check(
            "single_rounding", summary.total_estimated_cost == expected,
            f"totalEstimatedCost {summary.total_estimated_cost} != {expected}"
        ),
        _check(
            "item_count", summary.item_count == len(items),
            f"itemCount {summary.item_count} != {len(items)}"
        ),
    ]


def format_checks(results: List[CheckResult]) -> str:
    """Render check results as plain text."""
    lines = []
    passed = sum(1 for r in results if r.passed)
    for result in results:
        status = "PASS" if result.passed else "FAIL"
        line = f"  [{status}] {result.name}"
        if result.message:
            line += f": {result.message}"
        lines.append(line)
    lines.append("")
    lines.append(f"{passed}/{len(results)} checks passed")
    return "\n".join(lines)


# =============================================================================
# END OF CONSISTENCY CHECKS
# =============================================================================
