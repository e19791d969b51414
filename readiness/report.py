# =============================================================================
# BOM READINESS ENGINE - READINESS REPORT
# =============================================================================
# Orchestrates shortage, bottleneck and stock health analysis into one
# production readiness report.
#
# EXECUTION ORDER:
# 1. Reject non-list input (returns None)
# 2. Attach per-part max producible units
# 3. Mark bottleneck parts (needs step 2)
# 4. Global max producible units = MIN of attached limits
# 5. Shortage parts and stock health (independent of each other)
# 6. Assemble report, ready = no shortage parts
# 7. Stamp generated_at
# 8. Emit observability event (best effort)
# =============================================================================

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from .bottleneck import (
    MIN_REQUIRED_QTY,
    attach_max_producible_units,
    mark_bottleneck_parts,
)
from .events import EventSink, emit_safely, log_event
from .parts import PartSummary, load_production_summary, part_to_dict
from .shortage import identify_shortage_parts
from .stock_health import StockHealth, calculate_inactive_stock_impact

READINESS_EVENT = "bom.production_readiness.generated"


@dataclass(frozen=True)
class ProductionReadinessReport:
    """Point-in-time readiness of a BOM against available stock."""
    summary: List[PartSummary] = field(default_factory=list)
    max_producible_units: int = 0
    shortage_parts: List[PartSummary] = field(default_factory=list)
    bottleneck_parts: List[PartSummary] = field(default_factory=list)
    stock_health: StockHealth = field(default_factory=StockHealth)
    is_ready_for_production: bool = True
    generated_at: str = ""

    def to_dict(self) -> Dict:
        return {
            "summary": [part_to_dict(p) for p in self.summary],
            "maxProducibleUnits": self.max_producible_units,
            "shortageParts": [part_to_dict(p) for p in self.shortage_parts],
            "bottleneckParts": [part_to_dict(p) for p in self.bottleneck_parts],
            "stockHealth": self.stock_health.to_dict(),
            "isReadyForProduction": self.is_ready_for_production,
            "generatedAt": self.generated_at,
        }


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_production_readiness_report(
    input_summary,
    log_event_fn: Optional[EventSink] = log_event,
    clock: Optional[Callable[[], datetime]] = None,
    epsilon: float = MIN_REQUIRED_QTY,
) -> Optional[ProductionReadinessReport]:
    """
    Build the production readiness report for a BOM.

    Args:
        input_summary: List of PartSummary or raw part mappings
        log_event_fn: Observability sink (event_name, context); None disables
        clock: Returns the generation time, defaults to UTC now
        epsilon: Floor applied to per-unit requirements

    Returns:
        ProductionReadinessReport, or None when input is not a list
    """
    # 1. Structural check
    parts = load_production_summary(input_summary)
    if parts is None:
        return None

    # 2-3. Per-part limits, then bottleneck marking on the enriched parts
    enriched = mark_bottleneck_parts(attach_max_producible_units(parts, epsilon))

    # 4. Global limit
    max_units = min((p.max_producible_units for p in enriched), default=0)
    if not math.isfinite(max_units):
        max_units = 0

    # 5. Independent aggregates
    shortage_parts = identify_shortage_parts(enriched)
    stock_health = calculate_inactive_stock_impact(enriched)

    # 6-7. Assemble
    generated_at = (clock or _utc_now)()
    report = ProductionReadinessReport(
        summary=enriched,
        max_producible_units=max_units,
        shortage_parts=shortage_parts,
        bottleneck_parts=[p for p in enriched if p.is_bottleneck],
        stock_health=stock_health,
        is_ready_for_production=len(shortage_parts) == 0,
        generated_at=generated_at.isoformat(),
    )

    # 8. Observability
    emit_safely(log_event_fn, READINESS_EVENT, {
        "maxProducibleUnits": report.max_producible_units,
        "shortageCount": len(report.shortage_parts),
        "bottleneckCount": len(report.bottleneck_parts),
    })

    return report


# =============================================================================
# END OF READINESS REPORT
# =============================================================================
