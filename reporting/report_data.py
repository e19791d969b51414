"""Transform readiness and cost outputs into tabular export structures."""

from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd

from readiness.cost import calculate_line_cost, load_bom_details
from readiness.currency import DEFAULT_BASE_CURRENCY
from readiness.report import ProductionReadinessReport
from readiness.stock_health import describe_stock_health

PART_COLUMNS = [
    "part_id",
    "part_name",
    "required_qty_per_unit",
    "total_available_quantity",
    "max_producible_units",
    "is_bottleneck",
    "is_shortage",
    "batch_count",
    "usable_qty",
    "inactive_qty",
]

BATCH_COLUMNS = ["part_id", "part_name", "batch_id", "available_quantity", "is_inactive_batch"]

COST_COLUMNS = [
    "part_id",
    "part_name",
    "part_qty_per_product",
    "estimated_unit_cost",
    "currency",
    "exchange_rate",
    "line_cost_base",
]


def parts_frame(report: ProductionReadinessReport) -> pd.DataFrame:
    """One row per part with its limit, flags and stock split."""
    shortage_ids = {id(p) for p in report.shortage_parts}
    rows = []
    for part in report.summary:
        usable = sum(b.available_quantity for b in part.material_batches if not b.is_inactive_batch)
        inactive = sum(b.available_quantity for b in part.material_batches if b.is_inactive_batch)
        rows.append(
            {
                "part_id": part.part_id,
                "part_name": part.part_name,
                "required_qty_per_unit": part.required_qty_per_unit,
                "total_available_quantity": part.total_available_quantity,
                "max_producible_units": part.max_producible_units,
                "is_bottleneck": part.is_bottleneck,
                "is_shortage": id(part) in shortage_ids,
                "batch_count": len(part.material_batches),
                "usable_qty": float(usable),
                "inactive_qty": float(inactive),
            }
        )
    if not rows:
        return pd.DataFrame(columns=PART_COLUMNS)
    return pd.DataFrame(rows, columns=PART_COLUMNS)


def batches_frame(report: ProductionReadinessReport) -> pd.DataFrame:
    rows = [
        {
            "part_id": part.part_id,
            "part_name": part.part_name,
            "batch_id": batch.batch_id,
            "available_quantity": batch.available_quantity,
            "is_inactive_batch": batch.is_inactive_batch,
        }
        for part in report.summary
        for batch in part.material_batches
    ]
    if not rows:
        return pd.DataFrame(columns=BATCH_COLUMNS)
    return pd.DataFrame(rows, columns=BATCH_COLUMNS)


def cost_lines_frame(structured_result, base_currency: str = DEFAULT_BASE_CURRENCY) -> pd.DataFrame:
    """Line-level cost view; line_cost_base is unrounded."""
    rows = []
    for item in load_bom_details(structured_result):
        rows.append(
            {
                "part_id": item.part_id,
                "part_name": item.part_name,
                "part_qty_per_product": item.part_qty_per_product,
                "estimated_unit_cost": item.estimated_unit_cost,
                "currency": item.currency,
                "exchange_rate": item.exchange_rate,
                "line_cost_base": calculate_line_cost(item, base_currency),
            }
        )
    if not rows:
        return pd.DataFrame(columns=COST_COLUMNS)
    return pd.DataFrame(rows, columns=COST_COLUMNS)


def _bottleneck_names(report: ProductionReadinessReport) -> Optional[str]:
    names: List[str] = [p.part_name or p.part_id for p in report.bottleneck_parts]
    names = [name for name in names if name]
    return "\n".join(names) if names else None


def flatten_readiness_metadata(report: Optional[ProductionReadinessReport]) -> Optional[Dict]:
    """Flat header fields for summary panels; None when there is no report."""
    if report is None:
        return None
    return {
        "readiness_status": report.is_ready_for_production,
        "readiness_max_units": report.max_producible_units,
        "readiness_shortage_count": len(report.shortage_parts),
        "readiness_stock_health_summary": describe_stock_health(report.stock_health),
        "readiness_bottleneck_part_names": _bottleneck_names(report),
        "readiness_bottleneck_count": len(report.bottleneck_parts),
        "readiness_generated_at": report.generated_at,
    }
