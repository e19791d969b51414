# =============================================================================
# BOM READINESS ENGINE - STOCK HEALTH MODULE
# =============================================================================
# Splits batch-level stock into usable and inactive pools.
#
# KEY CONSTRAINT: usable + inactive == SUM(batch availableQuantity)
# =============================================================================

from dataclasses import dataclass
from typing import Dict

from .normalize import to_number


@dataclass(frozen=True)
class StockHealth:
    """Usable vs inactive stock across all batches of a summary."""
    usable: float = 0.0
    inactive: float = 0.0

    @property
    def total(self) -> float:
        return self.usable + self.inactive

    def to_dict(self) -> Dict[str, float]:
        return {"usable": self.usable, "inactive": self.inactive}


def calculate_inactive_stock_impact(summary) -> StockHealth:
    """
    Aggregate batch quantities into usable and inactive totals.

    Parts without batches contribute nothing; non-list input yields zeros.
    """
    usable = 0.0
    inactive = 0.0

    if not isinstance(summary, list):
        return StockHealth()

    for part in summary:
        batches = getattr(part, "material_batches", None)
        if not isinstance(batches, list):
            continue
        for batch in batches:
            qty = to_number(batch.available_quantity)
            if batch.is_inactive_batch:
                inactive += qty
            else:
                usable += qty

    return StockHealth(usable=usable, inactive=inactive)


def describe_stock_health(health: StockHealth) -> str:
    """Short display text, e.g. '1,200 usable / 300 inactive (20.0% inactive)'."""
    total = health.total
    inactive_pct = (health.inactive / total) if total else 0.0
    return (
        f"{health.usable:,.0f} usable / {health.inactive:,.0f} inactive "
        f"({inactive_pct:.1%} inactive)"
    )


# =============================================================================
# END OF STOCK HEALTH MODULE
# =============================================================================
