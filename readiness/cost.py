# =============================================================================
# BOM READINESS ENGINE - COST MODULE
# =============================================================================
# Estimated production cost of one finished unit, normalized to a base
# currency, plus an estimated-vs-actual material cost comparison.
#
# FORMULA:
# Line_cost[i]  = Qty_per_product[i] * Unit_cost[i] * FX[i]   (FX = 1 for base)
# Total_cost    = ROUND(SUM(Line_cost), 4)
#
# KEY CONSTRAINT: round once, at the end. Never per line.
# =============================================================================

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from .currency import (
    DEFAULT_BASE_CURRENCY,
    convert_to_base_currency,
    normalize_currency_code,
)
from .normalize import to_number, round_to

COST_DECIMAL_PLACES = 4
EMPTY_COST_DESCRIPTION = "No BOM details available for cost estimation."


@dataclass
class BomLineItem:
    """One BOM detail line with its estimated cost inputs."""
    part_qty_per_product: float = 0.0
    estimated_unit_cost: float = 0.0
    currency: str = ""
    exchange_rate: float = 1.0
    part_id: str = ""
    part_name: str = ""


@dataclass
class CostSummary:
    """Aggregated estimated BOM cost."""
    type: str = "ESTIMATED"
    description: str = EMPTY_COST_DESCRIPTION
    total_estimated_cost: float = 0.0
    currency: str = DEFAULT_BASE_CURRENCY
    item_count: int = 0

    def to_dict(self) -> Dict:
        return {
            "type": self.type,
            "description": self.description,
            "totalEstimatedCost": self.total_estimated_cost,
            "currency": self.currency,
            "itemCount": self.item_count,
        }


def _pick(data: Mapping, *keys, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def load_bom_line_item(data: Mapping) -> BomLineItem:
    """
    Build a BomLineItem from a detail record.

    Accepts the cost shape (partQtyPerProduct) as well as the BOM details
    shape (quantityPerUnit with a nested part).
    """
    part = data.get("part") if isinstance(data.get("part"), Mapping) else {}
    return BomLineItem(
        part_qty_per_product=to_number(
            _pick(data, "partQtyPerProduct", "part_qty_per_product",
                  "quantityPerUnit", "quantity_per_unit")
        ),
        estimated_unit_cost=to_number(
            _pick(data, "estimatedUnitCost", "estimated_unit_cost")
        ),
        currency=str(_pick(data, "currency", default="")),
        exchange_rate=to_number(
            _pick(data, "exchangeRate", "exchange_rate"), fallback=1.0
        ),
        part_id=str(_pick(part, "id", default=_pick(data, "partId", "part_id", default=""))),
        part_name=str(_pick(part, "name", default=_pick(data, "partName", "part_name", default=""))),
    )


def load_bom_details(structured_result) -> List[BomLineItem]:
    """Extract line items from {'details': [...]}; anything else is empty."""
    if isinstance(structured_result, Mapping):
        details = structured_result.get("details")
    else:
        details = getattr(structured_result, "details", None)

    if not isinstance(details, list):
        return []

    items = []
    for row in details:
        if isinstance(row, BomLineItem):
            items.append(row)
        elif isinstance(row, Mapping):
            items.append(load_bom_line_item(row))
    return items


def calculate_line_cost(item: BomLineItem, base_currency: str = DEFAULT_BASE_CURRENCY) -> float:
    """Unrounded base-currency cost of one line."""
    amount = to_number(item.part_qty_per_product) * to_number(item.estimated_unit_cost)
    return convert_to_base_currency(
        amount, item.currency, item.exchange_rate, base_currency
    )


def compute_estimated_bom_cost_summary(
    structured_result,
    base_currency: str = DEFAULT_BASE_CURRENCY,
    places: int = COST_DECIMAL_PLACES
) -> CostSummary:
    """
    Estimated cost of producing one finished unit.

    Args:
        structured_result: {'details': [line, ...]} or an object with .details
        base_currency: Currency every line is normalized to
        places: Decimal places of the single final rounding

    Returns:
        CostSummary; a zero summary when there are no details
    """
    base = normalize_currency_code(base_currency)
    items = load_bom_details(structured_result)

    if not items:
        return CostSummary(currency=base)

    total = 0.0
    for item in items:
        total += calculate_line_cost(item, base)

    return CostSummary(
        type="ESTIMATED",
        description=(
            f"Estimated BOM cost from {len(items)} line item(s), "
            f"normalized to {base}."
        ),
        total_estimated_cost=round_to(total, places),
        currency=base,
        item_count=len(items),
    )


# =============================================================================
# MATERIAL COST COMPARISON (ESTIMATED VS ACTUAL)
# =============================================================================

@dataclass
class UnitCostQuote:
    """A unit cost in some currency (batch receipt or supplier contract)."""
    unit_cost: float
    currency: Optional[str] = None
    exchange_rate: Optional[float] = None


@dataclass
class MaterialCostLine:
    """Packaging material consumed by a BOM item, with its cost sources."""
    quantity_per_bom: float = 1.0
    estimated_unit_cost: float = 0.0
    currency: Optional[str] = None
    exchange_rate: float = 1.0
    batch_cost: Optional[UnitCostQuote] = None
    supplier_cost: Optional[UnitCostQuote] = None
    material_name: str = ""


@dataclass
class MaterialCostSummary:
    """BOM-level estimated vs actual material cost."""
    bom_id: str
    base_currency: str = DEFAULT_BASE_CURRENCY
    total_estimated_cost: float = 0.0
    total_actual_cost: float = 0.0
    variance: float = 0.0
    variance_percentage: float = 0.0
    line_count: int = 0

    def to_dict(self) -> Dict:
        return {
            "bomId": self.bom_id,
            "baseCurrency": self.base_currency,
            "totalEstimatedCost": self.total_estimated_cost,
            "totalActualCost": self.total_actual_cost,
            "variance": self.variance,
            "variancePercentage": self.variance_percentage,
            "lineCount": self.line_count,
        }


def _load_quote(data) -> Optional[UnitCostQuote]:
    if not isinstance(data, Mapping):
        return None
    unit_cost = _pick(data, "unitCost", "unit_cost")
    if unit_cost is None:
        return None
    rate = _pick(data, "exchangeRate", "exchange_rate")
    return UnitCostQuote(
        unit_cost=to_number(unit_cost),
        currency=_pick(data, "currency"),
        exchange_rate=None if rate is None else to_number(rate, fallback=1.0),
    )


def load_material_cost_lines(bom_items) -> List[MaterialCostLine]:
    """
    Flatten BOM items into material cost lines.

    Expected structure per item:
        bomItemMaterial: {quantity: number}        (defaults to 1)
        packagingMaterials:
          - estimatedUnitCost, currency, exchangeRate, name
            supplier:
              contract: {unitCost, currency, exchangeRate}
              batches: [{unitCost, currency, exchangeRate}, ...]
    """
    lines: List[MaterialCostLine] = []
    if not isinstance(bom_items, list):
        return lines

    for item in bom_items:
        if not isinstance(item, Mapping):
            continue
        item_material = item.get("bomItemMaterial")
        if not isinstance(item_material, Mapping):
            item_material = {}
        quantity = to_number(_pick(item_material, "quantity"), fallback=1.0)

        for mat in item.get("packagingMaterials") or []:
            if not isinstance(mat, Mapping):
                continue
            supplier = mat.get("supplier")
            if not isinstance(supplier, Mapping):
                supplier = {}
            batches = supplier.get("batches")
            if not isinstance(batches, list):
                batches = []
            lines.append(MaterialCostLine(
                quantity_per_bom=quantity,
                estimated_unit_cost=to_number(_pick(mat, "estimatedUnitCost", "estimated_unit_cost")),
                currency=_pick(mat, "currency"),
                exchange_rate=to_number(_pick(mat, "exchangeRate", "exchange_rate"), fallback=1.0),
                batch_cost=_load_quote(batches[0]) if batches else None,
                supplier_cost=_load_quote(supplier.get("contract")),
                material_name=str(_pick(mat, "name", default="")),
            ))
    return lines


def resolve_actual_unit_cost(line: MaterialCostLine):
    """
    Pick the actual unit cost: batch, then supplier contract, then estimate.

    Returns:
        Tuple (unit_cost, currency, exchange_rate)
    """
    for quote in (line.batch_cost, line.supplier_cost):
        if quote is not None:
            rate = quote.exchange_rate if quote.exchange_rate is not None else 1.0
            return quote.unit_cost, quote.currency or line.currency, rate
    return line.estimated_unit_cost, line.currency, line.exchange_rate


def calculate_bom_material_costs(
    bom_id: str,
    lines: List[MaterialCostLine],
    base_currency: str = DEFAULT_BASE_CURRENCY,
    places: int = COST_DECIMAL_PLACES
) -> MaterialCostSummary:
    """
    Compare estimated and actual material cost for a BOM.

    Both totals accumulate unrounded; totals, variance and variance
    percentage are each rounded once from the unrounded sums.
    """
    base = normalize_currency_code(base_currency)
    total_estimated = 0.0
    total_actual = 0.0

    for line in lines:
        qty = to_number(line.quantity_per_bom, fallback=1.0)
        total_estimated += convert_to_base_currency(
            line.estimated_unit_cost * qty, line.currency, line.exchange_rate, base
        )
        actual_cost, actual_currency, actual_rate = resolve_actual_unit_cost(line)
        total_actual += convert_to_base_currency(
            actual_cost * qty, actual_currency, actual_rate, base
        )

    variance = total_actual - total_estimated
    variance_pct = (variance / total_estimated * 100) if total_estimated else 0.0

    return MaterialCostSummary(
        bom_id=bom_id,
        base_currency=base,
        total_estimated_cost=round_to(total_estimated, places),
        total_actual_cost=round_to(total_actual, places),
        variance=round_to(variance, places),
        variance_percentage=round_to(variance_pct, places),
        line_count=len(lines),
    )


# =============================================================================
# END OF COST MODULE
# =============================================================================
