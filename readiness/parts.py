# =============================================================================
# BOM READINESS ENGINE - PARTS MODULE
# =============================================================================
# Part-level production summary records and their loading.
# A production summary has one PartSummary per BOM component, each optionally
# backed by the physical batches (lots) that make up its stock.
#
# KEY CONSTRAINT: numeric fallbacks happen here, at load time, so the
# algorithms downstream only ever see finite floats.
# =============================================================================

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from .normalize import to_number, to_bool


@dataclass
class MaterialBatch:
    """Single physical lot backing a part."""
    available_quantity: float = 0.0
    is_inactive_batch: bool = False
    batch_id: str = ""


@dataclass
class PartSummary:
    """Availability of one BOM component against its per-unit requirement."""
    part_id: str = ""
    part_name: str = ""
    required_qty_per_unit: float = 0.0  # units of part per finished unit
    total_available_quantity: float = 0.0
    material_batches: List[MaterialBatch] = field(default_factory=list)
    is_shortage: bool = False  # may be pre-set upstream (e.g. quality hold)

    # Derived by the engine
    max_producible_units: Optional[float] = None  # whole units, inf if unbounded
    is_bottleneck: bool = False


def _pick(data: Mapping, *keys, default=None):
    """Return the first key present in data (camelCase or snake_case)."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def load_material_batch(data: Mapping) -> MaterialBatch:
    """Build a MaterialBatch from an upstream batch record."""
    return MaterialBatch(
        available_quantity=to_number(
            _pick(data, "availableQuantity", "available_quantity")
        ),
        is_inactive_batch=to_bool(
            _pick(data, "isInactiveBatch", "is_inactive_batch")
        ),
        batch_id=str(_pick(data, "batchId", "batch_id", "id", default="") or ""),
    )


def load_part_summary(data: Mapping) -> PartSummary:
    """
    Build a PartSummary from an upstream part record.

    Args:
        data: Part record with camelCase (API) or snake_case keys

    Returns:
        PartSummary with all numeric fields defaulted to 0 when unusable

    Expected structure:
        partId: str
        partName: str
        requiredQtyPerUnit: number
        totalAvailableQuantity: number
        isShortage: bool (optional)
        materialBatches:
          - availableQuantity: number
            isInactiveBatch: bool
    """
    raw_batches = _pick(data, "materialBatches", "material_batches", default=[])
    batches = []
    if isinstance(raw_batches, list):
        for batch_data in raw_batches:
            if isinstance(batch_data, Mapping):
                batches.append(load_material_batch(batch_data))

    raw_max = _pick(data, "maxProducibleUnits", "max_producible_units")
    max_units = None
    if raw_max is not None:
        max_units = int(to_number(raw_max))

    return PartSummary(
        part_id=str(_pick(data, "partId", "part_id", default="") or ""),
        part_name=str(_pick(data, "partName", "part_name", default="") or ""),
        required_qty_per_unit=to_number(
            _pick(data, "requiredQtyPerUnit", "required_qty_per_unit")
        ),
        total_available_quantity=to_number(
            _pick(data, "totalAvailableQuantity", "total_available_quantity")
        ),
        material_batches=batches,
        is_shortage=to_bool(_pick(data, "isShortage", "is_shortage")),
        max_producible_units=max_units,
        is_bottleneck=to_bool(_pick(data, "isBottleneck", "is_bottleneck")),
    )


def load_production_summary(raw) -> Optional[List[PartSummary]]:
    """
    Load a production summary array.

    Returns None when raw is not a list. Rows that are already PartSummary
    instances pass through; rows that are neither records nor mappings are
    skipped.
    """
    if not isinstance(raw, list):
        return None

    parts: List[PartSummary] = []
    for row in raw:
        if isinstance(row, PartSummary):
            parts.append(row)
        elif isinstance(row, Mapping):
            parts.append(load_part_summary(row))
    return parts


def part_to_dict(part: PartSummary) -> Dict:
    """Export a PartSummary in the camelCase output shape."""
    return {
        "partId": part.part_id,
        "partName": part.part_name,
        "requiredQtyPerUnit": part.required_qty_per_unit,
        "totalAvailableQuantity": part.total_available_quantity,
        "isShortage": part.is_shortage,
        "maxProducibleUnits": part.max_producible_units,
        "isBottleneck": part.is_bottleneck,
        "materialBatches": [
            {
                "batchId": batch.batch_id,
                "availableQuantity": batch.available_quantity,
                "isInactiveBatch": batch.is_inactive_batch,
            }
            for batch in part.material_batches
        ],
    }


def validate_production_summary(summary: List[PartSummary]) -> List[str]:
    """
    Validate a loaded production summary.

    Args:
        summary: Loaded part summaries

    Returns:
        List of validation errors (empty if valid)

    Validations:
        - requiredQtyPerUnit >= 0
        - totalAvailableQuantity >= 0
        - batch availableQuantity >= 0
        - part IDs are unique (when present)
    """
    errors = []
    seen = set()

    for part in summary:
        label = part.part_id or part.part_name or "<unnamed>"

        if part.required_qty_per_unit < 0:
            errors.append(
                f"Negative requiredQtyPerUnit for part {label}: "
                f"{part.required_qty_per_unit}"
            )
        if part.total_available_quantity < 0:
            errors.append(
                f"Negative totalAvailableQuantity for part {label}: "
                f"{part.total_available_quantity}"
            )
        for batch in part.material_batches:
            if batch.available_quantity < 0:
                errors.append(
                    f"Negative batch availableQuantity for part {label}: "
                    f"{batch.available_quantity}"
                )

        if part.part_id:
            if part.part_id in seen:
                errors.append(f"Duplicate part ID in summary: {part.part_id}")
            seen.add(part.part_id)

    return errors


# =============================================================================
# END OF PARTS MODULE
# =============================================================================
