# =============================================================================
# BOM READINESS ENGINE - BOTTLENECK MODULE
# =============================================================================
# Per-part producible unit limits and bottleneck marking.
#
# FORMULA:
# Max_units[p] = floor(Available[p] / max(Required[p], EPSILON))
# Max_units    = MIN over p of Max_units[p]
# Bottleneck[p] = (Max_units[p] == Max_units), every tie is marked
# =============================================================================

import math
from dataclasses import replace
from typing import List

from .normalize import to_number
from .parts import PartSummary

MIN_REQUIRED_QTY = 0.0001


def calculate_part_max_units(part: PartSummary, epsilon: float = MIN_REQUIRED_QTY) -> float:
    """
    Units of finished product this part alone could support.

    A zero or negative requirement is floored at epsilon, so the part is
    effectively unconstraining without dividing by zero. A quotient that
    overflows is returned as math.inf and only loses to finite limits
    in the global minimum, which is itself guarded.
    """
    available = to_number(part.total_available_quantity)
    required = max(to_number(part.required_qty_per_unit), epsilon)

    ratio = available / required
    if not math.isfinite(ratio):
        return math.inf
    return math.floor(ratio)


def attach_max_producible_units(summary, epsilon: float = MIN_REQUIRED_QTY) -> List[PartSummary]:
    """Return copies of the parts carrying their own max_producible_units."""
    if not isinstance(summary, list):
        return []
    return [
        replace(part, max_producible_units=calculate_part_max_units(part, epsilon))
        for part in summary
    ]


def calculate_max_manufacturable_units(summary, epsilon: float = MIN_REQUIRED_QTY) -> int:
    """
    Global number of finished units the summary supports.

    Args:
        summary: List of PartSummary

    Returns:
        Minimum per-part limit, or 0 for empty/invalid input
    """
    if not isinstance(summary, list) or len(summary) == 0:
        return 0

    min_units = min(calculate_part_max_units(part, epsilon) for part in summary)
    if not math.isfinite(min_units):
        return 0
    return int(min_units)


def _attached_units(part: PartSummary) -> float:
    if part.max_producible_units is None:
        return 0
    return part.max_producible_units


def mark_bottleneck_parts(summary) -> List[PartSummary]:
    """
    Mark every part whose attached limit equals the minimum.

    Expects max_producible_units already attached (see
    attach_max_producible_units); a missing value compares as 0.
    """
    if not isinstance(summary, list) or len(summary) == 0:
        return []

    min_units = min(_attached_units(part) for part in summary)
    return [
        replace(part, is_bottleneck=_attached_units(part) == min_units)
        for part in summary
    ]


# =============================================================================
# END OF BOTTLENECK MODULE
# =============================================================================
