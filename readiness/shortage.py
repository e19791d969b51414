# =============================================================================
# BOM READINESS ENGINE - SHORTAGE MODULE
# =============================================================================
# Flags parts that cannot cover a single finished unit.
#
# RULE:
# shortage = upstream isShortage flag OR available < required per unit
# =============================================================================

from typing import List

from .normalize import to_number
from .parts import PartSummary


def is_part_short(part: PartSummary) -> bool:
    """True if the part is pre-flagged or cannot cover one unit."""
    if part.is_shortage:
        return True
    available = to_number(part.total_available_quantity)
    required = to_number(part.required_qty_per_unit)
    return available < required


def identify_shortage_parts(summary) -> List[PartSummary]:
    """
    Select the parts in shortage.

    Args:
        summary: List of PartSummary (anything else is treated as empty)

    Returns:
        New list holding the shortage parts, in input order
    """
    if not isinstance(summary, list):
        return []
    return [part for part in summary if is_part_short(part)]


# =============================================================================
# END OF SHORTAGE MODULE
# =============================================================================
