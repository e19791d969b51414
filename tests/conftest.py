# =============================================================================
# BOM READINESS ENGINE - PYTEST CONFIGURATION
# =============================================================================
# Shared fixtures and configuration for all tests.
# =============================================================================

import pytest
import sys
import os
from pathlib import Path

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture
def project_root():
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def samples_dir(project_root):
    """Get sample snapshot directory."""
    return project_root / "samples"


@pytest.fixture
def raw_summary():
    """Three-part production summary in the upstream camelCase shape."""
    return [
        {
            "partId": "p1", "partName": "Capsule Shell",
            "requiredQtyPerUnit": 2, "totalAvailableQuantity": 10,
            "materialBatches": [
                {"batchId": "b1", "availableQuantity": 10, "isInactiveBatch": False},
                {"batchId": "b2", "availableQuantity": 4, "isInactiveBatch": True},
            ],
        },
        {
            "partId": "p2", "partName": "Bottle",
            "requiredQtyPerUnit": 5, "totalAvailableQuantity": 10,
            "materialBatches": [
                {"batchId": "b3", "availableQuantity": 10, "isInactiveBatch": False},
            ],
        },
        {
            "partId": "p3", "partName": "Label",
            "requiredQtyPerUnit": 1, "totalAvailableQuantity": 3,
        },
    ]


@pytest.fixture
def summary(raw_summary):
    """Loaded PartSummary list."""
    from readiness.parts import load_production_summary
    return load_production_summary(raw_summary)


@pytest.fixture
def fixed_clock():
    """Clock returning a fixed UTC timestamp."""
    from datetime import datetime, timezone
    return lambda: datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def bom_details():
    """Cost details with one foreign-currency line."""
    return {
        "details": [
            {"partQtyPerProduct": 3, "estimatedUnitCost": 10.004,
             "currency": "USD", "exchangeRate": 1.35},
            {"partQtyPerProduct": 1, "estimatedUnitCost": 5, "currency": "CAD"},
        ]
    }
