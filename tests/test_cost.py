# =============================================================================
# BOM READINESS ENGINE - COST ENGINE TESTS
# =============================================================================

import pytest

from readiness.currency import convert_to_base_currency, normalize_currency_code
from readiness.cost import (
    EMPTY_COST_DESCRIPTION,
    BomLineItem,
    MaterialCostLine,
    UnitCostQuote,
    calculate_bom_material_costs,
    compute_estimated_bom_cost_summary,
    load_bom_details,
    load_material_cost_lines,
    resolve_actual_unit_cost,
)


class TestCurrency:
    """Tests for base currency conversion."""

    def test_base_currency_unchanged(self):
        assert convert_to_base_currency(10, "CAD", 1.35, "CAD") == 10

    def test_foreign_currency_converted(self):
        assert convert_to_base_currency(10, "USD", 1.5, "CAD") == 15.0

    def test_missing_rate_defaults_to_one(self):
        assert convert_to_base_currency(10, "USD", None, "CAD") == 10.0
        assert convert_to_base_currency(10, "USD", float("nan"), "CAD") == 10.0

    def test_missing_currency_is_base(self):
        assert convert_to_base_currency(10, None, 2.0, "CAD") == 10.0
        assert convert_to_base_currency(10, None, 2.0, "cad") == 10.0
        assert convert_to_base_currency(10, "", 2.0, " cad ") == 10.0

    def test_codes_are_case_insensitive(self):
        assert normalize_currency_code(" usd ") == "USD"
        assert convert_to_base_currency(10, "cad", 2.0, "CAD") == 10.0


class TestEstimatedCostSummary:
    """Tests for the estimated BOM cost summary."""

    def test_mixed_currency_total(self, bom_details):
        """3 * 10.004 * 1.35 + 5 = 45.5162."""
        summary = compute_estimated_bom_cost_summary(bom_details, "CAD")
        assert summary.total_estimated_cost == 45.5162
        assert summary.currency == "CAD"
        assert summary.item_count == 2
        assert summary.type == "ESTIMATED"

    def test_single_final_rounding(self):
        """Per-line rounding would give 0.0; rounding the exact sum gives 0.0001."""
        details = {"details": [
            {"partQtyPerProduct": 1, "estimatedUnitCost": 0.00004, "currency": "CAD"}
            for _ in range(3)
        ]}
        per_line = sum(round(0.00004, 4) for _ in range(3))
        summary = compute_estimated_bom_cost_summary(details, "CAD")
        assert per_line == 0.0
        assert summary.total_estimated_cost == 0.0001

    def test_large_total_not_lost(self):
        details = {"details": [
            {"partQtyPerProduct": 1e12, "estimatedUnitCost": 1e12, "currency": "CAD"}
        ]}
        summary = compute_estimated_bom_cost_summary(details, "CAD")
        assert summary.total_estimated_cost == 1e24

    @pytest.mark.parametrize("structured", [None, {}, {"details": []}, {"details": "x"}])
    def test_empty_details(self, structured):
        summary = compute_estimated_bom_cost_summary(structured, "CAD")
        assert summary.total_estimated_cost == 0.0
        assert summary.item_count == 0
        assert summary.description == EMPTY_COST_DESCRIPTION

    def test_to_dict_shape(self, bom_details):
        data = compute_estimated_bom_cost_summary(bom_details).to_dict()
        assert set(data) == {"type", "description", "totalEstimatedCost", "currency", "itemCount"}

    def test_loads_details_shape(self):
        """quantityPerUnit and nested part from BOM details are accepted."""
        items = load_bom_details({"details": [{
            "quantityPerUnit": 2, "estimatedUnitCost": "1.5", "currency": "CAD",
            "part": {"id": "p1", "name": "Cap"},
        }]})
        assert items == [BomLineItem(2.0, 1.5, "CAD", 1.0, "p1", "Cap")]

    def test_missing_fields_default(self):
        summary = compute_estimated_bom_cost_summary({"details": [{}]}, "CAD")
        assert summary.total_estimated_cost == 0.0
        assert summary.item_count == 1

    def test_custom_places(self, bom_details):
        summary = compute_estimated_bom_cost_summary(bom_details, "CAD", places=2)
        assert summary.total_estimated_cost == 45.52


class TestMaterialCosts:
    """Tests for estimated vs actual material cost comparison."""

    def test_batch_cost_wins(self):
        line = MaterialCostLine(
            quantity_per_bom=3, estimated_unit_cost=2.0, currency="CAD",
            batch_cost=UnitCostQuote(2.5, "USD", 1.2),
            supplier_cost=UnitCostQuote(9.9, "CAD"),
        )
        summary = calculate_bom_material_costs("bom-1", [line], "CAD")
        assert summary.total_estimated_cost == 6.0
        assert summary.total_actual_cost == 9.0
        assert summary.variance == 3.0
        assert summary.variance_percentage == 50.0

    def test_supplier_cost_fallback(self):
        line = MaterialCostLine(
            quantity_per_bom=3, estimated_unit_cost=2.0, currency="CAD",
            supplier_cost=UnitCostQuote(2.2),
        )
        assert resolve_actual_unit_cost(line) == (2.2, "CAD", 1.0)
        summary = calculate_bom_material_costs("bom-1", [line], "CAD")
        assert summary.total_actual_cost == 6.6

    def test_estimate_used_without_sources(self):
        line = MaterialCostLine(quantity_per_bom=2, estimated_unit_cost=4.0, currency="CAD")
        summary = calculate_bom_material_costs("bom-1", [line])
        assert summary.total_actual_cost == summary.total_estimated_cost == 8.0
        assert summary.variance == 0.0

    def test_zero_estimate_has_zero_percentage(self):
        line = MaterialCostLine(
            quantity_per_bom=1, estimated_unit_cost=0.0, currency="CAD",
            batch_cost=UnitCostQuote(1.0, "CAD"),
        )
        summary = calculate_bom_material_costs("bom-1", [line])
        assert summary.variance == 1.0
        assert summary.variance_percentage == 0.0

    def test_load_nested_items(self):
        items = [{
            "bomItemMaterial": {"quantity": 2},
            "packagingMaterials": [{
                "name": "Cap",
                "estimatedUnitCost": 1.0,
                "currency": "USD",
                "exchangeRate": 1.4,
                "supplier": {
                    "contract": {"unitCost": 1.1, "currency": "USD", "exchangeRate": 1.4},
                    "batches": [{"unitCost": 1.2}],
                },
            }],
        }, {"packagingMaterials": [{"estimatedUnitCost": 3}]}]
        lines = load_material_cost_lines(items)
        assert len(lines) == 2
        assert lines[0].quantity_per_bom == 2.0
        assert lines[0].batch_cost == UnitCostQuote(1.2, None, None)
        assert lines[0].supplier_cost.unit_cost == 1.1
        assert lines[1].quantity_per_bom == 1.0
        # Batch with no currency inherits the material currency, rate defaults to 1.
        assert resolve_actual_unit_cost(lines[0]) == (1.2, "USD", 1.0)

    def test_load_invalid_items(self):
        assert load_material_cost_lines(None) == []
        assert load_material_cost_lines([None, {"packagingMaterials": None}]) == []
