# =============================================================================
# BOM READINESS ENGINE - REPORTING AND CLI TESTS
# =============================================================================

import json

from readiness.report import get_production_readiness_report
from reporting.report_data import (
    PART_COLUMNS,
    batches_frame,
    cost_lines_frame,
    flatten_readiness_metadata,
    parts_frame,
)
import main


def _quiet(event_name, context):
    pass


class TestReportData:
    """Tests for tabular views."""

    def test_parts_frame(self, raw_summary):
        report = get_production_readiness_report(raw_summary, log_event_fn=_quiet)
        frame = parts_frame(report)
        assert list(frame.columns) == PART_COLUMNS
        assert len(frame) == 3
        row = frame.set_index("part_id").loc["p1"]
        assert row["usable_qty"] == 10.0
        assert row["inactive_qty"] == 4.0
        assert bool(frame.set_index("part_id").loc["p2", "is_bottleneck"]) is True

    def test_empty_frames_keep_columns(self):
        report = get_production_readiness_report([], log_event_fn=_quiet)
        assert parts_frame(report).empty
        assert list(parts_frame(report).columns) == PART_COLUMNS
        assert batches_frame(report).empty
        assert cost_lines_frame(None).empty

    def test_batches_frame(self, raw_summary):
        report = get_production_readiness_report(raw_summary, log_event_fn=_quiet)
        frame = batches_frame(report)
        assert list(frame["batch_id"]) == ["b1", "b2", "b3"]

    def test_cost_lines_frame(self, bom_details):
        frame = cost_lines_frame(bom_details, "CAD")
        assert len(frame) == 2
        assert round(frame["line_cost_base"].sum(), 4) == 45.5162

    def test_flatten_metadata(self, raw_summary, fixed_clock):
        report = get_production_readiness_report(
            raw_summary, log_event_fn=_quiet, clock=fixed_clock
        )
        meta = flatten_readiness_metadata(report)
        assert meta["readiness_status"] is True
        assert meta["readiness_max_units"] == 2
        assert meta["readiness_bottleneck_part_names"] == "Bottle"
        assert meta["readiness_stock_health_summary"].startswith("20 usable / 4 inactive")
        assert meta["readiness_generated_at"] == "2026-01-15T09:30:00+00:00"

    def test_flatten_none(self):
        assert flatten_readiness_metadata(None) is None


class TestCommandLine:
    """Tests for main.py commands against the sample snapshots."""

    def test_readiness_json(self, samples_dir, capsys):
        code = main.main(["readiness", "--input", str(samples_dir / "readiness_summary.yaml"), "--json"])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["maxProducibleUnits"] == 2
        assert data["isReadyForProduction"] is True

    def test_readiness_text(self, samples_dir, capsys):
        code = main.main(["readiness", "--input", str(samples_dir / "readiness_summary.yaml")])
        out = capsys.readouterr().out
        assert code == 0
        assert "PRODUCTION READINESS" in out
        assert "Bottlenecks:       1" in out

    def test_readiness_rejects_non_list(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("partId: p1\n", encoding="utf-8")
        assert main.main(["readiness", "--input", str(path)]) == 1

    def test_cost(self, samples_dir, capsys):
        code = main.main(["cost", "--input", str(samples_dir / "bom_details.yaml")])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["totalEstimatedCost"] == 45.5162
        assert data["currency"] == "CAD"

    def test_validate(self, samples_dir, capsys):
        code = main.main(["validate", "--input", str(samples_dir / "readiness_summary.yaml")])
        assert code == 0
        assert "5/5 checks passed" in capsys.readouterr().out

    def test_bad_config(self, tmp_path, samples_dir, capsys):
        config = tmp_path / "engine.yaml"
        config.write_text("engine:\n  base_currency: dollars\n", encoding="utf-8")
        code = main.main(["--config", str(config), "cost",
                          "--input", str(samples_dir / "bom_details.yaml")])
        assert code == 2
        assert "base_currency invalid" in capsys.readouterr().out
