"""
Unit tests for the stock valuation report.
"""
import csv
import io
from datetime import date

import pytest

from desk.formatting import Formatter
from desk.stock_report import CSV_HEADERS, StockReport, status_label, stock_status


@pytest.fixture
def report(sample_inventory, sample_materials) -> StockReport:
    return StockReport(
        sample_inventory,
        sample_materials,
        company_name="Gulf Recycling",
        generated_by="Fatma",
        formatter=Formatter("OMR", 3),
        generated_on=date(2024, 6, 15),
    )


@pytest.mark.unit
class TestStockStatus:

    @pytest.mark.parametrize("current, reorder, expected", [
        (150, 100, "good"),
        (100, 100, "low"),
        (51, 100, "low"),
        (50, 100, "critical"),
        (1, 100, "critical"),
        (0, 100, "out-of-stock"),
        (0, None, "out-of-stock"),
        (5, None, "good"),
        (5, 0, "good"),
    ])
    def test_classification(self, current, reorder, expected):
        assert stock_status(current, reorder) == expected

    def test_labels(self):
        assert status_label("out-of-stock") == "Out of Stock"
        assert status_label("low") == "Low Stock"
        assert status_label("mystery") == "mystery"


@pytest.mark.unit
class TestStats:

    def test_summary_figures(self, report):
        stats = report.stats
        assert stats.total_materials == 4
        assert stats.materials_with_stock == 3
        assert stats.total_value == pytest.approx(358.0)
        assert stats.low_stock_count == 2
        assert stats.out_of_stock_count == 1

    def test_empty_inputs(self):
        report = StockReport({}, [])
        assert report.stats.total_materials == 0
        assert report.stats.total_value == 0
        assert report.rows == []

    def test_inventory_keys_may_be_integers(self, sample_materials):
        report = StockReport({1: {"currentStock": 4, "reorderLevel": 10}}, sample_materials)
        row = next(r for r in report.rows if r.id == 1)
        assert row.current_stock == 4
        assert row.status == "critical"


@pytest.mark.unit
class TestRows:

    def test_sorted_by_value_descending(self, report):
        assert [r.code for r in report.rows] == ["UO-01", "CU-01", "FE-01", "BT-01"]
        values = [r.total_value for r in report.rows]
        assert values == sorted(values, reverse=True)

    def test_row_derivation(self, report):
        rows = {r.code: r for r in report.rows}
        assert rows["UO-01"].unit_cost == 0.25
        assert rows["UO-01"].total_value == 250.0
        assert rows["UO-01"].status == "good"
        assert rows["CU-01"].status == "critical"
        assert rows["FE-01"].status == "low"

    def test_falls_back_to_average_cost_and_minimum_level(self, report):
        batteries = next(r for r in report.rows if r.code == "BT-01")
        assert batteries.unit_cost == 1.5
        assert batteries.reorder_level == 20
        assert batteries.total_value == 0
        assert batteries.status == "out-of-stock"

    def test_material_without_inventory_is_out_of_stock(self, sample_materials):
        report = StockReport({}, sample_materials[:1])
        row = report.rows[0]
        assert row.current_stock == 0
        assert row.status == "out-of-stock"


@pytest.mark.unit
class TestCsvExport:

    def test_filename(self, report):
        assert report.csv_filename() == "stock-report-2024-06-15.csv"

    def test_header_and_row_count(self, report):
        lines = report.to_csv().splitlines()
        assert lines[0] == ",".join(CSV_HEADERS)
        assert len(lines) == 1 + len(report.rows)

    def test_rows_are_quoted_with_three_decimals(self, report):
        first = report.to_csv().splitlines()[1]
        assert first == (
            '"UO-01","Used Oil","Oil","1000.000","L","500.000","0.250","250.000","good"'
        )

    def test_parses_back_as_csv(self, report):
        parsed = list(csv.reader(io.StringIO(report.to_csv())))
        assert parsed[0] == CSV_HEADERS
        assert [row[0] for row in parsed[1:]] == ["UO-01", "CU-01", "FE-01", "BT-01"]

    def test_values_with_commas_survive(self):
        report = StockReport(
            {"9": {"currentStock": 2}},
            [{"id": 9, "code": "MX", "name": "Nuts, bolts", "standardPrice": 1}],
        )
        parsed = list(csv.reader(io.StringIO(report.to_csv())))
        assert parsed[1][1] == "Nuts, bolts"


@pytest.mark.unit
class TestPrintDocument:

    def test_contains_header_summary_and_footer(self, report):
        html = report.render_print_document()
        assert "<title>Stock Valuation Report - Gulf Recycling</title>" in html
        assert "Generated: 15 Jun 2024" in html
        assert "Generated by: Fatma" in html
        assert "Grand Total:" in html
        assert html.count("OMR 358.000") == 2
        assert "@media print" in html

    def test_row_badges(self, report):
        html = report.render_print_document()
        assert '<span class="status-badge status-critical">Critical</span>' in html
        assert '<span class="status-badge status-out-of-stock">Out of Stock</span>' in html

    def test_warning_cards_highlighted(self, report):
        html = report.render_print_document()
        assert 'class="summary-card warning"' in html
        assert 'class="summary-card danger"' in html

    def test_auto_print_script_optional(self, report):
        assert "window.print()" in report.render_print_document()
        assert "window.print()" not in report.render_print_document(auto_print=False)

    def test_names_are_escaped(self):
        report = StockReport({}, [{"id": 1, "name": "<b>Acid</b>"}], company_name="A & B")
        html = report.render_print_document()
        assert "&lt;b&gt;Acid&lt;/b&gt;" in html
        assert "A &amp; B" in html
