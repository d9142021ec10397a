"""
Stock valuation report.

A pure function of the inventory snapshot (keyed by material id) and the
material master list: no backend calls. Produces summary figures, a table
sorted by value, a self-printing HTML document and a CSV export.
"""
import csv
import io
from datetime import date
from typing import Mapping, Optional, Sequence, Union

from jinja2 import BaseLoader, Environment

from desk.formatting import Formatter
from models.stock import InventoryEntry, Material, StockReportRow, StockReportStats

CRITICAL_RATIO = 0.5

STATUS_LABELS = {
    "good":         "In Stock",
    "low":          "Low Stock",
    "critical":     "Critical",
    "out-of-stock": "Out of Stock",
}

CSV_HEADERS = [
    "Material Code", "Material Name", "Category", "Current Stock", "Unit",
    "Reorder Level", "Unit Cost", "Total Value", "Status",
]
CSV_MIME_TYPE = "text/csv;charset=utf-8"

PRINT_TEMPLATE = """\
<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>Stock Valuation Report - {{ company_name }}</title>
    <style>
      * { margin: 0; padding: 0; box-sizing: border-box; }
      body { font-family: 'Segoe UI', system-ui, sans-serif; padding: 20px; color: #1f2937; }
      .report-header { text-align: center; margin-bottom: 24px; padding-bottom: 16px; border-bottom: 2px solid #e5e7eb; }
      .company-name { font-size: 24px; font-weight: 700; margin-bottom: 4px; }
      .report-title { font-size: 18px; color: #6b7280; margin-bottom: 8px; }
      .report-date { font-size: 14px; color: #9ca3af; }
      .summary-grid { display: grid; grid-template-columns: repeat(4, 1fr); gap: 16px; margin-bottom: 24px; }
      .summary-card { background: #f9fafb; border: 1px solid #e5e7eb; border-radius: 8px; padding: 16px; text-align: center; }
      .summary-value { font-size: 24px; font-weight: 700; }
      .summary-label { font-size: 12px; color: #6b7280; text-transform: uppercase; }
      .summary-card.warning .summary-value { color: #d97706; }
      .summary-card.danger .summary-value { color: #dc2626; }
      .report-table { width: 100%; border-collapse: collapse; margin-top: 16px; }
      .report-table th { background: #f3f4f6; padding: 12px 8px; text-align: left; font-size: 12px; text-transform: uppercase; color: #6b7280; border-bottom: 2px solid #e5e7eb; }
      .report-table td { padding: 10px 8px; border-bottom: 1px solid #e5e7eb; font-size: 13px; }
      .report-table tr:nth-child(even) { background: #f9fafb; }
      .report-table tfoot td { background: #f3f4f6; font-weight: 600; }
      .status-badge { display: inline-block; padding: 2px 8px; border-radius: 12px; font-size: 11px; font-weight: 500; }
      .status-good { background: #d1fae5; color: #047857; }
      .status-low { background: #fef3c7; color: #92400e; }
      .status-critical { background: #fee2e2; color: #b91c1c; }
      .status-out-of-stock { background: #f3f4f6; color: #6b7280; }
      .text-right { text-align: right; }
      .report-footer { margin-top: 24px; padding-top: 16px; border-top: 1px solid #e5e7eb; font-size: 12px; color: #9ca3af; display: flex; justify-content: space-between; }
      @media print {
        body { padding: 0; }
        .report-table { font-size: 11px; }
        .report-table th, .report-table td { padding: 6px 4px; }
      }
    </style>
  </head>
  <body>
    <div class="report-header">
      <div class="company-name">{{ company_name }}</div>
      <div class="report-title">Stock Valuation Report</div>
      <div class="report-date">Generated: {{ generated_on }}</div>
    </div>

    <div class="summary-grid">
      <div class="summary-card">
        <div class="summary-value">{{ stats.total_materials }}</div>
        <div class="summary-label">Total Materials</div>
      </div>
      <div class="summary-card">
        <div class="summary-value">{{ money(stats.total_value) }}</div>
        <div class="summary-label">Total Value</div>
      </div>
      <div class="summary-card{% if stats.low_stock_count %} warning{% endif %}">
        <div class="summary-value">{{ stats.low_stock_count }}</div>
        <div class="summary-label">Low Stock Items</div>
      </div>
      <div class="summary-card{% if stats.out_of_stock_count %} danger{% endif %}">
        <div class="summary-value">{{ stats.out_of_stock_count }}</div>
        <div class="summary-label">Out of Stock</div>
      </div>
    </div>

    <table class="report-table">
      <thead>
        <tr>
          <th>Code</th>
          <th>Material</th>
          <th>Category</th>
          <th class="text-right">Current Stock</th>
          <th class="text-right">Reorder Level</th>
          <th class="text-right">Unit Cost</th>
          <th class="text-right">Total Value</th>
          <th>Status</th>
        </tr>
      </thead>
      <tbody>
        {% for row in rows %}
        <tr>
          <td><strong>{{ row.code or '' }}</strong></td>
          <td>{{ row.name or '' }}</td>
          <td>{{ row.category or '' }}</td>
          <td class="text-right">{{ qty(row.current_stock) }} {{ row.unit or '' }}</td>
          <td class="text-right">{{ qty(row.reorder_level) }} {{ row.unit or '' }}</td>
          <td class="text-right">{{ money(row.unit_cost) }}</td>
          <td class="text-right"><strong>{{ money(row.total_value) }}</strong></td>
          <td><span class="status-badge status-{{ row.status }}">{{ labels[row.status] }}</span></td>
        </tr>
        {% endfor %}
      </tbody>
      <tfoot>
        <tr>
          <td colspan="6" class="text-right">Grand Total:</td>
          <td class="text-right"><strong>{{ money(stats.total_value) }}</strong></td>
          <td></td>
        </tr>
      </tfoot>
    </table>

    <div class="report-footer">
      <span>Generated by: {{ generated_by }}</span>
      <span>{{ company_name }} - Procurement &amp; Inventory</span>
    </div>
    {% if auto_print %}
    <script>
      window.addEventListener('load', function () {
        window.focus();
        setTimeout(function () { window.print(); window.close(); }, 250);
      });
    </script>
    {% endif %}
  </body>
</html>
"""


def stock_status(current_stock: float, reorder_level: Optional[float]) -> str:
    """
    out-of-stock at zero; critical at or below half the reorder level;
    low at or below the reorder level; good otherwise (or with no level set).
    """
    if current_stock == 0:
        return "out-of-stock"
    if reorder_level and current_stock <= reorder_level * CRITICAL_RATIO:
        return "critical"
    if reorder_level and current_stock <= reorder_level:
        return "low"
    return "good"


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def _qty(value: float) -> str:
    return f"{value:,.3f}".rstrip("0").rstrip(".")


class StockReport:
    """
    Usage:
        report = StockReport(inventory, materials, company_name="Acme")
        report.stats.total_value
        html = report.render_print_document()
        csv_text = report.to_csv()
    """

    def __init__(
        self,
        inventory: Mapping[Union[int, str], Union[InventoryEntry, dict]],
        materials: Sequence[Union[Material, dict]],
        company_name: str = "Company",
        generated_by: str = "System",
        formatter: Optional[Formatter] = None,
        generated_on: Optional[date] = None,
    ) -> None:
        self.inventory = {
            str(key): InventoryEntry.model_validate(entry)
            for key, entry in (inventory or {}).items()
        }
        self.materials = [Material.model_validate(m) for m in (materials or [])]
        self.company_name = company_name or "Company"
        self.generated_by = generated_by or "System"
        self.formatter = formatter or Formatter()
        self.generated_on = generated_on or date.today()

        self.stats = self._build_stats()
        self.rows = self._build_rows()

    def _build_stats(self) -> StockReportStats:
        entries = list(self.inventory.values())
        return StockReportStats(
            total_materials=len(self.materials),
            materials_with_stock=sum(1 for e in entries if e.current_stock > 0),
            total_value=sum(e.total_value or 0.0 for e in entries),
            low_stock_count=sum(
                1 for e in entries
                if e.current_stock > 0 and (e.reorder_level or 0) > 0
                and e.current_stock <= e.reorder_level
            ),
            out_of_stock_count=sum(1 for e in entries if e.current_stock == 0),
        )

    def _build_rows(self) -> list[StockReportRow]:
        rows = []
        for material in self.materials:
            stock = self.inventory.get(str(material.id)) or InventoryEntry()
            current = stock.current_stock or 0.0
            unit_cost = material.standard_price or stock.average_cost or 0.0
            rows.append(StockReportRow(
                id=material.id,
                code=material.code,
                name=material.name,
                category=material.category,
                unit=material.unit,
                current_stock=current,
                reorder_level=stock.reorder_level or material.minimum_stock_level or 0.0,
                unit_cost=unit_cost,
                total_value=current * unit_cost,
                status=stock_status(current, stock.reorder_level),
            ))
        rows.sort(key=lambda r: r.total_value, reverse=True)
        return rows

    # ------------------------------------------------------------------
    # Print
    # ------------------------------------------------------------------

    def render_print_document(self, auto_print: bool = True) -> str:
        """Full HTML document; with auto_print it opens the print dialog then closes."""
        env = Environment(loader=BaseLoader(), autoescape=True, keep_trailing_newline=True)
        tmpl = env.from_string(PRINT_TEMPLATE)
        return tmpl.render(
            company_name=self.company_name,
            generated_by=self.generated_by,
            generated_on=self.formatter.format_date(self.generated_on),
            stats=self.stats,
            rows=self.rows,
            labels=STATUS_LABELS,
            money=self.formatter.format_currency,
            qty=_qty,
            auto_print=auto_print,
        )

    # ------------------------------------------------------------------
    # CSV
    # ------------------------------------------------------------------

    def csv_filename(self) -> str:
        return f"stock-report-{self.generated_on.isoformat()}.csv"

    def to_csv(self) -> str:
        buf = io.StringIO()
        csv.writer(buf, lineterminator="\n").writerow(CSV_HEADERS)
        writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
        for row in self.rows:
            writer.writerow([
                row.code or "",
                row.name or "",
                row.category or "",
                f"{row.current_stock:.3f}",
                row.unit or "",
                f"{row.reorder_level:.3f}",
                f"{row.unit_cost:.3f}",
                f"{row.total_value:.3f}",
                row.status,
            ])
        return buf.getvalue()
