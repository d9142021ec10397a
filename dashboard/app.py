"""
Procurement Desk Dashboard — FastAPI backend.

Serves the stock valuation report to browser clients. The report is computed
from the inventory snapshot the client posts; nothing is stored server-side.

Endpoints
---------
  GET  /api/health                  → liveness probe
  POST /api/stock-report            → summary stats + sorted rows (JSON)
  POST /api/stock-report/print      → self-printing HTML document
  POST /api/stock-report/export     → CSV download (stock-report-<date>.csv)
"""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response

from config import Config
from dashboard.models import StockReportRequest
from desk.formatting import Formatter
from desk.stock_report import CSV_MIME_TYPE, StockReport

logger = logging.getLogger(__name__)

config = Config()

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------
app = FastAPI(title="Procurement Desk Dashboard", docs_url=None, redoc_url=None)


def _build_report(body: StockReportRequest) -> StockReport:
    return StockReport(
        inventory=body.inventory,
        materials=body.materials,
        company_name=body.company_name or config.company_name,
        generated_by=body.generated_by or config.user_name,
        formatter=Formatter.from_config(config),
    )


# ── Routes ───────────────────────────────────────────────────────────────────

@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "api_base_url": config.api_base_url,
        "company_name": config.company_name,
        "time": datetime.now(timezone.utc).isoformat(),
    }


@app.post("/api/stock-report")
def stock_report(body: StockReportRequest):
    report = _build_report(body)
    return {
        "stats": report.stats.model_dump(),
        "rows": [row.model_dump() for row in report.rows],
    }


@app.post("/api/stock-report/print")
def stock_report_print(body: StockReportRequest):
    report = _build_report(body)
    return HTMLResponse(
        content=report.render_print_document(),
        headers={"Cache-Control": "no-store"},
    )


@app.post("/api/stock-report/export")
def stock_report_export(body: StockReportRequest):
    report = _build_report(body)
    filename = report.csv_filename()
    logger.info("Exporting stock report: %d materials -> %s", len(report.rows), filename)
    return Response(
        content=report.to_csv(),
        media_type=CSV_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
