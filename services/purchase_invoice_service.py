"""
Purchase invoice API operations.

Maps one method to one REST call under /purchase-invoices:

  GET    /purchase-invoices                      get_all (+ filter presets)
  GET    /purchase-invoices/{id}                 get_by_id
  GET    /purchase-invoices/unlinked-company-bills
  POST   /purchase-invoices                      create, create_vendor_bill
  PUT    /purchase-invoices/{id}                 update
  DELETE /purchase-invoices/{id}                 delete
  PUT    /purchase-invoices/{id}/status          update_company_bill_status
  POST   /purchase-invoices/{id}/payment         record_payment
  POST   /purchase-invoices/{id}/attachment      upload_attachment
  POST   /purchase-invoices/sync-status          maintenance
  POST   /purchase-invoices/sync-prefixes        maintenance
  POST   /purchase-invoices/reset-orphan-payments

Nothing here raises to the caller; see ApiService.
"""
import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

from models.result import ServiceResult, SyncReport
from services.base import ApiService, to_payload

logger = logging.getLogger(__name__)

BASE_PATH = "/purchase-invoices"

# Python keyword -> query parameter accepted by GET /purchase-invoices
INVOICE_FILTER_PARAMS: dict[str, str] = {
    "search":            "search",
    "supplier_id":       "supplierId",
    "purchase_order_id": "purchaseOrderId",
    "payment_status":    "paymentStatus",
    "bill_status":       "billStatus",       # company bills: draft / sent
    "bill_type":         "billType",
    "from_date":         "fromDate",
    "to_date":           "toDate",
    "page":              "page",
    "limit":             "limit",
    "project_id":        "project_id",
}

PAYMENT_STATUS_NAMES = {
    "unpaid":  "Unpaid",
    "partial": "Partially Paid",
    "paid":    "Paid",
    "overdue": "Overdue",
}
PAYMENT_STATUS_COLORS = {
    "unpaid":  "#f59e0b",   # amber
    "partial": "#3b82f6",   # blue
    "paid":    "#10b981",   # green
    "overdue": "#ef4444",   # red
}
BILL_TYPE_NAMES = {"company": "Company Bill", "vendor": "Vendor Bill"}
BILL_TYPE_COLORS = {"company": "#3b82f6", "vendor": "#8b5cf6"}
BILL_STATUS_NAMES = {"draft": "Draft", "sent": "Sent"}
BILL_STATUS_COLORS = {"draft": "#f59e0b", "sent": "#10b981"}
DEFAULT_COLOR = "#6b7280"   # gray

_SECONDS_PER_DAY = 24 * 60 * 60


def build_invoice_query(filters: dict[str, Any]) -> dict[str, str]:
    """
    Translate keyword filters into GET /purchase-invoices query parameters.
    Empty values are skipped, as is project_id="all"; unknown keys are ignored.
    """
    params: dict[str, str] = {}
    for key, param in INVOICE_FILTER_PARAMS.items():
        value = filters.get(key)
        if not value:
            continue
        if key == "project_id" and value == "all":
            continue
        params[param] = value.isoformat() if isinstance(value, date) else str(value)

    unknown = set(filters) - set(INVOICE_FILTER_PARAMS)
    if unknown:
        logger.debug("Ignoring unsupported invoice filters: %s", sorted(unknown))
    return params


def _as_utc(value: Union[str, date, datetime]) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    elif not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def calculate_days_overdue(
    due_date: Optional[Union[str, date, datetime]],
    now: Optional[datetime] = None,
) -> int:
    """
    Whole days past the due date, rounded up; 0 when not yet due.

    Date-only due dates are taken as midnight UTC, so a due date exactly
    N x 24h before now is N days overdue.
    """
    if not due_date:
        return 0
    try:
        due = _as_utc(due_date)
    except ValueError:
        logger.debug("Unparseable due date: %r", due_date)
        return 0
    current = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    diff_days = math.ceil((current - due).total_seconds() / _SECONDS_PER_DAY)
    return diff_days if diff_days > 0 else 0


class PurchaseInvoiceService(ApiService):
    """
    Stateless request builder for purchase invoices.

    Usage:
        service = PurchaseInvoiceService(ApiTransport(config))
        result = service.get_unpaid()
        if result.success:
            invoices = [PurchaseInvoice(**row) for row in result.data]
    """

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all(self, **filters: Any) -> ServiceResult:
        """List invoices; see INVOICE_FILTER_PARAMS for the accepted filters."""
        return self._call(
            "GET", BASE_PATH, "fetch purchase invoices",
            empty=[], params=build_invoice_query(filters),
        )

    def get_by_id(self, invoice_id: Union[int, str]) -> ServiceResult:
        return self._call("GET", f"{BASE_PATH}/{invoice_id}", "fetch purchase invoice")

    def get_by_purchase_order(self, purchase_order_id: Union[int, str]) -> ServiceResult:
        return self.get_all(purchase_order_id=purchase_order_id)

    def get_by_payment_status(self, payment_status: str) -> ServiceResult:
        return self.get_all(payment_status=payment_status)

    def get_unpaid(self) -> ServiceResult:
        return self.get_by_payment_status("unpaid")

    def get_overdue(self) -> ServiceResult:
        return self.get_by_payment_status("overdue")

    def get_company_bills(self, **filters: Any) -> ServiceResult:
        return self.get_all(**{**filters, "bill_type": "company"})

    def get_vendor_bills(self, **filters: Any) -> ServiceResult:
        return self.get_all(**{**filters, "bill_type": "vendor"})

    def get_draft_company_bills(self, **filters: Any) -> ServiceResult:
        """Company bills still waiting to be marked as sent."""
        return self.get_company_bills(**{**filters, "bill_status": "draft"})

    def get_sent_company_bills(self, **filters: Any) -> ServiceResult:
        """Company bills eligible for linking to a vendor bill."""
        return self.get_company_bills(**{**filters, "bill_status": "sent"})

    def get_unlinked_company_bills(
        self,
        supplier_id: Optional[Union[int, str]] = None,
        status: Optional[str] = None,
    ) -> ServiceResult:
        """Company bills not yet covered by any vendor bill."""
        params: dict[str, str] = {}
        if supplier_id:
            params["supplierId"] = str(supplier_id)
        if status:
            params["status"] = status
        return self._call(
            "GET", f"{BASE_PATH}/unlinked-company-bills", "fetch unlinked company bills",
            empty=[], params=params,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, invoice_data: Any) -> ServiceResult:
        return self._call(
            "POST", BASE_PATH, "create purchase invoice", json=to_payload(invoice_data),
        )

    def create_vendor_bill(self, vendor_bill_data: Any) -> ServiceResult:
        """
        Create a vendor bill. The payload carries coversPurchaseOrders (or
        coversCompanyBills) and the single supplierId; billType is forced.
        """
        payload = {**to_payload(vendor_bill_data), "billType": "vendor"}
        return self._call("POST", BASE_PATH, "create vendor bill", json=payload)

    def update(self, invoice_id: Union[int, str], invoice_data: Any) -> ServiceResult:
        return self._call(
            "PUT", f"{BASE_PATH}/{invoice_id}", "update purchase invoice",
            json=to_payload(invoice_data),
        )

    def delete(self, invoice_id: Union[int, str]) -> ServiceResult:
        return self._call("DELETE", f"{BASE_PATH}/{invoice_id}", "delete purchase invoice")

    def update_company_bill_status(self, bill_id: Union[int, str], status: str) -> ServiceResult:
        """Move a company bill between draft and sent."""
        return self._call(
            "PUT", f"{BASE_PATH}/{bill_id}/status", "update company bill status",
            json={"status": status},
        )

    def record_payment(self, invoice_id: Union[int, str], payment_data: Any) -> ServiceResult:
        return self._call(
            "POST", f"{BASE_PATH}/{invoice_id}/payment", "record invoice payment",
            json=to_payload(payment_data),
        )

    def upload_attachment(
        self,
        invoice_id: Union[int, str],
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> ServiceResult:
        """Upload the scanned invoice document as multipart field 'attachment'."""
        return self._call(
            "POST", f"{BASE_PATH}/{invoice_id}/attachment", "upload invoice attachment",
            files={"attachment": (filename, content, content_type)},
        )

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def sync_payment_status(self) -> ServiceResult:
        """Server-side fix for invoices whose balance is 0 but status is not 'paid'."""
        return self._call("POST", f"{BASE_PATH}/sync-status", "sync payment status")

    def sync_invoice_prefixes(self) -> ServiceResult:
        """Server-side backfill of CB-/VB- invoice number prefixes."""
        return self._call("POST", f"{BASE_PATH}/sync-prefixes", "sync invoice prefixes")

    def reset_orphan_payments(self) -> ServiceResult:
        """Server-side reset of payments on company bills no vendor bill covers."""
        return self._call(
            "POST", f"{BASE_PATH}/reset-orphan-payments", "reset orphan payments",
        )

    def run_all_sync(self) -> SyncReport:
        status_sync = self.sync_payment_status()
        prefix_sync = self.sync_invoice_prefixes()
        orphan_reset = self.reset_orphan_payments()
        return SyncReport(
            status_sync=status_sync, prefix_sync=prefix_sync, orphan_reset=orphan_reset,
        )

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------

    calculate_days_overdue = staticmethod(calculate_days_overdue)

    @staticmethod
    def get_payment_status_name(status: str) -> str:
        return PAYMENT_STATUS_NAMES.get(status, status)

    @staticmethod
    def get_payment_status_color(status: str) -> str:
        return PAYMENT_STATUS_COLORS.get(status, DEFAULT_COLOR)

    @staticmethod
    def get_bill_type_name(bill_type: str) -> str:
        return BILL_TYPE_NAMES.get(bill_type, bill_type)

    @staticmethod
    def get_bill_type_color(bill_type: str) -> str:
        return BILL_TYPE_COLORS.get(bill_type, DEFAULT_COLOR)

    @staticmethod
    def get_bill_status_name(status: str) -> str:
        return BILL_STATUS_NAMES.get(status, status)

    @staticmethod
    def get_bill_status_color(status: str) -> str:
        return BILL_STATUS_COLORS.get(status, DEFAULT_COLOR)
